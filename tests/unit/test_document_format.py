import pytest

from docnum.utils.document import (
    DEFAULT_PREFIX,
    DocumentType,
    format_document_number,
    prefix_for,
)


@pytest.mark.parametrize(
    "document_type, department, sequence, year, expected",
    [
        ("oficio", "RH", 3, 2024, "Oficio No.SINTEL-RH-003-2024"),
        ("memorando", "TI", 1, 2025, "Memorando No.SINTEL-TI-001-2025"),
        ("orden_compra", "ADM", 42, 2024, "Orden de Compra No.SINTEL-ADM-042-2024"),
        ("acta_recepcion", "LOG", 7, 2024, "Acta de Recepción No.SINTEL-LOG-007-2024"),
        ("circular", "RH", 5, 2024, "Documento No.SINTEL-RH-005-2024"),
        ("proforma", "VEN", 999, 2024, "Proforma No.SINTEL-VEN-999-2024"),
        ("proforma", "VEN", 1000, 2024, "Proforma No.SINTEL-VEN-1000-2024"),
    ],
)
def test_format_document_number(document_type, department, sequence, year, expected):
    assert format_document_number(document_type, department, sequence, year) == expected


def test_format_without_organization_uses_a_space():
    number = format_document_number("oficio", "RH", 12, 2024, organization="")
    assert number == "Oficio No. RH-012-2024"


def test_custom_organization():
    number = format_document_number("acta_entrega", "RH", 1, 2024, organization="ACME")
    assert number == "Acta de Entrega No.ACME-RH-001-2024"


def test_every_document_type_has_a_prefix():
    for member in DocumentType:
        assert prefix_for(member.key) == member.prefix
        assert member.prefix.endswith("No.")


def test_unknown_type_falls_back_to_default_prefix():
    assert DocumentType.from_key("informe") is None
    assert prefix_for("informe") == DEFAULT_PREFIX
    assert prefix_for("") == DEFAULT_PREFIX
