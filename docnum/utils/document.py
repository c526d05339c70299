# docnum/utils/document.py
from enum import Enum

DEFAULT_PREFIX = "Documento No."
SEQUENCE_WIDTH = 3


class DocumentType(Enum):
    """Known document types and the prefix printed in front of their numbers."""

    OFICIO = ("oficio", "Oficio No.")
    MEMORANDO = ("memorando", "Memorando No.")
    ORDEN_COMPRA = ("orden_compra", "Orden de Compra No.")
    PROFORMA = ("proforma", "Proforma No.")
    ACTA_ENTREGA = ("acta_entrega", "Acta de Entrega No.")
    ACTA_RECEPCION = ("acta_recepcion", "Acta de Recepción No.")

    def __init__(self, key, prefix):
        self.key = key
        self.prefix = prefix

    @classmethod
    def from_key(cls, key):
        """Returns the member for `key`, or None for types outside the table."""
        for member in cls:
            if member.key == key:
                return member
        return None


def prefix_for(document_type: str) -> str:
    member = DocumentType.from_key(document_type)
    if member is None:
        return DEFAULT_PREFIX
    return member.prefix


def format_document_number(
    document_type: str,
    department: str,
    sequence: int,
    year: int,
    organization: str = "SINTEL",
) -> str:
    """
    Builds the human-readable identifier, e.g. "Oficio No.SINTEL-RH-003-2024".

    The sequence is zero-padded to three digits and grows past 999 without
    truncation. With an empty organization the prefix and department are
    separated by a single space.

    Args:
        document_type: Type key such as "oficio"; unknown keys get "Documento No.".
        department: Department short code.
        sequence: Value issued by the scope counter.
        year: Scope year.
        organization: Code printed between prefix and department.

    Returns:
        The formatted document number.
    """
    separator = f"{organization}-" if organization else " "
    return (
        f"{prefix_for(document_type)}{separator}{department}"
        f"-{sequence:0{SEQUENCE_WIDTH}d}-{year}"
    )
