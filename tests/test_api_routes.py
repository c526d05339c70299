# tests/test_api_routes.py
import json

import pytest

from docnum.services import counters
from tests.fixtures.sample_data import DocumentFactory, ScopeCounterFactory


def _generate(client, path="/api/generate-document", **body):
    payload = {"type": "oficio", "department": "RH", "subject": "Test"}
    payload.update(body)
    return client.post(path, json=payload)


class TestGenerateDocument:
    def test_generate(self, client, current_year):
        response = _generate(client)

        assert response.status_code == 201
        data = response.get_json()
        assert data["success"] is True
        assert data["documentNumber"] == f"Oficio No.SINTEL-RH-001-{current_year}"
        assert isinstance(data["id"], int)

    @pytest.mark.parametrize("path", ["/api/generate-document", "/api/documents"])
    def test_both_paths_share_the_counter(self, client, path, current_year):
        _generate(client)
        response = _generate(client, path=path)
        assert response.get_json()["documentNumber"].endswith(f"RH-002-{current_year}")

    def test_missing_fields(self, client):
        response = client.post("/api/generate-document", json={"type": "oficio"})

        assert response.status_code == 400
        data = response.get_json()
        assert data["success"] is False
        assert data["message"] == "Missing required fields: department, subject"
        assert client.get("/api/counters").get_json() == []

    def test_empty_body(self, client):
        response = client.post("/api/generate-document", data="not json")
        assert response.status_code == 400

    def test_wrong_field_type(self, client):
        response = _generate(client, subject=123)

        assert response.status_code == 400
        data = response.get_json()
        assert data["message"] == "Invalid input data"
        assert data["details"][0]["loc"] == ["subject"]

    def test_department_too_long(self, client):
        response = _generate(client, department="X" * 11)
        assert response.status_code == 400

    def test_storage_failure_is_reported_without_internals(self, client, db_session, current_year):
        scope = ScopeCounterFactory(year=current_year)
        DocumentFactory(scope=scope, sequence=1)

        response = _generate(client)

        assert response.status_code == 500
        data = response.get_json()
        assert data["success"] is False
        assert data["details"] == "IntegrityError"
        assert "INSERT" not in json.dumps(data)
        assert counters.peek(db_session, "RH", "oficio", current_year) == 0


class TestNextNumber:
    def test_preview(self, client, current_year):
        _generate(client)

        response = client.get("/api/next-number/oficio/RH")

        assert response.status_code == 200
        assert response.get_json() == {
            "documentNumber": f"Oficio No.SINTEL-RH-002-{current_year}",
            "nextNumber": 2,
        }

    def test_preview_is_repeatable(self, client):
        first = client.get("/api/next-number/memorando/TI").get_json()
        second = client.get("/api/next-number/memorando/TI").get_json()
        assert first == second
        assert first["nextNumber"] == 1

    def test_preview_department_too_long(self, client):
        response = client.get("/api/next-number/oficio/DEPARTMENT-X")

        assert response.status_code == 400
        assert response.get_json()["success"] is False
        assert client.get("/api/counters").get_json() == []


class TestDocumentHistory:
    def test_list_newest_first(self, client):
        for subject in ("first", "second", "third"):
            _generate(client, subject=subject)

        response = client.get("/api/documents")

        assert response.status_code == 200
        data = response.get_json()
        assert [d["subject"] for d in data] == ["third", "second", "first"]
        assert set(data[0]) == {
            "id",
            "document_number",
            "document_type",
            "department",
            "subject",
            "recipient",
            "created_date",
            "status",
        }

    def test_limit_parameter(self, client):
        for i in range(4):
            _generate(client, subject=f"doc {i}")

        assert len(client.get("/api/documents?limit=2").get_json()) == 2
        assert len(client.get("/api/documents?limit=all").get_json()) == 4

    @pytest.mark.parametrize("limit", ["abc", "0", "-3"])
    def test_bad_limit(self, client, limit):
        assert client.get(f"/api/documents?limit={limit}").status_code == 400

    def test_stats(self, client):
        _generate(client)
        _generate(client, department="TI")

        response = client.get("/api/stats")

        assert response.status_code == 200
        assert response.get_json() == {
            "totalDocuments": 2,
            "todayDocuments": 2,
            "activeDepartments": 2,
        }

    def test_counters(self, client, current_year):
        _generate(client)
        _generate(client)

        response = client.get("/api/counters")

        assert response.status_code == 200
        assert response.get_json() == [
            {"department": "RH", "document_type": "oficio", "counter": 2, "year": current_year}
        ]


class TestDelete:
    @pytest.mark.parametrize("path", ["/api/delete-document/{}", "/api/documents/{}"])
    def test_delete_document(self, client, path, current_year):
        created = _generate(client).get_json()

        response = client.delete(path.format(created["id"]))

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert f"RH-001-{current_year}" in data["message"]
        assert client.get("/api/documents").get_json() == []

    def test_delete_unknown_document(self, client):
        response = client.delete("/api/delete-document/424242")
        assert response.status_code == 404
        assert response.get_json()["message"] == "Document not found"

    @pytest.mark.parametrize("path", ["/api/delete-all-documents", "/api/documents"])
    def test_delete_all(self, client, path, current_year):
        _generate(client)
        _generate(client, department="TI")

        response = client.delete(path)

        assert response.status_code == 200
        assert response.get_json()["totalDeleted"] == 2
        assert client.get("/api/documents").get_json() == []
        assert _generate(client).get_json()["documentNumber"].endswith(
            f"RH-001-{current_year}"
        )


class TestResetCounters:
    def test_reset_counter(self, client, current_year):
        _generate(client)
        _generate(client)

        response = client.post(
            "/api/reset-counter",
            json={"department": "RH", "document_type": "oficio", "year": current_year},
        )

        assert response.status_code == 200
        assert response.get_json()["success"] is True
        assert client.get("/api/next-number/oficio/RH").get_json()["nextNumber"] == 1

    def test_reset_counter_missing_parameters(self, client):
        response = client.post("/api/reset-counter", json={"department": "RH"})
        assert response.status_code == 400

    def test_reset_unknown_counter(self, client):
        response = client.post(
            "/api/reset-counter",
            json={"department": "RH", "document_type": "oficio", "year": 1999},
        )
        assert response.status_code == 404
        assert response.get_json()["message"] == "Counter not found"

    @pytest.mark.parametrize("path", ["/api/reset-counters", "/api/reset-all-counters"])
    def test_reset_all(self, client, path):
        _generate(client)
        _generate(client, type="memorando")

        response = client.post(path)

        assert response.status_code == 200
        assert response.get_json()["totalReset"] == 2
        assert all(c["counter"] == 0 for c in client.get("/api/counters").get_json())


def test_unknown_route_is_json(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
