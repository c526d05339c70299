# tests/test_security.py
from urllib.parse import quote


class TestSecurity:
    def test_sql_injection_in_path(self, client):
        """Path segments are bound as parameters, never spliced into SQL."""
        malicious = "RH' OR 1=1"
        response = client.get(f"/api/next-number/oficio/{quote(malicious)}")

        assert response.status_code == 200
        assert client.get("/api/documents").status_code == 200

    def test_sql_injection_in_body_is_rejected(self, client):
        response = client.post(
            "/api/generate-document",
            json={
                "type": "oficio",
                "department": "RH'; DROP TABLE sintel_counters; --",
                "subject": "x",
            },
        )
        assert response.status_code == 400
        assert client.get("/api/counters").status_code == 200

    def test_markup_is_stored_verbatim(self, client):
        xss_payload = '<script>alert("XSS")</script>'
        response = client.post(
            "/api/generate-document",
            json={"type": "oficio", "department": "RH", "subject": xss_payload},
        )
        assert response.status_code == 201

        listed = client.get("/api/documents")
        assert listed.mimetype == "application/json"
        assert listed.get_json()[0]["subject"] == xss_payload
