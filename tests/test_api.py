"""
HTTP contract tests for the glow API: status codes, bodies and error mapping.
"""

import sqlite3
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from glowstore.api.main import app
from glowstore.core.config import VERSION

OBJECT_ID = "550e8400-e29b-41d4-a716-446655440000"
UPPER_ID = OBJECT_ID.upper()
SAMPLE_DATA = "4|6|8;0.5|0.3|0.0|1.0"

INVALID_ID = {"error": "Invalid object ID format. Expected UUID."}
INVALID_DATA = {"error": "Invalid data format. Expected 'metadata;values' with pipe-delimited numbers."}
NOT_FOUND = {"error": "No glow data found for this object."}
INTERNAL = {"error": "Internal server error."}


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client against a fresh database; startup creates the table."""
    monkeypatch.setenv("DB_PATH", str(tmp_path / "glow.db"))
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:

    def test_glow_health_always_healthy(self, client):
        with patch("glowstore.core.store.get_db") as mock_db:
            response = client.get("/api/glow/health")
            mock_db.assert_not_called()

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "timestamp" in body

    def test_service_health_checks_database(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": VERSION, "dbHealth": True}

    def test_service_health_reports_broken_database(self, client):
        with patch("glowstore.core.db.get_db", side_effect=sqlite3.OperationalError("unable to open")):
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"
        assert response.json()["dbHealth"] is False


class TestSaveGlow:

    def test_save_example(self, client):
        response = client.post(f"/api/glow/{UPPER_ID}", json={"data": SAMPLE_DATA})
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["objectId"] == OBJECT_ID
        assert body["message"] == "Glow data saved successfully."
        assert body["updatedAt"]

    def test_save_invalid_data(self, client):
        response = client.post(f"/api/glow/{OBJECT_ID}", json={"data": "abc"})
        assert response.status_code == 400
        assert response.json() == INVALID_DATA

    def test_save_invalid_id(self, client):
        response = client.post("/api/glow/not-a-uuid", json={"data": SAMPLE_DATA})
        assert response.status_code == 400
        assert response.json() == INVALID_ID

    @pytest.mark.parametrize("body", [{}, {"data": None}, {"data": ""}, {"data": 5}, {"data": ["1;1"]}])
    def test_save_missing_or_wrong_data_field(self, client, body):
        response = client.post(f"/api/glow/{OBJECT_ID}", json=body)
        assert response.status_code == 400
        assert response.json() == INVALID_DATA

    def test_save_without_body(self, client):
        response = client.post(f"/api/glow/{OBJECT_ID}")
        assert response.status_code == 400
        assert response.json() == INVALID_DATA

    def test_save_malformed_json(self, client):
        response = client.post(
            f"/api/glow/{OBJECT_ID}",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == INVALID_DATA

    def test_rejected_write_leaves_nothing_behind(self, client):
        client.post(f"/api/glow/{OBJECT_ID}", json={"data": "4|6;0.5;1.0"})
        assert client.get(f"/api/glow/{OBJECT_ID}").status_code == 404


class TestGetGlow:

    def test_round_trip(self, client):
        saved = client.post(f"/api/glow/{OBJECT_ID}", json={"data": SAMPLE_DATA}).json()

        response = client.get(f"/api/glow/{UPPER_ID}")
        assert response.status_code == 200
        body = response.json()
        assert body["objectId"] == OBJECT_ID
        assert body["data"] == SAMPLE_DATA
        assert body["updatedAt"] == saved["updatedAt"]

    def test_get_invalid_id(self, client):
        response = client.get("/api/glow/not-a-uuid")
        assert response.status_code == 400
        assert response.json() == INVALID_ID

    def test_get_missing(self, client):
        response = client.get(f"/api/glow/{OBJECT_ID}")
        assert response.status_code == 404
        assert response.json() == NOT_FOUND

    def test_update_is_visible(self, client):
        client.post(f"/api/glow/{OBJECT_ID}", json={"data": SAMPLE_DATA})
        client.post(f"/api/glow/{UPPER_ID}", json={"data": "2;1.0|0.0"})
        assert client.get(f"/api/glow/{OBJECT_ID}").json()["data"] == "2;1.0|0.0"


class TestDeleteGlow:

    def test_delete_then_get(self, client):
        client.post(f"/api/glow/{OBJECT_ID}", json={"data": SAMPLE_DATA})

        response = client.delete(f"/api/glow/{UPPER_ID}")
        assert response.status_code == 200
        assert response.json() == {"message": "Glow data deleted successfully."}

        assert client.get(f"/api/glow/{OBJECT_ID}").status_code == 404

    def test_delete_missing(self, client):
        response = client.delete(f"/api/glow/{OBJECT_ID}")
        assert response.status_code == 404
        assert response.json() == NOT_FOUND

    def test_delete_invalid_id(self, client):
        response = client.delete("/api/glow/1234")
        assert response.status_code == 400
        assert response.json() == INVALID_ID


class TestInternalFailures:

    @pytest.mark.parametrize("method,body", [
        ("get", None),
        ("post", {"data": SAMPLE_DATA}),
        ("delete", None),
    ])
    def test_storage_failure_is_opaque(self, client, method, body):
        failure = sqlite3.OperationalError("unable to open database file /var/secret/glow.db")
        with patch("glowstore.core.store.get_db", side_effect=failure):
            if body is None:
                response = client.request(method.upper(), f"/api/glow/{OBJECT_ID}")
            else:
                response = client.request(method.upper(), f"/api/glow/{OBJECT_ID}", json=body)

        assert response.status_code == 500
        assert response.json() == INTERNAL
        assert "secret" not in response.text

    def test_persistent_conflict_is_internal_error(self, client, monkeypatch):
        monkeypatch.setenv("UPSERT_CONFLICT_RETRIES", "1")
        conflict = sqlite3.IntegrityError("UNIQUE constraint failed: glow_records.object_id")
        with patch("glowstore.core.store._write_record", side_effect=conflict):
            response = client.post(f"/api/glow/{OBJECT_ID}", json={"data": SAMPLE_DATA})
        assert response.status_code == 500
        assert response.json() == INTERNAL


class TestCors:

    def test_preflight_allows_any_origin(self, client):
        response = client.options(
            f"/api/glow/{OBJECT_ID}",
            headers={
                "Origin": "http://sim1234.agni.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
