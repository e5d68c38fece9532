"""Integration tests for the error envelope and shared response headers."""
import pytest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError


@pytest.mark.integration
class TestErrorEnvelope:
    """Every error is rendered as {success: false, error: {code, message}}."""

    def test_not_found_shape(self, client):
        response = client.post(
            "/api/v1/groups/999999/checkout", json={"deviceId": "dave2"}
        )

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "NotFound"
        assert "999999" in data["error"]["message"]
        assert "details" not in data

    def test_request_validation_shape(self, client, group_code):
        response = client.post(
            f"/api/v1/groups/{group_code}/checkin",
            json={"deviceId": "dave2", "placeId": "101"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"] == {"code": "ValidationError", "message": "Validation failed"}
        assert {"field": "userName", "message": "Field required"} in data["details"]

    @pytest.mark.parametrize("overrides,field", [
        ({"deviceId": "   "}, "deviceId"),
        ({"userName": "<b></b>"}, "userName"),
        ({"placeId": ""}, "placeId"),
        ({"placeCoords": [200.0, 36.9]}, "placeCoords"),
        ({"meetupNote": "n" * 201}, "meetupNote"),
        ({"timestamp": -1}, "timestamp"),
    ])
    def test_invalid_checkin_fields(self, client, group_code, overrides, field):
        payload = {"deviceId": "dave2", "userName": "Dave", "placeId": "101", "placeName": "Yamabiko Restaurant"}
        payload.update(overrides)

        response = client.post(f"/api/v1/groups/{group_code}/checkin", json=payload)

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == field

    def test_malformed_group_code(self, client):
        response = client.get("/api/v1/groups/1234/members")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ValidationError"

    def test_storage_error(self, client, group_code):
        """Database failures surface as a 500 StorageError."""
        with patch(
            "groupshare.db.store.CheckinStore.lock_group",
            side_effect=OperationalError("SELECT", {}, Exception("connection lost")),
        ):
            response = client.post(
                f"/api/v1/groups/{group_code}/checkout", json={"deviceId": "dave2"}
            )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "StorageError"


@pytest.mark.integration
class TestResponseHeaders:

    def test_request_id_header(self, client):
        response = client.get("/api/v1/groups/999999")
        assert response.headers["X-Request-ID"]

    def test_request_id_echoed(self, client):
        response = client.get("/api/v1/groups/999999", headers={"X-Request-ID": "trace-abc"})
        assert response.headers["X-Request-ID"] == "trace-abc"

    def test_api_version_header(self, client):
        from groupshare.core.config import settings

        response = client.get("/api/v1/groups/999999")
        assert response.headers["X-API-Version"] == settings.APP_VERSION


@pytest.mark.integration
class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["status"] == "connected"
        assert "pool" in data["database"]
        assert "rss_mb" in data["memory"]
