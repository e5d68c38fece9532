"""Integration tests for group endpoints."""
import pytest


@pytest.mark.integration
class TestCreateGroup:

    def test_create_group(self, client):
        response = client.post("/api/v1/groups")

        assert response.status_code == 201
        data = response.json()
        assert len(data["code"]) == 6
        assert data["code"].isdigit()
        assert "created_at" in data
        assert data["expires_at"] is None

    def test_codes_are_unique(self, client):
        codes = {client.post("/api/v1/groups").json()["code"] for _ in range(10)}
        assert len(codes) == 10

    def test_exhausted_code_generation(self, client, monkeypatch):
        """Every attempt colliding returns 503 with the error envelope."""
        monkeypatch.setattr("groupshare.services.groups.generate_group_code", lambda: "482913")
        assert client.post("/api/v1/groups").status_code == 201

        response = client.post("/api/v1/groups")

        assert response.status_code == 503
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "CodeGenerationExhausted"


@pytest.mark.integration
class TestGetGroup:

    def test_existing_group(self, client, group_code):
        response = client.get(f"/api/v1/groups/{group_code}")

        assert response.status_code == 200
        data = response.json()
        assert data["exists"] is True
        assert data["group"]["code"] == group_code

    def test_unknown_group(self, client):
        response = client.get("/api/v1/groups/999999")

        assert response.status_code == 200
        assert response.json() == {"exists": False, "group": None}

    def test_malformed_code(self, client):
        response = client.get("/api/v1/groups/12ab56")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ValidationError"
