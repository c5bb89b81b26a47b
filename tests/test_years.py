"""Tests for /api/years and /api/public/years."""

from fastapi.testclient import TestClient


class TestYears:
    def test_list_newest_name_first(self, client: TestClient, editor_headers):
        for name in ("2023", "2025", "2024"):
            r = client.post("/api/years", json={"name": name}, headers=editor_headers)
            assert r.status_code == 201

        assert [y["name"] for y in client.get("/api/years").json()] == ["2025", "2024", "2023"]

    def test_public_list_only_exposes_id_and_name(self, client: TestClient, editor_headers):
        client.post("/api/years", json={"name": "2025"}, headers=editor_headers)
        years = client.get("/api/public/years").json()
        assert list(years[0].keys()) == ["id", "name"]

    def test_duplicate_name_conflicts(self, client: TestClient, editor_headers):
        client.post("/api/years", json={"name": "2025"}, headers=editor_headers)
        r = client.post("/api/years", json={"name": " 2025 "}, headers=editor_headers)
        assert r.status_code == 409

    def test_create_requires_session(self, client: TestClient, aws_env):
        assert client.post("/api/years", json={"name": "2025"}).status_code == 401
