"""Tests for the one-per-year records: /api/venue, /api/contact, /api/settings."""

from fastapi.testclient import TestClient

VENUE = {
    "name": "Palais des Congrès",
    "city": "Yaoundé",
    "region": "Centre",
    "latitude": 3.8667,
    "longitude": 11.5167,
    "capacity": 800,
    "images": [],
}


class TestVenue:
    def test_get_missing_returns_404(self, client: TestClient, year):
        r = client.get(f"/api/venue?yearId={year['id']}")
        assert r.status_code == 404

    def test_create_then_get(self, client: TestClient, editor_headers, year):
        r = client.post("/api/venue", json={**VENUE, "yearId": year["id"]}, headers=editor_headers)
        assert r.status_code == 201, r.text
        assert r.json()["yearId"] == year["id"]

        venue = client.get(f"/api/venue?yearId={year['id']}").json()
        assert venue["city"] == "Yaoundé"
        assert venue["latitude"] == 3.8667
        assert venue["capacity"] == 800

    def test_second_create_conflicts(self, client: TestClient, editor_headers, year):
        client.post("/api/venue", json={**VENUE, "yearId": year["id"]}, headers=editor_headers)
        r = client.post("/api/venue", json={**VENUE, "yearId": year["id"]}, headers=editor_headers)
        assert r.status_code == 409

    def test_put_updates_existing_record(self, client: TestClient, editor_headers, year):
        created = client.post(
            "/api/venue", json={**VENUE, "yearId": year["id"]}, headers=editor_headers
        ).json()
        r = client.put(
            "/api/venue",
            json={"yearId": year["id"], "capacity": 1000},
            headers=editor_headers,
        )
        assert r.status_code == 200
        assert r.json()["capacity"] == 1000
        assert r.json()["name"] == VENUE["name"]
        assert r.json()["id"] == created["id"]
        assert r.json()["createdAt"] == created["createdAt"]

    def test_put_creates_when_required_fields_present(self, client: TestClient, editor_headers, year):
        r = client.put(
            "/api/venue",
            json={"yearId": year["id"], "name": "Hall", "city": "Douala", "region": "Littoral"},
            headers=editor_headers,
        )
        assert r.status_code == 200
        assert r.json()["id"]
        assert r.json()["yearId"] == year["id"]

    def test_put_creating_without_required_fields_returns_400(
        self, client: TestClient, editor_headers, year
    ):
        r = client.put(
            "/api/venue",
            json={"yearId": year["id"], "capacity": 10},
            headers=editor_headers,
        )
        assert r.status_code == 400
        assert "name" in r.json()["detail"]

    def test_unknown_year_returns_404(self, client: TestClient, editor_headers, aws_env):
        r = client.post("/api/venue", json={**VENUE, "yearId": "nope"}, headers=editor_headers)
        assert r.status_code == 404

    def test_delete(self, client: TestClient, editor_headers, year):
        client.post("/api/venue", json={**VENUE, "yearId": year["id"]}, headers=editor_headers)
        r = client.delete(f"/api/venue?yearId={year['id']}", headers=editor_headers)
        assert r.status_code == 200
        assert client.get(f"/api/venue?yearId={year['id']}").status_code == 404

    def test_delete_survives_s3_failure(self, client: TestClient, editor_headers, year, monkeypatch):
        import shared.s3  # noqa: PLC0415
        from botocore.exceptions import EndpointConnectionError  # noqa: PLC0415

        def _s3_down(keys):
            raise EndpointConnectionError(endpoint_url="https://s3.example.com")

        monkeypatch.setattr(shared.s3, "delete_s3_objects", _s3_down)
        images = [shared.s3.public_url("venue/hall.jpg")]
        client.post(
            "/api/venue",
            json={**VENUE, "yearId": year["id"], "images": images},
            headers=editor_headers,
        )

        r = client.delete(f"/api/venue?yearId={year['id']}", headers=editor_headers)
        assert r.status_code == 200
        assert client.get(f"/api/venue?yearId={year['id']}").status_code == 404


class TestContact:
    def test_upsert_round(self, client: TestClient, editor_headers, year):
        r = client.put(
            "/api/contact",
            json={"yearId": year["id"], "email": "hello@acd.cm", "phone": "+237 600 000 000"},
            headers=editor_headers,
        )
        assert r.status_code == 200

        r = client.put(
            "/api/contact",
            json={"yearId": year["id"], "phone": None},
            headers=editor_headers,
        )
        assert r.json()["email"] == "hello@acd.cm"
        assert r.json()["phone"] is None

    def test_invalid_email_returns_400(self, client: TestClient, editor_headers, year):
        r = client.post(
            "/api/contact",
            json={"yearId": year["id"], "email": "not-an-email"},
            headers=editor_headers,
        )
        assert r.status_code == 400

    def test_yearid_only_body_returns_400(self, client: TestClient, editor_headers, year):
        r = client.put("/api/contact", json={"yearId": year["id"]}, headers=editor_headers)
        assert r.status_code == 400
        assert r.json()["detail"] == "No fields to update"


class TestSettings:
    def test_create_and_get(self, client: TestClient, editor_headers, year):
        r = client.post(
            "/api/settings",
            json={
                "yearId": year["id"],
                "rsvpLink": "https://rsvp.example.com",
                "eventDate": "2025-09-20T08:00:00Z",
                "maxAttendees": 600,
            },
            headers=editor_headers,
        )
        assert r.status_code == 201, r.text
        settings = client.get(f"/api/settings?yearId={year['id']}").json()
        assert settings["maxAttendees"] == 600
        assert settings["eventDate"].startswith("2025-09-20T08:00:00")

    def test_records_are_per_year(self, client: TestClient, editor_headers, year):
        from tests.conftest import create_year  # noqa: PLC0415

        other = create_year("2024")
        client.put(
            "/api/settings",
            json={"yearId": year["id"], "maxAttendees": 600},
            headers=editor_headers,
        )
        assert client.get(f"/api/settings?yearId={other['id']}").status_code == 404
