"""Tests for GET / POST / PUT / DELETE /api/gallery."""

from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict, year: dict, **fields) -> dict:
    r = client.post(
        "/api/gallery",
        json={"yearId": year["id"], "imageUrl": "https://cdn.example.com/a.jpg", **fields},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


class TestGallery:
    def test_category_filter(self, client: TestClient, editor_headers, year):
        _create(client, editor_headers, year, caption="Crowd", category="attendees")
        _create(client, editor_headers, year, caption="Stage", category="talks")

        all_images = client.get(f"/api/gallery?yearId={year['id']}").json()
        talks = client.get(f"/api/gallery?yearId={year['id']}&category=talks").json()
        assert [i["caption"] for i in all_images] == ["Stage", "Crowd"]
        assert [i["caption"] for i in talks] == ["Stage"]

    def test_image_url_required(self, client: TestClient, editor_headers, year):
        r = client.post(
            "/api/gallery",
            json={"yearId": year["id"], "caption": "no image"},
            headers=editor_headers,
        )
        assert r.status_code == 400

    def test_update_caption(self, client: TestClient, editor_headers, year):
        created = _create(client, editor_headers, year, caption="old")
        r = client.put(
            f"/api/gallery/{created['id']}",
            json={"caption": "new"},
            headers=editor_headers,
        )
        assert r.json()["caption"] == "new"

    def test_delete(self, client: TestClient, editor_headers, year):
        created = _create(client, editor_headers, year)
        r = client.delete(f"/api/gallery/{created['id']}", headers=editor_headers)
        assert r.json() == {"id": created["id"], "message": "Image deleted"}
        assert client.get(f"/api/gallery/{created['id']}").status_code == 404
