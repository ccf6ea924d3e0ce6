import pytest

from lecture_queue.library import VideoLibrary
from lecture_queue.server import create_app
from lecture_queue.storage import MemoryRepository


@pytest.fixture
def client(make_provider):
    provider = make_provider(fail={"https://www.youtube.com/watch?v=down"})
    app = create_app(VideoLibrary(MemoryRepository(), fetch=provider))
    app.testing = True
    return app.test_client()


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["ok"] is True
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_add_and_list(client):
    resp = client.post("/api/videos", json={"url": "https://youtu.be/abc123"})
    assert resp.status_code == 200
    record = resp.get_json()
    assert record["id"] == "abc123"
    assert record["subject"] == "CS101"
    assert record["publishedAt"] == "2024-03-15T12:00:00.000Z"

    assert client.get("/api/videos").get_json() == [record]


def test_add_requires_url(client):
    resp = client.post("/api/videos", json={})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "url required"}


def test_add_invalid_link(client):
    resp = client.post("/api/videos", json={"url": "https://example.com/watch?v=xyz"})
    assert resp.status_code == 422
    assert "Invalid YouTube link" in resp.get_json()["error"]


def test_add_metadata_failure(client):
    resp = client.post("/api/videos", json={"url": "https://youtu.be/down"})
    assert resp.status_code == 502
    assert client.get("/api/videos").get_json() == []


def test_bulk(client):
    resp = client.post("/api/videos/bulk", json={"urls": [
        "https://youtu.be/a", "bad", "https://youtu.be/down", "https://youtu.be/b",
    ]})
    data = resp.get_json()
    assert data["success"] is True
    assert data["added"] == 2
    assert data["errors"] == 2
    assert len(data["errorDetails"]) == 2
    assert [r["id"] for r in data["results"]] == ["a", "b"]


def test_bulk_requires_list(client):
    resp = client.post("/api/videos/bulk", json={"urls": "https://youtu.be/a"})
    assert resp.status_code == 400


def test_delete_one(client):
    client.post("/api/videos", json={"url": "https://youtu.be/a"})
    data = client.delete("/api/videos/a").get_json()
    assert data == {"ok": True, "removed": True, "id": "a", "message": "Video removed successfully"}
    data = client.delete("/api/videos/a").get_json()
    assert data["removed"] is False
    assert data["message"] == "Video not found"


def test_delete_all(client):
    client.post("/api/videos", json={"url": "https://youtu.be/a"})
    assert client.delete("/api/videos").get_json() == {"ok": True}
    assert client.get("/api/export").get_json() == []


def test_import_and_merge(client):
    items = [
        {"id": "x", "url": "https://www.youtube.com/watch?v=x", "title": "X"},
        {"id": "bad"},
    ]
    assert client.post("/api/import", json={"items": items}).get_json() == {"ok": True, "count": 1}

    merge = [{"id": "x", "url": "https://www.youtube.com/watch?v=x", "subject": "CS50"}]
    assert client.post("/api/merge", json={"items": merge}).get_json() == {"ok": True, "upserted": 1}

    exported = client.get("/api/export").get_json()
    assert exported == [{"id": "x", "url": "https://www.youtube.com/watch?v=x", "title": "X", "subject": "CS50"}]


@pytest.mark.parametrize("path", ["/api/import", "/api/merge"])
def test_items_must_be_list(client, path):
    resp = client.post(path, json={"items": {"id": "x"}})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "items must be an array"}


@pytest.mark.parametrize("path, body", [
    ("/api/videos", ["https://youtu.be/a"]),
    ("/api/videos", "https://youtu.be/a"),
    ("/api/videos/bulk", ["https://youtu.be/a"]),
    ("/api/import", [{"id": "x", "url": "u"}]),
    ("/api/merge", 42),
])
def test_non_object_body_is_rejected(client, path, body):
    resp = client.post(path, json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_debug(client):
    client.post("/api/videos", json={"url": "https://youtu.be/a"})
    data = client.get("/api/debug").get_json()
    assert data["videoCount"] == 1
    assert data["videos"][0]["id"] == "a"


def test_unknown_route(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Cannot GET /api/nope"
