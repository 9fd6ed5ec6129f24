from __future__ import annotations

import asyncio

from persistence.defaults import default_content
from persistence.errors import StoreUnavailableError, WriteInProgressError


def test_public_reads(client):
    r = client.get("/api/content")
    assert r.status_code == 200
    assert r.json() == default_content()

    r = client.get("/api/content/hero")
    assert r.status_code == 200
    assert r.json()["ctaLink"] == "#music"

    r = client.get("/api/content/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Section not found", "message": 'Section "nope" does not exist'}


def test_mutations_require_token(client):
    r = client.put("/api/content/hero", json={"title": "x"})
    assert r.status_code == 401
    assert r.json()["message"] == "No authentication token provided"

    r = client.post("/api/content/events/items", json={"title": "x"}, headers={"Authorization": "Bearer junk"})
    assert r.status_code == 403

    r = client.delete("/api/content/events/items/1")
    assert r.status_code == 401


def test_update_section(client, admin_headers):
    r = client.put("/api/content/contact", json={"email": "hi@example.com"}, headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"] == {"email": "hi@example.com"}

    assert client.get("/api/content/contact").json() == {"email": "hi@example.com"}

    # any JSON value, including arrays, for new sections too
    r = client.put("/api/content/pressQuotes", json=["one", "two"], headers=admin_headers)
    assert r.status_code == 200
    assert client.get("/api/content/pressQuotes").json() == ["one", "two"]


def test_update_section_requires_body(client, admin_headers):
    r = client.put("/api/content/hero", headers=admin_headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Validation failed", "message": "Request body is required"}


def test_item_lifecycle(client, admin_headers):
    r = client.post(
        "/api/content/events/items",
        json={"title": "Winter Gala", "day": "12", "month": "DEC"},
        headers=admin_headers,
    )
    assert r.status_code == 201
    item = r.json()["item"]
    assert item["id"]
    assert client.get("/api/content/events").json() == [item]

    r = client.put(f"/api/content/events/items/{item['id']}", json={"month": "JAN"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"] == [{**item, "month": "JAN"}]

    r = client.delete(f"/api/content/events/items/{item['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"] == []

    r = client.delete(f"/api/content/events/items/{item['id']}", headers=admin_headers)
    assert r.status_code == 404
    assert "not found" in r.json()["message"]


def test_item_validation_and_type_guard(client, admin_headers):
    r = client.post("/api/content/events/items", json={}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Item data is required"

    r = client.post("/api/content/events/items", json=["not", "an", "object"], headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"

    r = client.post("/api/content/contact/items", json={"email": "x"}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid operation"

    r = client.put("/api/content/events/items/missing", json={}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Update data is required"

    r = client.put("/api/content/events/items/missing", json={"title": "x"}, headers=admin_headers)
    assert r.status_code == 404


def test_duplicate_item_id_conflicts(client, admin_headers):
    r = client.post("/api/content/gallery/items", json={"id": "g1", "title": "a"}, headers=admin_headers)
    assert r.status_code == 201
    r = client.post("/api/content/gallery/items", json={"id": "g1", "title": "b"}, headers=admin_headers)
    assert r.status_code == 409


def test_bodies_are_sanitized(client, admin_headers):
    r = client.post(
        "/api/content/testimonials/items",
        json={"quote": "  Great <script>alert(1)</script>show ", "link": "javascript:alert(1)"},
        headers=admin_headers,
    )
    assert r.status_code == 201
    item = r.json()["item"]
    assert item["quote"] == "Great show"
    assert item["link"] == "alert(1)"


def test_write_in_progress_maps_to_retryable_503(client, admin_headers, disk_store, monkeypatch):
    async def _busy(doc):
        raise WriteInProgressError(str(disk_store.path))

    monkeypatch.setattr(disk_store, "write_content", _busy)
    r = client.put("/api/content/hero", json={"title": "x"}, headers=admin_headers)
    assert r.status_code == 503
    assert r.headers["Retry-After"] == "1"
    assert "try again shortly" in r.json()["message"]


def test_unavailable_store_maps_to_503(client, disk_store, monkeypatch):
    async def _down():
        raise StoreUnavailableError("disk gone")

    monkeypatch.setattr(disk_store, "read_content", _down)
    r = client.get("/api/content")
    assert r.status_code == 503
    assert r.json()["error"] == "Service unavailable"


def test_initialize_runs_on_startup(client, disk_store):
    assert disk_store.path.exists()
    assert asyncio.run(disk_store.read_content()) == default_content()
