from __future__ import annotations

import dataclasses

import pytest
from fastapi.testclient import TestClient

from persistence import DiskContentStore, GistContentStore, create_content_store


def test_app_smoke_routes(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = client.get("/api/unknown")
    assert r.status_code == 404
    assert r.json()["error"] == "Not found"


def test_default_app_uses_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "env-data"))
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    import app as app_module

    with TestClient(app_module.create_app()) as client:
        assert client.get("/api/content/hero").status_code == 200
    assert (tmp_path / "env-data" / "content.json").exists()


def test_store_selection(settings):
    local = create_content_store(settings)
    assert isinstance(local, DiskContentStore)
    assert local.path == settings.data_dir / "content.json"
    assert local.backup_path == settings.data_dir / "content.backup.json"

    gist = create_content_store(dataclasses.replace(settings, content_store="gist", gist_id="g", github_token="t"))
    assert isinstance(gist, GistContentStore)

    with pytest.raises(ValueError):
        create_content_store(dataclasses.replace(settings, content_store="s3"))


def test_gist_backend_boots_without_secrets(settings):
    import app as app_module

    gist_settings = dataclasses.replace(settings, content_store="gist", gist_id=None, github_token=None)
    with TestClient(app_module.create_app(settings=gist_settings)) as client:
        assert client.get("/api/health").status_code == 200
        r = client.get("/api/content")
        assert r.status_code == 503


def test_security_headers_on_success_and_error_responses(client):
    for path, expected_status in (("/api/health", 200), ("/api/unknown", 404), ("/api/content/nope", 404)):
        r = client.get(path)
        assert r.status_code == expected_status
        assert r.headers["X-Content-Type-Options"] == "nosniff"
        assert r.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert r.headers["Referrer-Policy"] == "no-referrer"
        assert r.headers["Cross-Origin-Resource-Policy"] == "cross-origin"
        # HSTS is production-only
        assert "Strict-Transport-Security" not in r.headers


def test_production_adds_hsts(settings, disk_store):
    import app as app_module

    prod = dataclasses.replace(settings, environment="production")
    with TestClient(app_module.create_app(settings=prod, store=disk_store)) as client:
        r = client.get("/api/health")
        assert r.headers["Strict-Transport-Security"].startswith("max-age=")
