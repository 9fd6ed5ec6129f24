from __future__ import annotations

import dataclasses
from pathlib import Path
import sys
from typing import Iterator

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def settings(tmp_path: Path):
    """Settings pointing at a temp data dir so tests never touch real ./data."""
    from settings import get_settings

    return dataclasses.replace(
        get_settings(),
        environment="test",
        jwt_secret="test-secret",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        bcrypt_rounds=4,
        content_store="local",
        data_dir=tmp_path / "data",
        login_rate_limit_max=5,
        api_rate_limit_max=1000,
    )


@pytest.fixture
def disk_store(settings):
    from persistence.disk_store import DiskContentStore

    return DiskContentStore(settings.content_path, settings.backup_path)


@pytest.fixture
def client(settings, disk_store) -> Iterator:
    from fastapi.testclient import TestClient

    import app as app_module

    with TestClient(app_module.create_app(settings=settings, store=disk_store)) as c:
        yield c


@pytest.fixture
def admin_headers(client) -> dict[str, str]:
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
