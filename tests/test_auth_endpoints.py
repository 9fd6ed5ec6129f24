from __future__ import annotations

import asyncio
import time

import jwt

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"


def test_login_issues_token_that_verifies(client, settings):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["admin"] == {"email": ADMIN_EMAIL}

    claims = jwt.decode(body["token"], settings.jwt_secret, algorithms=[settings.jwt_alg])
    assert claims["email"] == ADMIN_EMAIL
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == settings.jwt_expires_in_seconds

    headers = {"Authorization": f"Bearer {body['token']}"}
    r = client.get("/api/auth/verify", headers=headers)
    assert r.status_code == 200
    assert r.json()["admin"]["email"] == ADMIN_EMAIL

    r = client.post("/api/auth/logout", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Logged out successfully"


def test_login_rejects_bad_credentials(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"error": "Authentication failed", "message": "Invalid email or password"}

    r = client.post("/api/auth/login", json={"email": "someone@else.com", "password": ADMIN_PASSWORD})
    assert r.status_code == 401

    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
    assert r.status_code == 400
    assert r.json()["message"] == "Email and password are required"


def test_expired_and_forged_tokens(client, settings):
    now = int(time.time())
    expired = jwt.encode(
        {"email": ADMIN_EMAIL, "role": "admin", "iat": now - 100, "exp": now - 10},
        settings.jwt_secret,
        algorithm=settings.jwt_alg,
    )
    r = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Token expired"

    forged = jwt.encode({"email": ADMIN_EMAIL, "role": "admin"}, "other-secret", algorithm="HS256")
    r = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 403

    not_admin = jwt.encode({"email": ADMIN_EMAIL, "role": "viewer"}, settings.jwt_secret, algorithm=settings.jwt_alg)
    r = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {not_admin}"})
    assert r.status_code == 403

    r = client.get("/api/auth/verify")
    assert r.status_code == 401


def test_login_is_rate_limited(client):
    for _ in range(5):
        r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
        assert r.status_code == 401

    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 429
    assert r.json()["error"] == "Too many attempts"
    assert int(r.headers["Retry-After"]) > 0


class RecordingAdmin:
    """Stands in for AdminAccount and records whether check() ran on the event loop."""

    email = ADMIN_EMAIL

    def __init__(self) -> None:
        self.ran_on_loop: list[bool] = []

    def check(self, email: str, password: str) -> bool:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self.ran_on_loop.append(False)
        else:
            self.ran_on_loop.append(True)
        return email == ADMIN_EMAIL and password == ADMIN_PASSWORD


def test_password_check_runs_in_worker_thread(client):
    admin = RecordingAdmin()
    client.app.state.admin = admin

    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    assert r.status_code == 401

    assert admin.ran_on_loop == [False, False]
