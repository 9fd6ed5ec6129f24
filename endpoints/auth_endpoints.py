from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import bcrypt
import jwt
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from settings import Settings

from .errors import ApiError
from .rate_limit import enforce_login_rate_limit

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AdminAccount:
    """The single admin login. The password is only kept as a bcrypt hash."""

    email: str
    password_hash: bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminAccount":
        hashed = bcrypt.hashpw(settings.admin_password.encode("utf-8"), bcrypt.gensalt(rounds=settings.bcrypt_rounds))
        return cls(email=settings.admin_email, password_hash=hashed)

    def check(self, email: str, password: str) -> bool:
        if email != self.email:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), self.password_hash)


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def issue_token(settings: Settings, email: str) -> str:
    now = int(time.time())
    payload = {
        "email": email,
        "role": ADMIN_ROLE,
        "iat": now,
        "exp": now + settings.jwt_expires_in_seconds,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def _bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if not auth or not auth.lower().startswith("bearer "):
        return None
    token = auth.split(" ", 1)[1].strip()
    return token or None


async def require_admin(request: Request) -> dict[str, Any]:
    """Dependency for mutating routes: returns the verified token claims."""
    token = _bearer_token(request)
    if not token:
        raise ApiError(401, "Access denied", "No authentication token provided")

    settings: Settings = request.app.state.settings
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
    except jwt.ExpiredSignatureError:
        raise ApiError(401, "Token expired", "Your session has expired. Please login again.")
    except jwt.InvalidTokenError:
        raise ApiError(403, "Invalid token", "Authentication failed")

    if claims.get("role") != ADMIN_ROLE:
        raise ApiError(403, "Invalid token", "Authentication failed")
    return claims


@router.post("/login", dependencies=[Depends(enforce_login_rate_limit)])
async def login(request: Request, body: LoginRequest) -> dict[str, Any]:
    email = (body.email or "").strip()
    password = body.password or ""
    if not email or not password:
        raise ApiError(400, "Validation failed", "Email and password are required")

    settings: Settings = request.app.state.settings
    admin: AdminAccount = request.app.state.admin
    # bcrypt is CPU-bound; run it in a worker thread.
    if not await asyncio.to_thread(admin.check, email, password):
        if settings.debug_log_requests:
            logger.info("LOGIN failed: email=%s client=%s", email, request.client.host if request.client else None)
        raise ApiError(401, "Authentication failed", "Invalid email or password")

    logger.info("LOGIN ok: email=%s", email)
    return {
        "success": True,
        "message": "Login successful",
        "token": issue_token(settings, admin.email),
        "admin": {"email": admin.email},
    }


@router.get("/verify")
async def verify(claims: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
    return {"success": True, "message": "Token is valid", "admin": claims}


@router.post("/logout")
async def logout(claims: dict[str, Any] = Depends(require_admin)) -> dict[str, Any]:
    # Tokens are stateless; the client drops its copy.
    logger.info("LOGOUT: email=%s", claims.get("email"))
    return {"success": True, "message": "Logged out successfully"}
