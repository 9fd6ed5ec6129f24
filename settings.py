from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw.strip())


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw.strip())


def _env_optional(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def project_root() -> Path:
    return Path(__file__).resolve().parent


@dataclass(frozen=True)
class Settings:
    # Deployment
    environment: str
    frontend_url: str

    # JWT
    jwt_secret: str
    jwt_alg: str
    jwt_expires_in_seconds: int

    # Admin account
    admin_email: str
    admin_password: str
    bcrypt_rounds: int

    # Content storage: "local" or "gist"
    content_store: str
    data_dir: Path

    # Gist storage (only read when content_store == "gist")
    gist_id: str | None
    github_token: str | None
    gist_filename: str
    github_api_url: str
    content_cache_ttl_seconds: float

    # Image uploads (Cloudinary)
    cloudinary_cloud_name: str | None
    cloudinary_api_key: str | None
    cloudinary_api_secret: str | None
    upload_folder: str
    max_upload_bytes: int

    # Rate limiting
    login_rate_limit_max: int
    login_rate_limit_window_seconds: int
    api_rate_limit_max: int
    api_rate_limit_window_seconds: int

    # Debug
    debug_log_requests: bool

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def content_path(self) -> Path:
        return self.data_dir / "content.json"

    @property
    def backup_path(self) -> Path:
        return self.data_dir / "content.backup.json"


def get_settings() -> Settings:
    data_dir_raw = _env_optional("DATA_DIR")
    data_dir = Path(data_dir_raw) if data_dir_raw else project_root() / "data"

    return Settings(
        environment=os.getenv("ENVIRONMENT", "development").strip().lower(),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/"),
        # NOTE: default is insecure; set JWT_SECRET in production
        jwt_secret=os.getenv("JWT_SECRET", "dev-only-change-this"),
        jwt_alg=os.getenv("JWT_ALG", "HS256"),
        jwt_expires_in_seconds=_env_int("JWT_EXPIRES_IN_SECONDS", 24 * 60 * 60),
        admin_email=os.getenv("ADMIN_EMAIL", "admin@example.com"),
        admin_password=os.getenv("ADMIN_PASSWORD", "admin123"),
        bcrypt_rounds=_env_int("BCRYPT_ROUNDS", 12),
        content_store=os.getenv("CONTENT_STORE", "local").strip().lower(),
        data_dir=data_dir,
        gist_id=_env_optional("GIST_ID"),
        github_token=_env_optional("GITHUB_TOKEN"),
        gist_filename=os.getenv("GIST_FILENAME", "content.json"),
        github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/"),
        content_cache_ttl_seconds=_env_float("CONTENT_CACHE_TTL_SECONDS", 30.0),
        cloudinary_cloud_name=_env_optional("CLOUDINARY_CLOUD_NAME"),
        cloudinary_api_key=_env_optional("CLOUDINARY_API_KEY"),
        cloudinary_api_secret=_env_optional("CLOUDINARY_API_SECRET"),
        upload_folder=os.getenv("UPLOAD_FOLDER", "singer_portfolio").strip("/"),
        max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        login_rate_limit_max=_env_int("LOGIN_RATE_LIMIT_MAX", 5),
        login_rate_limit_window_seconds=_env_int("LOGIN_RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
        api_rate_limit_max=_env_int("API_RATE_LIMIT_MAX", 100),
        api_rate_limit_window_seconds=_env_int("API_RATE_LIMIT_WINDOW_SECONDS", 60),
        debug_log_requests=_env_bool("DEBUG_LOG_REQUESTS", False),
    )
