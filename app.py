from __future__ import annotations

import contextlib
import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv

from endpoints.auth_endpoints import AdminAccount, router as auth_router
from endpoints.content_endpoints import router as content_router
from endpoints.errors import register_exception_handlers
from endpoints.rate_limit import FixedWindowRateLimiter, enforce_api_rate_limit
from endpoints.security_headers import add_security_headers
from endpoints.upload_endpoints import CloudinaryMedia, router as upload_router
from persistence import ContentStore, create_content_store
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    store: ContentStore = app.state.content_store
    await store.initialize()
    try:
        yield
    finally:
        await store.close()


def create_app(settings: Settings | None = None, store: ContentStore | None = None) -> FastAPI:
    if settings is None:
        load_dotenv()
        settings = get_settings()

    app = FastAPI(title="Portfolio Content API", lifespan=lifespan)

    # One store per process, shared by every request through app.state.
    app.state.settings = settings
    app.state.content_store = store if store is not None else create_content_store(settings)
    app.state.admin = AdminAccount.from_settings(settings)
    app.state.login_limiter = FixedWindowRateLimiter(
        settings.login_rate_limit_max, settings.login_rate_limit_window_seconds
    )
    app.state.api_limiter = FixedWindowRateLimiter(settings.api_rate_limit_max, settings.api_rate_limit_window_seconds)
    app.state.media = CloudinaryMedia.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app, hide_internal_errors=settings.is_production)
    add_security_headers(app, hsts=settings.is_production)

    @app.get("/api/health")
    async def health():
        return {
            "status": "ok",
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(auth_router, dependencies=[Depends(enforce_api_rate_limit)])
    app.include_router(content_router, dependencies=[Depends(enforce_api_rate_limit)])
    app.include_router(upload_router, dependencies=[Depends(enforce_api_rate_limit)])

    logger.info("Content store: %s (%s)", settings.content_store, type(app.state.content_store).__name__)
    return app


app = create_app()
