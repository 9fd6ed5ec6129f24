from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from persistence.errors import (
    DuplicateItemError,
    ItemNotFoundError,
    NotAnArrayError,
    RemoteApiError,
    StoreUnavailableError,
    WriteInProgressError,
)

logger = logging.getLogger(__name__)

WRITE_RETRY_AFTER_SECONDS = 1


class ApiError(Exception):
    """An error already shaped for the client: status + {"error", "message"} body."""

    def __init__(self, status_code: int, error: str, message: str, *, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.headers = headers


def error_response(status_code: int, error: str, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse({"error": error, "message": message}, status_code=status_code, headers=headers)


async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status_code, exc.error, exc.message, exc.headers)


async def _not_an_array(request: Request, exc: NotAnArrayError) -> JSONResponse:
    return error_response(400, "Invalid operation", str(exc))


async def _item_not_found(request: Request, exc: ItemNotFoundError) -> JSONResponse:
    return error_response(404, "Not found", str(exc))


async def _duplicate_item(request: Request, exc: DuplicateItemError) -> JSONResponse:
    return error_response(409, "Conflict", str(exc))


async def _write_in_progress(request: Request, exc: WriteInProgressError) -> JSONResponse:
    logger.warning("Rejected concurrent write: %s %s", request.method, request.url.path)
    return error_response(
        503,
        "Write in progress",
        "Another change is being saved. Please try again shortly.",
        {"Retry-After": str(WRITE_RETRY_AFTER_SECONDS)},
    )


async def _store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("Content store unavailable: %s", exc)
    return error_response(503, "Service unavailable", "Content is temporarily unavailable. Please try again later.")


async def _remote_api_error(request: Request, exc: RemoteApiError) -> JSONResponse:
    logger.error("Remote content host error: status=%s message=%s", exc.status_code, exc.message)
    return error_response(502, "Upstream error", f"Content host responded with {exc.status_code}: {exc.message}")


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(str(err.get("msg", "")) for err in exc.errors()) or "Invalid request"
    return error_response(400, "Validation failed", details)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, "Not found", f"Route {request.method} {request.url.path} not found")
    return error_response(exc.status_code, "Request failed", str(exc.detail), getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI, *, hide_internal_errors: bool) -> None:
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = "An unexpected error occurred" if hide_internal_errors else str(exc) or exc.__class__.__name__
        body: dict[str, Any] = {"error": "Internal server error", "message": message}
        return JSONResponse(body, status_code=500)

    app.add_exception_handler(ApiError, _api_error)
    app.add_exception_handler(NotAnArrayError, _not_an_array)
    app.add_exception_handler(ItemNotFoundError, _item_not_found)
    app.add_exception_handler(DuplicateItemError, _duplicate_item)
    app.add_exception_handler(WriteInProgressError, _write_in_progress)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable)
    app.add_exception_handler(RemoteApiError, _remote_api_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled)
