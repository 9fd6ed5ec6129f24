from __future__ import annotations

from fastapi import FastAPI, Request

# Uploaded images are served from another origin, so resources stay cross-origin readable.
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
}
HSTS_VALUE = "max-age=15552000; includeSubDomains"


def add_security_headers(app: FastAPI, *, hsts: bool) -> None:
    """Stamp the usual hardening headers on every response, errors included."""
    headers = dict(SECURITY_HEADERS)
    if hsts:
        headers["Strict-Transport-Security"] = HSTS_VALUE

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
