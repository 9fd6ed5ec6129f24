from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request, Response

from .errors import ApiError


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: float

    def headers(self) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(math.ceil(self.reset_after)),
        }


class FixedWindowRateLimiter:
    """
    In-memory fixed-window counter per client key.

    Process-local; counters reset on restart.
    """

    def __init__(self, max_requests: int, window_seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self._max = max_requests
        self._window = window_seconds
        self._clock = clock
        self._guard = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}  # key -> (window_start, count)
        self._next_sweep = clock() + window_seconds

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._guard:
            if now >= self._next_sweep:
                self._sweep(now)
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self._window:
                start, count = now, 0
            count += 1
            self._windows[key] = (start, count)
        reset_after = max(0.0, self._window - (now - start))
        return RateLimitDecision(
            allowed=count <= self._max,
            limit=self._max,
            remaining=max(0, self._max - count),
            reset_after=reset_after,
        )

    def _sweep(self, now: float) -> None:
        # Drop clients whose window has ended; called with the guard held.
        self._windows = {k: v for k, v in self._windows.items() if now - v[0] < self._window}
        self._next_sweep = now + self._window

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        with self._guard:
            self._windows.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _enforce(limiter: FixedWindowRateLimiter, request: Request, response: Response, error: str, message: str) -> None:
    decision = limiter.hit(client_key(request))
    if not decision.allowed:
        headers = decision.headers()
        headers["Retry-After"] = str(math.ceil(decision.reset_after))
        raise ApiError(429, error, message, headers=headers)
    response.headers.update(decision.headers())


async def enforce_api_rate_limit(request: Request, response: Response) -> None:
    _enforce(
        request.app.state.api_limiter,
        request,
        response,
        "Rate limit exceeded",
        "Too many requests. Please slow down.",
    )


async def enforce_login_rate_limit(request: Request, response: Response) -> None:
    _enforce(
        request.app.state.login_limiter,
        request,
        response,
        "Too many attempts",
        "Too many login attempts. Please try again later.",
    )
