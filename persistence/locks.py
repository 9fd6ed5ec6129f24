from __future__ import annotations

import contextlib
import threading
from typing import Iterator

from .errors import WriteInProgressError


class WriteGuard:
    """
    Single-writer guard for one document.

    A second writer is rejected immediately with WriteInProgressError; nobody waits.
    Process-local only: separate processes writing the same file are not coordinated.
    """

    def __init__(self, target: str) -> None:
        self._target = target
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextlib.contextmanager
    def hold(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise WriteInProgressError(self._target)
        try:
            yield
        finally:
            self._lock.release()
