from __future__ import annotations

import asyncio
import json
import logging
import shutil
from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .content_store import JsonContentStore
from .defaults import default_content
from .errors import StoreUnavailableError
from .locks import WriteGuard
from .paths import ensure_dir

logger = logging.getLogger(__name__)


class DiskContentStore(JsonContentStore):
    """
    Stores the content document as a single JSON file on local disk.

    - Missing file reads as the default skeleton (first-run bootstrapping).
    - Every write first copies the current file to a single-generation backup,
      then writes a uniquely named temp file and renames it into place.
    - One writer at a time; a concurrent writer is rejected, not queued.
    """

    def __init__(self, path: Path, backup_path: Path | None = None):
        self._path = path
        self._backup_path = backup_path or path.with_name(f"{path.stem}.backup{path.suffix}")
        self._guard = WriteGuard(str(path))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def backup_path(self) -> Path:
        return self._backup_path

    @property
    def is_writing(self) -> bool:
        return self._guard.busy

    async def initialize(self) -> None:
        created = await asyncio.to_thread(self._initialize_sync)
        if created:
            logger.info("Created default content document at %s", self._path)
        else:
            logger.info("Using content document at %s", self._path)

    def _initialize_sync(self) -> bool:
        ensure_dir(self._path.parent)
        if self._path.exists():
            return False
        atomic_write_json(self._path, default_content())
        return True

    async def read_content(self) -> dict[str, Any]:
        try:
            raw = await asyncio.to_thread(read_json, self._path)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreUnavailableError(f"Failed to read {self._path}: {e}") from e
        if raw is None:
            return default_content()
        if not isinstance(raw, dict):
            raise StoreUnavailableError(f"{self._path} does not contain a JSON object")
        return raw

    async def write_content(self, doc: dict[str, Any]) -> dict[str, Any]:
        with self._guard.hold():
            await asyncio.to_thread(self._write_sync, doc)
        logger.info("Content saved to %s", self._path)
        return doc

    def _write_sync(self, doc: dict[str, Any]) -> None:
        if self._path.exists():
            shutil.copyfile(self._path, self._backup_path)
        atomic_write_json(self._path, doc)

    async def restore_backup(self) -> dict[str, Any]:
        """Swap the previous generation back into place. The current document becomes the backup."""
        with self._guard.hold():
            doc = await asyncio.to_thread(self._restore_sync)
        logger.warning("Content restored from backup %s", self._backup_path)
        return doc

    def _restore_sync(self) -> dict[str, Any]:
        try:
            previous = read_json(self._backup_path)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreUnavailableError(f"Failed to read backup {self._backup_path}: {e}") from e
        if not isinstance(previous, dict):
            raise StoreUnavailableError(f"No usable backup at {self._backup_path}")
        self._write_sync(previous)
        return previous
