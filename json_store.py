from __future__ import annotations

import contextlib
import json
import os
import uuid
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for a missing file. Unreadable files and invalid JSON raise.
    """
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    return json.loads(raw)


def temp_path_for(path: Path) -> Path:
    # Unique per write so rapid successive writes never share a temp file.
    return path.with_name(f"{path.name}.tmp.{uuid.uuid4().hex}")


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = False) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.

    The temp file lives next to the target so the final replace is a same-filesystem
    rename. If anything fails before the replace, the temp file is removed and the
    previous document is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = temp_path_for(path)
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        raise
