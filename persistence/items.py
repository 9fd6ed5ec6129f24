from __future__ import annotations

import uuid
from typing import Any, Mapping

from .errors import NotAnArrayError


def is_item_array(value: Any) -> bool:
    return isinstance(value, list)


def new_item_id() -> str:
    return str(uuid.uuid4())


def find_item_index(items: list[Any], item_id: str) -> int:
    """Linear scan for the item whose ``id`` equals ``item_id``; -1 if absent."""
    for index, item in enumerate(items):
        if isinstance(item, dict) and item.get("id") == item_id:
            return index
    return -1


def require_item_array(document: Mapping[str, Any], section: str) -> list[Any]:
    items = document.get(section)
    if not is_item_array(items):
        raise NotAnArrayError(section)
    return items
