from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class AddItemResult:
    document: dict[str, Any]
    item: dict[str, Any]


class ContentStore(Protocol):
    """
    A single JSON content document: section name -> JSON value.

    Every mutation is read-modify-write of the whole document.
    """

    async def initialize(self) -> None:
        """Prepare the backing medium. Idempotent; safe on every boot."""
        ...

    async def read_content(self) -> dict[str, Any]:
        """Return the full current document (a copy the caller may mutate)."""
        ...

    async def write_content(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Persist the full document."""
        ...

    async def update_section(self, section: str, value: Any) -> dict[str, Any]: ...

    async def add_item(self, section: str, item: dict[str, Any]) -> AddItemResult: ...

    async def update_item(self, section: str, item_id: str, patch: dict[str, Any]) -> dict[str, Any]: ...

    async def delete_item(self, section: str, item_id: str) -> dict[str, Any]: ...

    async def close(self) -> None: ...
