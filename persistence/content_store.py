from __future__ import annotations

import abc
import copy
from typing import Any

from .errors import DuplicateItemError, ItemNotFoundError
from .interfaces import AddItemResult, ContentStore
from .items import find_item_index, new_item_id, require_item_array


class JsonContentStore(ContentStore, abc.ABC):
    """
    Section/item operations shared by every engine.

    Subclasses provide read_content/write_content; everything here is
    read-modify-write over the whole document. Preconditions are checked
    before any write, so a rejected call leaves the document unchanged.
    """

    async def initialize(self) -> None:
        return None

    async def close(self) -> None:
        return None

    @abc.abstractmethod
    async def read_content(self) -> dict[str, Any]: ...

    @abc.abstractmethod
    async def write_content(self, doc: dict[str, Any]) -> dict[str, Any]: ...

    async def update_section(self, section: str, value: Any) -> dict[str, Any]:
        doc = await self.read_content()
        doc[section] = copy.deepcopy(value)
        await self.write_content(doc)
        return doc

    async def add_item(self, section: str, item: dict[str, Any]) -> AddItemResult:
        doc = await self.read_content()
        items = require_item_array(doc, section)

        new_item = copy.deepcopy(dict(item))
        if not new_item.get("id"):
            new_item["id"] = new_item_id()
        else:
            new_item["id"] = str(new_item["id"])
            if find_item_index(items, new_item["id"]) != -1:
                raise DuplicateItemError(section, new_item["id"])

        items.append(new_item)
        await self.write_content(doc)
        return AddItemResult(document=doc, item=copy.deepcopy(new_item))

    async def update_item(self, section: str, item_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        doc = await self.read_content()
        items = require_item_array(doc, section)
        index = find_item_index(items, item_id)
        if index == -1:
            raise ItemNotFoundError(section, item_id)

        merged = {**items[index], **copy.deepcopy(patch)}
        merged["id"] = items[index]["id"]
        items[index] = merged
        await self.write_content(doc)
        return doc

    async def delete_item(self, section: str, item_id: str) -> dict[str, Any]:
        doc = await self.read_content()
        items = require_item_array(doc, section)
        index = find_item_index(items, item_id)
        if index == -1:
            raise ItemNotFoundError(section, item_id)

        del items[index]
        await self.write_content(doc)
        return doc
