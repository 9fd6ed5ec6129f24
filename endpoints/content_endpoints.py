from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Request, status

from persistence.interfaces import ContentStore

from .auth_endpoints import require_admin
from .errors import ApiError
from .sanitize import sanitize_payload, sanitize_string

router = APIRouter(prefix="/api/content", tags=["content"])
logger = logging.getLogger(__name__)


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content_store


@router.get("")
async def get_all_content(store: ContentStore = Depends(get_content_store)) -> dict[str, Any]:
    return await store.read_content()


@router.get("/{section}")
async def get_section(section: str, store: ContentStore = Depends(get_content_store)) -> Any:
    content = await store.read_content()
    if section not in content:
        raise ApiError(404, "Section not found", f'Section "{section}" does not exist')
    return content[section]


@router.put("/{section}", dependencies=[Depends(require_admin)])
async def update_section(
    section: str,
    data: Any = Body(None),
    store: ContentStore = Depends(get_content_store),
) -> dict[str, Any]:
    if data is None:
        raise ApiError(400, "Validation failed", "Request body is required")

    section = sanitize_string(section)
    content = await store.update_section(section, sanitize_payload(data))
    logger.info("Section %s updated", section)
    return {
        "success": True,
        "message": f'Section "{section}" updated successfully',
        "data": content[section],
    }


@router.post("/{section}/items", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def add_item(
    section: str,
    item: Optional[dict[str, Any]] = Body(None),
    store: ContentStore = Depends(get_content_store),
) -> dict[str, Any]:
    if not item:
        raise ApiError(400, "Validation failed", "Item data is required")

    section = sanitize_string(section)
    result = await store.add_item(section, sanitize_payload(item))
    logger.info("Item %s added to %s", result.item["id"], section)
    return {
        "success": True,
        "message": f'Item added to "{section}" successfully',
        "item": result.item,
    }


@router.put("/{section}/items/{item_id}", dependencies=[Depends(require_admin)])
async def update_item(
    section: str,
    item_id: str,
    updates: Optional[dict[str, Any]] = Body(None),
    store: ContentStore = Depends(get_content_store),
) -> dict[str, Any]:
    if not updates:
        raise ApiError(400, "Validation failed", "Update data is required")

    section = sanitize_string(section)
    item_id = sanitize_string(item_id)
    content = await store.update_item(section, item_id, sanitize_payload(updates))
    logger.info("Item %s updated in %s", item_id, section)
    return {
        "success": True,
        "message": f'Item updated in "{section}" successfully',
        "data": content[section],
    }


@router.delete("/{section}/items/{item_id}", dependencies=[Depends(require_admin)])
async def delete_item(
    section: str,
    item_id: str,
    store: ContentStore = Depends(get_content_store),
) -> dict[str, Any]:
    section = sanitize_string(section)
    item_id = sanitize_string(item_id)
    content = await store.delete_item(section, item_id)
    logger.info("Item %s deleted from %s", item_id, section)
    return {
        "success": True,
        "message": f'Item deleted from "{section}" successfully',
        "data": content[section],
    }
