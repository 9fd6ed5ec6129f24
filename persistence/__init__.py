from __future__ import annotations

from .content_store import JsonContentStore
from .disk_store import DiskContentStore
from .errors import (
    ContentStoreError,
    DuplicateItemError,
    ItemNotFoundError,
    NotAnArrayError,
    RemoteApiError,
    StoreConfigurationError,
    StoreUnavailableError,
    WriteInProgressError,
)
from .factory import create_content_store
from .gist_store import GistContentStore
from .interfaces import AddItemResult, ContentStore

__all__ = [
    "AddItemResult",
    "ContentStore",
    "JsonContentStore",
    "DiskContentStore",
    "GistContentStore",
    "create_content_store",
    "ContentStoreError",
    "StoreUnavailableError",
    "StoreConfigurationError",
    "WriteInProgressError",
    "NotAnArrayError",
    "ItemNotFoundError",
    "DuplicateItemError",
    "RemoteApiError",
]
