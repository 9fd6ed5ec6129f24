from __future__ import annotations


class ContentStoreError(Exception):
    """Base class for every failure raised by a content store."""


class StoreUnavailableError(ContentStoreError):
    """The backing medium is unreachable and no usable cached document exists."""


class StoreConfigurationError(StoreUnavailableError):
    """The store is missing required configuration (e.g. gist id or token)."""


class WriteInProgressError(ContentStoreError):
    def __init__(self, target: str) -> None:
        super().__init__(f"A write to {target} is already in progress")
        self.target = target


class NotAnArrayError(ContentStoreError):
    def __init__(self, section: str) -> None:
        super().__init__(f'Section "{section}" is not an array')
        self.section = section


class ItemNotFoundError(ContentStoreError):
    def __init__(self, section: str, item_id: str) -> None:
        super().__init__(f'Item with id "{item_id}" not found in "{section}"')
        self.section = section
        self.item_id = item_id


class DuplicateItemError(ContentStoreError):
    def __init__(self, section: str, item_id: str) -> None:
        super().__init__(f'Item with id "{item_id}" already exists in "{section}"')
        self.section = section
        self.item_id = item_id


class RemoteApiError(ContentStoreError):
    """Non-2xx answer from the remote document host."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Remote API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
