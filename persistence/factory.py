from __future__ import annotations

from settings import Settings

from .disk_store import DiskContentStore
from .gist_store import GistContentStore
from .interfaces import ContentStore


def create_content_store(settings: Settings) -> ContentStore:
    if settings.content_store == "local":
        return DiskContentStore(settings.content_path, settings.backup_path)
    if settings.content_store == "gist":
        return GistContentStore(
            settings.gist_id,
            settings.github_token,
            filename=settings.gist_filename,
            api_url=settings.github_api_url,
            cache_ttl=settings.content_cache_ttl_seconds,
        )
    raise ValueError(f"Unknown CONTENT_STORE {settings.content_store!r} (expected 'local' or 'gist')")
