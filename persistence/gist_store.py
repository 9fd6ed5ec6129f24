from __future__ import annotations

import copy
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from .content_store import JsonContentStore
from .defaults import default_content
from .errors import ContentStoreError, RemoteApiError, StoreConfigurationError, StoreUnavailableError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_FILENAME = "content.json"
CACHE_TTL_SECONDS = 30.0
USER_AGENT = "portfolio-content-backend"


@dataclass
class CachedDocument:
    document: dict[str, Any]
    fetched_at: float


class GistContentStore(JsonContentStore):
    """
    Stores the content document as one file inside a GitHub Gist.

    Reads are cached in memory for ``cache_ttl`` seconds to stay under the
    GitHub rate limits. When a fetch fails, a stale cache is served if there
    is one; otherwise the failure is raised (no synthesized default).

    Writes PATCH the whole document and refresh the cache on success.
    There is no write serialization: two concurrent mutations can each read
    the same document and the later PATCH wins.
    """

    def __init__(
        self,
        gist_id: str | None,
        token: str | None,
        *,
        filename: str = DEFAULT_FILENAME,
        api_url: str = GITHUB_API_URL,
        cache_ttl: float = CACHE_TTL_SECONDS,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._gist_id = gist_id
        self._token = token
        self._filename = filename
        self._api_url = api_url.rstrip("/")
        self._cache_ttl = cache_ttl
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=15.0)
        self._clock = clock
        self._cache: CachedDocument | None = None

    @property
    def cache(self) -> CachedDocument | None:
        return self._cache

    async def initialize(self) -> None:
        # Secrets may be provisioned after boot; only warn here.
        if not self._gist_id or not self._token:
            logger.warning("GIST_ID or GITHUB_TOKEN not set; gist reads and writes will fail until configured")
            return
        logger.info("Gist storage initialized (gist=%s file=%s)", self._gist_id, self._filename)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _gist_url(self) -> str:
        if not self._gist_id or not self._token:
            raise StoreConfigurationError("GIST_ID or GITHUB_TOKEN not set")
        return f"{self._api_url}/gists/{self._gist_id}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }

    async def read_content(self) -> dict[str, Any]:
        cache = self._cache
        if cache is not None and (self._clock() - cache.fetched_at) < self._cache_ttl:
            return copy.deepcopy(cache.document)

        try:
            document = await self._fetch()
        except (ContentStoreError, httpx.HTTPError, ValueError) as e:
            if self._cache is not None:
                logger.warning("Failed to read from gist, serving stale cache: %s", e)
                return copy.deepcopy(self._cache.document)
            if isinstance(e, StoreUnavailableError):
                raise
            raise StoreUnavailableError(f"Failed to read content from gist: {e}") from e

        self._cache = CachedDocument(document=document, fetched_at=self._clock())
        return copy.deepcopy(document)

    async def _fetch(self) -> dict[str, Any]:
        url = self._gist_url()
        response = await self._client.get(url, headers=self._headers())
        _raise_for_status(response)

        payload = response.json()
        files = payload.get("files") if isinstance(payload, dict) else None
        if not isinstance(files, dict):
            raise StoreUnavailableError(f"Gist {self._gist_id} reply has no files mapping")
        file = files.get(self._filename)
        if not isinstance(file, dict):
            # An empty gist is an empty backing store: the first write creates the file.
            logger.info("%s not found in gist %s, using default content", self._filename, self._gist_id)
            return default_content()

        if file.get("truncated"):
            # The API truncates large files; the raw URL serves the full content.
            raw_url = file.get("raw_url")
            if not isinstance(raw_url, str) or not raw_url:
                raise StoreUnavailableError(f"{self._filename} in gist {self._gist_id} is truncated without a raw_url")
            raw = await self._client.get(raw_url, headers=self._headers())
            _raise_for_status(raw)
            text = raw.text
        else:
            text = file.get("content")
            if not isinstance(text, str):
                raise StoreUnavailableError(f"{self._filename} in gist {self._gist_id} has no content")

        document = json.loads(text)
        if not isinstance(document, dict):
            raise StoreUnavailableError(f"{self._filename} in gist {self._gist_id} is not a JSON object")
        return document

    async def write_content(self, doc: dict[str, Any]) -> dict[str, Any]:
        url = self._gist_url()
        body = {"files": {self._filename: {"content": json.dumps(doc, indent=2, ensure_ascii=False)}}}
        try:
            response = await self._client.patch(url, headers=self._headers(), json=body)
        except httpx.HTTPError as e:
            raise StoreUnavailableError(f"Failed to write content to gist: {e}") from e
        _raise_for_status(response)

        self._cache = CachedDocument(document=copy.deepcopy(doc), fetched_at=self._clock())
        logger.info("Content saved to gist %s", self._gist_id)
        return doc


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    message = response.reason_phrase
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        message = payload["message"]
    raise RemoteApiError(response.status_code, message)
