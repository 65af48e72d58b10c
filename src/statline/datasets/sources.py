from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

import httpx

from .registry import DatasetDefinition

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0


class DatasetLoadError(Exception):
    """Transport or decode failure while fetching a dataset's text."""

    def __init__(self, dataset_id: str, reason: str) -> None:
        super().__init__(f"{dataset_id}: {reason}")
        self.dataset_id = dataset_id
        self.reason = reason


class TextSource(Protocol):
    """Where dataset text comes from. Implementations raise DatasetLoadError."""

    async def fetch_text(self, definition: DatasetDefinition) -> str:
        ...


def _decode(dataset_id: str, payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DatasetLoadError(dataset_id, f"not valid UTF-8: {e}") from e


class FileTextSource:
    """Read snapshots from a local directory (``{root}/{definition.path}``)."""

    def __init__(self, root: Path) -> None:
        self.root = root

    async def fetch_text(self, definition: DatasetDefinition) -> str:
        path = self.root / definition.path
        logger.debug("Reading %s from %s", definition.dataset_id, path)
        try:
            payload = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise DatasetLoadError(definition.dataset_id, str(e)) from e
        return _decode(definition.dataset_id, payload)


class HttpTextSource:
    """Fetch snapshots over HTTP relative to ``base_url``.

    Snapshots change during a game day, so responses are requested with
    ``Cache-Control: no-store``.
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self._client = client
        self._owns_client = client is None
        self.timeout_sec = timeout_sec

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout_sec,
                follow_redirects=True,
                headers={"Cache-Control": "no-store"},
            )
        return self._client

    def url_for(self, definition: DatasetDefinition) -> str:
        return self.base_url + definition.path.lstrip("/")

    async def fetch_text(self, definition: DatasetDefinition) -> str:
        url = self.url_for(definition)
        logger.debug("Fetching %s from %s", definition.dataset_id, url)
        try:
            response = await self._get_client().get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DatasetLoadError(
                definition.dataset_id, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DatasetLoadError(definition.dataset_id, str(e) or type(e).__name__) from e
        return _decode(definition.dataset_id, response.content)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
