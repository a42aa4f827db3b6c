"""Client for fetching paginated content from the ButterCMS API."""

import asyncio
import logging
from typing import Any

import httpx

from .config import ScannerConfig

logger = logging.getLogger(__name__)

# Nesting levels of referenced content the API expands inline
REFERENCE_LEVELS = 5


class ContentFetchError(RuntimeError):
    """A scope could not be fetched after exhausting retries."""


class ButterClient:
    """HTTP client for the ButterCMS read API.

    Each get_all_* method walks every page of one source and returns the
    concatenated items. Transient failures are retried per page; a page that
    still fails raises ContentFetchError for the whole source.
    """

    def __init__(
        self,
        config: ScannerConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Connection settings. Defaults to ScannerConfig.from_env().
            transport: Optional httpx transport, used by tests.
        """
        self.config = config or ScannerConfig.from_env()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ButterClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            base_url=self.config.api_url,
            timeout=self.config.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_with_retry(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET a JSON document, retrying failed attempts.

        Waits attempt * retry_delay seconds between attempts.

        Raises:
            httpx.HTTPError: The last error once max_retries attempts failed.
        """
        if not self._client:
            raise RuntimeError("ButterClient must be used as an async context manager")

        attempt = 1
        while True:
            try:
                response = await self._client.get(url, params=params)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as e:
                if attempt >= self.config.max_retries:
                    raise
                logger.warning(f"Request to {url} failed (attempt {attempt}): {self._redact(e)}")
                await asyncio.sleep(self.config.retry_delay * attempt)
                attempt += 1

    def _redact(self, error: Exception) -> str:
        """Error text with the API token masked; httpx errors embed the request URL."""
        message = str(error)
        if self.config.token:
            message = message.replace(self.config.token, "[redacted]")
        return message

    def _params(self, page: int, preview: bool, expand_references: bool) -> dict[str, Any]:
        params: dict[str, Any] = {
            "auth_token": self.config.token or "",
            "page": page,
            "page_size": self.config.page_size,
        }
        if expand_references:
            params["levels"] = REFERENCE_LEVELS
            params["alt_media_text"] = 1
        if preview:
            params["preview"] = 1
        return params

    async def _get_all(
        self,
        url: str,
        description: str,
        preview: bool,
        expand_references: bool = True,
        data_key: str | None = None,
    ) -> list[Any]:
        items: list[Any] = []
        page = 1

        while True:
            try:
                payload = await self.fetch_with_retry(
                    url, self._params(page, preview, expand_references)
                )
            except Exception as e:
                raise ContentFetchError(f"Failed to fetch {description}: {self._redact(e)}") from e

            if not isinstance(payload, dict):
                raise ContentFetchError(f"Failed to fetch {description}: unexpected response body")

            data = payload.get("data")
            if data_key is not None:
                data = data.get(data_key) if isinstance(data, dict) else None

            if not isinstance(data, list) or not data:
                break

            items.extend(data)
            meta = payload.get("meta") or {}
            if meta.get("next_page") is None:
                break
            page += 1

        logger.info(f"Fetched {len(items)} items for {description}")
        return items

    async def get_all_pages(self, page_type: str, preview: bool = False) -> list[Any]:
        """Fetch every page of one page type."""
        return await self._get_all(f"/pages/{page_type}/", f"page {page_type}", preview)

    async def get_all_posts(self, preview: bool = False) -> list[Any]:
        """Fetch every blog post."""
        return await self._get_all("/posts/", "posts", preview, expand_references=False)

    async def get_all_collections(self, collection_type: str, preview: bool = False) -> list[Any]:
        """Fetch every item of one collection."""
        return await self._get_all(
            f"/content/{collection_type}/",
            f"collection {collection_type}",
            preview,
            data_key=collection_type,
        )
