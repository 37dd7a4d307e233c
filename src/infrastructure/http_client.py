"""Async HTTP client used for catalog downloads and GraphQL lookups."""

from typing import Any

import httpx
from loguru import logger

from infrastructure.errors import HTTPClientError

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
}


class AsyncHTTPClient:
    """Thin wrapper over ``httpx.AsyncClient`` with error normalisation."""

    def __init__(self, timeout: float = 30, headers: dict[str, str] | None = None):
        """
        Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds
            headers: Extra default headers
        """
        self.timeout = timeout
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, headers=self.headers, follow_redirects=True
            )
        return self._client

    async def get_text(self, url: str) -> str:
        """GET a URL and return the body as text."""
        logger.debug(f"GET {url}")
        response = await self._request("GET", url)
        return response.text

    async def post_json(
        self, url: str, payload: dict[str, Any], headers: dict[str, str] | None = None
    ) -> Any:
        """POST a JSON payload and decode the JSON response."""
        logger.debug(f"POST {url}")
        response = await self._request("POST", url, json=payload, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise HTTPClientError(f"Invalid JSON from {url}: {e}", url) from e

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._get_client().request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise HTTPClientError(
                f"{method} {url} returned {e.response.status_code}",
                url,
                e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise HTTPClientError(f"{method} {url} failed: {e}", url) from e
        return response

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
