"""Image Fetcher

Downloads raw image bytes over HTTP.
"""

import logging
from typing import Optional

import httpx

from ..errors import FetchError

logger = logging.getLogger(__name__)


class ImageFetcher:
    """Fetches image content from a URL with an async HTTP client."""

    def __init__(
        self,
        timeout: Optional[float] = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds. None disables the timeout.
            client: Optional pre-built client, mainly for tests.
        """
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch(self, url: str) -> bytes:
        """Download the body of ``url``.

        Args:
            url: Image URL.

        Returns:
            Raw response body.

        Raises:
            FetchError: On network failure, timeout or non-2xx status.
        """
        client = self._get_client()
        try:
            resp = await client.get(url)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching {url}") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Fetching {url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: {e}") from e

        logger.debug(f"Fetched {len(resp.content)} bytes from {url}")
        return resp.content
