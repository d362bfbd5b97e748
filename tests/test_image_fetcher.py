"""Tests for ImageFetcher."""

import httpx
import pytest

from image_analysis.errors import FetchError
from image_analysis.services.image_fetcher import ImageFetcher


def make_fetcher(handler):
    """Create a fetcher backed by a mock transport."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ImageFetcher(client=client)


class TestImageFetcher:
    """Tests for ImageFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_fetch_returns_body(self):
        """Test the raw response body is returned."""
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(200, content=b"\x89PNG-data")

        fetcher = make_fetcher(handler)
        try:
            content = await fetcher.fetch("https://images.example.com/cat.png")
        finally:
            await fetcher.close()

        assert content == b"\x89PNG-data"
        assert requested == ["https://images.example.com/cat.png"]

    @pytest.mark.asyncio
    async def test_fetch_not_found(self):
        """Test a 404 raises FetchError."""
        fetcher = make_fetcher(lambda request: httpx.Response(404))

        with pytest.raises(FetchError, match="404") as exc_info:
            await fetcher.fetch("https://images.example.com/missing.png")

        assert exc_info.value.stage == "fetching"
        await fetcher.close()

    @pytest.mark.asyncio
    async def test_fetch_connection_error(self):
        """Test network failures raise FetchError."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("https://images.example.com/cat.png")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        await fetcher.close()

    @pytest.mark.asyncio
    async def test_fetch_timeout(self):
        """Test timeouts raise FetchError."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        fetcher = make_fetcher(handler)

        with pytest.raises(FetchError, match="Timed out"):
            await fetcher.fetch("https://images.example.com/cat.png")
        await fetcher.close()

    @pytest.mark.asyncio
    async def test_default_client_uses_timeout(self):
        """Test the lazily built client carries the configured timeout."""
        fetcher = ImageFetcher(timeout=3.5)

        client = fetcher._get_client()
        try:
            assert client.timeout.read == 3.5
            assert client.follow_redirects is True
        finally:
            await fetcher.close()
