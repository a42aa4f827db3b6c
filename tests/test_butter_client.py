"""Tests for the paginated content client."""

import httpx
import pytest

from content_scanner.butter_client import ButterClient, ContentFetchError
from content_scanner.config import ScannerConfig


def make_config(**overrides):
    values = {"token": "secret", "retry_delay": 0.0}
    values.update(overrides)
    return ScannerConfig(**values)


def paged_handler(pages, calls, data_key=None):
    """Serve `pages` (a list of item lists) one per ?page=N request."""

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        page = int(request.url.params["page"])
        items = pages[page - 1]
        next_page = page + 1 if page < len(pages) else None
        data = {data_key: items} if data_key else items
        return httpx.Response(200, json={"data": data, "meta": {"next_page": next_page}})

    return handler


class TestPagination:
    """Test page walking and query parameters."""

    async def test_pages_are_concatenated(self):
        calls = []
        transport = httpx.MockTransport(paged_handler([[{"slug": "a"}], [{"slug": "b"}]], calls))
        async with ButterClient(make_config(), transport=transport) as client:
            items = await client.get_all_pages("landing", preview=True)

        assert [item["slug"] for item in items] == ["a", "b"]
        assert len(calls) == 2
        params = calls[0].url.params
        assert calls[0].url.path == "/v2/pages/landing/"
        assert params["auth_token"] == "secret"
        assert params["page_size"] == "100"
        assert params["levels"] == "5"
        assert params["alt_media_text"] == "1"
        assert params["preview"] == "1"

    async def test_posts_do_not_request_reference_levels(self):
        calls = []
        transport = httpx.MockTransport(paged_handler([[{"slug": "post"}]], calls))
        async with ButterClient(make_config(), transport=transport) as client:
            items = await client.get_all_posts()

        assert items == [{"slug": "post"}]
        assert calls[0].url.path == "/v2/posts/"
        assert "levels" not in calls[0].url.params
        assert "preview" not in calls[0].url.params

    async def test_collections_read_items_under_their_key(self):
        calls = []
        transport = httpx.MockTransport(
            paged_handler([[{"q": 1}, {"q": 2}]], calls, data_key="faq")
        )
        async with ButterClient(make_config(), transport=transport) as client:
            items = await client.get_all_collections("faq")

        assert items == [{"q": 1}, {"q": 2}]
        assert calls[0].url.path == "/v2/content/faq/"

    async def test_empty_page_stops_pagination(self):
        def handler(request):
            return httpx.Response(200, json={"data": [], "meta": {"next_page": 2}})

        async with ButterClient(make_config(), transport=httpx.MockTransport(handler)) as client:
            assert await client.get_all_pages("landing") == []


class TestRetries:
    """Test retry behavior."""

    async def test_transient_failure_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"data": [{"slug": "a"}], "meta": {"next_page": None}})

        async with ButterClient(make_config(), transport=httpx.MockTransport(handler)) as client:
            items = await client.get_all_posts()

        assert items == [{"slug": "a"}]
        assert len(attempts) == 2

    async def test_exhausted_retries_raise_content_fetch_error(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(500)

        config = make_config(max_retries=3)
        async with ButterClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ContentFetchError, match="Failed to fetch page landing"):
                await client.get_all_pages("landing")

        assert len(attempts) == 3

    async def test_single_attempt_when_max_retries_is_one(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(503)

        config = make_config(max_retries=1)
        async with ButterClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.fetch_with_retry("/posts/", {})

        assert len(attempts) == 1

    async def test_last_error_is_raised_after_retries(self):
        def handler(request):
            return httpx.Response(200, content=b"not json")

        config = make_config(max_retries=2)
        async with ButterClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ValueError):
                await client.fetch_with_retry("/posts/", {})

    async def test_non_object_body_is_an_error(self):
        def handler(request):
            return httpx.Response(200, json=["unexpected"])

        async with ButterClient(make_config(), transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ContentFetchError, match="collection faq"):
                await client.get_all_collections("faq")

    async def test_client_requires_context_manager(self):
        client = ButterClient(make_config())
        with pytest.raises(RuntimeError):
            await client.fetch_with_retry("/posts/", {})

    async def test_error_message_masks_token(self):
        def handler(request):
            return httpx.Response(500)

        config = make_config(max_retries=1)
        async with ButterClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ContentFetchError) as exc_info:
                await client.get_all_posts()

        assert "secret" not in str(exc_info.value)
        assert "[redacted]" in str(exc_info.value)
