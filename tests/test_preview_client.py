"""
Tests for og_preview/services/external_clients/preview_client.py.

Outbound HTTP goes through httpx.MockTransport; the real-transport tests use
malformed URLs that fail before any response arrives.
"""
import httpx
import pytest

from og_preview.models.preview_record import PreviewRecord
from og_preview.services.external_clients.preview_client import (
    PreviewClient,
    create_http_client,
    get_preview_client,
    is_html_content_type,
)

ARTICLE_URL = "https://example.com/article"
IMAGE_URL = "https://example.com/photo.png"

MALFORMED_URLS = [
    "bruh",
    "",
    "http://",
    "javascript:x",
    "http://[::1",
    "http://a:99999",
    "http://xn--zz.com/",
    "http://xn--.com",
]


class TestIsHtmlContentType:
    @pytest.mark.parametrize(
        "content_type",
        ["text/html", "text/html; charset=utf-8", "TEXT/HTML", " text/html ;charset=latin-1"],
    )
    def test_html(self, content_type):
        assert is_html_content_type(content_type) is True

    @pytest.mark.parametrize(
        "content_type",
        [None, "", "image/png", "application/xhtml+xml", "text/plain", "text/htmlx"],
    )
    def test_not_html(self, content_type):
        assert is_html_content_type(content_type) is False


class TestFetch:
    @pytest.fixture
    def client(self, site):
        return PreviewClient(create_http_client(site.transport()))

    async def test_html_page_gets_head_then_get(self, client, site, og_page):
        site.pages[ARTICLE_URL] = ("text/html; charset=utf-8", og_page)

        record = await client.fetch(ARTICLE_URL)

        assert site.requests == [("HEAD", ARTICLE_URL), ("GET", ARTICLE_URL)]
        assert record.ok is True
        assert record.cached is False
        assert record.title == "OG Title"
        assert record.images == ["https://example.com/a.png", "https://example.com/b.png"]

    async def test_non_html_skips_full_fetch(self, client, site):
        site.pages[IMAGE_URL] = ("image/png", b"\x89PNG")

        record = await client.fetch(IMAGE_URL)

        assert site.methods == ["HEAD"]
        assert record == PreviewRecord.failed()
        assert record.cached is None

    async def test_missing_content_type_skips_full_fetch(self, client, site):
        site.pages[ARTICLE_URL] = (None, b"<html></html>")

        record = await client.fetch(ARTICLE_URL)

        assert site.methods == ["HEAD"]
        assert record == PreviewRecord.failed()

    async def test_error_status_html_is_still_parsed(self, og_page):
        def handler(request):
            return httpx.Response(
                404, headers={"content-type": "text/html"}, content=og_page
            )

        client = PreviewClient(create_http_client(httpx.MockTransport(handler)))
        record = await client.fetch(ARTICLE_URL)

        assert record.ok is True
        assert record.title == "OG Title"

    async def test_fetching_twice_gives_same_record(self, client, site, og_page):
        site.pages[ARTICLE_URL] = ("text/html", og_page)

        first = await client.fetch(ARTICLE_URL)
        second = await client.fetch(ARTICLE_URL)

        assert first == second


class TestFetchFailures:
    async def test_connect_error_on_head(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = PreviewClient(create_http_client(httpx.MockTransport(handler)))

        assert await client.fetch(ARTICLE_URL) == PreviewRecord.failed()

    async def test_timeout_on_full_fetch(self):
        methods = []

        def handler(request):
            methods.append(request.method)
            if request.method == "GET":
                raise httpx.ReadTimeout("too slow", request=request)
            return httpx.Response(200, headers={"content-type": "text/html"})

        client = PreviewClient(create_http_client(httpx.MockTransport(handler)))
        record = await client.fetch(ARTICLE_URL)

        assert methods == ["HEAD", "GET"]
        assert record == PreviewRecord.failed()

    @pytest.mark.parametrize("url", MALFORMED_URLS)
    async def test_malformed_url(self, url):
        async with get_preview_client() as client:
            record = await client.fetch(url)

        assert record.to_wire() == {"ok": False, "images": []}

    async def test_bad_punycode_host_is_logged(self, caplog):
        async with get_preview_client() as client:
            with caplog.at_level("WARNING"):
                record = await client.fetch("http://xn--zz.com/")

        assert record == PreviewRecord.failed()
        assert "HEAD http://xn--zz.com/ failed" in caplog.text


class TestClientConfiguration:
    async def test_user_agent_and_redirects(self):
        client = create_http_client()
        try:
            assert client.headers["User-Agent"].startswith("og-preview/")
            assert client.follow_redirects is True
        finally:
            await client.aclose()

    async def test_context_manager_closes_client(self):
        async with get_preview_client() as preview_client:
            http_client = preview_client.client
            assert not http_client.is_closed
        assert http_client.is_closed
