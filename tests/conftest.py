import httpx
import pytest

from og_preview.services.preview_cache import get_preview_cache

OG_PAGE = b"""<!DOCTYPE html>
<html>
  <head>
    <title>Plain Title</title>
    <meta property="og:title" content="OG Title" />
    <meta property="og:description" content="OG description" />
    <meta name="description" content="Plain description" />
    <meta property="og:image" content="https://example.com/a.png" />
    <meta property="og:image" content="https://example.com/b.png" />
  </head>
  <body><p>Hello</p></body>
</html>
"""

PLAIN_PAGE = b"""<html>
  <head>
    <title>Plain Title</title>
    <meta name="description" content="Plain description" />
  </head>
  <body></body>
</html>
"""


@pytest.fixture(autouse=True)
def fresh_preview_cache():
    """Each test gets its own process-wide cache."""
    get_preview_cache.cache_clear()
    yield
    get_preview_cache.cache_clear()


@pytest.fixture
def og_page():
    return OG_PAGE


@pytest.fixture
def plain_page():
    return PLAIN_PAGE


class RecordingSite:
    """
    Fake remote site for httpx.MockTransport.

    Serves ``pages`` keyed by URL as ``(content_type, body)`` and records every
    request as ``(method, url)``.
    """

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, str(request.url)))
        content_type, body = self.pages.get(str(request.url), ("text/plain", b""))
        headers = {"content-type": content_type} if content_type else {}
        if request.method == "HEAD":
            return httpx.Response(200, headers=headers)
        return httpx.Response(200, headers=headers, content=body)

    @property
    def methods(self):
        return [method for method, _ in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def site():
    return RecordingSite()
