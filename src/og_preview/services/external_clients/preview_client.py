from contextlib import asynccontextmanager
import logging
from typing import Optional

import httpx

from og_preview.configurations.config import settings
from og_preview.models.preview_record import PreviewRecord
from og_preview.services.og_service import extract_preview

logger = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html"


def is_html_content_type(content_type: Optional[str]) -> bool:
    """True for ``text/html`` with any (or no) parameters."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == HTML_MEDIA_TYPE


class PreviewClient:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _request(self, method: str, url: str) -> Optional[httpx.Response]:
        try:
            return await self.client.request(method, url)
        # ValueError covers bad IDNA hosts, OverflowError out-of-range ports
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, OverflowError) as e:
            logger.warning(f"{method} {url} failed: {e!r}")
        return None

    async def fetch(self, url: str) -> PreviewRecord:
        """
        Builds a preview for ``url`` in two phases.

        A HEAD request checks the content type first so that images, videos
        and other non-HTML payloads are never downloaded. Only ``text/html``
        targets get the full GET, whose body is handed to the extractor.

        Args:
            url: The URL to preview, used as given.

        Returns:
            The extracted record, or the failed record on any transport error
            or non-HTML content type.
        """
        logger.info(f"Fetching OG preview for {url}")

        head_response = await self._request("HEAD", url)
        if head_response is None:
            return PreviewRecord.failed()

        content_type = head_response.headers.get("content-type")
        if not is_html_content_type(content_type):
            logger.info(f"Skipping {url}: content type {content_type!r} is not HTML")
            return PreviewRecord.failed()

        get_response = await self._request("GET", url)
        if get_response is None:
            return PreviewRecord.failed()

        return extract_preview(get_response.content)


def create_http_client(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.request_timeout,
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


@asynccontextmanager
async def get_preview_client(transport: Optional[httpx.AsyncBaseTransport] = None):
    logger.debug("Created new preview HTTP client")
    client = create_http_client(transport)
    try:
        yield PreviewClient(client)
    finally:
        logger.debug("Closing preview HTTP client")
        await client.aclose()
