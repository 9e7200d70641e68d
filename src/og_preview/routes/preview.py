import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from og_preview.common.responses import PrettyJSONResponse
from og_preview.configurations.config import settings
from og_preview.models.preview_record import PreviewRecord
from og_preview.services.external_clients.preview_client import PreviewClient
from og_preview.services.preview_cache import PreviewCache, get_preview_cache

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["preview"],
)


def get_preview_client_dependency(request: Request) -> PreviewClient:
    return request.app.state.preview_client


@router.get(
    settings.listenpath,
    response_class=PrettyJSONResponse,
    operation_id="get_preview",
)
async def get_preview(
    url: Optional[str] = Query(default=None),
    cache: PreviewCache = Depends(get_preview_cache),
    client: PreviewClient = Depends(get_preview_client_dependency),
) -> PrettyJSONResponse:
    """
    Open Graph preview of ``url``.

    Always answers 200: a missing parameter, an unreachable host, a non-HTML
    target and an unparseable page all come back as ``{"ok": false}``.
    """
    if url is None:
        return PrettyJSONResponse(PreviewRecord.failed().to_wire())

    record, hit = await cache.get_or_fetch(
        url, client.fetch, store_failures=settings.cache_failures
    )
    logger.info(f"Preview for {url}: ok={record.ok} cache_hit={hit}")

    return PrettyJSONResponse(record.to_wire())
