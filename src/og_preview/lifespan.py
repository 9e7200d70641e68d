import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from og_preview.services.external_clients.preview_client import get_preview_client
from og_preview.services.preview_cache import get_preview_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(local_app: FastAPI):
    get_preview_cache()

    async with get_preview_client() as preview_client:
        local_app.state.preview_client = preview_client
        logger.info("Preview service started")

        yield

        # Shutdown code
        logger.info("Shutting down application")

    logger.info(
        f"Application shutdown complete, {get_preview_cache().size()} previews were cached"
    )
