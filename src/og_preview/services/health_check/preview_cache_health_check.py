import logging

from og_preview.services.health_check.async_health_check_factory import (
    ComponentHealthCheck,
)
from og_preview.services.preview_cache import get_preview_cache

HEALTH_KEY = "__health__"


class PreviewCacheHealthCheck(ComponentHealthCheck):
    """Unhealthy when a cache read cannot take the read lock in time."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._logger = logging.getLogger(__name__)

    async def ping(self) -> None:
        cache = get_preview_cache()
        await cache.read(HEALTH_KEY)
        self._logger.debug(f"Preview cache healthy with {cache.size()} entries")
