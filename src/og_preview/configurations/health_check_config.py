# Add Health Checks
from fastapi import FastAPI

from og_preview.services.health_check.async_health_check_factory import (
    HealthCheckFactory,
)
from og_preview.services.health_check.preview_cache_health_check import (
    PreviewCacheHealthCheck,
)

_health_checks = HealthCheckFactory()

_health_checks.add(
    PreviewCacheHealthCheck(
        alias="preview_cache",
        tags=["cache", "memory"],
    )
)


def setup_health_checks(app: FastAPI) -> None:
    app.add_api_route(
        "/health",
        endpoint=_health_checks.respond,
        tags=["system"],
        operation_id="get_health",
    )
