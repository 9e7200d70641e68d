import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from fastapi_healthcheck.enum import HealthCheckStatusEnum
from fastapi_healthcheck.model import HealthCheckEntityModel, HealthCheckModel

from og_preview.common.responses import PrettyJSONResponse

logger = logging.getLogger(__name__)

STATUS_CODES = {
    HealthCheckStatusEnum.HEALTHY.value: 200,
    HealthCheckStatusEnum.UNHEALTHY.value: 503,
}


def _status_value(status) -> str:
    if isinstance(status, HealthCheckStatusEnum):
        return status.value
    return status


class ComponentHealthCheck(ABC):
    """
    One named component of the service report.

    Subclasses implement ``ping``; a ping that raises or does not finish
    within ``timeout`` seconds marks the component unhealthy.
    """

    def __init__(
        self, alias: str, tags: Optional[List[str]] = None, timeout: float = 1.0
    ) -> None:
        self.alias = alias
        self.tags = tags or []
        self.timeout = timeout

    @abstractmethod
    async def ping(self) -> None:
        ...

    async def check_health(self) -> HealthCheckStatusEnum:
        try:
            await asyncio.wait_for(self.ping(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"{self.alias} did not answer within {self.timeout}s")
            return HealthCheckStatusEnum.UNHEALTHY
        except Exception as e:
            logger.error(f"{self.alias} health check failed: {e!r}")
            return HealthCheckStatusEnum.UNHEALTHY
        return HealthCheckStatusEnum.HEALTHY


class HealthCheckFactory:
    _health_checks: List[ComponentHealthCheck]

    def __init__(self) -> None:
        self._health_checks = list()

    def add(self, item: ComponentHealthCheck) -> None:
        self._health_checks.append(item)

    def _dump_model(self, model: HealthCheckModel) -> dict:
        """Convert the health model to a json-serializable dict."""
        return {
            "status": _status_value(model.status),
            "totalTimeTaken": str(model.totalTimeTaken),
            "entities": [
                {
                    "alias": entity.alias,
                    "status": _status_value(entity.status),
                    "timeTaken": str(entity.timeTaken),
                    "tags": entity.tags,
                }
                for entity in model.entities
            ],
        }

    async def check(self) -> dict:
        health = HealthCheckModel()
        total_start = datetime.now()

        for item in self._health_checks:
            entity = HealthCheckEntityModel(alias=item.alias, tags=item.tags)

            entity_start = datetime.now()
            entity.status = await item.check_health()
            entity.timeTaken = datetime.now() - entity_start

            # One unhealthy component makes the service unhealthy
            if entity.status == HealthCheckStatusEnum.UNHEALTHY:
                health.status = HealthCheckStatusEnum.UNHEALTHY

            health.entities.append(entity)

        health.totalTimeTaken = datetime.now() - total_start

        return self._dump_model(health)

    async def respond(self) -> PrettyJSONResponse:
        """``/health`` endpoint: the report, with 503 when anything is unhealthy."""
        result = await self.check()
        status_code = STATUS_CODES.get(result["status"], 503)
        return PrettyJSONResponse(content=result, status_code=status_code)
