import logging

import uvicorn

from og_preview.configurations.config import settings
from og_preview.configurations.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run() -> None:
    setup_logging()

    from og_preview.app import app

    logger.info(
        f"Serving previews on http://{settings.listenaddr}{settings.listenpath}"
    )
    uvicorn.run(
        app,
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
    )
