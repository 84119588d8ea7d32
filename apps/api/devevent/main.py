"""Entry points for the host application's lifecycle hooks."""

import structlog

from devevent.core.config import settings
from devevent.core.logging import configure_logging
from devevent.db import connection_manager
from devevent.registry import ModelRegistry, clear_models, get_models

configure_logging()

logger = structlog.get_logger()


def startup() -> ModelRegistry:
    models = get_models()
    logger.info("devevent_started", env=settings.env, database=models.database.name)
    return models


def shutdown() -> None:
    connection_manager.disconnect()
    clear_models()


def health() -> dict[str, str]:
    return {
        "status": "ok",
        "env": settings.env,
        "database": "connected" if connection_manager.connected else "disconnected",
    }
