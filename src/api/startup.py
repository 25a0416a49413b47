"""Startup and shutdown hooks for the Chit Chest API.

Usage in FastAPI:
    @asynccontextmanager
    async def lifespan(app):
        await on_startup()
        yield
        await on_shutdown()
"""

from structlog import get_logger

from src.bootstrap.chest_services import get_chest_config, initialize_document_store
from src.bootstrap.database import close_database_engine
from src.bootstrap.logging import configure_structlog, get_environment

logger = get_logger(__name__)


def configure_logging() -> None:
    """Configure structlog from ``ENVIRONMENT`` and ``LOG_LEVEL``."""
    environment = get_environment()
    configure_structlog(environment)
    logger.info("logging_configured", environment=environment)


async def on_startup() -> None:
    """Configure logging, load config and prepare the document store.

    Config is loaded eagerly so an invalid environment stops the process
    before it serves requests.
    """
    configure_logging()
    config = get_chest_config()
    await initialize_document_store()
    logger.info(
        "service_started",
        default_duration_days=config.default_duration_days,
        duration_unit=config.duration_unit.value,
    )


async def on_shutdown() -> None:
    await close_database_engine()
    logger.info("service_stopped")
