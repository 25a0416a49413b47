"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

import os

from src.infrastructure.observability import configure_structlog as _configure_structlog

ENVIRONMENT_VAR = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"


def get_environment() -> str:
    return os.getenv(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT).lower()


def configure_structlog(environment: str | None = None) -> None:
    """Configure structlog, defaulting to the ``ENVIRONMENT`` variable."""
    _configure_structlog(environment=environment or get_environment())


__all__ = ["configure_structlog", "get_environment"]
