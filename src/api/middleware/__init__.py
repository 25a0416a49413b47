"""API middleware."""

from src.api.middleware.logging_middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
