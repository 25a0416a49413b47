"""Locking adapters."""

from src.infrastructure.adapters.locking.asyncio_keyed_lock import AsyncioKeyedLock

__all__ = ["AsyncioKeyedLock"]
