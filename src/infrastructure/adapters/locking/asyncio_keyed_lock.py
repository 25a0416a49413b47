"""asyncio implementation of KeyedLockProtocol.

One asyncio.Lock per key, created on demand and dropped once nobody holds
or waits for it. Multi-key holds acquire in sorted order.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from structlog import get_logger

from src.application.ports.keyed_lock import KeyedLockProtocol

logger = get_logger(__name__)


class AsyncioKeyedLock(KeyedLockProtocol):
    """Per-key mutual exclusion inside one event loop."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        ordered = sorted(set(keys))
        registered: list[str] = []
        acquired: list[asyncio.Lock] = []
        try:
            for key in ordered:
                lock = self._locks.setdefault(key, asyncio.Lock())
                self._users[key] = self._users.get(key, 0) + 1
                registered.append(key)
                if lock.locked():
                    logger.debug("keyed_lock_contended", key=key)
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in registered:
                self._users[key] -= 1
                if self._users[key] == 0:
                    del self._users[key]
                    del self._locks[key]

    def active_keys(self) -> list[str]:
        return sorted(self._locks)
