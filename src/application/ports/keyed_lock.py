"""Keyed lock port.

Serializes same-process callers that touch the same pair. Keys are taken in
sorted order so two callers locking {a, b} and {b, a} cannot deadlock.
This only orders callers inside one process; cross-process safety comes
from the document store's compare-and-swap.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol


class KeyedLockProtocol(Protocol):
    def hold(self, *keys: str) -> AbstractAsyncContextManager[None]:
        """Return an async context manager holding every key at once."""
        ...
