"""System clock implementation of TimeAuthorityProtocol.

Chest deadlines are wall-clock instants, so a wall clock that jumps backward
can briefly re-lock a chest that already looked unlockable. The jump is
logged for investigation; it never rejects a request.
"""

import time
from datetime import datetime, timezone

from structlog import get_logger

from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)


class TimeAuthorityService(TimeAuthorityProtocol):
    """Production time authority backed by the host clock.

    Example:
        >>> clock = TimeAuthorityService()
        >>> clock.now().tzinfo is not None
        True
    """

    def __init__(self) -> None:
        self._last_seen: datetime | None = None

    def now(self) -> datetime:
        return self.utcnow()

    def utcnow(self) -> datetime:
        current = datetime.now(timezone.utc)
        if self._last_seen is not None and current < self._last_seen:
            logger.warning(
                "wall_clock_moved_backwards",
                previous=self._last_seen.isoformat(),
                current=current.isoformat(),
                drift_seconds=(self._last_seen - current).total_seconds(),
            )
        self._last_seen = current
        return current

    def monotonic(self) -> float:
        return time.monotonic()
