"""Time authority port.

Every service that needs the current time injects a TimeAuthorityProtocol
instead of calling datetime.now() directly. Chest deadlines, chit
timestamps and the shared pairing instant all come from here, which lets
tests move the clock past an unlock deadline without sleeping.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract source of the current time.

    For production:
        Use TimeAuthorityService from src/application/services/

    For testing:
        Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return the current time in UTC (timezone-aware)."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic clock reading in seconds.

        Only differences between readings are meaningful.
        """
        ...
