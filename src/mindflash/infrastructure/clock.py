"""Clock adapters."""

from datetime import datetime, timedelta, timezone

from mindflash.domain.ports import Clock


class SystemClock(Clock):
    """Wall clock in UTC, so "today" matches the YYYY-MM-DD keys on disk."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Clock pinned to a given instant.

    Used by tests and by callers replaying a day of reviews.
    """

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, days: int = 0, **kwargs) -> None:
        self._instant = self._instant + timedelta(days=days, **kwargs)
