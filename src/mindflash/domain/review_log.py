"""
Per-day review counters.

Counts are keyed by calendar date and only ever incremented; streaks and
the activity chart are derived from them.
"""

from collections.abc import Mapping
from datetime import date

from .constants import DEFAULT_HISTORY_DAYS


class ReviewLog:
    def __init__(self, counts: Mapping[date, int] | None = None):
        self._counts: dict[date, int] = {}
        for day, count in (counts or {}).items():
            self._counts[day] = int(count)

    def record_review(self, day: date) -> int:
        """Increment the counter for `day` and return the new count."""
        self._counts[day] = self._counts.get(day, 0) + 1
        return self._counts[day]

    def count_on(self, day: date) -> int:
        return self._counts.get(day, 0)

    def compute_streak(self, as_of: date) -> int:
        """
        Count consecutive days with at least one review, ending at `as_of`.

        A day without reviews stops the walk, `as_of` included: the streak
        reads 0 until the first review of the day is logged.
        """
        streak = 0
        cursor = as_of
        while self._counts.get(cursor, 0) > 0:
            streak += 1
            cursor = date.fromordinal(cursor.toordinal() - 1)
        return streak

    def reviews_in_window(
        self, n: int = DEFAULT_HISTORY_DAYS, *, as_of: date
    ) -> list[tuple[date, int]]:
        """
        The last `n` calendar days ending at `as_of`, oldest first.

        Days without reviews are zero-filled.
        """
        start = as_of.toordinal() - n + 1
        return [
            (day, self._counts.get(day, 0))
            for day in (date.fromordinal(o) for o in range(start, as_of.toordinal() + 1))
        ]

    def total(self) -> int:
        return sum(self._counts.values())

    def items(self) -> list[tuple[date, int]]:
        return sorted(self._counts.items())

    def clear(self) -> None:
        self._counts.clear()

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReviewLog):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        return f"ReviewLog({len(self._counts)} days, {self.total()} reviews)"
