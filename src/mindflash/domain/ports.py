"""
Ports (interfaces) for time and storage.

Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime


class Clock(ABC):
    """
    Port supplying the current date and instant.

    Implementations:
        - SystemClock: Reads the wall clock in UTC.
        - FixedClock: Returns a pinned instant (tests, replays).
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current instant (timezone-aware)."""
        pass

    def today(self) -> date:
        """Current calendar date, with no time component."""
        return self.now().date()


class KeyValueStore(ABC):
    """
    Port for string-keyed durable storage.

    Values are JSON text; the store never interprets them.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass
