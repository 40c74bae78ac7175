"""
Stats Service: application layer orchestrator.

Resolves deck scope from the StudyContext and delegates the math to
StatsCalculator and the review log.
"""

from datetime import date

from mindflash.application.context import StudyContext
from mindflash.domain.constants import DEFAULT_HISTORY_DAYS
from mindflash.domain.errors import UnknownDeckError
from mindflash.domain.models import Deck, LibraryStats

from .calculator import StatsCalculator


class StatsService:
    def __init__(self, context: StudyContext, calculator: StatsCalculator | None = None):
        """
        Args:
            context: The study context to read decks and reviews from.
            calculator: Optional custom calculator; uses default if not provided.
        """
        self.context = context
        self._calc = calculator or StatsCalculator()

    def _scope(self, deck_id: str | None) -> list[Deck]:
        # None means every deck
        if deck_id is None:
            return self.context.decks
        deck = self.context.find_deck(deck_id)
        if deck is None:
            raise UnknownDeckError(deck_id)
        return [deck]

    def summary(self, deck_id: str | None = None, as_of: date | None = None) -> LibraryStats:
        as_of = as_of or self.context.today()
        return self._calc.summary(self._scope(deck_id), self.context.review_log, as_of)

    def box_distribution(self, deck_id: str | None = None) -> dict[int, int]:
        return self._calc.box_distribution(self._scope(deck_id))

    def review_history(
        self, days: int | None = None, as_of: date | None = None
    ) -> list[tuple[date, int]]:
        if days is None:
            config = self.context.config
            days = config.history_days if config else DEFAULT_HISTORY_DAYS
        as_of = as_of or self.context.today()
        return self.context.review_log.reviews_in_window(days, as_of=as_of)
