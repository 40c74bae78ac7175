"""
Stats calculator for the analytics view.

This is a pure computation module with no I/O.
"""

from datetime import date

from mindflash.application.due import count_due
from mindflash.domain.constants import MASTERED_BOX, MAX_BOX, MIN_BOX
from mindflash.domain.models import Deck, LibraryStats
from mindflash.domain.review_log import ReviewLog


class StatsCalculator:
    """
    Derives headline numbers from decks and the review log.

    Stateless and side-effect free.
    """

    def summary(self, decks: list[Deck], review_log: ReviewLog, as_of: date) -> LibraryStats:
        total = sum(len(d.cards) for d in decks)
        mastered = sum(1 for d in decks for c in d.cards if c.box == MASTERED_BOX)
        return LibraryStats(
            total=total,
            due_today=count_due(decks, as_of),
            mastered=mastered,
            # Streak is global: the review log is not split per deck.
            streak=review_log.compute_streak(as_of),
        )

    def box_distribution(self, decks: list[Deck]) -> dict[int, int]:
        """Card count per Leitner box, every box present."""
        boxes = {b: 0 for b in range(MIN_BOX, MAX_BOX + 1)}
        for deck in decks:
            for card in deck.cards:
                if card.box in boxes:
                    boxes[card.box] += 1
        return boxes
