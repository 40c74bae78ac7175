"""
Leitner-box scheduler with a bounded ease adjustment.

Each grade moves the card between boxes 1-5 and nudges its ease factor;
the next due date is looked up from the card's new box.
"""

import logging
from collections.abc import Mapping

from mindflash.application.utils.dates import add_days, format_timestamp
from mindflash.domain.constants import (
    BOX_DELTAS,
    DEFAULT_INTERVALS,
    EASE_DELTAS,
    MAX_BOX,
    MAX_EASE,
    MIN_BOX,
    MIN_EASE,
)
from mindflash.domain.errors import InvalidGradeError
from mindflash.domain.models import Card, Grade
from mindflash.domain.ports import Clock

logger = logging.getLogger(__name__)


def clamp(n: int, low: int, high: int) -> int:
    return max(low, min(high, n))


def next_box(box: int, grade: Grade | None) -> int:
    delta = BOX_DELTAS[grade.value] if grade else 0
    return clamp(box + delta, MIN_BOX, MAX_BOX)


def next_ease(ease: int, grade: Grade | None) -> int:
    delta = EASE_DELTAS[grade.value] if grade else 0
    return clamp(ease + delta, MIN_EASE, MAX_EASE)


class Scheduler:
    """
    Applies a grade to a card.

    Note: `ease` is tracked and clamped but the interval only depends on the
    box. Changing that would move every existing card's due dates.
    """

    def __init__(
        self,
        clock: Clock,
        intervals: Mapping[int, int] | None = None,
        strict: bool = False,
    ):
        """
        Args:
            clock: Source of "today" and "now".
            intervals: Box -> days table; defaults to DEFAULT_INTERVALS.
            strict: Raise InvalidGradeError for unknown grades instead of
                applying a null delta.
        """
        self.clock = clock
        self.intervals = dict(intervals or DEFAULT_INTERVALS)
        self.strict = strict

    def interval_for(self, box: int) -> int:
        return self.intervals[box]

    def schedule(self, card: Card, grade: Grade | str) -> Card:
        """
        Mutate `card` for the given grade and return it.

        Unknown grades leave box and ease untouched, but the due date is
        still recomputed and the review still counts.
        """
        parsed = Grade.parse(grade)
        if parsed is None:
            if self.strict:
                raise InvalidGradeError(grade)
            logger.warning(f"Unknown grade {grade!r} for card {card.id}; applying no change")

        card.box = next_box(card.box, parsed)
        card.ease = next_ease(card.ease, parsed)

        now = self.clock.now()
        card.last_reviewed = format_timestamp(now)
        card.next_due = add_days(now.date(), self.interval_for(card.box))
        card.times_reviewed = (card.times_reviewed or 0) + 1

        logger.debug(
            f"Scheduled {card.id}: grade={parsed.value if parsed else grade!r} "
            f"box={card.box} ease={card.ease} next_due={card.next_due}"
        )
        return card
