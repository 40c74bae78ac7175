"""
Study session coordinator.

Serves the due cards of one deck one at a time. The queue order is fixed
when the session starts and consumed strictly FIFO; a graded card is never
put back, even if "again" leaves it due today.
"""

import logging
from collections import deque
from datetime import date
from enum import Enum

from mindflash.application.context import StudyContext
from mindflash.application.due import get_due_cards
from mindflash.application.scheduler import Scheduler
from mindflash.domain.models import Card, Deck, Grade

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class StudySession:
    def __init__(self, context: StudyContext, scheduler: Scheduler | None = None):
        self.context = context
        self.scheduler = scheduler or Scheduler(context.clock, strict=context.strict_grades)
        self.deck: Deck | None = None
        self._queue: deque[Card] = deque()
        self.reviewed_count = 0

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._queue else SessionState.IDLE

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def start(self, deck: Deck, as_of: date | None = None) -> int:
        """
        Build the queue from the deck's due cards.

        Returns the number of queued cards; 0 means there is nothing to study.
        """
        as_of = as_of or self.context.today()
        due = get_due_cards(deck, as_of)

        shuffle = self.context.config.shuffle if self.context.config else True
        if shuffle:
            self.context.rng.shuffle(due)

        self.deck = deck
        self._queue = deque(due)
        self.reviewed_count = 0

        logger.info(f"Study session started for '{deck.name}': {len(due)} due")
        return len(due)

    def current(self) -> Card | None:
        return self._queue[0] if self._queue else None

    def grade(self, grade: Grade | str) -> Card | None:
        """
        Grade the head card, log the review and advance.

        Returns the graded card (so the caller can persist it), or None when
        there is no current card.
        """
        card = self.current()
        if card is None:
            return None

        self.scheduler.schedule(card, grade)
        self.context.review_log.record_review(self.context.today())

        self._queue.popleft()
        self.reviewed_count += 1

        if not self._queue:
            logger.info(f"Study session finished: {self.reviewed_count} reviewed")
        return card

    def still_due(self) -> int:
        """Cards of the session deck due right now, graded ones included."""
        if self.deck is None:
            return 0
        return len(get_due_cards(self.deck, self.context.today()))

    def abandon(self) -> None:
        self._queue.clear()
        self.deck = None
