"""
Domain models for decks, cards and analytics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .constants import BASE_EASE, MIN_BOX


class Grade(str, Enum):
    """Recall difficulty reported after a card is revealed."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: "Grade | str | None") -> "Grade | None":
        """
        Coerce a raw token into a Grade.

        Returns None for anything outside the four known categories.
        """
        if isinstance(value, Grade):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass
class Card:
    """
    A single flashcard and its scheduling state.

    Attributes:
        id: Opaque unique identifier.
        front: Prompt text.
        back: Answer text.
        box: Leitner box (1 = newest, 5 = mastered).
        ease: Bounded ease factor (130-350, baseline 250).
        last_reviewed: ISO timestamp of the most recent grading, if any.
        next_due: Calendar date on which the card becomes eligible again.
        created_at: ISO timestamp of creation.
        times_reviewed: Number of completed grading events.
    """

    id: str
    front: str
    back: str
    created_at: str
    box: int = MIN_BOX
    ease: int = BASE_EASE
    last_reviewed: str | None = None
    next_due: date | None = None
    times_reviewed: int = 0


@dataclass
class Deck:
    """An ordered collection of cards. Card order matters for display only."""

    id: str
    name: str
    created_at: str
    description: str = ""
    cards: list[Card] = field(default_factory=list)

    def find_card(self, card_id: str) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None


@dataclass(frozen=True)
class LibraryStats:
    """Headline numbers shown on the analytics view."""

    total: int
    due_today: int
    mastered: int
    streak: int
