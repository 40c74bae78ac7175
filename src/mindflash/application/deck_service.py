"""
Deck and card management over a StudyContext.

Every mutating method returns the changed entity; callers persist the
context right after (see LibraryRepository.save).
"""

import logging

from mindflash.application.context import StudyContext
from mindflash.application.id_service import generate_card_id, generate_deck_id
from mindflash.application.utils.dates import format_timestamp
from mindflash.domain.constants import BASE_EASE, MIN_BOX
from mindflash.domain.errors import (
    InvalidCardError,
    InvalidDeckError,
    UnknownCardError,
    UnknownDeckError,
)
from mindflash.domain.models import Card, Deck

logger = logging.getLogger(__name__)

DEMO_DECKS = [
    (
        "Web Dev Basics",
        "HTML, CSS, JS essentials",
        [
            ("What does HTML stand for?", "HyperText Markup Language"),
            ("What is CSS used for?", "Styling and layout of web pages"),
            (
                "const vs let?",
                "const is block-scoped and cannot be reassigned; "
                "let is block-scoped and can be reassigned.",
            ),
        ],
    ),
    (
        "Algorithms",
        "Big-O and patterns",
        [
            ("Big-O of binary search?", "O(log n)"),
            (
                "Two-pointer pattern usage?",
                "Finding pairs, subarrays in sorted arrays/strings efficiently.",
            ),
        ],
    ),
]


class DeckService:
    def __init__(self, context: StudyContext):
        self.context = context

    # --- decks ---

    def get_deck(self, deck_id: str) -> Deck:
        deck = self.context.find_deck(deck_id)
        if deck is None:
            raise UnknownDeckError(deck_id)
        return deck

    def create_deck(self, name: str, description: str = "") -> Deck:
        name = (name or "").strip()
        if not name:
            raise InvalidDeckError("Deck name must not be empty")

        deck = Deck(
            id=generate_deck_id(),
            name=name,
            description=(description or "").strip(),
            created_at=format_timestamp(self.context.now()),
        )
        self.context.decks.append(deck)
        logger.info(f"Created deck '{deck.name}' ({deck.id})")
        return deck

    def update_deck(
        self, deck_id: str, name: str | None = None, description: str | None = None
    ) -> Deck:
        deck = self.get_deck(deck_id)
        if name is not None:
            name = name.strip()
            if not name:
                raise InvalidDeckError("Deck name must not be empty")
            deck.name = name
        if description is not None:
            deck.description = description.strip()
        return deck

    def delete_deck(self, deck_id: str) -> None:
        deck = self.get_deck(deck_id)
        self.context.decks = [d for d in self.context.decks if d.id != deck.id]
        logger.info(f"Deleted deck '{deck.name}' ({len(deck.cards)} cards)")

    def filter_decks(self, search: str = "") -> list[Deck]:
        """Case-insensitive match on name or description; blank returns all."""
        q = (search or "").strip().lower()
        if not q:
            return list(self.context.decks)
        return [
            d
            for d in self.context.decks
            if q in d.name.lower() or q in (d.description or "").lower()
        ]

    # --- cards ---

    def get_card(self, deck_id: str, card_id: str) -> Card:
        card = self.get_deck(deck_id).find_card(card_id)
        if card is None:
            raise UnknownCardError(deck_id, card_id)
        return card

    def create_card(self, deck_id: str, front: str, back: str) -> Card:
        deck = self.get_deck(deck_id)
        front, back = _clean_text(front, "front"), _clean_text(back, "back")

        card = Card(
            id=generate_card_id(),
            front=front,
            back=back,
            created_at=format_timestamp(self.context.now()),
            box=MIN_BOX,
            ease=BASE_EASE,
            last_reviewed=None,
            next_due=self.context.today(),
            times_reviewed=0,
        )
        deck.cards.append(card)
        return card

    def update_card(
        self,
        deck_id: str,
        card_id: str,
        front: str | None = None,
        back: str | None = None,
    ) -> Card:
        """Edit card text. Scheduling state is left to the scheduler."""
        card = self.get_card(deck_id, card_id)
        if front is not None:
            card.front = _clean_text(front, "front")
        if back is not None:
            card.back = _clean_text(back, "back")
        return card

    def delete_card(self, deck_id: str, card_id: str) -> None:
        deck = self.get_deck(deck_id)
        card = self.get_card(deck_id, card_id)
        deck.cards = [c for c in deck.cards if c.id != card.id]

    # --- first run ---

    def seed_demo(self) -> list[Deck]:
        """Create the demo decks, only when the library is empty."""
        if self.context.decks:
            return []

        created = []
        for name, description, cards in DEMO_DECKS:
            deck = self.create_deck(name, description)
            for front, back in cards:
                self.create_card(deck.id, front, back)
            created.append(deck)
        return created


def _clean_text(value: str, side: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidCardError(f"Card {side} must not be empty")
    return text
