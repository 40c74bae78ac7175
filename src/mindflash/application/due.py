"""Due-set evaluation."""

from datetime import date

from mindflash.domain.models import Card, Deck


def is_due(card: Card, as_of: date) -> bool:
    """
    A card is due when its next_due date is on or before `as_of`.

    Cards without a due date are due immediately.
    """
    if card.next_due is None:
        return True
    return card.next_due <= as_of


def get_due_cards(deck: Deck, as_of: date) -> list[Card]:
    """Due cards in deck storage order."""
    return [c for c in deck.cards if is_due(c, as_of)]


def count_due(decks: list[Deck], as_of: date) -> int:
    return sum(len(get_due_cards(d, as_of)) for d in decks)
