"""Tests for deck and card management."""

from datetime import date

import pytest

from mindflash.domain.errors import (
    InvalidCardError,
    InvalidDeckError,
    UnknownCardError,
    UnknownDeckError,
)


class TestDecks:
    def test_create_deck_strips_and_stamps(self, decks, context):
        deck = decks.create_deck("  Spanish  ", "  verbs ")

        assert deck.name == "Spanish"
        assert deck.description == "verbs"
        assert deck.created_at == "2024-12-30T09:30:00.000Z"
        assert deck.id.startswith("deck_")
        assert context.decks == [deck]

    def test_create_deck_rejects_blank_name(self, decks):
        with pytest.raises(InvalidDeckError):
            decks.create_deck("   ")

    def test_update_deck(self, decks):
        deck = decks.create_deck("Old")
        decks.update_deck(deck.id, name="New", description="desc")
        assert (deck.name, deck.description) == ("New", "desc")

    def test_update_deck_keeps_unspecified_fields(self, decks):
        deck = decks.create_deck("Name", "desc")
        decks.update_deck(deck.id, description="other")
        assert deck.name == "Name"

    def test_unknown_deck(self, decks):
        with pytest.raises(UnknownDeckError):
            decks.get_deck("nope")
        with pytest.raises(UnknownDeckError):
            decks.delete_deck("nope")

    def test_delete_deck(self, decks, context):
        a = decks.create_deck("A")
        b = decks.create_deck("B")
        decks.delete_deck(a.id)
        assert context.decks == [b]

    def test_filter_decks(self, decks):
        decks.create_deck("Web Dev", "HTML and CSS")
        decks.create_deck("Algorithms", "Big-O")
        assert [d.name for d in decks.filter_decks("html")] == ["Web Dev"]
        assert [d.name for d in decks.filter_decks("ALGO")] == ["Algorithms"]
        assert len(decks.filter_decks("  ")) == 2
        assert decks.filter_decks("rust") == []


class TestCards:
    def test_create_card_defaults(self, decks):
        deck = decks.create_deck("D")
        card = decks.create_card(deck.id, " Q ", " A ")

        assert (card.front, card.back) == ("Q", "A")
        assert card.box == 1
        assert card.ease == 250
        assert card.next_due == date(2024, 12, 30)
        assert card.times_reviewed == 0
        assert card.last_reviewed is None
        assert deck.cards == [card]

    def test_card_ids_are_unique(self, decks):
        deck = decks.create_deck("D")
        ids = {decks.create_card(deck.id, "q", "a").id for _ in range(20)}
        assert len(ids) == 20

    @pytest.mark.parametrize("front,back", [("", "a"), ("q", "  ")])
    def test_create_card_rejects_blank_text(self, decks, front, back):
        deck = decks.create_deck("D")
        with pytest.raises(InvalidCardError):
            decks.create_card(deck.id, front, back)

    def test_create_card_unknown_deck(self, decks):
        with pytest.raises(UnknownDeckError):
            decks.create_card("nope", "q", "a")

    def test_update_card_keeps_schedule(self, decks):
        deck = decks.create_deck("D")
        card = decks.create_card(deck.id, "q", "a")
        card.box = 4

        decks.update_card(deck.id, card.id, back="answer")

        assert card.back == "answer"
        assert card.front == "q"
        assert card.box == 4

    def test_delete_card(self, decks):
        deck = decks.create_deck("D")
        keep = decks.create_card(deck.id, "q1", "a1")
        drop = decks.create_card(deck.id, "q2", "a2")

        decks.delete_card(deck.id, drop.id)

        assert deck.cards == [keep]
        with pytest.raises(UnknownCardError):
            decks.delete_card(deck.id, drop.id)


def test_seed_demo_only_when_empty(decks, context):
    created = decks.seed_demo()
    assert [d.name for d in created] == ["Web Dev Basics", "Algorithms"]
    assert sum(len(d.cards) for d in context.decks) == 5

    assert decks.seed_demo() == []
    assert len(context.decks) == 2
