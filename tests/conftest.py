import logging
import random
from datetime import date, datetime, timezone

import pytest

from mindflash.application.config import AppConfig
from mindflash.application.context import StudyContext
from mindflash.application.deck_service import DeckService
from mindflash.domain.models import Card, Deck
from mindflash.infrastructure.adapters.storage import InMemoryStore
from mindflash.infrastructure.clock import FixedClock
from mindflash.infrastructure.repository import LibraryRepository

# 2024-12-30 is a Monday; three days later crosses into 2025.
TODAY = date(2024, 12, 30)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 12, 30, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def context(clock, mock_home):
    return StudyContext(clock=clock, rng=random.Random(42), config=AppConfig())


@pytest.fixture
def decks(context):
    return DeckService(context)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repo(store):
    return LibraryRepository(store)


@pytest.fixture
def make_card():
    """Factory for cards with explicit scheduling state."""

    def _make(card_id="c1", box=1, ease=250, next_due=TODAY, times_reviewed=0, **kw):
        return Card(
            id=card_id,
            front=kw.pop("front", f"front {card_id}"),
            back=kw.pop("back", f"back {card_id}"),
            created_at=kw.pop("created_at", "2024-12-01T08:00:00.000Z"),
            box=box,
            ease=ease,
            next_due=next_due,
            times_reviewed=times_reviewed,
            **kw,
        )

    return _make


@pytest.fixture
def make_deck(make_card):
    def _make(n=3, deck_id="d1", **card_kw):
        cards = [make_card(card_id=f"c{i}", **card_kw) for i in range(1, n + 1)]
        return Deck(id=deck_id, name="Test Deck", created_at="2024-12-01T08:00:00.000Z", cards=cards)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config/data from the real user directory
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "MINDFLASH_DATA_FILE",
        "MINDFLASH_SEED",
        "MINDFLASH_SHUFFLE",
        "MINDFLASH_STRICT_GRADES",
        "MINDFLASH_VERBOSE",
        "MINDFLASH_LOG_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI commands set the root level and attach a log file handler."""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
