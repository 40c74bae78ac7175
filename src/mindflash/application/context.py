"""
Study context: the explicit state every core operation runs against.

Callers (CLI, server, tests) build one and pass it around; there is no
module-level store.
"""

import random
from dataclasses import dataclass, field
from datetime import date, datetime

from mindflash.application.config import AppConfig
from mindflash.domain.models import Deck
from mindflash.domain.ports import Clock
from mindflash.domain.review_log import ReviewLog


@dataclass
class StudyContext:
    clock: Clock
    decks: list[Deck] = field(default_factory=list)
    review_log: ReviewLog = field(default_factory=ReviewLog)
    rng: random.Random = field(default_factory=random.Random)
    config: AppConfig | None = None

    def today(self) -> date:
        return self.clock.today()

    def now(self) -> datetime:
        return self.clock.now()

    def find_deck(self, deck_id: str) -> Deck | None:
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        return None

    @property
    def strict_grades(self) -> bool:
        return bool(self.config and self.config.strict_grades)
