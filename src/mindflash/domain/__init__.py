# Domain Package
from .errors import (
    InvalidCardError,
    InvalidDeckError,
    InvalidGradeError,
    MalformedPayloadError,
    MindFlashError,
    UnknownCardError,
    UnknownDeckError,
    UnsupportedPayloadVersionError,
)
from .models import Card, Deck, Grade, LibraryStats
from .review_log import ReviewLog

__all__ = [
    "Card",
    "Deck",
    "Grade",
    "LibraryStats",
    "ReviewLog",
    "MindFlashError",
    "InvalidGradeError",
    "InvalidDeckError",
    "InvalidCardError",
    "UnknownDeckError",
    "UnknownCardError",
    "MalformedPayloadError",
    "UnsupportedPayloadVersionError",
]
