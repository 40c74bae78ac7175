"""
Payload serialization for decks, cards and the review log.

The JSON shape is shared by the on-disk store and by export/import files:

    {
      "version": 1,
      "exportedAt": "...",
      "decks": [{"id", "name", "description", "createdAt", "cards": [...]}],
      "reviewLog": {"YYYY-MM-DD": count}
    }

Card keys keep the field order of the browser app so a load followed by a
save reproduces the document.
"""

import logging
from typing import Any

from mindflash.application.utils.dates import format_day, parse_day
from mindflash.domain.constants import BASE_EASE, MIN_BOX, PAYLOAD_VERSION
from mindflash.domain.errors import MalformedPayloadError, UnsupportedPayloadVersionError
from mindflash.domain.models import Card, Deck
from mindflash.domain.review_log import ReviewLog

logger = logging.getLogger(__name__)


def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "front": card.front,
        "back": card.back,
        "box": card.box,
        "lastReviewed": card.last_reviewed,
        "nextDue": format_day(card.next_due) if card.next_due else None,
        "createdAt": card.created_at,
        "timesReviewed": card.times_reviewed,
        "ease": card.ease,
    }


def card_from_dict(data: dict[str, Any]) -> Card:
    if not isinstance(data, dict):
        raise MalformedPayloadError(f"Card must be an object, got {type(data).__name__}")
    try:
        return Card(
            id=str(data["id"]),
            front=data["front"],
            back=data["back"],
            created_at=data.get("createdAt"),
            box=int(data.get("box", MIN_BOX)),
            ease=int(data.get("ease", BASE_EASE)),
            last_reviewed=data.get("lastReviewed"),
            next_due=parse_day(data.get("nextDue")),
            times_reviewed=int(data.get("timesReviewed") or 0),
        )
    except KeyError as e:
        raise MalformedPayloadError(f"Card is missing required field {e}") from e
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError(f"Card {data.get('id')!r} has an invalid field: {e}") from e


def deck_to_dict(deck: Deck) -> dict[str, Any]:
    return {
        "id": deck.id,
        "name": deck.name,
        "description": deck.description,
        "createdAt": deck.created_at,
        "cards": [card_to_dict(c) for c in deck.cards],
    }


def deck_from_dict(data: dict[str, Any]) -> Deck:
    if not isinstance(data, dict):
        raise MalformedPayloadError(f"Deck must be an object, got {type(data).__name__}")
    try:
        cards = data.get("cards") or []
        if not isinstance(cards, list):
            raise MalformedPayloadError(f"Deck {data.get('id')!r} cards must be a list")
        return Deck(
            id=str(data["id"]),
            name=data["name"],
            created_at=data.get("createdAt"),
            description=data.get("description") or "",
            cards=[card_from_dict(c) for c in cards],
        )
    except KeyError as e:
        raise MalformedPayloadError(f"Deck is missing required field {e}") from e


def review_log_to_dict(log: ReviewLog) -> dict[str, int]:
    return {format_day(day): count for day, count in log.items()}


def review_log_from_dict(data: dict[str, Any] | None) -> ReviewLog:
    if not data:
        return ReviewLog()
    if not isinstance(data, dict):
        raise MalformedPayloadError("reviewLog must be an object")
    counts = {}
    for key, value in data.items():
        try:
            day = parse_day(key) if isinstance(key, str) else None
            count = int(value)
        except (TypeError, ValueError) as e:
            raise MalformedPayloadError(f"reviewLog has an invalid entry {key!r}: {e}") from e
        if day is None:
            raise MalformedPayloadError(f"reviewLog has an invalid date key {key!r}")
        counts[day] = count
    return ReviewLog(counts)


def build_payload(
    decks: list[Deck], review_log: ReviewLog, exported_at: str | None = None
) -> dict[str, Any]:
    payload: dict[str, Any] = {"version": PAYLOAD_VERSION}
    if exported_at:
        payload["exportedAt"] = exported_at
    payload["decks"] = [deck_to_dict(d) for d in decks]
    payload["reviewLog"] = review_log_to_dict(review_log)
    return payload


def parse_payload(payload: Any) -> tuple[list[Deck], ReviewLog | None]:
    """
    Load decks and the review log from an export payload.

    Also accepts the legacy browser backup layout
    (`{"version", "data": {"decks"}, "prefs", "reviews"}`). A legacy backup
    without `reviews` carries no log, so the returned log is None and the
    caller keeps its own.

    Raises:
        MalformedPayloadError: Missing/invalid version tag or structure.
        UnsupportedPayloadVersionError: Version newer than this build understands.
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError("Payload must be a JSON object")

    version = payload.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        raise MalformedPayloadError(f"Payload has no valid version tag: {version!r}")
    if version > PAYLOAD_VERSION:
        raise UnsupportedPayloadVersionError(version, PAYLOAD_VERSION)

    legacy = False
    if "decks" in payload:
        raw_decks = payload["decks"]
        raw_log = payload.get("reviewLog")
    elif isinstance(payload.get("data"), dict):
        logger.info("Importing legacy backup layout")
        legacy = True
        raw_decks = payload["data"].get("decks", [])
        raw_log = payload.get("reviews")
    else:
        raise MalformedPayloadError("Payload has no decks")

    if not isinstance(raw_decks, list):
        raise MalformedPayloadError("decks must be a list")

    decks = [deck_from_dict(d) for d in raw_decks]
    if legacy and not raw_log:
        return decks, None
    return decks, review_log_from_dict(raw_log)
