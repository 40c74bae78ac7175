"""
Library repository: loads and saves a StudyContext through a KeyValueStore.

Decks and the review log live under separate keys, matching the browser
app's localStorage layout.
"""

import json
import logging
from typing import Any

from mindflash.application.context import StudyContext
from mindflash.application.utils.dates import format_timestamp
from mindflash.domain.constants import DATA_KEY, REVIEW_LOG_KEY
from mindflash.domain.errors import MalformedPayloadError
from mindflash.domain.models import Deck
from mindflash.domain.ports import KeyValueStore
from mindflash.domain.review_log import ReviewLog
from mindflash.infrastructure.serialization import (
    build_payload,
    deck_from_dict,
    deck_to_dict,
    parse_payload,
    review_log_from_dict,
    review_log_to_dict,
)

logger = logging.getLogger(__name__)


class LibraryRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read_json(self, key: str) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(f"Stored value for {key} is not valid JSON: {e}") from e

    def load(self) -> tuple[list[Deck], ReviewLog]:
        data = self._read_json(DATA_KEY) or {}
        raw_decks = data.get("decks", []) if isinstance(data, dict) else []
        decks = [deck_from_dict(d) for d in raw_decks]
        review_log = review_log_from_dict(self._read_json(REVIEW_LOG_KEY))
        logger.debug(f"Loaded {len(decks)} decks, {review_log.total()} logged reviews")
        return decks, review_log

    def load_into(self, context: StudyContext) -> StudyContext:
        context.decks, context.review_log = self.load()
        return context

    def _write(self, decks: list[Deck], review_log: ReviewLog) -> None:
        # Serialize both keys first so a bad value never leaves one written
        data = json.dumps({"decks": [deck_to_dict(d) for d in decks]})
        reviews = json.dumps(review_log_to_dict(review_log))
        self.store.set(DATA_KEY, data)
        self.store.set(REVIEW_LOG_KEY, reviews)

    def save(self, context: StudyContext) -> None:
        """Persist decks and the review log. Call after every mutation."""
        self._write(context.decks, context.review_log)

    def reset(self, context: StudyContext | None = None) -> None:
        """Wipe all decks and analytics."""
        self.store.delete(DATA_KEY)
        self.store.delete(REVIEW_LOG_KEY)
        if context is not None:
            context.decks = []
            context.review_log = ReviewLog()
        logger.info("Library reset")

    def export_payload(self, context: StudyContext) -> dict[str, Any]:
        return build_payload(
            context.decks, context.review_log, exported_at=format_timestamp(context.now())
        )

    def import_payload(self, context: StudyContext, payload: Any) -> StudyContext:
        """
        Replace the context's library with the payload contents and persist.

        A legacy backup without reviews keeps the current review log.
        Neither the context nor the store changes if the payload is rejected.
        """
        decks, review_log = parse_payload(payload)
        if review_log is None:
            review_log = context.review_log
        self._write(decks, review_log)
        context.decks = decks
        context.review_log = review_log
        logger.info(f"Imported {len(decks)} decks")
        return context
