"""Exception hierarchy for MindFlash.

The scheduler and due evaluator never raise for well-formed cards; these
errors are surfaced by the surrounding CRUD and import layers.
"""


class MindFlashError(Exception):
    """Base class for all MindFlash errors."""


class InvalidGradeError(MindFlashError, ValueError):
    """Unrecognized grade token (only raised when strict grading is enabled)."""

    def __init__(self, grade: object):
        self.grade = grade
        super().__init__(f"Unknown grade: {grade!r} (expected again, hard, good or easy)")


class UnknownDeckError(MindFlashError, LookupError):
    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(f"Deck not found: {deck_id}")


class UnknownCardError(MindFlashError, LookupError):
    def __init__(self, deck_id: str, card_id: str):
        self.deck_id = deck_id
        self.card_id = card_id
        super().__init__(f"Card not found: {card_id} (deck {deck_id})")


class InvalidDeckError(MindFlashError, ValueError):
    pass


class InvalidCardError(MindFlashError, ValueError):
    pass


class MalformedPayloadError(MindFlashError, ValueError):
    pass


class UnsupportedPayloadVersionError(MindFlashError, ValueError):
    def __init__(self, version: int, supported: int):
        self.version = version
        self.supported = supported
        super().__init__(
            f"Payload version {version} is newer than supported version {supported}"
        )
