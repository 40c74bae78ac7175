"""Centralized constants for MindFlash.

Scheduling tables and defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Leitner boxes ----------
MIN_BOX = 1
MAX_BOX = 5
MASTERED_BOX = MAX_BOX

# Days until a card is due again, keyed by box.
DEFAULT_INTERVALS = {
    1: 0,
    2: 1,
    3: 3,
    4: 7,
    5: 21,
}

# ---------- Ease factor ----------
BASE_EASE = 250
MIN_EASE = 130
MAX_EASE = 350

# ---------- Grade deltas ----------
BOX_DELTAS = {"again": -1, "hard": 0, "good": 1, "easy": 2}
EASE_DELTAS = {"again": -40, "hard": -15, "good": 0, "easy": 15}

# ---------- Analytics ----------
DEFAULT_HISTORY_DAYS = 14

# ---------- Persistence ----------
PAYLOAD_VERSION = 1
DATA_KEY = "mindflash:data:v1"
REVIEW_LOG_KEY = "mindflash:reviews:v1"
