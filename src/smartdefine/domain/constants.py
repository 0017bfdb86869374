"""Centralized constants for the SmartDefine scheduling engine.

All magic numbers live here so every layer imports from a single
source of truth.
"""

from enum import Enum


class Difficulty(str, Enum):
    """Coarse learning stage of a word."""

    NEW = "new"
    LEARNING = "learning"
    MASTERED = "mastered"


class ReviewType(str, Enum):
    """Filter accepted by the due-set selector."""

    ALL = "all"
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"  # mastered words
    DIFFICULT = "difficult"  # low ease factor


# ---------- Ease factor ----------
EASE_MIN = 1.3
EASE_MAX = 3.0
EASE_DEFAULT = 2.5
EASE_CORRECT_BONUS = 0.1
EASE_INCORRECT_PENALTY = 0.2
LOW_CONFIDENCE = 0.5
LOW_CONFIDENCE_PENALTY = 0.1
HIGH_CONFIDENCE = 0.8
HIGH_CONFIDENCE_BONUS = 0.05

# ---------- Interval (days) ----------
INTERVAL_MIN = 1
INTERVAL_MAX = 365
INTERVAL_DEFAULT = 1
GRADUATION_INTERVAL = 6

# ---------- Difficulty transitions ----------
LEARNING_AFTER_REVIEWS = 2
MASTERED_AFTER_REVIEWS = 5
MASTERED_MIN_EASE = 2.5
REGRESSION_EASE = 2.0
DIFFICULT_EASE = 2.0

# ---------- Running statistics ----------
SMOOTHING_PRIOR = 0.8
SMOOTHING_SAMPLE = 0.2
DEFAULT_RESPONSE_TIME_MS = 5000
DEFAULT_CONFIDENCE = 0.5
HISTORY_SIZE = 20

# ---------- Priority ----------
OVERDUE_DAY_WEIGHT = 10
DIFFICULTY_PRIORITY = {
    Difficulty.NEW: 100,
    Difficulty.LEARNING: 50,
    Difficulty.MASTERED: 10,
}
LOW_EASE_PRIORITY = 25
LEGACY_DUE_OFFSET_SECONDS = 1
MS_PER_DAY = 86_400_000

# ---------- Selector / reminders ----------
DEFAULT_REVIEW_LIMIT = 20
DEFAULT_DAILY_GOAL = 10
DEFAULT_REMINDER_HOUR = 19
DEFAULT_OVERDUE_CHECK_MINUTES = 60
MAX_NEW_WORDS_SUGGESTED = 5
