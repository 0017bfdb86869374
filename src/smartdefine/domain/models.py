"""
Domain models for vocabulary review scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .constants import (
    DEFAULT_CONFIDENCE,
    DEFAULT_RESPONSE_TIME_MS,
    Difficulty,
)


@dataclass(frozen=True)
class ReviewOutcome:
    """
    Result of a single quiz/flashcard/typing interaction.

    Attributes:
        is_correct: Whether the learner answered correctly.
        response_time_ms: Time taken to answer.
        confidence_level: Self-reported confidence, expected in [0, 1].
            Callers clamp before submitting; out-of-range values are not validated.
    """

    is_correct: bool
    response_time_ms: float = DEFAULT_RESPONSE_TIME_MS
    confidence_level: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class ReviewEntry:
    """
    One entry of a word's recent performance history.

    Attributes:
        date: When the review happened.
        correct: Whether the answer was correct.
        response_time_ms: Response time of that review.
        confidence: Confidence reported for that review.
    """

    date: datetime
    correct: bool
    response_time_ms: float
    confidence: float


@dataclass(frozen=True)
class WordRecord:
    """
    A learned word together with its scheduling state.

    Scheduling fields are optional so that legacy or imported records can be
    represented as stored; `normalize_record` fills them in before any math.
    """

    word: str
    category: str
    explanation: str = ""

    # Scheduling state
    difficulty: Difficulty | None = Difficulty.NEW
    ease_factor: float | None = None
    interval: int | None = None
    review_count: int | None = 0
    last_reviewed: datetime | None = None
    next_review: datetime | None = None

    # Running statistics (informational only)
    average_response_time: float | None = None
    confidence_score: float | None = None
    history: tuple[ReviewEntry, ...] = ()
    correct_streak: int = 0
    accuracy_rate: float | None = None

    # Lookup context
    notes: str | None = None
    context: str | None = None
    date_added: datetime | None = None

    # Keys owned by other components, preserved on round trip
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def key(self) -> str:
        """Case-insensitive identity of the word inside its category."""
        return self.word.strip().lower()


# Category name -> records in that category
Collection = dict[str, list[WordRecord]]


@dataclass(frozen=True)
class DueWord:
    """
    A word selected for review with its ranking score.

    Attributes:
        record: The (normalized) word record.
        category: The category the record was found in.
        priority: Weighted urgency score. Higher is more urgent; not a probability.
        overdue_days: Fractional days since the word became due.
    """

    record: WordRecord
    category: str
    priority: float
    overdue_days: float = 0.0


@dataclass(frozen=True)
class StudyStats:
    """Summary counters over a whole collection."""

    total_words: int = 0
    new_words: int = 0
    learning_words: int = 0
    mastered_words: int = 0
    overdue_words: int = 0
    today_reviews: int = 0
    current_streak: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalWords": self.total_words,
            "newWords": self.new_words,
            "learningWords": self.learning_words,
            "masteredWords": self.mastered_words,
            "overdueWords": self.overdue_words,
            "todayReviews": self.today_reviews,
            "currentStreak": self.current_streak,
        }


@dataclass(frozen=True)
class Recommendation:
    """
    A study suggestion derived from the current statistics.

    Attributes:
        type: daily_goal | overdue | new_words | streak
        priority: high | medium | low
        message: Human-readable suggestion.
        action: What the UI should offer (review, review_overdue, learn_new, continue_streak).
        count: Number of words involved, when meaningful.
    """

    type: str
    priority: str
    message: str
    action: str
    count: int | None = None
