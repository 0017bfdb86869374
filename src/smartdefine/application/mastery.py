"""
Mastery updater: ease-factor-modulated spaced repetition (a simplified SM-2).

This is a pure computation module with no I/O. `update()` never mutates the
record it is given; it returns a new one.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from smartdefine.application.utils.clock import as_utc, round_half_up, utc_now
from smartdefine.domain.constants import (
    EASE_CORRECT_BONUS,
    EASE_DEFAULT,
    EASE_INCORRECT_PENALTY,
    EASE_MAX,
    EASE_MIN,
    GRADUATION_INTERVAL,
    HIGH_CONFIDENCE,
    HIGH_CONFIDENCE_BONUS,
    HISTORY_SIZE,
    INTERVAL_DEFAULT,
    INTERVAL_MAX,
    INTERVAL_MIN,
    LEARNING_AFTER_REVIEWS,
    LOW_CONFIDENCE,
    LOW_CONFIDENCE_PENALTY,
    MASTERED_AFTER_REVIEWS,
    MASTERED_MIN_EASE,
    REGRESSION_EASE,
    SMOOTHING_PRIOR,
    SMOOTHING_SAMPLE,
    Difficulty,
)
from smartdefine.domain.models import ReviewEntry, ReviewOutcome, WordRecord

logger = logging.getLogger(__name__)


def normalize_record(record: WordRecord) -> WordRecord:
    """
    Fill in scheduling defaults for legacy or partially populated records.

    `next_review` is left as-is: a missing due date has its own policy in the
    selector (always due) and the aggregator (counted as overdue).
    """
    return replace(
        record,
        difficulty=record.difficulty or Difficulty.NEW,
        ease_factor=EASE_DEFAULT if record.ease_factor is None else record.ease_factor,
        interval=INTERVAL_DEFAULT if record.interval is None else record.interval,
        review_count=record.review_count or 0,
    )


def update(
    record: WordRecord,
    outcome: ReviewOutcome,
    now: datetime | None = None,
) -> WordRecord:
    """
    Apply one review outcome to a word record.

    Args:
        record: Current state of the word (not modified).
        outcome: Result of the review.
        now: Review instant; defaults to the current UTC time.

    Returns:
        A new WordRecord with ease, interval, difficulty, next review date and
        running statistics updated.
    """
    now = as_utc(now) if now else utc_now()
    current = normalize_record(record)

    review_count = current.review_count + 1
    ease = next_ease_factor(current.ease_factor, outcome)
    interval = next_interval(current.interval, ease, outcome.is_correct)
    difficulty = next_difficulty(current.difficulty, review_count, ease)

    history = (
        *current.history,
        ReviewEntry(
            date=now,
            correct=outcome.is_correct,
            response_time_ms=outcome.response_time_ms,
            confidence=outcome.confidence_level,
        ),
    )[-HISTORY_SIZE:]

    logger.debug(
        f"[mastery] {current.word!r}: ease {current.ease_factor} -> {ease}, "
        f"interval {current.interval} -> {interval}, "
        f"{current.difficulty.value} -> {difficulty.value}"
    )

    return replace(
        current,
        review_count=review_count,
        ease_factor=ease,
        interval=interval,
        difficulty=difficulty,
        last_reviewed=now,
        next_review=now + timedelta(days=interval),
        average_response_time=_smooth(
            current.average_response_time, outcome.response_time_ms, digits=0
        ),
        confidence_score=_smooth(
            current.confidence_score, outcome.confidence_level, digits=2
        ),
        history=history,
        correct_streak=_trailing_correct(history),
        accuracy_rate=round_half_up(
            sum(1 for entry in history if entry.correct) / len(history), 2
        ),
    )


def next_ease_factor(ease: float, outcome: ReviewOutcome) -> float:
    """
    Adjust for correctness, then for confidence; clamp once and round to 2 decimals.
    """
    if outcome.is_correct:
        ease += EASE_CORRECT_BONUS
    else:
        ease -= EASE_INCORRECT_PENALTY

    if outcome.confidence_level < LOW_CONFIDENCE:
        ease -= LOW_CONFIDENCE_PENALTY
    elif outcome.confidence_level > HIGH_CONFIDENCE:
        ease += HIGH_CONFIDENCE_BONUS

    ease = min(max(ease, EASE_MIN), EASE_MAX)
    return round_half_up(ease, 2)


def next_interval(prior_interval: int, ease: float, is_correct: bool) -> int:
    """
    Days until the next review.

    A correct answer on a 1-day interval graduates to the fixed 6-day step;
    later correct answers multiply by the (already updated) ease factor.
    Any incorrect answer resets to 1 day.
    """
    if not is_correct:
        interval = INTERVAL_MIN
    elif prior_interval == 1:
        interval = GRADUATION_INTERVAL
    else:
        interval = int(round_half_up(prior_interval * ease))

    return min(max(interval, INTERVAL_MIN), INTERVAL_MAX)


def next_difficulty(current: Difficulty, review_count: int, ease: float) -> Difficulty:
    """
    At most one transition per review:

        new --(reviews >= 2)--> learning
        learning --(reviews >= 5 and ease >= 2.5)--> mastered
        mastered --(ease < 2.0)--> learning
    """
    if current is Difficulty.NEW and review_count >= LEARNING_AFTER_REVIEWS:
        return Difficulty.LEARNING
    if (
        current is Difficulty.LEARNING
        and review_count >= MASTERED_AFTER_REVIEWS
        and ease >= MASTERED_MIN_EASE
    ):
        return Difficulty.MASTERED
    if current is Difficulty.MASTERED and ease < REGRESSION_EASE:
        return Difficulty.LEARNING
    return current


def _smooth(prior: float | None, sample: float, digits: int) -> float:
    if prior is None:
        prior = sample
    value = round_half_up(prior * SMOOTHING_PRIOR + sample * SMOOTHING_SAMPLE, digits)
    return int(value) if digits == 0 else value


def _trailing_correct(history: tuple[ReviewEntry, ...]) -> int:
    """Correct answers at the end of the kept history, so never above HISTORY_SIZE."""
    streak = 0
    for entry in reversed(history):
        if not entry.correct:
            break
        streak += 1
    return streak
