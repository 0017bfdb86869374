"""
Due-set selector.

Scans a collection, keeps the words that are due and match the requested
review type, scores them and returns the most urgent ones first.
"""

import logging
from datetime import datetime, timedelta

from smartdefine.application.mastery import normalize_record
from smartdefine.application.utils.clock import as_utc, utc_now
from smartdefine.domain.constants import (
    DEFAULT_REVIEW_LIMIT,
    DIFFICULT_EASE,
    DIFFICULTY_PRIORITY,
    LEGACY_DUE_OFFSET_SECONDS,
    LOW_EASE_PRIORITY,
    OVERDUE_DAY_WEIGHT,
    Difficulty,
    ReviewType,
)
from smartdefine.domain.models import Collection, DueWord, WordRecord

logger = logging.getLogger(__name__)

_REVIEW_TYPE_TIERS = {
    ReviewType.NEW: Difficulty.NEW,
    ReviewType.LEARNING: Difficulty.LEARNING,
    ReviewType.REVIEW: Difficulty.MASTERED,
}


def select_due(
    collection: Collection,
    review_type: ReviewType | str = ReviewType.ALL,
    limit: int = DEFAULT_REVIEW_LIMIT,
    now: datetime | None = None,
) -> list[DueWord]:
    """
    Return due words ranked by priority, highest first.

    Args:
        collection: Category name -> word records.
        review_type: all | new | learning | review | difficult.
        limit: Maximum number of words returned. 0 or negative yields [].
        now: Reference instant; defaults to the current UTC time.

    Returns:
        At most `limit` DueWord items sorted by non-increasing priority.
        Ties keep collection order (category order, then record order).
    """
    if limit <= 0:
        return []

    review_type = ReviewType(review_type)
    now = as_utc(now) if now else utc_now()
    due: list[DueWord] = []

    for category, records in collection.items():
        for raw in records:
            record = normalize_record(raw)
            due_at = effective_due_date(record, now)

            if now < due_at:
                continue
            if not matches_review_type(record, review_type):
                continue

            overdue_days = max(0.0, (now - due_at) / timedelta(days=1))
            due.append(
                DueWord(
                    record=record,
                    category=category,
                    priority=calculate_priority(record, overdue_days),
                    overdue_days=overdue_days,
                )
            )

    # sorted() is stable, so equal priorities keep collection order
    ranked = sorted(due, key=lambda item: item.priority, reverse=True)
    logger.debug(
        f"[selector] {len(due)} due ({review_type.value}), "
        f"returning {min(limit, len(due))}"
    )
    return ranked[:limit]


def effective_due_date(record: WordRecord, now: datetime) -> datetime:
    """
    Due date used for ranking. Records without scheduling data are treated as
    having become due one second ago, so imported words are never excluded.
    """
    if record.next_review is None:
        return now - timedelta(seconds=LEGACY_DUE_OFFSET_SECONDS)
    return as_utc(record.next_review)


def matches_review_type(record: WordRecord, review_type: ReviewType) -> bool:
    if review_type is ReviewType.ALL:
        return True
    if review_type is ReviewType.DIFFICULT:
        return record.ease_factor < DIFFICULT_EASE
    return record.difficulty is _REVIEW_TYPE_TIERS[review_type]


def calculate_priority(record: WordRecord, overdue_days: float) -> float:
    """
    Weighted urgency score:

        overdue_days * 10
        + 100 new / 50 learning / 10 mastered
        + 25 if ease factor < 2.0
    """
    priority = overdue_days * OVERDUE_DAY_WEIGHT
    priority += DIFFICULTY_PRIORITY.get(record.difficulty, 0)
    if record.ease_factor < DIFFICULT_EASE:
        priority += LOW_EASE_PRIORITY
    return priority
