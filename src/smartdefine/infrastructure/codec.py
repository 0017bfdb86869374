"""
Conversion between WordRecord objects and their persisted shape.

Stored records use camelCase keys and ISO-8601 timestamps, e.g.:

    {"word": "ephemeral", "difficulty": "learning", "easeFactor": 2.6,
     "interval": 6, "reviewCount": 1, "lastReviewed": "2026-10-10T08:00:00Z",
     "nextReview": "2026-10-16T08:00:00Z", ...}

Keys not listed in `_KNOWN_KEYS` are kept in `WordRecord.extra` and written
back untouched.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from smartdefine.domain.constants import Difficulty
from smartdefine.domain.errors import StoreError
from smartdefine.domain.models import Collection, DueWord, ReviewEntry, WordRecord

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {
    "word",
    "category",
    "explanation",
    "difficulty",
    "easeFactor",
    "interval",
    "reviewCount",
    "lastReviewed",
    "nextReview",
    "averageResponseTime",
    "confidenceScore",
    "performanceHistory",
    "streak",
    "accuracyRate",
    "notes",
    "context",
    "dateAdded",
}


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix accepted). Naive values are UTC."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(f"Ignoring unparseable timestamp: {value!r}")
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    """Millisecond-precision UTC ISO string, e.g. 2026-10-17T09:30:00.000Z."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_difficulty(value: Any) -> Difficulty | None:
    if value is None:
        return None
    try:
        return Difficulty(str(value).lower())
    except ValueError:
        logger.debug(f"Unknown difficulty {value!r}, treating as missing")
        return None


def record_from_dict(data: dict[str, Any], category: str) -> WordRecord:
    """Build a WordRecord from its stored form; missing scheduling fields stay None."""
    if not isinstance(data, dict) or not data.get("word"):
        raise StoreError(f"Invalid word entry in category '{category}': {data!r}")

    history = tuple(
        ReviewEntry(
            date=parse_timestamp(entry.get("date")) or datetime.now(timezone.utc),
            correct=bool(entry.get("correct")),
            response_time_ms=entry.get("responseTime") or 0,
            confidence=entry.get("confidence") or 0.0,
        )
        for entry in data.get("performanceHistory") or []
        if isinstance(entry, dict)
    )

    return WordRecord(
        word=str(data["word"]),
        category=category,
        explanation=data.get("explanation") or "",
        difficulty=parse_difficulty(data.get("difficulty")),
        ease_factor=_optional_float(data.get("easeFactor")),
        interval=_optional_int(data.get("interval")),
        review_count=_optional_int(data.get("reviewCount")),
        last_reviewed=parse_timestamp(data.get("lastReviewed")),
        next_review=parse_timestamp(data.get("nextReview")),
        average_response_time=_optional_float(data.get("averageResponseTime")),
        confidence_score=_optional_float(data.get("confidenceScore")),
        history=history,
        correct_streak=_optional_int(data.get("streak")) or 0,
        accuracy_rate=_optional_float(data.get("accuracyRate")),
        notes=data.get("notes"),
        context=data.get("context"),
        date_added=parse_timestamp(data.get("dateAdded")),
        extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
    )


def record_to_dict(record: WordRecord) -> dict[str, Any]:
    data: dict[str, Any] = dict(record.extra)
    data.update(
        {
            "word": record.word,
            "explanation": record.explanation,
            "notes": record.notes,
            "context": record.context,
            "dateAdded": format_timestamp(record.date_added),
            "difficulty": record.difficulty.value if record.difficulty else None,
            "easeFactor": record.ease_factor,
            "interval": record.interval,
            "reviewCount": record.review_count,
            "lastReviewed": format_timestamp(record.last_reviewed),
            "nextReview": format_timestamp(record.next_review),
            "averageResponseTime": record.average_response_time,
            "confidenceScore": record.confidence_score,
            "performanceHistory": [
                {
                    "date": format_timestamp(entry.date),
                    "correct": entry.correct,
                    "responseTime": entry.response_time_ms,
                    "confidence": entry.confidence,
                }
                for entry in record.history
            ],
            "streak": record.correct_streak,
            "accuracyRate": record.accuracy_rate,
        }
    )
    return data


def collection_from_dict(data: Any) -> Collection:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise StoreError(f"Expected a mapping of categories, got {type(data).__name__}")

    collection: Collection = {}
    for category, entries in data.items():
        if not isinstance(entries, list):
            raise StoreError(f"Category '{category}' is not a list of words")
        collection[str(category)] = [record_from_dict(e, str(category)) for e in entries]
    return collection


def collection_to_dict(collection: Collection) -> dict[str, list[dict[str, Any]]]:
    return {
        category: [record_to_dict(record) for record in records]
        for category, records in collection.items()
    }


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def due_word_to_dict(item: DueWord) -> dict[str, Any]:
    """Stored shape of the record plus its category and priority."""
    data = record_to_dict(item.record)
    data["category"] = item.category
    data["priority"] = round(item.priority, 4)
    return data
