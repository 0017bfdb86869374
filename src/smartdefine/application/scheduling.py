"""
Scheduling service: application layer orchestrator.

The single entry point for UI, notification and export callers. Every call
re-reads the collection from the store; the service keeps no state of its own.
"""

import logging
from dataclasses import replace
from datetime import datetime

from smartdefine.application import mastery
from smartdefine.application.config import LearningSettings
from smartdefine.application.recommendations import generate_recommendations
from smartdefine.application.selector import select_due
from smartdefine.application.stats import StatsAggregator
from smartdefine.application.utils.clock import as_utc, utc_now
from smartdefine.domain.constants import (
    DEFAULT_REVIEW_LIMIT,
    EASE_DEFAULT,
    INTERVAL_DEFAULT,
    Difficulty,
    ReviewType,
)
from smartdefine.domain.errors import InvalidWordError, WordNotFoundError
from smartdefine.domain.models import (
    Collection,
    DueWord,
    Recommendation,
    ReviewOutcome,
    StudyStats,
    WordRecord,
)
from smartdefine.domain.ports import WordStore

logger = logging.getLogger(__name__)


def new_word_record(
    word: str,
    category: str,
    explanation: str = "",
    notes: str | None = None,
    context: str | None = None,
    now: datetime | None = None,
) -> WordRecord:
    """
    Build a freshly saved word: new, default ease and interval, due immediately.
    """
    canonical = word.strip().lower()
    if not canonical:
        raise InvalidWordError("Word must not be empty")

    now = as_utc(now) if now else utc_now()
    return WordRecord(
        word=canonical,
        category=category,
        explanation=explanation,
        difficulty=Difficulty.NEW,
        ease_factor=EASE_DEFAULT,
        interval=INTERVAL_DEFAULT,
        review_count=0,
        last_reviewed=None,
        next_review=now,
        notes=notes,
        context=context,
        date_added=now,
    )


class SchedulingService:
    """
    Composes the mastery updater, due-set selector and statistics aggregator
    over a WordStore.

    Follows Dependency Inversion: depends on the WordStore abstraction,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        store: WordStore,
        aggregator: StatsAggregator | None = None,
    ):
        """
        Args:
            store: The repository (port) holding the word collection.
            aggregator: Optional custom aggregator; uses default if not provided.
        """
        self._store = store
        self._aggregator = aggregator or StatsAggregator()

    async def process_review(
        self,
        record: WordRecord,
        outcome: ReviewOutcome,
        now: datetime | None = None,
    ) -> WordRecord:
        """
        Apply a review outcome and persist the updated record.

        Known limitation: this is a read-modify-write of the whole collection.
        Two reviews processed concurrently (for the same or different words)
        both start from the same snapshot, so the last save wins and the other
        update is lost. Spaced-repetition state self-corrects on the next review.

        Returns:
            The updated record, as stored.
        """
        updated = mastery.update(record, outcome, now=now)

        collection = await self._store.load()
        records = collection.setdefault(record.category, [])
        index = _find_index(records, record.key)
        if index is None:
            logger.warning(
                f"'{record.word}' was not in category '{record.category}', adding it"
            )
            records.append(updated)
        else:
            records[index] = updated

        await self._store.save(collection)
        logger.info(
            f"Reviewed '{updated.word}' ({'correct' if outcome.is_correct else 'incorrect'}): "
            f"{updated.difficulty.value}, next in {updated.interval}d"
        )
        return updated

    async def review_word(
        self,
        category: str,
        word: str,
        outcome: ReviewOutcome,
        now: datetime | None = None,
    ) -> WordRecord:
        """Look up a stored word and process a review for it."""
        record = await self.find_word(category, word)
        return await self.process_review(record, outcome, now=now)

    async def get_due(
        self,
        review_type: ReviewType | str = ReviewType.ALL,
        limit: int = DEFAULT_REVIEW_LIMIT,
        now: datetime | None = None,
    ) -> list[DueWord]:
        collection = await self._store.load()
        return select_due(collection, review_type=review_type, limit=limit, now=now)

    async def get_stats(self, now: datetime | None = None) -> StudyStats:
        collection = await self._store.load()
        return self._aggregator.aggregate(collection, now=now)

    async def get_recommendations(
        self,
        settings: LearningSettings | None = None,
        now: datetime | None = None,
    ) -> list[Recommendation]:
        stats = await self.get_stats(now=now)
        return generate_recommendations(stats, settings or LearningSettings())

    async def find_word(self, category: str, word: str) -> WordRecord:
        collection = await self._store.load()
        records = collection.get(category, [])
        index = _find_index(records, word.strip().lower())
        if index is None:
            raise WordNotFoundError(category, word)
        return records[index]

    async def add_word(
        self,
        word: str,
        category: str,
        explanation: str = "",
        notes: str | None = None,
        context: str | None = None,
        now: datetime | None = None,
    ) -> WordRecord:
        """
        Save a word to a category.

        Saving a word that already exists starts it over as new, keeping only
        its original date_added.
        """
        record = new_word_record(word, category, explanation, notes, context, now=now)

        collection = await self._store.load()
        records = collection.setdefault(category, [])
        index = _find_index(records, record.key)
        if index is None:
            records.append(record)
            logger.info(f"Added '{record.word}' to '{category}'")
        else:
            previous = records[index]
            if previous.date_added:
                record = replace(record, date_added=previous.date_added)
            records[index] = record
            logger.info(f"Reset '{record.word}' in '{category}'")

        await self._store.save(collection)
        return record

    async def delete_word(self, category: str, word: str) -> None:
        collection = await self._store.load()
        records = collection.get(category, [])
        index = _find_index(records, word.strip().lower())
        if index is None:
            raise WordNotFoundError(category, word)

        del records[index]
        if not records:
            del collection[category]

        await self._store.save(collection)
        logger.info(f"Deleted '{word}' from '{category}'")

    async def load_collection(self) -> Collection:
        return await self._store.load()


def _find_index(records: list[WordRecord], key: str) -> int | None:
    for i, record in enumerate(records):
        if record.key == key:
            return i
    return None
