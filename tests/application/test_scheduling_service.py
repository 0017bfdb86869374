from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from smartdefine.application.config import LearningSettings
from smartdefine.application.scheduling import SchedulingService, new_word_record
from smartdefine.domain.constants import Difficulty, ReviewType
from smartdefine.domain.errors import InvalidWordError, WordNotFoundError
from smartdefine.domain.models import ReviewOutcome
from smartdefine.infrastructure.adapters import MemoryWordStore


@pytest.fixture
def mock_store():
    store = AsyncMock()
    store.load.return_value = {}
    return store


def test_new_word_record_defaults(now):
    record = new_word_record("  Ephemeral ", "GRE", "lasting a short time", now=now)

    assert record.word == "ephemeral"
    assert record.category == "GRE"
    assert record.difficulty is Difficulty.NEW
    assert record.ease_factor == 2.5
    assert record.interval == 1
    assert record.review_count == 0
    assert record.last_reviewed is None
    assert record.next_review == now
    assert record.date_added == now


def test_new_word_record_rejects_blank_word(now):
    with pytest.raises(InvalidWordError):
        new_word_record("   ", "GRE", now=now)


@pytest.mark.asyncio
async def test_process_review_persists_updated_record(make_record, now):
    original = make_record("ephemeral")
    store = MemoryWordStore({"General": [make_record("other"), original]})
    service = SchedulingService(store)

    updated = await service.process_review(original, ReviewOutcome(True), now=now)

    assert updated.interval == 6
    saved = (await store.load())["General"]
    assert [r.word for r in saved] == ["other", "ephemeral"]
    assert saved[1] == updated
    assert store.save_count == 1


@pytest.mark.asyncio
async def test_process_review_adds_record_missing_from_store(make_record, now):
    store = MemoryWordStore()
    service = SchedulingService(store)

    await service.process_review(make_record("lost", category="Misc"), ReviewOutcome(True), now=now)

    saved = await store.load()
    assert [r.word for r in saved["Misc"]] == ["lost"]


@pytest.mark.asyncio
async def test_review_word_looks_up_case_insensitively(make_record, now):
    store = MemoryWordStore({"General": [make_record("ephemeral")]})
    service = SchedulingService(store)

    updated = await service.review_word("General", "Ephemeral", ReviewOutcome(False), now=now)

    assert updated.review_count == 1
    assert updated.interval == 1


@pytest.mark.asyncio
async def test_review_word_unknown(memory_store, now):
    service = SchedulingService(memory_store)

    with pytest.raises(WordNotFoundError):
        await service.review_word("General", "nothing", ReviewOutcome(True), now=now)


@pytest.mark.asyncio
async def test_get_due_reads_store_and_ranks(make_record, now, days_ago):
    store = MemoryWordStore(
        {
            "General": [
                make_record("later", next_review=now + timedelta(days=1)),
                make_record("overdue", next_review=days_ago(3)),
                make_record("learning", difficulty=Difficulty.LEARNING),
            ]
        }
    )
    service = SchedulingService(store)

    due = await service.get_due(ReviewType.ALL, 10, now=now)

    assert [item.record.word for item in due] == ["overdue", "learning"]
    assert due[0].priority == pytest.approx(130)


@pytest.mark.asyncio
async def test_get_stats_on_empty_store(mock_store, now):
    service = SchedulingService(mock_store)

    stats = await service.get_stats(now=now)

    assert stats.total_words == 0
    assert stats.overdue_words == 0
    assert stats.current_streak == 0
    mock_store.load.assert_awaited_once()


@pytest.mark.asyncio
async def test_store_errors_propagate_unchanged(mock_store, now):
    mock_store.load.side_effect = OSError("disk gone")
    service = SchedulingService(mock_store)

    with pytest.raises(OSError, match="disk gone"):
        await service.get_due(now=now)

    # no retry
    mock_store.load.assert_awaited_once()


@pytest.mark.asyncio
async def test_save_failure_surfaces_to_caller(mock_store, make_record, now):
    mock_store.save.side_effect = OSError("read-only")
    service = SchedulingService(mock_store)

    with pytest.raises(OSError):
        await service.process_review(make_record(), ReviewOutcome(True), now=now)


@pytest.mark.asyncio
async def test_add_word_appends_and_saves(memory_store, now):
    service = SchedulingService(memory_store)

    record = await service.add_word("Laconic", "GRE", "brief", context="a laconic reply", now=now)

    saved = await memory_store.load()
    assert saved["GRE"] == [record]
    assert record.context == "a laconic reply"


@pytest.mark.asyncio
async def test_add_existing_word_resets_but_keeps_date_added(make_record, now, days_ago):
    reviewed = make_record(
        "laconic",
        category="GRE",
        difficulty=Difficulty.MASTERED,
        review_count=9,
        date_added=days_ago(40),
    )
    store = MemoryWordStore({"GRE": [reviewed]})
    service = SchedulingService(store)

    record = await service.add_word("laconic", "GRE", "new explanation", now=now)

    assert record.difficulty is Difficulty.NEW
    assert record.review_count == 0
    assert record.date_added == days_ago(40)
    assert len((await store.load())["GRE"]) == 1


@pytest.mark.asyncio
async def test_delete_word_removes_empty_category(make_record, now):
    store = MemoryWordStore({"GRE": [make_record("laconic", category="GRE")]})
    service = SchedulingService(store)

    await service.delete_word("GRE", "LACONIC")

    assert await store.load() == {}


@pytest.mark.asyncio
async def test_delete_unknown_word(memory_store):
    service = SchedulingService(memory_store)

    with pytest.raises(WordNotFoundError) as exc:
        await service.delete_word("GRE", "laconic")

    assert exc.value.category == "GRE"
    assert memory_store.save_count == 0


@pytest.mark.asyncio
async def test_get_recommendations(make_record, now):
    store = MemoryWordStore({"General": [make_record("a"), make_record("b")]})
    service = SchedulingService(store)

    recs = await service.get_recommendations(LearningSettings(daily_goal=3), now=now)

    assert [r.type for r in recs] == ["daily_goal", "overdue", "new_words"]
    assert recs[0].count == 3
