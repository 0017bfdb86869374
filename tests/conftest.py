import os
from datetime import datetime, timedelta, timezone

import pytest

from smartdefine.domain.constants import Difficulty
from smartdefine.domain.models import WordRecord
from smartdefine.infrastructure.adapters import MemoryWordStore

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    """Factory for word records with scheduling defaults filled in."""

    def _make(word="ephemeral", category="General", **overrides):
        fields = {
            "difficulty": Difficulty.NEW,
            "ease_factor": 2.5,
            "interval": 1,
            "review_count": 0,
            "next_review": NOW,
        }
        fields.update(overrides)
        return WordRecord(word=word, category=category, **fields)

    return _make


@pytest.fixture
def days_ago():
    def _days_ago(days: float) -> datetime:
        return NOW - timedelta(days=days)

    return _days_ago


@pytest.fixture
def memory_store():
    return MemoryWordStore()


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("SMARTDEFINE_"):
            monkeypatch.delenv(key)
    return home
