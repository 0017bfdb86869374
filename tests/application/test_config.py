from pathlib import Path

import pytest
from pydantic import ValidationError

from smartdefine.application.config import AppConfig, LearningSettings, resolve_config
from smartdefine.application.factory import get_word_store
from smartdefine.infrastructure.adapters import JsonWordStore, MemoryWordStore, YamlWordStore


def test_defaults(mock_home):
    config = resolve_config()

    assert config.store_path == mock_home / ".config/smartdefine/words.json"
    assert config.treat_missing_as_new is True
    assert config.default_limit == 20
    assert config.learning == LearningSettings()
    assert config.learning.daily_goal == 10
    assert config.learning.reminder_hour == 19


def test_env_overrides(mock_home, monkeypatch):
    monkeypatch.setenv("SMARTDEFINE_TREAT_MISSING_AS_NEW", "false")
    monkeypatch.setenv("SMARTDEFINE_LEARNING__DAILY_GOAL", "25")

    config = resolve_config()

    assert config.treat_missing_as_new is False
    assert config.learning.daily_goal == 25


def test_toml_file(mock_home, monkeypatch):
    cfg = mock_home / ".config/smartdefine/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('store_path = "~/words.yaml"\n\n[learning]\nreview_reminders = false\n')

    config = resolve_config()

    assert config.store_path == mock_home / "words.yaml"
    assert config.learning.review_reminders is False


def test_env_beats_toml(mock_home, monkeypatch):
    cfg = mock_home / ".smartdefine.toml"
    cfg.write_text("default_limit = 5\n")
    monkeypatch.setenv("SMARTDEFINE_DEFAULT_LIMIT", "7")

    assert resolve_config().default_limit == 7


def test_cli_overrides_win_and_none_is_ignored(mock_home, monkeypatch):
    monkeypatch.setenv("SMARTDEFINE_DEFAULT_LIMIT", "7")

    config = resolve_config({"default_limit": 3, "store_path": None})

    assert config.default_limit == 3
    assert config.store_path.name == "words.json"


def test_invalid_settings_rejected():
    with pytest.raises(ValidationError):
        LearningSettings(daily_goal=0)
    with pytest.raises(ValidationError):
        LearningSettings(reminder_hour=24)


@pytest.mark.parametrize(
    "backend,path,expected",
    [
        ("auto", "words.json", JsonWordStore),
        ("auto", "words.yaml", YamlWordStore),
        ("auto", "words.YML", YamlWordStore),
        ("json", "words.yaml", JsonWordStore),
        ("yaml", "words.txt", YamlWordStore),
        ("memory", "words.json", MemoryWordStore),
    ],
)
def test_store_factory(mock_home, backend, path, expected):
    config = AppConfig(store_backend=backend, store_path=Path(path))
    assert isinstance(get_word_store(config), expected)
