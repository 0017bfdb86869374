from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from smartdefine.domain.constants import (
    DEFAULT_DAILY_GOAL,
    DEFAULT_OVERDUE_CHECK_MINUTES,
    DEFAULT_REMINDER_HOUR,
    DEFAULT_REVIEW_LIMIT,
)


def config_dir() -> Path:
    return Path.home() / ".config/smartdefine"


def config_files() -> list[Path]:
    home = Path.home()
    return [config_dir() / "config.toml", home / ".smartdefine.toml"]


class LearningSettings(BaseModel):
    """
    Learner preferences consumed by the reminder task and recommendations.
    The scheduling functions themselves never read these.
    """

    review_reminders: bool = True
    daily_goal: int = Field(default=DEFAULT_DAILY_GOAL, ge=1)
    context_aware_definitions: bool = True
    save_to_word_list: bool = True
    spaced_repetition: bool = True
    reminder_hour: int = Field(default=DEFAULT_REMINDER_HOUR, ge=0, le=23)
    overdue_check_minutes: int = Field(default=DEFAULT_OVERDUE_CHECK_MINUTES, ge=1)


class AppConfig(BaseSettings):
    """
    Configuration model for smartdefine.
    Supports loading from:
    1. Environment variables (SMARTDEFINE_*, nested with __)
    2. Config file (~/.config/smartdefine/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="SMARTDEFINE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Storage
    store_path: Path = Field(default_factory=lambda: config_dir() / "words.json")
    store_backend: Literal["auto", "json", "yaml", "memory"] = "auto"
    log_dir: Path = Field(default_factory=lambda: config_dir() / "logs")

    # Scheduling
    treat_missing_as_new: bool = True
    default_limit: int = Field(default=DEFAULT_REVIEW_LIMIT, ge=1)
    badge_limit: int = Field(default=1000, ge=1)

    learning: LearningSettings = Field(default_factory=LearningSettings)

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("store_path", "log_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/smartdefine/config.toml (if exists)
    3. Environment variables (SMARTDEFINE_*)
    4. cli_overrides (passed from Typer), None values ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
