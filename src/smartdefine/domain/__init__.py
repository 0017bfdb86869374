# Domain Package
from .constants import Difficulty, ReviewType
from .errors import InvalidWordError, SmartDefineError, StoreError, WordNotFoundError
from .models import (
    Collection,
    DueWord,
    Recommendation,
    ReviewEntry,
    ReviewOutcome,
    StudyStats,
    WordRecord,
)
from .ports import Notifier, WordStore

__all__ = [
    "Collection",
    "Difficulty",
    "DueWord",
    "InvalidWordError",
    "Notifier",
    "Recommendation",
    "ReviewEntry",
    "ReviewOutcome",
    "ReviewType",
    "SmartDefineError",
    "StoreError",
    "StudyStats",
    "WordNotFoundError",
    "WordRecord",
    "WordStore",
]
