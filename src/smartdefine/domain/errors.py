"""Error types raised by the SmartDefine engine and its adapters."""


class SmartDefineError(Exception):
    """Base class for all SmartDefine errors."""


class WordNotFoundError(SmartDefineError, LookupError):
    def __init__(self, category: str, word: str):
        self.category = category
        self.word = word
        super().__init__(f"Word '{word}' not found in category '{category}'")


class InvalidWordError(SmartDefineError, ValueError):
    """Raised when a word to be saved is empty after normalization."""


class StoreError(SmartDefineError):
    """Raised when stored data exists but cannot be decoded."""
