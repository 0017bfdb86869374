# Infrastructure Store Adapters Package
from .file_store import FileWordStore, JsonWordStore, YamlWordStore
from .memory_store import MemoryWordStore
from .notifier import LoggingNotifier

__all__ = [
    "FileWordStore",
    "JsonWordStore",
    "YamlWordStore",
    "MemoryWordStore",
    "LoggingNotifier",
]
