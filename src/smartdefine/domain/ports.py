"""
Ports (interfaces) for the review engine.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Collection


class WordStore(ABC):
    """
    Port for durable storage of the learner's word collection.

    The full collection is the unit of transfer; there are no partial updates.

    Implementations:
        - JsonWordStore / YamlWordStore: a single file on disk.
        - MemoryWordStore: process-local, for tests and ephemeral use.
    """

    @abstractmethod
    async def load(self) -> Collection:
        """
        Load every category and its word records.

        Returns:
            Mapping of category name to records. Empty if nothing is stored yet.
        """
        pass

    @abstractmethod
    async def save(self, collection: Collection) -> None:
        """
        Replace the stored collection with the given one.

        Args:
            collection: Mapping of category name to records.
        """
        pass


class Notifier(ABC):
    """
    Port for user-facing reminders (desktop notification, badge, chat message).
    """

    @abstractmethod
    async def notify(self, title: str, message: str) -> None:
        pass

    @abstractmethod
    async def set_badge(self, count: int) -> None:
        """Show `count` on the badge; 0 clears it."""
        pass
