"""In-process word store. Useful for tests and throwaway sessions."""

import copy

from smartdefine.domain.models import Collection
from smartdefine.domain.ports import WordStore


class MemoryWordStore(WordStore):
    def __init__(self, collection: Collection | None = None):
        self._collection: Collection = copy.deepcopy(collection or {})
        self.save_count = 0

    async def load(self) -> Collection:
        # Callers get their own lists, like a real store would hand out.
        return {category: list(records) for category, records in self._collection.items()}

    async def save(self, collection: Collection) -> None:
        self._collection = {category: list(records) for category, records in collection.items()}
        self.save_count += 1
