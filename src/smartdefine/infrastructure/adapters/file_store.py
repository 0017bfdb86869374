"""
File-backed word stores.

The whole collection is read and written as one document. Writes go to a
temporary sibling file that is then renamed over the target.
"""

import asyncio
import json
import logging
import os
from abc import abstractmethod
from pathlib import Path
from typing import Any

import yaml

from smartdefine.domain.errors import StoreError
from smartdefine.domain.models import Collection
from smartdefine.domain.ports import WordStore
from smartdefine.infrastructure.codec import collection_from_dict, collection_to_dict

logger = logging.getLogger(__name__)

# Browser-extension exports wrap the collection in this key
WORD_LISTS_KEY = "wordLists"


class FileWordStore(WordStore):
    """Base class for single-file stores; subclasses supply the document format."""

    def __init__(self, path: Path):
        self.path = Path(path)

    async def load(self) -> Collection:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, collection: Collection) -> None:
        await asyncio.to_thread(self._save_sync, collection)

    def _load_sync(self) -> Collection:
        if not self.path.exists():
            logger.debug(f"[store] {self.path} does not exist yet, starting empty")
            return {}

        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}

        try:
            data = self.decode(text)
        except (ValueError, yaml.YAMLError) as e:
            raise StoreError(f"Could not decode {self.path}: {e}") from e

        if isinstance(data, dict) and WORD_LISTS_KEY in data:
            data = data[WORD_LISTS_KEY]

        collection = collection_from_dict(data)
        logger.debug(
            f"[store] Loaded {sum(len(v) for v in collection.values())} words "
            f"in {len(collection)} categories from {self.path}"
        )
        return collection

    def _save_sync(self, collection: Collection) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(self.encode(collection_to_dict(collection)), encoding="utf-8")
        os.replace(tmp, self.path)
        logger.debug(f"[store] Saved {len(collection)} categories to {self.path}")

    @abstractmethod
    def decode(self, text: str) -> Any:
        pass

    @abstractmethod
    def encode(self, data: dict[str, Any]) -> str:
        pass


class JsonWordStore(FileWordStore):
    def decode(self, text: str) -> Any:
        return json.loads(text)

    def encode(self, data: dict[str, Any]) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class YamlWordStore(FileWordStore):
    def decode(self, text: str) -> Any:
        return yaml.safe_load(text)

    def encode(self, data: dict[str, Any]) -> str:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
