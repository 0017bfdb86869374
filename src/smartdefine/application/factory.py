"""
Store factory.
Centralizes the logic for selecting the appropriate WordStore adapter.
"""

import logging

from smartdefine.application.config import AppConfig
from smartdefine.domain.ports import WordStore
from smartdefine.infrastructure.adapters import JsonWordStore, MemoryWordStore, YamlWordStore

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def get_word_store(config: AppConfig) -> WordStore:
    """
    Returns the WordStore implementation for the configured backend.
    """
    # 1. Manual selection
    if config.store_backend == "memory":
        return MemoryWordStore()

    if config.store_backend == "yaml":
        return YamlWordStore(config.store_path)

    if config.store_backend == "json":
        return JsonWordStore(config.store_path)

    # 2. Auto selection by file suffix
    if config.store_path.suffix.lower() in _YAML_SUFFIXES:
        logger.debug(f"Store: YAML ({config.store_path})")
        return YamlWordStore(config.store_path)

    logger.debug(f"Store: JSON ({config.store_path})")
    return JsonWordStore(config.store_path)
