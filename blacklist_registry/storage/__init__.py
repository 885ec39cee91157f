"""Registry store implementations and backend selection."""

import logging

from blacklist_registry.config import RegistrySettings
from blacklist_registry.storage.base import RegistryStore, ensure_unique_ordered
from blacklist_registry.storage.memory import InMemoryRegistryStore
from blacklist_registry.storage.mongo import MongoRegistryStore

logger = logging.getLogger(__name__)


def create_store(settings: RegistrySettings) -> RegistryStore:
    """Build the store selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        if settings.dataset_path:
            return InMemoryRegistryStore.from_file(settings.dataset_path)
        logger.warning("Using an empty in-memory registry store; data is not persisted")
        return InMemoryRegistryStore()
    return MongoRegistryStore(
        uri=settings.mongo_uri,
        database=settings.mongo_db,
        collection=settings.mongo_collection,
    )


__all__ = [
    "RegistryStore",
    "InMemoryRegistryStore",
    "MongoRegistryStore",
    "create_store",
    "ensure_unique_ordered",
]
