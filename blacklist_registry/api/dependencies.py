"""FastAPI dependencies for dependency injection.

Holds one store per process. Query and write services are stateless
wrappers around it and are built per request.
"""

import logging
from typing import Optional

from fastapi import Depends

from blacklist_registry.config import RegistrySettings, get_settings
from blacklist_registry.query import RegistryQueryService
from blacklist_registry.registry import EntryRegistry
from blacklist_registry.storage import RegistryStore, create_store
from blacklist_registry.validator import SchemaValidator

logger = logging.getLogger(__name__)

# Global singletons
_store: Optional[RegistryStore] = None
_validator: Optional[SchemaValidator] = None


def get_registry_settings() -> RegistrySettings:
    return get_settings()


def get_validator() -> SchemaValidator:
    """Get the SchemaValidator singleton for the packaged schema."""
    global _validator
    if _validator is None:
        _validator = SchemaValidator.default()
        logger.debug(f"Loaded registry schema version {_validator.version}")
    return _validator


async def get_store() -> RegistryStore:
    """Get the RegistryStore singleton, starting it on first use."""
    global _store
    if _store is None:
        settings = get_settings()
        logger.debug(f"Initializing registry store backend={settings.store_backend}")
        store = create_store(settings)
        await store.startup()
        _store = store
        logger.info(f"Registry store initialized: backend={settings.store_backend}")
    return _store


async def get_query_service(
    store: RegistryStore = Depends(get_store),
    settings: RegistrySettings = Depends(get_registry_settings),
) -> RegistryQueryService:
    return RegistryQueryService(store, timeout=settings.store_timeout_seconds)


async def get_entry_registry(
    store: RegistryStore = Depends(get_store),
    validator: SchemaValidator = Depends(get_validator),
) -> EntryRegistry:
    return EntryRegistry(store, validator)


async def cleanup() -> None:
    """Cleanup resources on shutdown."""
    global _store
    if _store is not None:
        await _store.shutdown()
        _store = None
    logger.info("Registry store shut down")
