"""Blacklist Registry - ordered public registry with redaction-aware rendering.

This package provides the entry model, schema validation, the registry
store contract and its implementations, the read and write services, and
the rendering adapter shared by every list client.
"""

from blacklist_registry.exceptions import (
    DuplicatePosition,
    EntryNotFound,
    FieldError,
    SchemaViolation,
    StoreUnavailable,
    UnsupportedProtocolVersion,
)
from blacklist_registry.models import Entry, EntryStatus
from blacklist_registry.query import RegistryQueryService
from blacklist_registry.registry import EntryRegistry
from blacklist_registry.rendering import ProtocolVersion, render, render_item
from blacklist_registry.storage import InMemoryRegistryStore, MongoRegistryStore
from blacklist_registry.validator import SchemaValidator, ValidationResult

__all__ = [
    "Entry",
    "EntryStatus",
    "SchemaValidator",
    "ValidationResult",
    "EntryRegistry",
    "RegistryQueryService",
    "ProtocolVersion",
    "render",
    "render_item",
    "InMemoryRegistryStore",
    "MongoRegistryStore",
    "FieldError",
    "SchemaViolation",
    "StoreUnavailable",
    "DuplicatePosition",
    "EntryNotFound",
    "UnsupportedProtocolVersion",
]
