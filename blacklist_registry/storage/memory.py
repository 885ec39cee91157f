"""In-memory implementation of RegistryStore."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from blacklist_registry.dataset import load_dataset
from blacklist_registry.exceptions import DuplicatePosition, EntryNotFound
from blacklist_registry.models import Entry
from blacklist_registry.storage.base import ensure_unique_ordered
from blacklist_registry.validator import SchemaValidator

logger = logging.getLogger(__name__)


class InMemoryRegistryStore:
    """RegistryStore backed by a plain list.

    Entries are kept in a list rather than a dict keyed by position so that
    seeded data holding a duplicate position is surfaced by ``list_all``
    instead of being silently collapsed.
    """

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        self._entries: list[Entry] = list(entries)
        self._lock = asyncio.Lock()

    @classmethod
    def from_file(
        cls, path: str | Path, validator: SchemaValidator | None = None
    ) -> "InMemoryRegistryStore":
        """Seed a store from a JSON dataset dump.

        Args:
            path: Dataset file holding a JSON array of entries
            validator: Validator to gate the seed data (defaults to the packaged schema)

        Raises:
            DatasetError: If the file cannot be read
            SchemaViolation: If any entry in the dump is invalid
        """
        data = load_dataset(path)
        validator = validator or SchemaValidator.default()
        validator.validate_collection(data).raise_for_errors()
        store = cls(Entry.model_validate(doc) for doc in data)
        logger.info(f"Seeded in-memory registry with {len(store._entries)} entries from {path}")
        return store

    async def startup(self) -> None:
        logger.debug("In-memory registry store ready")

    async def shutdown(self) -> None:
        pass

    async def append(self, entry: Entry) -> Entry:
        async with self._lock:
            if any(e.position == entry.position for e in self._entries):
                raise DuplicatePosition(entry.position)
            self._entries.append(entry)
        return entry

    async def list_all(self) -> list[Entry]:
        entries = sorted(self._entries, key=lambda e: e.position)
        return ensure_unique_ordered(entries)

    async def get(self, position: int) -> Optional[Entry]:
        for entry in self._entries:
            if entry.position == position:
                return entry
        return None

    async def update(self, position: int, patch: Mapping[str, Any]) -> Entry:
        async with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.position == position:
                    updated = Entry.model_validate({**entry.to_document(), **patch})
                    self._entries[index] = updated
                    return updated
        raise EntryNotFound(position)
