"""Storage interface for the registry collection.

The registry is a single flat collection keyed by ``position``. The core only
needs append, full ordered scan, lookup by position and a partial update;
anything else about the backing store is its own business.
"""

from typing import Any, Mapping, Optional, Protocol

from blacklist_registry.exceptions import DuplicatePosition
from blacklist_registry.models import Entry


class RegistryStore(Protocol):
    """Storage backend for registry entries.

    Implementations:
    - MongoDB (``MongoRegistryStore``)
    - In-memory (``InMemoryRegistryStore``, for tests and file-seeded runs)

    Example usage:
        ```python
        store = MongoRegistryStore(uri="mongodb://localhost", database="blacklist")
        await store.startup()
        await store.append(Entry(position=2, name="Raymond", status="active"))
        entries = await store.list_all()
        await store.shutdown()
        ```
    """

    async def startup(self) -> None:
        """Initialize the backend (connections, indexes).

        Raises:
            StoreUnavailable: If the backend cannot be reached
        """
        ...

    async def shutdown(self) -> None:
        """Release backend resources. Safe to call more than once."""
        ...

    async def append(self, entry: Entry) -> Entry:
        """Persist a validated entry.

        No identity is assigned beyond the entry's own ``position``. A single
        append is atomic; concurrent appends for different positions need no
        coordination.

        Raises:
            DuplicatePosition: If an entry already holds ``entry.position``
            StoreUnavailable: If the write cannot be completed
        """
        ...

    async def list_all(self) -> list[Entry]:
        """Return every entry sorted ascending by ``position``.

        Raises:
            DuplicatePosition: If stored data holds a position twice
            StoreUnavailable: If the backend is unreachable or returns
                undecodable documents
        """
        ...

    async def get(self, position: int) -> Optional[Entry]:
        """Return the entry at ``position``, or None."""
        ...

    async def update(self, position: int, patch: Mapping[str, Any]) -> Entry:
        """Apply a partial update to the entry at ``position``.

        Separate from ``append``: it never creates an entry. Applying the
        same patch twice leaves the same stored state.

        Raises:
            EntryNotFound: If no entry holds ``position``
            StoreUnavailable: If the write cannot be completed
        """
        ...


def ensure_unique_ordered(entries: list[Entry]) -> list[Entry]:
    """Check that ``entries`` are strictly ascending by position.

    Raises:
        DuplicatePosition: On two adjacent entries sharing a position
        ValueError: On entries out of order
    """
    for previous, current in zip(entries, entries[1:]):
        if current.position == previous.position:
            raise DuplicatePosition(current.position)
        if current.position < previous.position:
            raise ValueError(
                f"Entries out of order: {previous.position} before {current.position}"
            )
    return entries
