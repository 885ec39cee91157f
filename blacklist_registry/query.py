"""Read side of the registry.

``RegistryQueryService`` hands back stored entries exactly as the store
orders them. It never redacts or renames fields; that belongs to
``blacklist_registry.rendering``.
"""

import asyncio
import logging
from typing import Optional

from blacklist_registry.exceptions import (
    DuplicatePosition,
    EntryNotFound,
    RegistryError,
    StoreUnavailable,
)
from blacklist_registry.models import Entry, EntryStatus, RegistryPage, RegistryStats
from blacklist_registry.storage.base import RegistryStore, ensure_unique_ordered

logger = logging.getLogger(__name__)


class RegistryQueryService:
    """Fetches the ordered registry from a RegistryStore.

    Args:
        store: Backing registry store
        timeout: Seconds allowed for one full read; None waits indefinitely
    """

    def __init__(self, store: RegistryStore, timeout: Optional[float] = None):
        self.store = store
        self.timeout = timeout

    async def fetch_registry(self) -> list[Entry]:
        """Return every entry, ascending by position.

        Raises:
            StoreUnavailable: If the store fails, times out, or answers out of order
            DuplicatePosition: If two stored entries share a position
        """
        try:
            entries = await asyncio.wait_for(self.store.list_all(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Registry read timed out after {self.timeout}s")
            raise StoreUnavailable(f"Registry read timed out after {self.timeout}s") from e
        except RegistryError:
            raise
        except Exception as e:
            logger.error(f"Registry store failed during read: {e}")
            raise StoreUnavailable(f"Registry store failed: {e}") from e

        try:
            return ensure_unique_ordered(list(entries))
        except DuplicatePosition:
            logger.error("Registry read found a duplicate position")
            raise
        except ValueError as e:
            raise StoreUnavailable(f"Registry store returned a malformed response: {e}") from e

    async def fetch_entry(self, position: int) -> Entry:
        """Return the stored entry at ``position``.

        Raises:
            EntryNotFound: If no entry holds ``position``
            StoreUnavailable: If the store fails or times out
        """
        try:
            entry = await asyncio.wait_for(self.store.get(position), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Lookup of position {position} timed out after {self.timeout}s")
            raise StoreUnavailable(f"Registry read timed out after {self.timeout}s") from e
        except RegistryError:
            raise
        except Exception as e:
            logger.error(f"Registry store failed during lookup of {position}: {e}")
            raise StoreUnavailable(f"Registry store failed: {e}") from e
        if entry is None:
            raise EntryNotFound(position)
        return entry

    async def search(self, text: str) -> list[Entry]:
        """Entries whose name or status contains ``text``, case-insensitively.

        A query that is all digits also matches the entry at that position.
        An empty query returns the whole registry.
        """
        needle = text.strip().lower()
        entries = await self.fetch_registry()
        if not needle:
            return entries
        return [
            e
            for e in entries
            if needle in e.name.lower()
            or needle in e.status.value
            or (needle.isdigit() and int(needle) == e.position)
        ]

    async def fetch_window(self, min_position: int, max_position: int) -> list[Entry]:
        """Entries whose position lies within ``[min_position, max_position]``."""
        entries = await self.fetch_registry()
        return [e for e in entries if min_position <= e.position <= max_position]

    async def fetch_by_status(self, status: EntryStatus, limit: Optional[int] = None) -> list[Entry]:
        """The first ``limit`` entries (by position) with the given status."""
        if limit is not None and limit < 1:
            raise ValueError("limit must be a positive integer")
        matches = [e for e in await self.fetch_registry() if e.status is status]
        return matches[:limit] if limit is not None else matches

    async def fetch_page(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        min_position: Optional[int] = None,
        max_position: Optional[int] = None,
    ) -> RegistryPage:
        """Slice the ordered registry into pages.

        Args:
            page: 1-based page number
            limit: Page size; None returns everything on page 1
            min_position: Optional lower bound of the served window
            max_position: Optional upper bound of the served window

        Returns:
            RegistryPage with the slice and paging metadata
        """
        if page < 1:
            raise ValueError("page must be a positive integer")
        if limit is not None and limit < 1:
            raise ValueError("limit must be a positive integer")

        entries = await self.fetch_registry()
        if min_position is not None or max_position is not None:
            low = min_position if min_position is not None else 0
            high = max_position if max_position is not None else float("inf")
            entries = [e for e in entries if low <= e.position <= high]

        total = len(entries)
        size = limit if limit is not None else max(total, 1)
        start = (page - 1) * size
        end = page * size
        has_more = end < total
        return RegistryPage(
            items=entries[start:end],
            total=total,
            page=page,
            limit=size,
            has_more=has_more,
            next_page=page + 1 if has_more else None,
        )

    async def stats(self) -> RegistryStats:
        """Count entries per status over the whole registry."""
        entries = await self.fetch_registry()
        by_status = {status.value: 0 for status in EntryStatus}
        for entry in entries:
            by_status[entry.status.value] += 1
        return RegistryStats(total=len(entries), by_status=by_status)
