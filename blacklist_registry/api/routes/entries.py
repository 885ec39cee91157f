"""Entries router - the ordered registry as stored, before any redaction."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from blacklist_registry.api.dependencies import get_query_service, get_registry_settings
from blacklist_registry.config import RegistrySettings
from blacklist_registry.models import Entry, EntryStatus, RegistryStats
from blacklist_registry.query import RegistryQueryService

router = APIRouter()


@router.get("", response_model=List[Entry])
async def list_entries(
    query: RegistryQueryService = Depends(get_query_service),
) -> List[Entry]:
    """List every entry, ascending by position."""
    return await query.fetch_registry()


@router.get("/stats", response_model=RegistryStats)
async def entry_stats(
    query: RegistryQueryService = Depends(get_query_service),
) -> RegistryStats:
    """Count entries per status."""
    return await query.stats()


@router.get("/status/{status}", response_model=List[Entry])
async def list_entries_by_status(
    status: str,
    limit: Optional[int] = Query(default=None, ge=1),
    query: RegistryQueryService = Depends(get_query_service),
    settings: RegistrySettings = Depends(get_registry_settings),
) -> List[Entry]:
    """List the first entries holding a status (case-insensitive)."""
    try:
        entry_status = EntryStatus(status.lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown status '{status}'")
    return await query.fetch_by_status(entry_status, limit or settings.status_limit)


@router.get("/search", response_model=List[Entry])
async def search_entries(
    q: str = Query(default="", description="Text matched against name and status"),
    query: RegistryQueryService = Depends(get_query_service),
) -> List[Entry]:
    """Case-insensitive search over names and statuses; an empty query lists everything."""
    return await query.search(q)


# Declared last so the fixed paths above are matched first.
@router.get("/{position}", response_model=Entry)
async def get_entry(
    position: int,
    query: RegistryQueryService = Depends(get_query_service),
) -> Entry:
    """Get the entry at a position."""
    return await query.fetch_entry(position)
