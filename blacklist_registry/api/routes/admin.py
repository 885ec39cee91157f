"""Admin router - appends and updates."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from blacklist_registry.api.dependencies import get_entry_registry
from blacklist_registry.api.schemas import EntryResponse, ErrorResponse
from blacklist_registry.registry import EntryRegistry

router = APIRouter()

_WRITE_ERRORS = {
    400: {"model": ErrorResponse, "description": "Schema violation"},
    409: {"model": ErrorResponse, "description": "Position already taken"},
    503: {"model": ErrorResponse, "description": "Registry store unavailable"},
}


@router.post(
    "/entries",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
)
@router.post(
    "/add-data",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def add_entry(
    payload: Dict[str, Any] = Body(...),
    registry: EntryRegistry = Depends(get_entry_registry),
) -> EntryResponse:
    """Append an entry. ``guide`` and ``order`` are accepted for ``position``."""
    entry = await registry.add_entry(payload)
    return EntryResponse(message="Name added successfully to the list", entry=entry)


@router.put(
    "/entries/{position}",
    response_model=EntryResponse,
    responses={**_WRITE_ERRORS, 404: {"model": ErrorResponse, "description": "Not found"}},
)
async def update_entry(
    position: int,
    patch: Dict[str, Any] = Body(...),
    registry: EntryRegistry = Depends(get_entry_registry),
) -> EntryResponse:
    """Update ``name`` and/or ``status`` of an existing entry."""
    entry = await registry.update_entry(position, patch)
    return EntryResponse(message="Item updated successfully", entry=entry)
