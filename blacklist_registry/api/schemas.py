"""Request and response schemas for API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from blacklist_registry.models import Entry

# =============================================================================
# Response Schemas
# =============================================================================


class EntryResponse(BaseModel):
    """Response for a successful write."""

    message: str
    entry: Entry


class RenderedPageResponse(BaseModel):
    """Client-facing page of rendered items.

    Key names follow what the list clients already read (``hasMore``).
    """

    model_config = ConfigDict(populate_by_name=True)

    items: list[dict[str, Any]] = Field(default_factory=list)
    total: int
    page: int
    limit: int
    protocol: str
    has_more: bool = Field(..., alias="hasMore")
    next: str | None = None


class ErrorDetail(BaseModel):
    path: str
    message: str


class ErrorResponse(BaseModel):
    detail: str
    error_code: str
    errors: list[ErrorDetail] = Field(default_factory=list)
