"""Data models for registry entries and the read-side projections built from them."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Largest value a MongoDB document can hold in an int64 field.
MAX_POSITION = 2**63 - 1


class EntryStatus(str, Enum):
    active = "active"
    deceased = "deceased"
    incarcerated = "incarcerated"
    captured = "captured"
    redacted = "redacted"


class Entry(BaseModel):
    """A single registry record.

    ``position`` is the only ordering key and the only identity an entry has.
    Entries are frozen once built; changes go through the update path and
    produce a new instance.
    """

    model_config = ConfigDict(frozen=True)

    position: int = Field(
        ..., ge=0, le=MAX_POSITION, description="Unique sequence position, defines display order"
    )
    name: str = Field(default="", description="Human-readable alias, empty only for redacted entries")
    status: EntryStatus = Field(..., description="Lifecycle status")

    @property
    def is_redacted(self) -> bool:
        return self.status is EntryStatus.redacted

    def to_document(self) -> dict[str, Any]:
        """Return the persisted shape ``{position, name, status}``."""
        return {"position": self.position, "name": self.name, "status": self.status.value}


class RegistryPage(BaseModel):
    """One page of the ordered collection."""

    items: list[Entry] = Field(default_factory=list)
    total: int = Field(..., description="Number of entries across all pages")
    page: int = Field(..., description="1-based page number")
    limit: int = Field(..., description="Page size used for slicing")
    has_more: bool = Field(..., description="True when a later page holds entries")
    next_page: int | None = Field(default=None, description="Next page number, if any")


class RegistryStats(BaseModel):
    """Entry counts for the whole collection."""

    total: int
    by_status: dict[str, int] = Field(default_factory=dict)
