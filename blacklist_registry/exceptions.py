"""Exceptions raised across the registry pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure.

    Attributes:
        path: JSON pointer to the offending field, e.g. ``/3/status``.
        message: Human-readable description of the violated rule.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path} {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


class RegistryError(Exception):
    """Base class for registry errors."""

    pass


class SchemaViolation(RegistryError):
    """Raised when a candidate entry or collection fails validation.

    Attributes:
        errors: Every field-level failure found, in discovery order.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(str(e) for e in self.errors[:3])
        if len(self.errors) > 3:
            summary += f"; ... ({len(self.errors) - 3} more)"
        super().__init__(f"Schema violation: {summary}")

    def to_list(self) -> list[dict[str, str]]:
        return [e.to_dict() for e in self.errors]


class StoreUnavailable(RegistryError):
    """Raised when the registry store cannot be reached or returns unparseable data."""

    pass


class DuplicatePosition(RegistryError):
    """Raised when two entries share a position.

    Attributes:
        position: The position held by more than one entry.
    """

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"Duplicate position {position} in registry")


class EntryNotFound(RegistryError):
    """Raised when an update targets a position that does not exist."""

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"Entry at position {position} not found")


class UnsupportedProtocolVersion(RegistryError):
    """Raised when rendering is requested for an unknown protocol version."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Unsupported protocol version: {value!r}")


class DatasetError(RegistryError):
    """Raised when a schema or dataset file cannot be read or parsed."""

    pass
