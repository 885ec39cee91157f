"""
Write path for the registry.

Every candidate entry is validated against the schema definition before the
store sees it; a rejected write leaves the store untouched.
"""

import logging
from typing import Any, Mapping

from blacklist_registry.exceptions import EntryNotFound, FieldError, SchemaViolation
from blacklist_registry.models import Entry
from blacklist_registry.storage.base import RegistryStore
from blacklist_registry.validator import SchemaValidator

logger = logging.getLogger(__name__)

# Historical names for ``position`` still sent by older admin clients.
POSITION_ALIASES = ("guide", "order")

UPDATABLE_FIELDS = frozenset({"name", "status"})


def normalize_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Fold position aliases into ``position``.

    Values are taken as sent; nothing is coerced. When more than one of
    ``position``, ``order`` and ``guide`` is present they must agree.

    Raises:
        SchemaViolation: If the aliases carry different values
    """
    normalized = {k: v for k, v in payload.items() if k not in POSITION_ALIASES}
    candidates = [
        (key, payload[key]) for key in ("position", *POSITION_ALIASES) if key in payload
    ]
    if not candidates:
        return normalized

    value = candidates[0][1]
    for key, other in candidates[1:]:
        if other != value or type(other) is not type(value):
            raise SchemaViolation(
                [
                    FieldError(
                        "/position",
                        f"conflicting values: {candidates[0][0]}={value!r}, {key}={other!r}",
                    )
                ]
            )
    normalized["position"] = value
    return normalized


class EntryRegistry:
    """
    Validated write access to the registry store.

    Usage:
        ```python
        registry = EntryRegistry(store, SchemaValidator.default())
        entry = await registry.add_entry({"guide": 2, "name": "Raymond", "status": "active"})
        entry = await registry.update_entry(2, {"status": "captured"})
        ```
    """

    def __init__(self, store: RegistryStore, validator: SchemaValidator | None = None):
        """
        Args:
            store: Backing registry store
            validator: Schema validator (defaults to the packaged schema)
        """
        self.store = store
        self.validator = validator or SchemaValidator.default()

    async def add_entry(self, payload: Mapping[str, Any]) -> Entry:
        """Validate a candidate entry and append it to the store.

        Args:
            payload: Raw entry, possibly using ``guide``/``order`` for position

        Returns:
            The stored Entry

        Raises:
            SchemaViolation: If the candidate is malformed (nothing is written)
            DuplicatePosition: If the position is already taken
            StoreUnavailable: If the store cannot complete the append
        """
        try:
            candidate = normalize_payload(payload)
            self.validator.validate_entry(candidate).raise_for_errors()
        except SchemaViolation as e:
            logger.warning(f"Rejected entry: {e}")
            raise

        entry = Entry.model_validate(candidate)
        stored = await self.store.append(entry)
        logger.info(f"Added entry at position {stored.position} ({stored.status.value})")
        return stored

    async def update_entry(self, position: int, patch: Mapping[str, Any]) -> Entry:
        """Apply a partial update to an existing entry.

        Only ``name`` and ``status`` may change; position is the entry's
        identity. The merged entry is validated before anything is written,
        and re-applying the same patch yields the same entry.

        Raises:
            SchemaViolation: If the patch is empty, names other fields, or
                produces an invalid entry
            EntryNotFound: If no entry holds ``position``
            StoreUnavailable: If the store cannot complete the update
        """
        errors = [
            FieldError(f"/{key}", "cannot be updated")
            for key in patch
            if key not in UPDATABLE_FIELDS
        ]
        if not patch:
            errors.append(FieldError("/", "patch must name at least one field"))
        if errors:
            logger.warning(f"Rejected update for position {position}: {errors}")
            raise SchemaViolation(errors)

        current = await self.store.get(position)
        if current is None:
            raise EntryNotFound(position)

        merged = {**current.to_document(), **patch}
        result = self.validator.validate_entry(merged)
        if not result.valid:
            logger.warning(f"Rejected update for position {position}: {result.errors}")
            result.raise_for_errors()

        # Write every updatable field of the validated entry, not just the
        # patch, so the stored result is the entry that was validated even if
        # another update lands between the read and this write.
        updated = await self.store.update(
            position, {key: merged[key] for key in sorted(UPDATABLE_FIELDS)}
        )
        logger.info(f"Updated entry at position {position}: {sorted(patch)}")
        return updated
