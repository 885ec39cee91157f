"""
Schema validator for registry entries.

- validates a single candidate entry before it reaches the store
- validates a whole collection for the offline audit
- reports every violation, never just the first
- detects repeated positions across a collection

The packaged ``registry.schema.json`` is the one definition of a valid entry
and is shared by the write path and the audit.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import SchemaError, ValidationError

from blacklist_registry.dataset import load_json
from blacklist_registry.exceptions import DatasetError, FieldError, SchemaViolation
from blacklist_registry.models import Entry

logger = logging.getLogger(__name__)

SCHEMA_RESOURCE = "registry.schema.json"

# Stock jsonschema wording for these rules names the regex, not the intent.
_MESSAGES = {
    ("name", "pattern"): "must not be empty unless status is redacted",
    ("name", "required"): "is required unless status is redacted",
}

_TYPE_NAMES = {
    "array": "an array",
    "boolean": "a boolean",
    "integer": "an integer",
    "null": "null",
    "number": "a number",
    "object": "an object",
    "string": "a string",
}


def _is_strict_integer(checker: Any, instance: Any) -> bool:
    return isinstance(instance, int) and not isinstance(instance, bool)


# Draft 2020-12 counts 5.0 as an integer; positions must be real ints so that
# 5 and 5.0 cannot sit side by side as distinct entries.
RegistryValidator = validators.extend(
    Draft202012Validator,
    type_checker=Draft202012Validator.TYPE_CHECKER.redefine("integer", _is_strict_integer),
)


@dataclass
class ValidationResult:
    """Outcome of a validation run. Empty ``errors`` means valid."""

    errors: list[FieldError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise ``SchemaViolation`` carrying every error, if there are any."""
        if self.errors:
            raise SchemaViolation(self.errors)


def _pointer(parts: Sequence[Any]) -> str:
    if not parts:
        return "/"
    return "".join(f"/{p}" for p in parts)


@lru_cache(maxsize=1)
def _packaged_schema() -> str:
    return (resources.files("blacklist_registry") / "data" / SCHEMA_RESOURCE).read_text(
        encoding="utf-8"
    )


class SchemaValidator:
    """Validates entries and collections against a registry schema definition.

    The definition must describe the collection at its root and the entry
    shape under ``$defs/entry``.
    """

    def __init__(self, schema: Mapping[str, Any]):
        """Compile validators for a schema definition.

        Args:
            schema: Parsed JSON Schema (Draft 2020-12)

        Raises:
            DatasetError: If the definition is not a usable schema
        """
        if not isinstance(schema, Mapping):
            raise DatasetError("Schema definition must be a JSON object")
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise DatasetError(f"Invalid schema definition: {e.message}") from e

        defs = schema.get("$defs", {})
        if "entry" not in defs:
            raise DatasetError("Schema definition has no '$defs/entry'")

        self.schema = dict(schema)
        self.version = schema.get("version")
        self._collection_validator = RegistryValidator(self.schema)
        self._entry_validator = RegistryValidator(
            {"$defs": defs, "$ref": "#/$defs/entry"}
        )

    @classmethod
    def default(cls) -> "SchemaValidator":
        """Validator for the packaged schema definition."""
        return cls(json.loads(_packaged_schema()))

    @classmethod
    def from_path(cls, path: str | Path) -> "SchemaValidator":
        """Validator for a schema definition stored on disk."""
        return cls(load_json(path, "schema"))

    def validate(self, candidate: Any) -> ValidationResult:
        """Validate a single entry (mapping) or a collection (list of entries).

        Args:
            candidate: Entry mapping, ``Entry`` model, or list of entries

        Returns:
            ValidationResult listing every violation found
        """
        if isinstance(candidate, (Mapping, Entry)):
            return self.validate_entry(candidate)
        if isinstance(candidate, Sequence) and not isinstance(candidate, (str, bytes)):
            return self.validate_collection(candidate)
        return ValidationResult([FieldError("/", "must be an object or an array")])

    def validate_entry(self, candidate: Any) -> ValidationResult:
        if isinstance(candidate, Entry):
            candidate = candidate.to_document()
        return ValidationResult(self._collect(self._entry_validator, candidate))

    def validate_collection(self, candidate: Any) -> ValidationResult:
        if isinstance(candidate, Sequence) and not isinstance(candidate, (str, bytes)):
            candidate = [
                item.to_document() if isinstance(item, Entry) else item
                for item in candidate
            ]
        errors = self._collect(self._collection_validator, candidate)
        if isinstance(candidate, list):
            errors.extend(_duplicate_positions(candidate))
        if errors:
            logger.debug(f"Collection validation found {len(errors)} violation(s)")
        return ValidationResult(errors)

    def _collect(self, validator: Any, instance: Any) -> list[FieldError]:
        errors: list[FieldError] = []
        seen: set[FieldError] = set()
        for error in validator.iter_errors(instance):
            for field_error in _field_errors(error):
                if field_error not in seen:
                    seen.add(field_error)
                    errors.append(field_error)
        return errors


def _field_errors(error: ValidationError) -> list[FieldError]:
    """Translate one jsonschema error into field-level errors.

    ``required`` and ``additionalProperties`` are reported on the object by
    jsonschema; they are moved onto the offending field here.
    """
    parts = list(error.absolute_path)

    if error.validator == "required" and isinstance(error.instance, Mapping):
        return [
            FieldError(
                _pointer(parts + [name]),
                _MESSAGES.get((name, "required"), "is a required property"),
            )
            for name in error.validator_value
            if name not in error.instance
        ]

    if error.validator == "additionalProperties" and isinstance(error.instance, Mapping):
        allowed = error.schema.get("properties", {})
        return [
            FieldError(_pointer(parts + [name]), "is not an allowed property")
            for name in error.instance
            if name not in allowed
        ]

    field_name = parts[-1] if parts else None
    message = _MESSAGES.get((field_name, error.validator)) or _rule_message(error)
    return [FieldError(_pointer(parts), message)]


def _rule_message(error: ValidationError) -> str:
    """Describe the violated rule without echoing the offending value."""
    rule = error.validator_value
    if error.validator == "type":
        expected = [rule] if isinstance(rule, str) else list(rule)
        return "must be " + " or ".join(_TYPE_NAMES.get(t, t) for t in expected)
    if error.validator == "enum":
        return "must be one of: " + ", ".join(str(v) for v in rule)
    if error.validator == "const":
        return f"must be {rule}"
    if error.validator == "minimum":
        return f"must be >= {rule}"
    if error.validator == "maximum":
        return f"must be <= {rule}"
    if error.validator == "pattern":
        return f"must match pattern {rule}"
    if error.validator == "minLength":
        return f"must be at least {rule} character(s) long"
    if error.validator == "maxLength":
        return f"must be at most {rule} character(s) long"
    return f"violates the '{error.validator}' rule"


def _duplicate_positions(collection: list[Any]) -> list[FieldError]:
    first_seen: dict[int, int] = {}
    errors = []
    for index, item in enumerate(collection):
        if not isinstance(item, Mapping):
            continue
        position = item.get("position")
        if isinstance(position, float) and position.is_integer():
            position = int(position)
        if not isinstance(position, int) or isinstance(position, bool):
            continue
        if position in first_seen:
            errors.append(
                FieldError(
                    f"/{index}/position",
                    f"duplicates position {position} (first seen at /{first_seen[position]})",
                )
            )
        else:
            first_seen[position] = index
    return errors
