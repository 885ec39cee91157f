"""Read-only catalog of user-facing labels and messages.

Loaded once from the packaged ``strings.json``; every level is wrapped in a
``MappingProxyType`` so callers cannot mutate it.
"""

import json
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Any, Mapping

STRINGS_RESOURCE = "strings.json"


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


@lru_cache(maxsize=1)
def load_strings() -> Mapping[str, Any]:
    """Return the string catalog, reading it on first use."""
    raw = (resources.files("blacklist_registry") / "data" / STRINGS_RESOURCE).read_text(
        encoding="utf-8"
    )
    return _freeze(json.loads(raw))


def get_string(key: str, default: str = "") -> str:
    """Look up a dotted key such as ``"emptyState.title"``."""
    node: Any = load_strings()
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node if isinstance(node, str) else default
