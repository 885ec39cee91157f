"""Client-facing projection of registry entries.

This is the only module that knows the wire name of the position field:
legacy clients read it as ``guide``, current clients as ``v1``. It is also
where redaction happens: a redacted entry is projected to its position and
the redaction marker, and nothing else.
"""

import html
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from types import MappingProxyType
from typing import Any

from blacklist_registry.exceptions import UnsupportedProtocolVersion
from blacklist_registry.models import Entry
from blacklist_registry.strings import get_string


REDACTED_MARKER = "redacted"


class ProtocolVersion(str, Enum):
    legacy = "legacy"
    current = "current"


POSITION_FIELDS: Mapping[ProtocolVersion, str] = MappingProxyType(
    {
        ProtocolVersion.legacy: "guide",
        ProtocolVersion.current: "v1",
    }
)


def resolve_protocol(value: Any) -> ProtocolVersion:
    """Map a client-supplied protocol name onto a ProtocolVersion.

    Raises:
        UnsupportedProtocolVersion: For anything other than a known version
    """
    if isinstance(value, ProtocolVersion):
        return value
    try:
        return ProtocolVersion(value)
    except (ValueError, TypeError):
        raise UnsupportedProtocolVersion(value) from None


def position_field(protocol: Any) -> str:
    """Wire name of the position field for ``protocol``."""
    return POSITION_FIELDS[resolve_protocol(protocol)]


def render_item(entry: Entry, protocol: Any) -> dict[str, Any]:
    """Project one entry for a client.

    Args:
        entry: Stored entry
        protocol: Protocol version (or its name) the client speaks

    Returns:
        ``{<field>: position, "redacted": True}`` for redacted entries,
        otherwise ``{<field>: position, "name": ..., "status": ...}``
    """
    field = position_field(protocol)
    if entry.is_redacted:
        return {field: entry.position, REDACTED_MARKER: True}
    return {field: entry.position, "name": entry.name, "status": entry.status.value}


def render(entries: Iterable[Entry], protocol: Any) -> list[dict[str, Any]]:
    """Project entries in the order received.

    The protocol is resolved before any entry is looked at, so an unknown
    version is refused even for an empty registry.
    """
    protocol = resolve_protocol(protocol)
    return [render_item(entry, protocol) for entry in entries]


def render_markup(items: Sequence[Mapping[str, Any]], protocol: Any) -> str:
    """Build list markup from already-rendered items.

    Works on the output of ``render`` rather than on entries, so the markup
    can only ever contain what the projection exposed.
    """
    field = position_field(protocol)
    if not items:
        return _empty_state()
    return "".join(_item_markup(item, field) for item in items)


def _empty_state() -> str:
    title = html.escape(get_string("emptyState.title"))
    message = html.escape(get_string("emptyState.message"))
    return (
        '<div class="empty-state-message">'
        '<div class="empty-state-icon"></div>'
        f'<div class="empty-state-title">{title}</div>'
        f'<div class="empty-state-message">{message}</div>'
        "</div>"
    )


def _item_markup(item: Mapping[str, Any], field: str) -> str:
    position = int(item[field])
    prefix = html.escape(get_string("list.guidePrefix", "#"))
    suffix = html.escape(get_string("list.guideSuffix", "."))
    item_label = html.escape(get_string("list.itemLabel"))
    guide = (
        f'<span class="guide" aria-label="{item_label} {position}">'
        f"{prefix}{position}{suffix}</span>"
    )

    if item.get(REDACTED_MARKER):
        label = html.escape(get_string("list.redactedLabel"))
        status = REDACTED_MARKER
        aria = label
        body = f'<span class="item-redacted" aria-label="{label}" role="img"></span>'
    else:
        name = html.escape(str(item["name"]))
        status = html.escape(str(item["status"]))
        status_label = html.escape(get_string("list.statusLabel", "Status"))
        dash = html.escape(get_string("list.dash", "-"))
        aria = f"{name}, {status_label.lower()}: {status}"
        body = (
            f'<span><span class="name" itemprop="name">{name}</span>'
            f'<span class="dash" aria-hidden="true">{dash}</span>'
            f'<span class="status {status}" aria-label="{status_label}: {status}" '
            f'itemprop="description">{status}</span></span>'
        )

    return (
        f'<article class="list-item" id="item-{position}" aria-label="{aria}" '
        f'tabindex="0" data-item-id="{position}" data-item-status="{status}">'
        f'<header class="item-header">{guide}{body}</header>'
        "</article>"
    )
