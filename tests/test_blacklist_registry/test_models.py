"""Tests for blacklist_registry.models module."""

import pytest
from pydantic import ValidationError

from blacklist_registry.models import MAX_POSITION, Entry, EntryStatus


class TestEntry:
    """Test suite for the Entry model."""

    def test_entry_creation(self):
        entry = Entry(position=2, name="Raymond", status="active")

        assert entry.position == 2
        assert entry.name == "Raymond"
        assert entry.status is EntryStatus.active
        assert not entry.is_redacted

    def test_name_defaults_to_empty(self):
        entry = Entry(position=5, status="redacted")

        assert entry.name == ""
        assert entry.is_redacted

    def test_entry_is_frozen(self):
        entry = Entry(position=2, name="Raymond", status="active")

        with pytest.raises(ValidationError):
            entry.name = "Someone else"

    def test_negative_position_rejected(self):
        with pytest.raises(ValidationError):
            Entry(position=-1, name="X", status="active")

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Entry(position=1, name="X", status="missing")

    def test_to_document(self):
        entry = Entry(position=12, name="Anslo Garrick", status="captured")

        assert entry.to_document() == {
            "position": 12,
            "name": "Anslo Garrick",
            "status": "captured",
        }

    def test_status_values(self):
        assert [s.value for s in EntryStatus] == [
            "active",
            "deceased",
            "incarcerated",
            "captured",
            "redacted",
        ]

    def test_position_fits_in_int64(self):
        assert Entry(position=MAX_POSITION, name="X", status="active").position == 2**63 - 1

        with pytest.raises(ValidationError):
            Entry(position=MAX_POSITION + 1, name="X", status="active")
