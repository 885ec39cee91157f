"""Tests for blacklist_registry.registry module."""

from unittest.mock import AsyncMock

import pytest

from blacklist_registry.exceptions import (
    DuplicatePosition,
    EntryNotFound,
    SchemaViolation,
)
from blacklist_registry.models import Entry, EntryStatus
from blacklist_registry.registry import EntryRegistry, normalize_payload
from blacklist_registry.storage import InMemoryRegistryStore


class TestNormalizePayload:
    """Folding of historical position field names."""

    def test_position_passes_through(self):
        assert normalize_payload({"position": 3, "name": "X"}) == {"position": 3, "name": "X"}

    @pytest.mark.parametrize("alias", ["guide", "order"])
    def test_alias(self, alias):
        assert normalize_payload({alias: 3, "status": "active"}) == {
            "position": 3,
            "status": "active",
        }

    def test_agreeing_aliases(self):
        assert normalize_payload({"position": 3, "guide": 3, "order": 3}) == {"position": 3}

    def test_conflicting_aliases(self):
        with pytest.raises(SchemaViolation) as exc_info:
            normalize_payload({"position": 3, "guide": 4})

        assert exc_info.value.errors[0].path == "/position"

    def test_aliases_are_not_coerced(self):
        with pytest.raises(SchemaViolation):
            normalize_payload({"position": 3, "order": "3"})

        assert normalize_payload({"guide": "3"}) == {"position": "3"}

    def test_no_position_at_all(self):
        assert normalize_payload({"name": "X"}) == {"name": "X"}


class TestAddEntry:
    """Validated appends."""

    @pytest.mark.asyncio
    async def test_add_entry(self, store):
        registry = EntryRegistry(store)

        entry = await registry.add_entry({"position": 3, "name": "Tom Keen", "status": "active"})

        assert entry == Entry(position=3, name="Tom Keen", status="active")
        assert await store.get(3) == entry

    @pytest.mark.asyncio
    async def test_add_entry_with_guide_alias(self, store):
        entry = await EntryRegistry(store).add_entry(
            {"guide": 40, "name": "", "status": "redacted"}
        )

        assert entry.position == 40
        assert entry.is_redacted

    @pytest.mark.asyncio
    async def test_invalid_status_is_never_stored(self):
        """A rejected candidate leaves the store untouched."""
        store = InMemoryRegistryStore()
        registry = EntryRegistry(store)

        with pytest.raises(SchemaViolation) as exc_info:
            await registry.add_entry({"position": 5, "name": "X", "status": "missing"})

        assert [e.path for e in exc_info.value.errors] == ["/status"]
        assert 5 not in [e.position for e in await store.list_all()]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"position": 1, "name": "", "status": "active"},
            {"position": -4, "name": "X", "status": "active"},
            {"position": "1", "name": "X", "status": "active"},
            {"name": "X", "status": "active"},
            {"position": 1, "name": "X", "status": "active", "extra": True},
            {"position": 1, "guide": 2, "name": "X", "status": "active"},
        ],
    )
    async def test_rejected_payloads_do_not_reach_the_store(self, payload):
        store = AsyncMock()
        registry = EntryRegistry(store)

        with pytest.raises(SchemaViolation):
            await registry.add_entry(payload)

        store.append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_position(self, store):
        with pytest.raises(DuplicatePosition):
            await EntryRegistry(store).add_entry(
                {"position": 2, "name": "Second Raymond", "status": "active"}
            )

        assert len(await store.list_all()) == 6


class TestUpdateEntry:
    """Partial updates through the registry."""

    @pytest.mark.asyncio
    async def test_update_status(self, store):
        entry = await EntryRegistry(store).update_entry(2, {"status": "captured"})

        assert entry.status is EntryStatus.captured
        assert entry.name == "Raymond"

    @pytest.mark.asyncio
    async def test_update_is_idempotent(self, store):
        registry = EntryRegistry(store)

        first = await registry.update_entry(7, {"name": "The Freelancer (deceased)"})
        second = await registry.update_entry(7, {"name": "The Freelancer (deceased)"})

        assert first == second == await store.get(7)

    @pytest.mark.asyncio
    async def test_redact_entry(self, store):
        entry = await EntryRegistry(store).update_entry(104, {"status": "redacted", "name": ""})

        assert entry.is_redacted
        assert entry.name == ""

    @pytest.mark.asyncio
    async def test_unredact_requires_a_name(self, store):
        with pytest.raises(SchemaViolation) as exc_info:
            await EntryRegistry(store).update_entry(5, {"status": "active"})

        assert [e.path for e in exc_info.value.errors] == ["/name"]
        assert (await store.get(5)).is_redacted

    @pytest.mark.asyncio
    async def test_position_cannot_be_updated(self, store):
        with pytest.raises(SchemaViolation) as exc_info:
            await EntryRegistry(store).update_entry(2, {"position": 3})

        assert exc_info.value.errors[0].path == "/position"
        assert exc_info.value.errors[0].message == "cannot be updated"

    @pytest.mark.asyncio
    async def test_empty_patch(self, store):
        with pytest.raises(SchemaViolation) as exc_info:
            await EntryRegistry(store).update_entry(2, {})

        assert exc_info.value.errors[0].path == "/"

    @pytest.mark.asyncio
    async def test_invalid_status_value(self, store):
        with pytest.raises(SchemaViolation):
            await EntryRegistry(store).update_entry(2, {"status": "missing"})

        assert (await store.get(2)).status is EntryStatus.active

    @pytest.mark.asyncio
    async def test_unknown_position(self, store):
        with pytest.raises(EntryNotFound):
            await EntryRegistry(store).update_entry(999, {"status": "active"})

    @pytest.mark.asyncio
    async def test_update_writes_the_validated_entry(self):
        store = AsyncMock()
        store.get.return_value = Entry(position=2, name="Raymond", status="active")
        store.update.return_value = Entry(position=2, name="Raymond", status="captured")

        await EntryRegistry(store).update_entry(2, {"status": "captured"})

        store.update.assert_awaited_once_with(2, {"name": "Raymond", "status": "captured"})

    @pytest.mark.asyncio
    async def test_interleaved_update_cannot_store_an_invalid_entry(self, sample_entries, validator):
        """A write landing between the read and the update is overwritten whole."""

        class InterleavingStore(InMemoryRegistryStore):
            async def get(self, position):
                snapshot = await super().get(position)
                await super().update(position, {"name": "", "status": "redacted"})
                return snapshot

        store = InterleavingStore(sample_entries)

        entry = await EntryRegistry(store).update_entry(2, {"status": "captured"})

        stored = await InMemoryRegistryStore.get(store, 2)
        assert stored == entry == Entry(position=2, name="Raymond", status="captured")
        assert validator.validate_entry(stored).valid
