"""Tests for owner-scoped ledger entry CRUD."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from ledger.errors import Internal, NotFound
from ledger.models.entry import EntryCreate, EntryFilter, EntryKind, EntryUpdate
from ledger.models.principal import OwnerContext
from ledger.services import LedgerService
from ledger.services.storage import InMemoryLedgerStorage, StorageError


def owner() -> OwnerContext:
    return OwnerContext(owner_id=uuid4())


def expense(amount="25.00", category="Food", occurred_at="2024-01-15", note=None) -> EntryCreate:
    return EntryCreate(kind="expense", amount=amount, category=category, occurred_at=occurred_at, note=note)


def income(amount="1000.00", category="Salary", occurred_at="2024-01-05") -> EntryCreate:
    return EntryCreate(kind="income", amount=amount, category=category, occurred_at=occurred_at)


class FailingLedgerStorage(InMemoryLedgerStorage):
    """Storage whose every call fails like a dropped database connection."""

    async def insert_entry(self, entry):
        raise StorageError("connection reset")

    async def find_entry(self, owner_id, entry_id):
        raise StorageError("connection reset")

    async def find_entries(self, owner_id, start=None, end=None, kind=None, category=None, oldest_first=False):
        raise StorageError("connection reset")

    async def update_entry(self, owner_id, entry_id, changes):
        raise StorageError("connection reset")

    async def delete_entry(self, owner_id, entry_id):
        raise StorageError("connection reset")


class TestCreateEntry:
    """Tests for creating entries."""

    async def test_create_binds_owner(self, ledger_service):
        alice = owner()
        entry = await ledger_service.create_entry(alice, expense())

        assert entry.owner_id == alice.owner_id
        assert entry.kind == EntryKind.EXPENSE
        assert entry.amount == Decimal("25.00")
        assert entry.occurred_at == datetime(2024, 1, 15, tzinfo=timezone.utc)

    async def test_missing_occurred_at_defaults_to_now(self, ledger_service):
        before = datetime.now(timezone.utc)
        entry = await ledger_service.create_entry(owner(), expense(occurred_at=None))
        after = datetime.now(timezone.utc)

        assert before <= entry.occurred_at <= after

    async def test_created_entry_is_readable(self, ledger_service):
        alice = owner()
        created = await ledger_service.create_entry(alice, expense(note="Lunch"))
        fetched = await ledger_service.get_entry(alice, str(created.id))

        assert fetched == created


class TestListEntries:
    """Tests for listing and filtering."""

    async def test_newest_first(self, ledger_service):
        alice = owner()
        await ledger_service.create_entry(alice, expense(occurred_at="2024-01-01"))
        await ledger_service.create_entry(alice, expense(occurred_at="2024-03-01"))
        await ledger_service.create_entry(alice, expense(occurred_at="2024-02-01"))

        entries = await ledger_service.list_entries(alice)
        months = [e.occurred_at.month for e in entries]
        assert months == [3, 2, 1]

    async def test_storage_can_return_oldest_first(self, ledger_service, ledger_storage):
        alice = owner()
        await ledger_service.create_entry(alice, expense(occurred_at="2024-03-01"))
        await ledger_service.create_entry(alice, expense(occurred_at="2024-01-01"))

        entries = await ledger_storage.find_entries(alice.owner_id, oldest_first=True)
        assert [e.occurred_at.month for e in entries] == [1, 3]

    async def test_filters(self, ledger_service):
        alice = owner()
        await ledger_service.create_entry(alice, income())
        await ledger_service.create_entry(alice, expense(category="Food"))
        await ledger_service.create_entry(alice, expense(category="Rent", occurred_at="2024-02-01"))

        expenses = await ledger_service.list_entries(alice, EntryFilter(kind="expense"))
        assert {e.category for e in expenses} == {"Food", "Rent"}

        food = await ledger_service.list_entries(alice, EntryFilter(category="Food"))
        assert len(food) == 1

        january = await ledger_service.list_entries(
            alice, EntryFilter(start="2024-01-01", end="2024-02-01")
        )
        assert len(january) == 2

    async def test_list_is_owner_scoped(self, ledger_service):
        alice, bob = owner(), owner()
        await ledger_service.create_entry(alice, expense())
        await ledger_service.create_entry(bob, expense())
        await ledger_service.create_entry(bob, income())

        assert len(await ledger_service.list_entries(alice)) == 1
        assert all(e.owner_id == bob.owner_id for e in await ledger_service.list_entries(bob))


class TestUpdateAndDelete:
    """Tests for update and delete."""

    async def test_partial_update(self, ledger_service):
        alice = owner()
        created = await ledger_service.create_entry(alice, expense(note="Lunch"))

        updated = await ledger_service.update_entry(
            alice, str(created.id), EntryUpdate(amount="30")
        )

        assert updated.amount == Decimal("30.00")
        assert updated.note == "Lunch"
        assert updated.category == "Food"
        assert updated.owner_id == alice.owner_id
        assert updated.updated_at >= created.updated_at

    async def test_update_can_move_entry_in_time(self, ledger_service):
        alice = owner()
        created = await ledger_service.create_entry(alice, expense())
        updated = await ledger_service.update_entry(
            alice, str(created.id), EntryUpdate(occurred_at="2023-12-31")
        )
        assert updated.occurred_at == datetime(2023, 12, 31, tzinfo=timezone.utc)

    async def test_delete(self, ledger_service):
        alice = owner()
        created = await ledger_service.create_entry(alice, expense())

        await ledger_service.delete_entry(alice, str(created.id))

        with pytest.raises(NotFound):
            await ledger_service.get_entry(alice, str(created.id))

    async def test_delete_twice(self, ledger_service):
        alice = owner()
        created = await ledger_service.create_entry(alice, expense())
        await ledger_service.delete_entry(alice, str(created.id))

        with pytest.raises(NotFound):
            await ledger_service.delete_entry(alice, str(created.id))


class TestOwnershipIsolation:
    """Another owner's entry looks exactly like a missing one."""

    async def test_cross_owner_access_is_not_found(self, ledger_service):
        alice, bob = owner(), owner()
        entry = await ledger_service.create_entry(alice, expense(amount="42.00"))
        entry_id = str(entry.id)

        with pytest.raises(NotFound) as on_get:
            await ledger_service.get_entry(bob, entry_id)
        with pytest.raises(NotFound):
            await ledger_service.update_entry(bob, entry_id, EntryUpdate(amount="1"))
        with pytest.raises(NotFound):
            await ledger_service.delete_entry(bob, entry_id)

        with pytest.raises(NotFound) as on_missing:
            await ledger_service.get_entry(bob, str(uuid4()))
        assert on_get.value.message == on_missing.value.message

        # Alice's entry is untouched
        still_there = await ledger_service.get_entry(alice, entry_id)
        assert still_there.amount == Decimal("42.00")

    @pytest.mark.parametrize("bad_id", ["not-a-uuid", "123", ""])
    async def test_malformed_id_is_not_found(self, ledger_service, bad_id):
        with pytest.raises(NotFound):
            await ledger_service.get_entry(owner(), bad_id)


class TestStorageFailures:
    """Storage failures surface as an opaque Internal error."""

    @pytest.fixture
    def failing_service(self, event_logger):
        return LedgerService(FailingLedgerStorage(), event_logger=event_logger)

    async def test_create(self, failing_service):
        with pytest.raises(Internal) as exc:
            await failing_service.create_entry(owner(), expense())
        assert "connection reset" not in exc.value.message

    async def test_list(self, failing_service):
        with pytest.raises(Internal):
            await failing_service.list_entries(owner())

    async def test_get_update_delete(self, failing_service):
        alice = owner()
        entry_id = str(uuid4())
        with pytest.raises(Internal):
            await failing_service.get_entry(alice, entry_id)
        with pytest.raises(Internal):
            await failing_service.update_entry(alice, entry_id, EntryUpdate(note="x"))
        with pytest.raises(Internal):
            await failing_service.delete_entry(alice, entry_id)
