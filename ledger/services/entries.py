"""
Ledger Entry Service

Create, read, update and delete entries for the owner of the request.

CRITICAL: Every method takes the caller's OwnerContext and passes its
owner_id to storage as a filter. An entry that does not exist and an
entry that belongs to someone else both raise the same NotFound.
"""

from typing import Optional
from uuid import UUID

from ledger.errors import Internal, NotFound
from ledger.events import EventLogger
from ledger.models.clock import utc_now
from ledger.models.entry import EntryCreate, EntryFilter, EntryUpdate, LedgerEntry
from ledger.models.principal import OwnerContext
from ledger.services.storage import LedgerStorageInterface, StorageError


class LedgerService:
    """Owner-scoped CRUD over ledger entries."""

    def __init__(
        self,
        storage: LedgerStorageInterface,
        event_logger: Optional[EventLogger] = None,
    ):
        self._storage = storage
        self._events = event_logger or EventLogger()

    async def _parse_entry_id(self, owner: OwnerContext, raw_entry_id: str, operation: str) -> UUID:
        try:
            return UUID(str(raw_entry_id))
        except ValueError:
            await self._events.log_entry_not_found(owner.owner_id, str(raw_entry_id), operation)
            raise NotFound()

    async def _storage_failed(self, operation: str, error: StorageError, owner: OwnerContext) -> Internal:
        await self._events.log_storage_error(operation, str(error), owner.owner_id)
        return Internal()

    async def create_entry(self, owner: OwnerContext, data: EntryCreate) -> LedgerEntry:
        entry = LedgerEntry(
            owner_id=owner.owner_id,
            kind=data.kind,
            amount=data.amount,
            category=data.category,
            occurred_at=data.occurred_at or utc_now(),
            note=data.note,
        )

        try:
            await self._storage.insert_entry(entry)
        except StorageError as e:
            raise await self._storage_failed("insert_entry", e, owner)

        await self._events.log_entry_created(owner.owner_id, entry.id, entry.kind.value)
        return entry

    async def list_entries(
        self,
        owner: OwnerContext,
        filters: Optional[EntryFilter] = None,
    ) -> list[LedgerEntry]:
        """List the owner's entries, newest first."""
        filters = filters or EntryFilter()
        try:
            return await self._storage.find_entries(
                owner.owner_id,
                start=filters.start,
                end=filters.end,
                kind=filters.kind,
                category=filters.category,
            )
        except StorageError as e:
            raise await self._storage_failed("find_entries", e, owner)

    async def get_entry(self, owner: OwnerContext, entry_id: str) -> LedgerEntry:
        parsed_id = await self._parse_entry_id(owner, entry_id, "get")
        try:
            entry = await self._storage.find_entry(owner.owner_id, parsed_id)
        except StorageError as e:
            raise await self._storage_failed("find_entry", e, owner)

        if entry is None:
            await self._events.log_entry_not_found(owner.owner_id, str(entry_id), "get")
            raise NotFound()
        return entry

    async def update_entry(
        self,
        owner: OwnerContext,
        entry_id: str,
        update: EntryUpdate,
    ) -> LedgerEntry:
        parsed_id = await self._parse_entry_id(owner, entry_id, "update")
        changes = update.changes()
        try:
            entry = await self._storage.update_entry(owner.owner_id, parsed_id, changes)
        except StorageError as e:
            raise await self._storage_failed("update_entry", e, owner)

        if entry is None:
            await self._events.log_entry_not_found(owner.owner_id, str(entry_id), "update")
            raise NotFound()

        await self._events.log_entry_updated(owner.owner_id, entry.id, sorted(changes))
        return entry

    async def delete_entry(self, owner: OwnerContext, entry_id: str) -> None:
        parsed_id = await self._parse_entry_id(owner, entry_id, "delete")
        try:
            deleted = await self._storage.delete_entry(owner.owner_id, parsed_id)
        except StorageError as e:
            raise await self._storage_failed("delete_entry", e, owner)

        if deleted is None:
            await self._events.log_entry_not_found(owner.owner_id, str(entry_id), "delete")
            raise NotFound()

        await self._events.log_entry_deleted(owner.owner_id, parsed_id)
