"""
In-Memory Storage Implementation

Used by the test suite and by the default development configuration.
Data lives only as long as the process.

Entries are kept per owner, so a lookup with the wrong owner_id
cannot see another owner's entries at all.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from ledger.models.clock import utc_now
from ledger.models.entry import EntryKind, LedgerEntry
from ledger.models.principal import Principal
from ledger.services.storage.interface import (
    DuplicateError,
    LedgerStorageInterface,
    PrincipalStorageInterface,
)


class InMemoryPrincipalStorage(PrincipalStorageInterface):
    """Principals keyed by id, with an email index."""

    def __init__(self):
        self._by_id: dict[UUID, Principal] = {}
        self._id_by_email: dict[str, UUID] = {}

    async def create_principal(self, principal: Principal) -> Principal:
        email = principal.email.lower()
        if email in self._id_by_email:
            raise DuplicateError(f"Email already registered: {email}")
        self._by_id[principal.id] = principal.model_copy()
        self._id_by_email[email] = principal.id
        return principal

    async def get_principal_by_email(self, email: str) -> Optional[Principal]:
        principal_id = self._id_by_email.get(email.lower())
        if principal_id is None:
            return None
        return self._by_id[principal_id].model_copy()

    async def get_principal_by_id(self, principal_id: UUID) -> Optional[Principal]:
        principal = self._by_id.get(principal_id)
        return principal.model_copy() if principal else None


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Entries partitioned by owner_id."""

    def __init__(self):
        self._entries: dict[UUID, dict[UUID, LedgerEntry]] = {}

    def _owned(self, owner_id: UUID) -> dict[UUID, LedgerEntry]:
        return self._entries.get(owner_id, {})

    async def insert_entry(self, entry: LedgerEntry) -> LedgerEntry:
        self._entries.setdefault(entry.owner_id, {})[entry.id] = entry.model_copy()
        return entry

    async def find_entry(self, owner_id: UUID, entry_id: UUID) -> Optional[LedgerEntry]:
        entry = self._owned(owner_id).get(entry_id)
        return entry.model_copy() if entry else None

    async def find_entries(
        self,
        owner_id: UUID,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        kind: Optional[EntryKind] = None,
        category: Optional[str] = None,
        oldest_first: bool = False,
    ) -> list[LedgerEntry]:
        entries = []
        for entry in self._owned(owner_id).values():
            # Apply filters
            if start and entry.occurred_at < start:
                continue
            if end and entry.occurred_at >= end:
                continue
            if kind and entry.kind != kind:
                continue
            if category is not None and entry.category != category:
                continue
            entries.append(entry.model_copy())

        entries.sort(key=lambda e: (e.occurred_at, e.created_at), reverse=not oldest_first)
        return entries

    async def update_entry(
        self,
        owner_id: UUID,
        entry_id: UUID,
        changes: dict[str, Any],
    ) -> Optional[LedgerEntry]:
        owned = self._owned(owner_id)
        current = owned.get(entry_id)
        if current is None:
            return None

        data = current.model_dump()
        data.update(changes)
        data["updated_at"] = utc_now()
        updated = LedgerEntry.model_validate(data)
        owned[entry_id] = updated
        return updated.model_copy()

    async def delete_entry(self, owner_id: UUID, entry_id: UUID) -> Optional[LedgerEntry]:
        return self._owned(owner_id).pop(entry_id, None)
