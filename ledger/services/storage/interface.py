"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Run against MongoDB in production
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

CRITICAL: Every ledger method takes owner_id as a required argument and
applies it as a filter. There is no method that can read or change an
entry without naming its owner.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from ledger.models.entry import EntryKind, LedgerEntry
from ledger.models.principal import Principal


class PrincipalStorageInterface(ABC):
    """Abstract interface for principal storage."""

    @abstractmethod
    async def create_principal(self, principal: Principal) -> Principal:
        """
        Insert a new principal.

        Raises:
            DuplicateError: If the email is already registered
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def get_principal_by_email(self, email: str) -> Optional[Principal]:
        """Find a principal by (lower-cased) email."""
        pass

    @abstractmethod
    async def get_principal_by_id(self, principal_id: UUID) -> Optional[Principal]:
        """Find a principal by ID."""
        pass


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger entry storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def insert_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Insert one entry. The entry already carries its owner_id.

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def find_entry(self, owner_id: UUID, entry_id: UUID) -> Optional[LedgerEntry]:
        """Find one entry by id and owner. None if absent or owned by someone else."""
        pass

    @abstractmethod
    async def find_entries(
        self,
        owner_id: UUID,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        kind: Optional[EntryKind] = None,
        category: Optional[str] = None,
        oldest_first: bool = False,
    ) -> list[LedgerEntry]:
        """
        Find an owner's entries with occurred_at in [start, end).

        Args:
            owner_id: Owner to scope by (required)
            start: Inclusive lower bound, UTC
            end: Exclusive upper bound, UTC
            kind: Only entries of this kind
            category: Only entries in this category (exact match)
            oldest_first: Ascending order instead of newest first

        Returns:
            Entries ordered by (occurred_at, created_at), newest first
            unless oldest_first is set
        """
        pass

    @abstractmethod
    async def update_entry(
        self,
        owner_id: UUID,
        entry_id: UUID,
        changes: dict[str, Any],
    ) -> Optional[LedgerEntry]:
        """
        Apply changes to one entry scoped by id and owner.

        Returns:
            The updated entry, or None if no entry matched
        """
        pass

    @abstractmethod
    async def delete_entry(self, owner_id: UUID, entry_id: UUID) -> Optional[LedgerEntry]:
        """
        Delete one entry scoped by id and owner.

        Returns:
            The deleted entry, or None if no entry matched
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
