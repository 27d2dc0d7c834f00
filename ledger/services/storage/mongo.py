"""
MongoDB Storage Implementation

DESIGN DECISION: MongoDB is the production backend because:
1. Entries are independent single documents
2. The only queries are owner-scoped lookups and a date range scan
3. find_one_and_update / find_one_and_delete give us id+owner scoped
   mutations in one round trip

Storage format:
- IDs are stored as UUID strings (_id for the document itself)
- Amounts are stored as Decimal128, never as doubles
- Datetimes are stored as UTC and read back tz-aware
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from bson.decimal128 import Decimal128
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ledger.config import MongoSettings, get_settings
from ledger.models.clock import utc_now
from ledger.models.entry import EntryKind, LedgerEntry
from ledger.models.principal import Principal
from ledger.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    LedgerStorageInterface,
    PrincipalStorageInterface,
    StorageError,
)


class MongoLedgerClient:
    """
    Low-level MongoDB client wrapper.

    Handles connection setup with retry and index creation.
    """

    def __init__(
        self,
        settings: Optional[MongoSettings] = None,
        client: Optional[MongoClient] = None,
    ):
        self._settings = settings or get_settings().mongo
        self._client = client
        self._database: Optional[Database] = None

    @retry(
        retry=retry_if_exception_type(ConnectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> Database:
        """
        Establish connection to MongoDB and make sure indexes exist.
        """
        if self._database is None:
            try:
                if self._client is None:
                    self._client = MongoClient(
                        self._settings.url,
                        serverSelectionTimeoutMS=self._settings.server_selection_timeout_ms,
                        tz_aware=True,
                    )
                self._client.admin.command("ping")
                database = self._client[self._settings.database_name]
                self._ensure_indexes(database)
                self._database = database
            except PyMongoError as e:
                raise ConnectionError(f"Failed to connect to MongoDB: {e}")

        return self._database

    def _ensure_indexes(self, database: Database) -> None:
        database[self._settings.principals_collection].create_index(
            [("email", ASCENDING)], unique=True
        )
        database[self._settings.entries_collection].create_index(
            [("owner_id", ASCENDING), ("occurred_at", DESCENDING)]
        )

    def principals(self) -> Collection:
        return self.connect()[self._settings.principals_collection]

    def entries(self) -> Collection:
        return self.connect()[self._settings.entries_collection]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._database = None


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return Decimal(str(value))


class MongoPrincipalStorage(PrincipalStorageInterface):
    """MongoDB implementation of principal storage."""

    def __init__(self, client: Optional[MongoLedgerClient] = None):
        self._client = client or MongoLedgerClient()

    def _principal_to_document(self, principal: Principal) -> dict:
        return {
            "_id": str(principal.id),
            "name": principal.name,
            "email": principal.email.lower(),
            "password_hash": principal.password_hash,
            "created_at": principal.created_at,
        }

    def _document_to_principal(self, doc: dict) -> Principal:
        return Principal(
            id=UUID(doc["_id"]),
            name=doc["name"],
            email=doc["email"],
            password_hash=doc["password_hash"],
            created_at=doc.get("created_at") or utc_now(),
        )

    async def create_principal(self, principal: Principal) -> Principal:
        try:
            self._client.principals().insert_one(self._principal_to_document(principal))
            return principal
        except DuplicateKeyError:
            raise DuplicateError(f"Email already registered: {principal.email}")
        except PyMongoError as e:
            raise StorageError(f"Failed to save principal: {e}")

    async def get_principal_by_email(self, email: str) -> Optional[Principal]:
        try:
            doc = self._client.principals().find_one({"email": email.lower()})
        except PyMongoError as e:
            raise StorageError(f"Failed to get principal: {e}")
        return self._document_to_principal(doc) if doc else None

    async def get_principal_by_id(self, principal_id: UUID) -> Optional[Principal]:
        try:
            doc = self._client.principals().find_one({"_id": str(principal_id)})
        except PyMongoError as e:
            raise StorageError(f"Failed to get principal: {e}")
        return self._document_to_principal(doc) if doc else None


class MongoLedgerStorage(LedgerStorageInterface):
    """
    MongoDB implementation of ledger storage.

    Every query document includes owner_id.
    """

    def __init__(self, client: Optional[MongoLedgerClient] = None):
        self._client = client or MongoLedgerClient()

    def _entry_to_document(self, entry: LedgerEntry) -> dict:
        return {
            "_id": str(entry.id),
            "owner_id": str(entry.owner_id),
            "kind": entry.kind.value,
            "amount": Decimal128(entry.amount),
            "category": entry.category,
            "occurred_at": entry.occurred_at,
            "note": entry.note,
            "created_at": entry.created_at,
            "updated_at": entry.updated_at,
        }

    def _document_to_entry(self, doc: dict) -> LedgerEntry:
        return LedgerEntry(
            id=UUID(doc["_id"]),
            owner_id=UUID(doc["owner_id"]),
            kind=EntryKind(doc["kind"]),
            amount=_to_decimal(doc["amount"]),
            category=doc.get("category"),
            occurred_at=doc["occurred_at"],
            note=doc.get("note"),
            created_at=doc.get("created_at") or doc["occurred_at"],
            updated_at=doc.get("updated_at") or doc["occurred_at"],
        )

    def _changes_to_set(self, changes: dict[str, Any]) -> dict:
        update = {}
        for key, value in changes.items():
            if key == "amount":
                value = Decimal128(value)
            elif key == "kind":
                value = EntryKind(value).value
            update[key] = value
        update["updated_at"] = utc_now()
        return update

    def _scope(self, owner_id: UUID, entry_id: UUID) -> dict:
        return {"_id": str(entry_id), "owner_id": str(owner_id)}

    async def insert_entry(self, entry: LedgerEntry) -> LedgerEntry:
        try:
            self._client.entries().insert_one(self._entry_to_document(entry))
            return entry
        except PyMongoError as e:
            raise StorageError(f"Failed to save entry: {e}")

    async def find_entry(self, owner_id: UUID, entry_id: UUID) -> Optional[LedgerEntry]:
        try:
            doc = self._client.entries().find_one(self._scope(owner_id, entry_id))
        except PyMongoError as e:
            raise StorageError(f"Failed to get entry: {e}")
        return self._document_to_entry(doc) if doc else None

    async def find_entries(
        self,
        owner_id: UUID,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        kind: Optional[EntryKind] = None,
        category: Optional[str] = None,
        oldest_first: bool = False,
    ) -> list[LedgerEntry]:
        query: dict[str, Any] = {"owner_id": str(owner_id)}
        if start or end:
            window = {}
            if start:
                window["$gte"] = start
            if end:
                window["$lt"] = end
            query["occurred_at"] = window
        if kind:
            query["kind"] = EntryKind(kind).value
        if category is not None:
            query["category"] = category

        direction = ASCENDING if oldest_first else DESCENDING
        try:
            cursor = self._client.entries().find(query).sort(
                [("occurred_at", direction), ("created_at", direction)]
            )
            return [self._document_to_entry(doc) for doc in cursor]
        except PyMongoError as e:
            raise StorageError(f"Failed to list entries: {e}")

    async def update_entry(
        self,
        owner_id: UUID,
        entry_id: UUID,
        changes: dict[str, Any],
    ) -> Optional[LedgerEntry]:
        try:
            doc = self._client.entries().find_one_and_update(
                self._scope(owner_id, entry_id),
                {"$set": self._changes_to_set(changes)},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StorageError(f"Failed to update entry: {e}")
        return self._document_to_entry(doc) if doc else None

    async def delete_entry(self, owner_id: UUID, entry_id: UUID) -> Optional[LedgerEntry]:
        try:
            doc = self._client.entries().find_one_and_delete(self._scope(owner_id, entry_id))
        except PyMongoError as e:
            raise StorageError(f"Failed to delete entry: {e}")
        return self._document_to_entry(doc) if doc else None
