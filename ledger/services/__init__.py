"""Services package."""

from ledger.services.entries import LedgerService
from ledger.services.storage import (
    ConnectionError,
    DuplicateError,
    InMemoryLedgerStorage,
    InMemoryPrincipalStorage,
    LedgerStorageInterface,
    MongoLedgerClient,
    MongoLedgerStorage,
    MongoPrincipalStorage,
    PrincipalStorageInterface,
    StorageError,
)

__all__ = [
    # Entry service
    "LedgerService",
    # Storage services
    "ConnectionError",
    "DuplicateError",
    "InMemoryLedgerStorage",
    "InMemoryPrincipalStorage",
    "LedgerStorageInterface",
    "MongoLedgerClient",
    "MongoLedgerStorage",
    "MongoPrincipalStorage",
    "PrincipalStorageInterface",
    "StorageError",
]
