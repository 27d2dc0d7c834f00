"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
MongoDB is the production backend; the in-memory backend serves tests and
local development.
"""

from ledger.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    LedgerStorageInterface,
    PrincipalStorageInterface,
    StorageError,
)
from ledger.services.storage.memory import (
    InMemoryLedgerStorage,
    InMemoryPrincipalStorage,
)
from ledger.services.storage.mongo import (
    MongoLedgerClient,
    MongoLedgerStorage,
    MongoPrincipalStorage,
)

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    "PrincipalStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "StorageError",
    # In-memory implementation
    "InMemoryLedgerStorage",
    "InMemoryPrincipalStorage",
    # MongoDB implementation
    "MongoLedgerClient",
    "MongoLedgerStorage",
    "MongoPrincipalStorage",
]
