"""
Component Wiring for Personal Ledger

This module ties together all the components:
1. Storage backend (MongoDB or in-memory)
2. Credential and token services
3. Authorization gate
4. Ledger entry service and summary engine

DESIGN DECISION: Components are built once at startup and passed
explicitly. Nothing here holds per-request state; the owner of a
request travels as an OwnerContext argument.
"""

from typing import Optional

from ledger.auth import AuthorizationGate, CredentialService, PasswordHasher, TokenService
from ledger.config import Settings, check_secret_key, get_settings
from ledger.events import EventLogger, configure_logging
from ledger.models.clock import Clock, utc_now
from ledger.queries import SummaryEngine
from ledger.services import LedgerService
from ledger.services.storage import (
    InMemoryLedgerStorage,
    InMemoryPrincipalStorage,
    LedgerStorageInterface,
    MongoLedgerClient,
    MongoLedgerStorage,
    MongoPrincipalStorage,
    PrincipalStorageInterface,
)


class AppComponents:
    """Everything the HTTP layer needs, built once."""

    def __init__(
        self,
        credentials: CredentialService,
        gate: AuthorizationGate,
        ledger: LedgerService,
        summaries: SummaryEngine,
        event_logger: EventLogger,
        mongo_client: Optional[MongoLedgerClient] = None,
    ):
        self.credentials = credentials
        self.gate = gate
        self.ledger = ledger
        self.summaries = summaries
        self.event_logger = event_logger
        self.mongo_client = mongo_client

    def close(self) -> None:
        if self.mongo_client is not None:
            self.mongo_client.close()


def create_app_components(
    settings: Optional[Settings] = None,
    principal_storage: Optional[PrincipalStorageInterface] = None,
    ledger_storage: Optional[LedgerStorageInterface] = None,
    clock: Clock = utc_now,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use (defaults to get_settings())
        principal_storage: Override the principal store (tests)
        ledger_storage: Override the ledger store (tests)
        clock: Source of "now" for token minting and verification

    Returns:
        Wired AppComponents
    """
    settings = settings or get_settings()
    app_settings = settings.app
    auth_settings = settings.auth

    configure_logging(app_settings.log_level)
    check_secret_key(auth_settings, app_settings)

    mongo_client = None
    if principal_storage is None or ledger_storage is None:
        if app_settings.storage_backend == "mongo":
            mongo_client = MongoLedgerClient(settings.mongo)
            principal_storage = principal_storage or MongoPrincipalStorage(mongo_client)
            ledger_storage = ledger_storage or MongoLedgerStorage(mongo_client)
        else:
            principal_storage = principal_storage or InMemoryPrincipalStorage()
            ledger_storage = ledger_storage or InMemoryLedgerStorage()

    event_logger = EventLogger()
    tokens = TokenService(auth_settings, clock=clock)

    return AppComponents(
        credentials=CredentialService(
            principal_storage,
            tokens,
            hasher=PasswordHasher(auth_settings),
            event_logger=event_logger,
        ),
        gate=AuthorizationGate(tokens, event_logger=event_logger),
        ledger=LedgerService(ledger_storage, event_logger=event_logger),
        summaries=SummaryEngine(
            ledger_storage,
            event_logger=event_logger,
            uncategorized_label=app_settings.uncategorized_label,
        ),
        event_logger=event_logger,
        mongo_client=mongo_client,
    )
