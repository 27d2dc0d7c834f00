"""
Shared fixtures.

Everything runs against the in-memory stores; no MongoDB is needed.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from ledger.api import create_app
from ledger.auth import AuthorizationGate, CredentialService, PasswordHasher, TokenService
from ledger.config import AuthSettings
from ledger.events import EventLogger
from ledger.orchestrator import AppComponents
from ledger.queries import SummaryEngine
from ledger.services import LedgerService
from ledger.services.storage import InMemoryLedgerStorage, InMemoryPrincipalStorage


FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(
        secret_key="test-secret-key-0123456789abcdef",
        algorithm="HS256",
        token_expire_minutes=60,
        password_schemes="pbkdf2_sha256",
    )


@pytest.fixture
def token_service(auth_settings) -> TokenService:
    return TokenService(auth_settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def principal_storage() -> InMemoryPrincipalStorage:
    return InMemoryPrincipalStorage()


@pytest.fixture
def ledger_storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def event_logger() -> EventLogger:
    return EventLogger()


@pytest.fixture
def credentials(principal_storage, token_service, auth_settings, event_logger) -> CredentialService:
    return CredentialService(
        principal_storage,
        token_service,
        hasher=PasswordHasher(auth_settings),
        event_logger=event_logger,
    )


@pytest.fixture
def gate(token_service, event_logger) -> AuthorizationGate:
    return AuthorizationGate(token_service, event_logger=event_logger)


@pytest.fixture
def ledger_service(ledger_storage, event_logger) -> LedgerService:
    return LedgerService(ledger_storage, event_logger=event_logger)


@pytest.fixture
def summary_engine(ledger_storage, event_logger) -> SummaryEngine:
    return SummaryEngine(ledger_storage, event_logger=event_logger)


@pytest.fixture
def client(principal_storage, ledger_storage, auth_settings, event_logger) -> TestClient:
    """HTTP client over in-memory components using the real clock."""
    tokens = TokenService(auth_settings)
    components = AppComponents(
        credentials=CredentialService(
            principal_storage,
            tokens,
            hasher=PasswordHasher(auth_settings),
            event_logger=event_logger,
        ),
        gate=AuthorizationGate(tokens, event_logger=event_logger),
        ledger=LedgerService(ledger_storage, event_logger=event_logger),
        summaries=SummaryEngine(ledger_storage, event_logger=event_logger),
        event_logger=event_logger,
    )
    with TestClient(create_app(components)) as test_client:
        yield test_client
