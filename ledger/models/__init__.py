"""
Data Models Package

This package contains all Pydantic models used in the Personal Ledger system.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.entry import (
    EntryCreate,
    EntryFilter,
    EntryKind,
    EntryUpdate,
    LedgerEntry,
)
from ledger.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)
from ledger.models.principal import (
    AuthResult,
    IdentityToken,
    LoginRequest,
    OwnerContext,
    Principal,
    PrincipalView,
    RegisterRequest,
    TokenClaims,
)
from ledger.models.summary import (
    CategoryTotal,
    PeriodWindow,
    SummaryResult,
)

__all__ = [
    # Entry models
    "EntryCreate",
    "EntryFilter",
    "EntryKind",
    "EntryUpdate",
    "LedgerEntry",
    # Event models
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
    # Principal models
    "AuthResult",
    "IdentityToken",
    "LoginRequest",
    "OwnerContext",
    "Principal",
    "PrincipalView",
    "RegisterRequest",
    "TokenClaims",
    # Summary models
    "CategoryTotal",
    "PeriodWindow",
    "SummaryResult",
]
