"""
Operational Event Models for Personal Ledger

Significant actions are described as typed events and written to the
structured log. This provides:
1. Traceability of who did what, by owner id
2. Debugging information when things go wrong
3. A single place that decides what is safe to log

DESIGN DECISION: Events are log records only. They are not stored and
there is no edit history; entry amounts and notes are never logged.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledger.models.clock import utc_now


class LedgerEventType(str, Enum):
    """Types of events we log."""
    # Credentials
    PRINCIPAL_REGISTERED = "principal_registered"
    REGISTRATION_CONFLICT = "registration_conflict"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"

    # Authorization
    TOKEN_REJECTED = "token_rejected"

    # Entries
    ENTRY_CREATED = "entry_created"
    ENTRY_UPDATED = "entry_updated"
    ENTRY_DELETED = "entry_deleted"
    ENTRY_NOT_FOUND = "entry_not_found"

    # Summaries
    SUMMARY_COMPUTED = "summary_computed"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class EventSeverity(str, Enum):
    """Severity level for events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single operational event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType
    severity: EventSeverity = EventSeverity.INFO

    # Who and what
    owner_id: Optional[UUID] = None
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'entry', 'principal', 'summary')"
    )
    entity_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "owner_id": str(self.owner_id) if self.owner_id else None,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = LedgerEventBuilder.entry_created(owner_id, entry_id, "expense")
        event = LedgerEventBuilder.token_rejected("expired")
    """

    @staticmethod
    def principal_registered(owner_id: UUID) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PRINCIPAL_REGISTERED,
            owner_id=owner_id,
            entity_type="principal",
            entity_id=owner_id,
            description="Principal registered",
        )

    @staticmethod
    def registration_conflict() -> LedgerEvent:
        # The email itself is not logged
        return LedgerEvent(
            event_type=LedgerEventType.REGISTRATION_CONFLICT,
            severity=EventSeverity.WARNING,
            entity_type="principal",
            description="Registration rejected: email already in use",
        )

    @staticmethod
    def login_succeeded(owner_id: UUID) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOGIN_SUCCEEDED,
            owner_id=owner_id,
            entity_type="principal",
            entity_id=owner_id,
            description="Login succeeded",
        )

    @staticmethod
    def login_failed(reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOGIN_FAILED,
            severity=EventSeverity.WARNING,
            entity_type="principal",
            description="Login failed",
            details={"reason": reason},
        )

    @staticmethod
    def token_rejected(reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TOKEN_REJECTED,
            severity=EventSeverity.WARNING,
            entity_type="token",
            description="Identity token rejected",
            details={"reason": reason},
        )

    @staticmethod
    def entry_created(owner_id: UUID, entry_id: UUID, kind: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_CREATED,
            owner_id=owner_id,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Entry created: {kind}",
            details={"kind": kind},
        )

    @staticmethod
    def entry_updated(owner_id: UUID, entry_id: UUID, fields: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_UPDATED,
            owner_id=owner_id,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Entry updated: {', '.join(fields)}",
            details={"fields": fields},
        )

    @staticmethod
    def entry_deleted(owner_id: UUID, entry_id: UUID) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_DELETED,
            owner_id=owner_id,
            entity_type="entry",
            entity_id=entry_id,
            description="Entry deleted",
        )

    @staticmethod
    def entry_not_found(owner_id: UUID, raw_entry_id: str, operation: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_NOT_FOUND,
            severity=EventSeverity.WARNING,
            owner_id=owner_id,
            entity_type="entry",
            description=f"Entry not found for {operation}",
            details={"entry_id": raw_entry_id, "operation": operation},
        )

    @staticmethod
    def summary_computed(owner_id: UUID, period_key: str, entry_count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SUMMARY_COMPUTED,
            severity=EventSeverity.DEBUG,
            owner_id=owner_id,
            entity_type="summary",
            description=f"Summary computed for {period_key} over {entry_count} entries",
            details={"period_key": period_key, "entry_count": entry_count},
        )

    @staticmethod
    def storage_error(operation: str, error_message: str, owner_id: Optional[UUID] = None) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.STORAGE_ERROR,
            severity=EventSeverity.ERROR,
            owner_id=owner_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def system_error(error_type: str, error_message: str, details: Optional[dict] = None) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SYSTEM_ERROR,
            severity=EventSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
