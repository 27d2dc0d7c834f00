"""
Event Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability per owner
2. Debugging capability
3. Visibility into rejected tokens and failed logins

The event logger:
- Writes structured JSON through structlog
- Never persists anything (there is no audit trail)
"""

import logging
import sys
from typing import Optional
from uuid import UUID

import structlog

from ledger.models.events import EventSeverity, LedgerEvent, LedgerEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and so structlog) to stdout at the given level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class EventLogger:
    """
    Central event logging service.

    Every component that logs takes one of these in its constructor.
    """

    def __init__(self, logger_name: str = "ledger"):
        self._logger = structlog.get_logger(logger_name)

    async def log(self, event: LedgerEvent) -> None:
        """Log an event at its own severity."""
        log_dict = event.to_log_dict()
        if event.severity == EventSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)

    async def log_principal_registered(self, owner_id: UUID) -> None:
        await self.log(LedgerEventBuilder.principal_registered(owner_id))

    async def log_registration_conflict(self) -> None:
        await self.log(LedgerEventBuilder.registration_conflict())

    async def log_login_succeeded(self, owner_id: UUID) -> None:
        await self.log(LedgerEventBuilder.login_succeeded(owner_id))

    async def log_login_failed(self, reason: str) -> None:
        await self.log(LedgerEventBuilder.login_failed(reason))

    async def log_token_rejected(self, reason: str) -> None:
        await self.log(LedgerEventBuilder.token_rejected(reason))

    async def log_entry_created(self, owner_id: UUID, entry_id: UUID, kind: str) -> None:
        await self.log(LedgerEventBuilder.entry_created(owner_id, entry_id, kind))

    async def log_entry_updated(self, owner_id: UUID, entry_id: UUID, fields: list[str]) -> None:
        await self.log(LedgerEventBuilder.entry_updated(owner_id, entry_id, fields))

    async def log_entry_deleted(self, owner_id: UUID, entry_id: UUID) -> None:
        await self.log(LedgerEventBuilder.entry_deleted(owner_id, entry_id))

    async def log_entry_not_found(self, owner_id: UUID, raw_entry_id: str, operation: str) -> None:
        await self.log(LedgerEventBuilder.entry_not_found(owner_id, raw_entry_id, operation))

    async def log_summary_computed(self, owner_id: UUID, period_key: str, entry_count: int) -> None:
        await self.log(LedgerEventBuilder.summary_computed(owner_id, period_key, entry_count))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        owner_id: Optional[UUID] = None,
    ) -> None:
        await self.log(LedgerEventBuilder.storage_error(operation, error_message, owner_id))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        await self.log(LedgerEventBuilder.system_error(error_type, error_message, details))
