"""
Typed Errors for Personal Ledger

Every component fails fast with one of these. Nothing here retries.
The HTTP layer maps each kind to a status code and a minimal body
(see ledger.api.errors); messages are written to be safe to show.

DESIGN DECISION: Unauthorized and NotFound carry fixed generic messages.
Callers must not be able to tell "unknown email" from "wrong password",
or "no such entry" from "someone else's entry".
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FieldError(dict):
    """One per-field validation message: {"field": ..., "message": ...}."""

    def __init__(self, field: str, message: str):
        super().__init__(field=field, message=message)


class ValidationError(LedgerError):
    """Malformed input shape or range. User-correctable."""

    status_code = 400
    default_message = "Invalid request"

    def __init__(self, errors: list[FieldError], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field, message)])


class Unauthorized(LedgerError):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = 401
    default_message = "Not authorized"


class Conflict(LedgerError):
    """Duplicate registration email."""

    status_code = 409
    default_message = "User already exists"


class NotFound(LedgerError):
    """Ledger entry absent or not owned by the caller."""

    status_code = 404
    default_message = "Transaction not found"


class Internal(LedgerError):
    """Unexpected storage or infrastructure failure. Opaque to callers."""

    status_code = 500
    default_message = "Internal server error"
