"""
Ledger Entry Models

These models define the strict schemas for entries flowing through the system.
They are designed to:
1. Reject non-positive and sub-cent amounts at the boundary
2. Normalize every timestamp to UTC before it reaches storage
3. Keep owner_id out of anything a client can send

DESIGN DECISION: Amounts are Decimal quantized to cents.
Summaries add them up exactly; there is no float anywhere on the money path.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from ledger.models.clock import coerce_calendar_date, ensure_utc, utc_now


CENT = Decimal("0.01")

Amount = Annotated[
    Decimal,
    Field(gt=0, max_digits=14, decimal_places=2, description="Positive amount, at most 2 decimal places")
]


def to_cents(value: Decimal) -> Decimal:
    """Quantize a Decimal to exactly two decimal places."""
    return value.quantize(CENT)


# =============================================================================
# ENUMS
# =============================================================================

class EntryKind(str, Enum):
    """Direction of money for an entry."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# STORED ENTRY
# =============================================================================

class LedgerEntry(BaseModel):
    """
    One income or expense record as stored.

    owner_id is set by the service from the caller's OwnerContext,
    never from request data.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique entry ID"
    )
    owner_id: UUID = Field(
        ...,
        description="Principal that owns this entry"
    )
    kind: EntryKind
    amount: Amount
    # Older documents may lack a category; summaries bucket them as Uncategorized
    category: Optional[str] = Field(
        default=None,
        max_length=100,
    )
    occurred_at: datetime = Field(
        ...,
        description="When the money moved (UTC)"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    created_at: datetime = Field(
        default_factory=utc_now
    )
    updated_at: datetime = Field(
        default_factory=utc_now
    )

    @field_validator('amount')
    @classmethod
    def quantize_amount(cls, v: Decimal) -> Decimal:
        return to_cents(v)

    @field_validator('occurred_at', 'created_at', 'updated_at')
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class EntryCreate(BaseModel):
    """Payload for creating an entry."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    kind: EntryKind = Field(
        ...,
        description="'income' or 'expense'"
    )
    amount: Amount
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    occurred_at: Optional[datetime] = Field(
        default=None,
        description="Defaults to now (UTC) when omitted"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
    )

    @field_validator('occurred_at', mode='before')
    @classmethod
    def parse_calendar_date(cls, v):
        return coerce_calendar_date(v)

    @field_validator('occurred_at')
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @field_validator('amount')
    @classmethod
    def quantize_amount(cls, v: Decimal) -> Decimal:
        return to_cents(v)


class EntryUpdate(BaseModel):
    """
    Partial update of an entry.

    Only fields actually sent are applied. Required fields of the
    stored entry cannot be cleared with an explicit null.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    kind: Optional[EntryKind] = None
    amount: Optional[Amount] = None
    category: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=100,
    )
    occurred_at: Optional[datetime] = None
    note: Optional[str] = Field(
        default=None,
        max_length=500,
    )

    @field_validator('occurred_at', mode='before')
    @classmethod
    def parse_calendar_date(cls, v):
        return coerce_calendar_date(v)

    @field_validator('occurred_at')
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @field_validator('amount')
    @classmethod
    def quantize_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return to_cents(v) if v is not None else None

    @model_validator(mode='after')
    def validate_fields(self) -> 'EntryUpdate':
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        for name in ("kind", "amount", "category", "occurred_at"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class EntryFilter(BaseModel):
    """Optional filters for listing entries."""
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: Optional[EntryKind] = None
    category: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator('start', 'end', mode='before')
    @classmethod
    def parse_calendar_date(cls, v):
        return coerce_calendar_date(v)

    @field_validator('start', 'end')
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @model_validator(mode='after')
    def validate_range(self) -> 'EntryFilter':
        if self.start and self.end and self.end <= self.start:
            raise ValueError("end must be after start")
        return self
