"""
Summary Models

A summary is derived from the entries in one period window and is
never persisted. The shape is fixed: category totals are an explicit
list of (category, total) pairs in first-seen order.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PeriodWindow(BaseModel):
    """Half-open UTC range [start, end) that a summary covers."""
    model_config = ConfigDict(frozen=True)

    period_key: str = Field(
        ...,
        description="'YYYY-MM' for a month, 'YYYY' for a year"
    )
    year: int
    month: Optional[int] = None
    start: datetime
    end: datetime

    @model_validator(mode='after')
    def validate_bounds(self) -> 'PeriodWindow':
        if self.end <= self.start:
            raise ValueError("Window end must be after start")
        return self

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


class CategoryTotal(BaseModel):
    category: str
    total: Decimal


class SummaryResult(BaseModel):
    """Totals for one owner over one period window."""

    period_key: str
    year: int
    month: Optional[int] = None
    start: datetime
    end: datetime
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    by_category: list[CategoryTotal] = Field(default_factory=list)
    entry_count: int = Field(default=0, ge=0)
