"""Summary query package."""

from ledger.queries.summary import (
    SummaryEngine,
    monthly_window,
    parse_month,
    parse_year,
    summarize,
    yearly_window,
)

__all__ = [
    "SummaryEngine",
    "monthly_window",
    "parse_month",
    "parse_year",
    "summarize",
    "yearly_window",
]
