"""
Summary Aggregation Engine

DESIGN DECISION: Summaries are computed on every request from the
entries currently in storage. There is no cache and nothing is written.

Each summary is:
1. A half-open UTC window [start, end) for a month or a year
2. One owner-scoped storage query for entries inside that window,
   oldest first
3. A single pass that adds up income, expenses and per-category totals

GUARANTEES:
- Only the caller's entries inside the window are read
- Money is summed as Decimal, so balance == income - expenses exactly
- Sum of category totals == income + expenses
- An empty window is a zero summary, not an error
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Union

from ledger.errors import FieldError, Internal, ValidationError
from ledger.events import EventLogger
from ledger.models.entry import CENT, EntryKind, LedgerEntry
from ledger.models.principal import OwnerContext
from ledger.models.summary import CategoryTotal, PeriodWindow, SummaryResult
from ledger.services.storage import LedgerStorageInterface, StorageError


UNCATEGORIZED = "Uncategorized"

# Upper bound leaves room for the exclusive end of the window
MIN_YEAR = 1
MAX_YEAR = 9998

PeriodValue = Union[int, str, None]


# =============================================================================
# PERIOD PARSING
# =============================================================================

def _parse_int(field: str, value: PeriodValue) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError.for_field(field, f"{field} is required")
    if isinstance(value, bool):
        raise ValidationError.for_field(field, f"{field} must be an integer")
    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationError.for_field(field, f"{field} must be an integer")
    return int(text)


def parse_year(value: PeriodValue) -> int:
    year = _parse_int("year", value)
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError.for_field("year", f"year must be between {MIN_YEAR} and {MAX_YEAR}")
    return year


def parse_month(value: PeriodValue) -> int:
    month = _parse_int("month", value)
    if not 1 <= month <= 12:
        raise ValidationError.for_field("month", "month must be between 1 and 12")
    return month


def _parse_period(year: PeriodValue, month: PeriodValue = None, monthly: bool = False) -> tuple[int, Optional[int]]:
    """Parse year (and month) reporting every bad field at once."""
    errors: list[FieldError] = []
    parsed_year = parsed_month = None

    try:
        parsed_year = parse_year(year)
    except ValidationError as e:
        errors.extend(e.errors)
    if monthly:
        try:
            parsed_month = parse_month(month)
        except ValidationError as e:
            errors.extend(e.errors)

    if errors:
        raise ValidationError(errors)
    return parsed_year, parsed_month


# =============================================================================
# WINDOWS
# =============================================================================

def _first_instant(year: int, month: int) -> datetime:
    return datetime(year, month, 1, tzinfo=timezone.utc)


def monthly_window(year: int, month: int) -> PeriodWindow:
    """[first day of month, first day of next month), December rolls the year."""
    if month == 12:
        end = _first_instant(year + 1, 1)
    else:
        end = _first_instant(year, month + 1)
    return PeriodWindow(
        period_key=f"{year:04d}-{month:02d}",
        year=year,
        month=month,
        start=_first_instant(year, month),
        end=end,
    )


def yearly_window(year: int) -> PeriodWindow:
    """[Jan 1 of year, Jan 1 of year + 1), both UTC."""
    return PeriodWindow(
        period_key=f"{year:04d}",
        year=year,
        start=_first_instant(year, 1),
        end=_first_instant(year + 1, 1),
    )


# =============================================================================
# REDUCTION
# =============================================================================

def summarize(
    window: PeriodWindow,
    entries: Iterable[LedgerEntry],
    uncategorized_label: str = UNCATEGORIZED,
) -> SummaryResult:
    """
    Reduce entries into a summary for the window.

    Entries outside the window are ignored. Category totals cover income
    and expenses together and keep first-seen order, so callers pass
    entries oldest first.
    """
    total_income = Decimal("0")
    total_expenses = Decimal("0")
    by_category: dict[str, Decimal] = {}
    count = 0

    for entry in entries:
        if not window.contains(entry.occurred_at):
            continue
        count += 1

        if entry.kind == EntryKind.INCOME:
            total_income += entry.amount
        else:
            total_expenses += entry.amount

        category = (entry.category or "").strip() or uncategorized_label
        by_category[category] = by_category.get(category, Decimal("0")) + entry.amount

    return SummaryResult(
        period_key=window.period_key,
        year=window.year,
        month=window.month,
        start=window.start,
        end=window.end,
        total_income=total_income.quantize(CENT),
        total_expenses=total_expenses.quantize(CENT),
        balance=(total_income - total_expenses).quantize(CENT),
        by_category=[
            CategoryTotal(category=category, total=total.quantize(CENT))
            for category, total in by_category.items()
        ],
        entry_count=count,
    )


# =============================================================================
# ENGINE
# =============================================================================

class SummaryEngine:
    """
    Computes owner-scoped summaries over period windows.

    The engine never picks a default period; callers must supply one.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        event_logger: Optional[EventLogger] = None,
        uncategorized_label: str = UNCATEGORIZED,
    ):
        self._storage = storage
        self._events = event_logger or EventLogger()
        self._uncategorized_label = uncategorized_label

    async def monthly(self, owner: OwnerContext, year: PeriodValue, month: PeriodValue) -> SummaryResult:
        """
        Summary for one calendar month.

        Raises:
            ValidationError: Missing or malformed year/month, month outside 1-12
        """
        parsed_year, parsed_month = _parse_period(year, month, monthly=True)
        return await self.summarize_window(owner, monthly_window(parsed_year, parsed_month))

    async def yearly(self, owner: OwnerContext, year: PeriodValue) -> SummaryResult:
        """
        Summary for one calendar year.

        Raises:
            ValidationError: Missing or malformed year
        """
        parsed_year, _ = _parse_period(year)
        return await self.summarize_window(owner, yearly_window(parsed_year))

    async def summarize_window(self, owner: OwnerContext, window: PeriodWindow) -> SummaryResult:
        try:
            entries = await self._storage.find_entries(
                owner.owner_id,
                start=window.start,
                end=window.end,
                oldest_first=True,
            )
        except StorageError as e:
            await self._events.log_storage_error("find_entries", str(e), owner.owner_id)
            raise Internal()

        owned = [entry for entry in entries if entry.owner_id == owner.owner_id]
        result = summarize(window, owned, self._uncategorized_label)
        await self._events.log_summary_computed(owner.owner_id, window.period_key, result.entry_count)
        return result
