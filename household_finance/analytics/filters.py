"""
Transaction Filter

Selects the transactions the active filters and view mode let through,
newest first. Every predicate must hold; the tag filter is the one
exception, where any single listed tag is enough.
"""

import calendar
from collections.abc import Iterable
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from household_finance.models.finance import BUSINESS_TAG, Transaction
from household_finance.models.state import (
    EPOCH,
    DateRange,
    DateRangePreset,
    Filters,
    ViewMode,
)


def month_bounds(day: date) -> tuple[date, date]:
    """First and last day of the calendar month containing `day`."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def resolve_date_range(
    preset: DateRangePreset,
    today: Optional[date] = None,
    custom: Optional[DateRange] = None,
) -> DateRange:
    """
    Concrete from/to dates for a preset.

    CUSTOM keeps the dates of `custom` (or falls back to this month when
    none is given).
    """
    today = today or date.today()

    if preset == DateRangePreset.CUSTOM:
        if custom is not None:
            return custom.model_copy(update={"preset": DateRangePreset.CUSTOM})
        start, end = month_bounds(today)
    elif preset == DateRangePreset.LAST_MONTH:
        start, end = month_bounds(today - relativedelta(months=1))
    elif preset == DateRangePreset.THIS_YEAR:
        start, end = date(today.year, 1, 1), date(today.year, 12, 31)
    elif preset == DateRangePreset.ALL_TIME:
        start, end = EPOCH, today
    else:
        start, end = month_bounds(today)

    return DateRange(preset=preset, date_from=start, date_to=end)


def default_filters(today: Optional[date] = None) -> Filters:
    """This month, no other criteria."""
    return Filters(date_range=resolve_date_range(DateRangePreset.THIS_MONTH, today))


def amount_text(amount: float) -> str:
    """Amount as shown to search: no trailing '.0' on whole numbers."""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


# =============================================================================
# PREDICATES
# =============================================================================

def matches_view_mode(transaction: Transaction, view_mode: ViewMode) -> bool:
    if view_mode == ViewMode.PRIVATE:
        return not transaction.has_tag(BUSINESS_TAG)
    if view_mode == ViewMode.BUSINESS:
        return transaction.has_tag(BUSINESS_TAG)
    return True


def matches_search(transaction: Transaction, search_term: str) -> bool:
    """Case-insensitive substring match on description, tags or amount."""
    term = search_term.lower()
    if not term:
        return True
    if term in transaction.description.lower():
        return True
    if any(term in tag.lower() for tag in transaction.tags):
        return True
    return term in amount_text(transaction.amount)


def matches_tags(transaction: Transaction, tags: tuple[str, ...]) -> bool:
    if not tags:
        return True
    return any(tag in transaction.tags for tag in tags)


def matches_filters(
    transaction: Transaction,
    filters: Filters,
    view_mode: ViewMode = ViewMode.ALL,
    check_dates: bool = True,
) -> bool:
    """True if the transaction passes every active predicate."""
    if check_dates and not filters.date_range.contains(transaction.date):
        return False
    if not matches_view_mode(transaction, view_mode):
        return False
    if filters.transaction_type is not None and transaction.type != filters.transaction_type:
        return False
    if filters.category_id and transaction.category_id != filters.category_id:
        return False
    if not matches_search(transaction, filters.search_term):
        return False
    return matches_tags(transaction, filters.tags)


def filter_transactions(
    transactions: Iterable[Transaction],
    filters: Filters,
    view_mode: ViewMode = ViewMode.ALL,
) -> list[Transaction]:
    """Transactions passing all filters, sorted by date descending."""
    selected = [t for t in transactions if matches_filters(t, filters, view_mode)]
    selected.sort(key=lambda t: t.date, reverse=True)
    return selected
