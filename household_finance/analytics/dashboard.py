"""
Dashboard Stats

Totals for the active period and the percentage trend against the
period right before it.

Comparison periods:
- this month / last month: the calendar month before
- this year: the year before
- custom: the same number of days ending the day before the range
- all time: no comparison, every trend is 0

The comparison period is selected by date alone: view mode, type,
category, search and tag filters only narrow the active period.
"""

from collections.abc import Iterable
from datetime import timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from household_finance.analytics.filters import filter_transactions, month_bounds
from household_finance.models.finance import Transaction, TransactionType
from household_finance.models.reports import DashboardStats, PeriodTotals
from household_finance.models.state import (
    DateRange,
    DateRangePreset,
    Filters,
    ViewMode,
)


def calculate_totals(transactions: Iterable[Transaction]) -> PeriodTotals:
    income = expense = saving = 0.0
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        elif t.type == TransactionType.EXPENSE:
            expense += t.amount
        elif t.type == TransactionType.SAVING:
            saving += t.amount
    return PeriodTotals(income=income, expense=expense, saving=saving)


def calculate_trend(current: float, previous: float) -> float:
    """
    Percentage change from previous to current.

    0 when unchanged; 100 when growing from nothing; otherwise the change
    relative to |previous|.
    """
    if current == previous:
        return 0.0
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / abs(previous) * 100


def previous_period(date_range: DateRange) -> Optional[DateRange]:
    """The comparison range for `date_range`, None for all time."""
    preset = date_range.preset

    if preset == DateRangePreset.ALL_TIME:
        return None
    if preset in (DateRangePreset.THIS_MONTH, DateRangePreset.LAST_MONTH):
        start, end = month_bounds(date_range.date_from - relativedelta(months=1))
    elif preset == DateRangePreset.THIS_YEAR:
        start = date_range.date_from - relativedelta(years=1)
        end = date_range.date_to - relativedelta(years=1)
    else:
        end = date_range.date_from - timedelta(days=1)
        start = end - timedelta(days=date_range.day_count - 1)

    return DateRange(preset=preset, date_from=start, date_to=end)


def dashboard_stats(
    transactions: Iterable[Transaction],
    filters: Filters,
    view_mode: ViewMode = ViewMode.ALL,
) -> DashboardStats:
    """Current-period totals plus trends vs. the previous period."""
    transactions = list(transactions)
    current = calculate_totals(filter_transactions(transactions, filters, view_mode))

    stats = DashboardStats(
        income=current.income,
        expense=current.expense,
        saving=current.saving,
        balance=current.balance,
    )

    comparison = previous_period(filters.date_range)
    if comparison is None:
        return stats

    previous = calculate_totals(t for t in transactions if comparison.contains(t.date))

    return stats.model_copy(update={
        "income_trend": calculate_trend(current.income, previous.income),
        "expense_trend": calculate_trend(current.expense, previous.expense),
        "saving_trend": calculate_trend(current.saving, previous.saving),
        "balance_trend": calculate_trend(current.balance, previous.balance),
        "previous_from": comparison.date_from,
        "previous_to": comparison.date_to,
    })
