"""
Recurrence Calculator

Pure date arithmetic for recurring transactions. Month and year steps
use relativedelta, so Jan 31 + 1 month lands on the last day of February.

Two entry points:
- next_due_date: where a rule stands today, computed from its start date
- advance_due_date: where a rule goes after one of its occurrences is paid
"""

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from household_finance.models.finance import Frequency


_UNIT = {
    Frequency.DAILY: lambda n: relativedelta(days=n),
    Frequency.WEEKLY: lambda n: relativedelta(weeks=n),
    Frequency.MONTHLY: lambda n: relativedelta(months=n),
    Frequency.YEARLY: lambda n: relativedelta(years=n),
}


def step(day: date, frequency: Frequency, interval: int) -> date:
    """Move `day` forward by one full interval of the frequency unit."""
    return day + _UNIT[frequency](interval)


def _cut_at_end(candidate: date, end_date: Optional[date]) -> Optional[date]:
    if end_date is not None and end_date < candidate:
        return None
    return candidate


def next_due_date(
    start_date: date,
    frequency: Frequency,
    interval: int,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> Optional[date]:
    """
    First occurrence on or after today.

    Starts at `start_date` and steps by `interval` units while the date is
    strictly before today. Returns None if that occurrence falls after
    `end_date` (the series has fully elapsed).
    """
    today = today or date.today()
    candidate = start_date
    while candidate < today:
        candidate = step(candidate, frequency, interval)
    return _cut_at_end(candidate, end_date)


def advance_due_date(
    current_due: date,
    frequency: Frequency,
    interval: int,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> Optional[date]:
    """
    Next due date after paying the occurrence due on `current_due`.

    Always steps at least once, then keeps stepping while the result is
    still before today. Returns None once the series passes `end_date`.
    """
    today = today or date.today()
    candidate = step(current_due, frequency, interval)
    while candidate < today:
        candidate = step(candidate, frequency, interval)
    return _cut_at_end(candidate, end_date)
