"""
Upcoming Bills

Recurring rules flagged as bills that still have a due date, soonest
first, plus how many of them are due today or already overdue.
"""

from collections.abc import Iterable
from datetime import date
from typing import Optional

from household_finance.models.finance import RecurringTransaction
from household_finance.models.reports import UpcomingBills


def upcoming_bills(
    recurring: Iterable[RecurringTransaction],
    today: Optional[date] = None,
) -> UpcomingBills:
    today = today or date.today()
    bills = sorted(
        (r for r in recurring if r.is_bill and r.next_due_date is not None),
        key=lambda r: r.next_due_date,
    )
    return UpcomingBills(
        bills=bills,
        due_or_overdue_count=sum(1 for r in bills if r.next_due_date <= today),
    )
