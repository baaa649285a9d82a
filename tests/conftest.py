"""
Shared fixtures.

All date-dependent tests run against a fixed "today" so results never
depend on when the suite runs.
"""

from datetime import date

import pytest

from household_finance.analytics.filters import default_filters
from household_finance.models import (
    AppState,
    Transaction,
    TransactionType,
)


TODAY = date(2024, 3, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def make_state():
    """Factory for an AppState with this month's default filters."""
    def _make(**fields) -> AppState:
        fields.setdefault("filters", default_filters(TODAY))
        return AppState(**fields)
    return _make


@pytest.fixture
def make_transaction():
    """Factory for a transaction dated TODAY unless told otherwise."""
    def _make(
        transaction_id: str,
        type: TransactionType = TransactionType.EXPENSE,
        amount: float = 10.0,
        day: date = TODAY,
        **fields,
    ) -> Transaction:
        return Transaction(id=transaction_id, type=type, amount=amount, date=day, **fields)
    return _make
