"""
Default State

What a first start shows before anything was saved: a small household
with a salary, rent, a car loan and one freelance project. Dates are
placed relative to today so the dashboard has something in the current
month.
"""

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from household_finance.analytics.filters import default_filters
from household_finance.engine.recalculate import recalculate_derived
from household_finance.engine.recurrence import next_due_date
from household_finance.models.finance import (
    BUSINESS_TAG,
    Category,
    CategoryType,
    Frequency,
    Goal,
    GoalType,
    Liability,
    LiabilityType,
    Project,
    RecurringTransaction,
    Transaction,
    TransactionType,
)
from household_finance.models.state import AppState


def _recurring(today: date, **fields) -> RecurringTransaction:
    due = next_due_date(
        fields["start_date"],
        fields["frequency"],
        fields.get("interval", 1),
        fields.get("end_date"),
        today,
    )
    return RecurringTransaction(next_due_date=due, **fields)


def default_state(today: Optional[date] = None) -> AppState:
    """Sample data with derived amounts already computed."""
    today = today or date.today()
    this_month = today.replace(day=1)
    last_month = this_month - relativedelta(months=1)

    transactions = (
        Transaction(id="1", type=TransactionType.INCOME, amount=3200, description="Salary",
                    date=today, category_id="c1"),
        Transaction(id="2", type=TransactionType.EXPENSE, amount=850, description="Rent",
                    date=this_month, category_id="c2", tags=("private",)),
        Transaction(id="3", type=TransactionType.EXPENSE, amount=75.50, description="Weekly groceries",
                    date=last_month.replace(day=20), category_id="c3", tags=("private",)),
        Transaction(id="4", type=TransactionType.SAVING, amount=200, description="ETF savings plan",
                    date=this_month.replace(day=15), category_id="c4", goal_id="g1"),
        Transaction(id="5", type=TransactionType.INCOME, amount=500, description="Freelance project",
                    date=this_month.replace(day=10), category_id="c5",
                    tags=(BUSINESS_TAG, "project-alpha")),
        Transaction(id="6", type=TransactionType.EXPENSE, amount=49.99, description="Software subscription",
                    date=this_month.replace(day=5), category_id="c6",
                    tags=(BUSINESS_TAG, "project-alpha")),
        Transaction(id="7", type=TransactionType.EXPENSE, amount=120.00, description="Insurance",
                    date=this_month.replace(day=2), category_id="c2", tags=("private",)),
        Transaction(id="t-l1", type=TransactionType.EXPENSE, amount=500, description="Car loan installment",
                    date=this_month, category_id="c7", liability_id="l1"),
    )

    categories = (
        Category(id="c1", name="Salary", type=CategoryType.INCOME),
        Category(id="c2", name="Housing", type=CategoryType.EXPENSE, budget=1000),
        Category(id="c3", name="Groceries", type=CategoryType.EXPENSE, budget=400),
        Category(id="c4", name="Investments", type=CategoryType.EXPENSE),
        Category(id="c5", name="Freelance", type=CategoryType.INCOME),
        Category(id="c6", name="Software", type=CategoryType.EXPENSE, budget=100),
        Category(id="c7", name="Loan", type=CategoryType.EXPENSE),
    )

    goals = (
        Goal(id="g1", name="New car", target_amount=20000, type=GoalType.GOAL),
        Goal(id="g2", name="Vacation", target_amount=1500, type=GoalType.SINKING_FUND),
    )

    liabilities = (
        Liability(id="l1", name="Car loan", type=LiabilityType.DEBT,
                  initial_amount=15000, interest_rate=3.5, min_monthly_payment=500),
        Liability(id="l2", name="Student loan", type=LiabilityType.DEBT,
                  initial_amount=25000, interest_rate=1.8, min_monthly_payment=250),
        Liability(id="l3", name="Loan to a friend", type=LiabilityType.LOAN,
                  initial_amount=1000, interest_rate=0, min_monthly_payment=100),
    )

    recurring = (
        _recurring(today, id="r1", description="Rent", amount=850, type=TransactionType.EXPENSE,
                   category_id="c2", frequency=Frequency.MONTHLY, start_date=date(2023, 1, 1),
                   is_bill=True),
        _recurring(today, id="r2", description="Phone contract", amount=35,
                   type=TransactionType.EXPENSE, category_id="c2", frequency=Frequency.MONTHLY,
                   start_date=date(2023, 1, 15), is_bill=True),
        _recurring(today, id="r3", description="Insurance", amount=120, type=TransactionType.EXPENSE,
                   category_id="c2", frequency=Frequency.YEARLY, start_date=date(2023, 3, 1),
                   is_bill=True),
    )

    goals, liabilities = recalculate_derived(transactions, goals, liabilities)

    return AppState(
        transactions=transactions,
        categories=categories,
        goals=goals,
        projects=(Project(id="p1", name="Project Alpha", tag="project-alpha"),),
        recurring_transactions=recurring,
        liabilities=liabilities,
        filters=default_filters(today),
    )
