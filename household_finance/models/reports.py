"""
Report Models

Output shapes of the analytics layer. These are plain result records:
the analytics functions build them, views and exports read them.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from household_finance.models.finance import RecurringTransaction


# Balances at or below this are treated as paid off
PAID_OFF_THRESHOLD = 0.005


# =============================================================================
# DASHBOARD
# =============================================================================

class PeriodTotals(BaseModel):
    """Income, expense and saving totals for one period."""

    income: float = 0.0
    expense: float = 0.0
    saving: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense - self.saving


class DashboardStats(BaseModel):
    """Current-period totals and percentage trend vs. the previous period."""

    income: float
    expense: float
    saving: float
    balance: float
    income_trend: float = 0.0
    expense_trend: float = 0.0
    saving_trend: float = 0.0
    balance_trend: float = 0.0
    previous_from: Optional[datetime.date] = Field(
        default=None,
        description="Start of the comparison period (None for all time)"
    )
    previous_to: Optional[datetime.date] = None


# =============================================================================
# REPORTS
# =============================================================================

class BudgetOverviewItem(BaseModel):
    category_id: str
    name: str
    spent: float
    budget: float
    percentage: float = Field(
        ...,
        description="spent / budget x 100"
    )

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.budget


class ExpenseSlice(BaseModel):
    """Expense total for one category name."""

    name: str
    value: float


class ProjectReport(BaseModel):
    project_id: str
    name: str
    income: float
    expense: float
    profit: float
    income_budget: Optional[float] = None
    expense_budget: Optional[float] = None


class CashflowMonth(BaseModel):
    month: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Calendar month as YYYY-MM"
    )
    label: str = Field(
        ...,
        description="Short month name for chart axes"
    )
    income: float
    expense: float

    @property
    def net(self) -> float:
        return self.income - self.expense


class SankeyNode(BaseModel):
    name: str


class SankeyLink(BaseModel):
    source: int = Field(..., ge=0, description="Index into the node list")
    target: int = Field(..., ge=0, description="Index into the node list")
    value: float


class SankeyGraph(BaseModel):
    nodes: list[SankeyNode] = Field(default_factory=list)
    links: list[SankeyLink] = Field(default_factory=list)


class ReportsData(BaseModel):
    """Everything the reports view shows, built in one pass."""

    budget_overview: list[BudgetOverviewItem] = Field(default_factory=list)
    expense_breakdown: list[ExpenseSlice] = Field(default_factory=list)
    projects: list[ProjectReport] = Field(default_factory=list)
    cashflow: list[CashflowMonth] = Field(default_factory=list)
    sankey: SankeyGraph = Field(default_factory=SankeyGraph)


# =============================================================================
# UPCOMING BILLS
# =============================================================================

class UpcomingBills(BaseModel):
    bills: list[RecurringTransaction] = Field(
        default_factory=list,
        description="Bills with a due date, soonest first"
    )
    due_or_overdue_count: int = Field(
        default=0,
        ge=0,
        description="Bills due today or earlier"
    )


# =============================================================================
# DEBT PAYDOWN
# =============================================================================

class PaydownStrategy(str, Enum):
    """
    AVALANCHE: highest interest rate first.
    SNOWBALL: smallest balance first.
    """
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"


class MonthlyPaymentDetail(BaseModel):
    liability_id: str
    payment: float
    principal: float
    interest: float
    remaining_balance: float


class MonthlyBreakdown(BaseModel):
    month: int = Field(..., ge=1)
    payments: list[MonthlyPaymentDetail] = Field(default_factory=list)
    total_payment: float
    total_interest: float
    total_principal: float
    total_remaining_balance: float


class DebtPaydownPlan(BaseModel):
    strategy: PaydownStrategy
    total_months: int = 0
    total_interest_paid: float = 0.0
    total_principal_paid: float = 0.0
    monthly_breakdown: list[MonthlyBreakdown] = Field(default_factory=list)
    is_capped: bool = Field(
        default=False,
        description="True when the simulation stopped at the month limit with debt left"
    )

    def payoff_month(self, liability_id: str) -> Optional[int]:
        """First month in which the liability's remaining balance reached zero."""
        for month in self.monthly_breakdown:
            for detail in month.payments:
                if detail.liability_id == liability_id and detail.remaining_balance <= PAID_OFF_THRESHOLD:
                    return month.month
        return None
