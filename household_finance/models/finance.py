"""
Core Financial Entities

These models define the records the state engine owns:
transactions, categories, goals, liabilities, recurring rules and projects.

Every entity comes in two shapes:
- a *Draft*: the fields a user may set
- the entity itself: the draft plus `id` and any derived fields

DESIGN DECISION: Entities are frozen. A change is a replacement
(`model_copy(update=...)`), never an in-place edit, so an old state
snapshot is never altered by a newer one.

Money is a plain float. Derived fields (goal.current_amount,
liability.paid_amount, recurring.next_due_date) are written only by the
engine's recalculation and recurrence code.
"""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


BUSINESS_TAG = "business"
BILL_TAG = "bill"
SCAN_TAG = "ai-scan"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"
    SAVING = "saving"


class CategoryType(str, Enum):
    """Categories are either for income or for expenses."""
    INCOME = "income"
    EXPENSE = "expense"


class GoalType(str, Enum):
    """A one-off savings target or a fund refilled for periodic costs."""
    GOAL = "goal"
    SINKING_FUND = "sinking_fund"


class Frequency(str, Enum):
    """Recurrence unit; the rule's interval multiplies it."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class LiabilityType(str, Enum):
    """
    Direction of a liability.

    DEBT: the user owes money, paid down by expense transactions.
    LOAN: money owed to the user, paid back by income transactions.
    """
    DEBT = "debt"
    LOAN = "loan"


class _Entity(BaseModel):
    """Shared model configuration for all entities."""

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionDraft(_Entity):
    """A transaction before the engine assigns it an id."""

    type: TransactionType = Field(
        ...,
        description="income, expense or saving"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Non-negative amount"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="Free-text description"
    )
    date: datetime.date = Field(
        ...,
        description="Booking date (no time component)"
    )
    category_id: Optional[str] = None
    goal_id: Optional[str] = None
    liability_id: Optional[str] = None
    tags: tuple[str, ...] = Field(
        default=(),
        description="Case-sensitive tags; order carries no meaning"
    )

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Drop blank and repeated tags, keeping first occurrence order."""
        seen: dict[str, None] = {}
        for tag in v:
            tag = tag.strip()
            if tag:
                seen.setdefault(tag, None)
        return tuple(seen)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


class Transaction(TransactionDraft):
    """A booked transaction."""

    id: str = Field(
        ...,
        min_length=1,
        description="Unique transaction ID"
    )


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryDraft(_Entity):
    """
    A category before the engine assigns it an id.

    Budgets only apply to expense categories and are scoped by whatever
    date range is active when reports are built.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    type: CategoryType
    budget: Optional[float] = Field(
        default=None,
        gt=0,
        description="Spending budget for the active period (expense only)"
    )


class Category(CategoryDraft):
    id: str = Field(..., min_length=1)


# =============================================================================
# GOALS
# =============================================================================

class GoalDraft(_Entity):
    """User-settable goal fields. Progress is never settable."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100
    )
    target_amount: float = Field(
        ...,
        ge=0,
        description="Amount to reach"
    )
    type: GoalType = GoalType.GOAL
    monthly_contribution: Optional[float] = Field(
        default=None,
        ge=0
    )
    start_date: Optional[datetime.date] = None


class Goal(GoalDraft):
    """
    A savings goal.

    current_amount always equals the sum of saving transactions that
    reference this goal.
    """

    id: str = Field(..., min_length=1)
    current_amount: float = Field(
        default=0.0,
        description="Derived: sum of saving transactions for this goal"
    )

    @property
    def progress(self) -> float:
        """Fraction of the target reached (0 when the target is 0)."""
        if self.target_amount <= 0:
            return 0.0
        return self.current_amount / self.target_amount


# =============================================================================
# LIABILITIES
# =============================================================================

class LiabilityDraft(_Entity):
    """User-settable liability fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100
    )
    type: LiabilityType
    initial_amount: float = Field(
        ...,
        ge=0,
        description="Amount originally owed"
    )
    interest_rate: float = Field(
        default=0.0,
        ge=0,
        description="Annual interest rate in percent"
    )
    min_monthly_payment: float = Field(
        default=0.0,
        ge=0,
        description="Minimum payment due every month"
    )


class Liability(LiabilityDraft):
    """
    A debt or a loan.

    paid_amount = min(initial_amount, sum of matching transactions),
    where debts match expenses and loans match income.
    """

    id: str = Field(..., min_length=1)
    paid_amount: float = Field(
        default=0.0,
        description="Derived: amount paid so far, capped at initial_amount"
    )

    @property
    def remaining(self) -> float:
        return max(self.initial_amount - self.paid_amount, 0.0)

    @property
    def payment_type(self) -> TransactionType:
        """Transaction type that pays this liability down."""
        if self.type == LiabilityType.DEBT:
            return TransactionType.EXPENSE
        return TransactionType.INCOME


# =============================================================================
# RECURRING TRANSACTIONS
# =============================================================================

class RecurringDraft(_Entity):
    """
    A recurrence rule before the engine schedules it.

    The rule fires every `interval` x `frequency` from `start_date`,
    optionally until `end_date`.
    """

    description: str = Field(
        ...,
        min_length=1,
        max_length=200
    )
    amount: float = Field(..., ge=0)
    type: TransactionType
    category_id: Optional[str] = None
    goal_id: Optional[str] = None
    frequency: Frequency
    interval: int = Field(
        default=1,
        ge=1,
        description="Number of frequency units between occurrences"
    )
    start_date: datetime.date
    end_date: Optional[datetime.date] = None
    is_bill: bool = Field(
        default=False,
        description="Show in upcoming bills and allow one-click payment"
    )


class RecurringTransaction(RecurringDraft):
    """A scheduled recurrence rule."""

    id: str = Field(..., min_length=1)
    next_due_date: Optional[datetime.date] = Field(
        default=None,
        description="Derived: next occurrence on/after today; None once the series ended"
    )

    @property
    def has_ended(self) -> bool:
        return self.next_due_date is None


# =============================================================================
# PROJECTS
# =============================================================================

class ProjectDraft(_Entity):
    """Transactions carrying `tag` are attributed to the project."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100
    )
    tag: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Tag that attributes transactions to this project"
    )
    income_budget: Optional[float] = Field(default=None, gt=0)
    expense_budget: Optional[float] = Field(default=None, gt=0)


class Project(ProjectDraft):
    id: str = Field(..., min_length=1)
