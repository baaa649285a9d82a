"""
Application State Models

AppState is the aggregate root: every entity collection, the active
filters, and the UI-only fields. The reducer is the only code that
produces new AppState values.

Three shapes of the same state exist:
- AppState: everything, in memory
- persisted: AppState minus the UI-ephemeral fields (open modal,
  selection, sync connection status)
- SyncedAppState: the subset exchanged by import/export and sync
"""

import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from household_finance.models.finance import (
    Category,
    Goal,
    Liability,
    Project,
    RecurringTransaction,
    Transaction,
    TransactionType,
)


EPOCH = datetime.date(1970, 1, 1)


class ViewMode(str, Enum):
    """Coarse partition of transactions by the `business` tag."""
    ALL = "all"
    PRIVATE = "private"
    BUSINESS = "business"


class DateRangePreset(str, Enum):
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_YEAR = "this_year"
    ALL_TIME = "all_time"
    CUSTOM = "custom"


class Theme(str, Enum):
    GRANDEUR = "grandeur"
    SYNTHWAVE = "synthwave"
    BLOCKCHAIN = "blockchain"
    NEON = "neon"
    FOREST = "forest"


class SyncStatus(str, Enum):
    """Connection status of the identity/sync collaborator."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class ModalKind(str, Enum):
    """Dialogs the UI can open. The engine only stores which one is open."""
    ADD_TRANSACTION = "add_transaction"
    EDIT_TRANSACTION = "edit_transaction"
    SMART_SCAN = "smart_scan"
    MONTHLY_CHECK = "monthly_check"
    MANAGE_CATEGORIES = "manage_categories"
    MANAGE_GOALS = "manage_goals"
    MANAGE_PROJECTS = "manage_projects"
    MANAGE_RECURRING = "manage_recurring"
    MANAGE_LIABILITIES = "manage_liabilities"
    EXPORT_IMPORT_DATA = "export_import_data"
    TAX_EXPORT = "tax_export"
    SUBSCRIPTION = "subscription"
    SYNC_DATA = "sync_data"
    MERGE_TRANSACTIONS = "merge_transactions"
    DEBT_PAYDOWN_PLAN = "debt_paydown_plan"
    ANALYSIS = "analysis"


class ActiveModal(BaseModel):
    """The open dialog and whatever it was opened with."""

    model_config = ConfigDict(frozen=True)

    kind: ModalKind
    transaction: Optional[Transaction] = Field(
        default=None,
        description="Transaction being edited (edit_transaction)"
    )
    transaction_ids: tuple[str, ...] = Field(
        default=(),
        description="Transactions to merge (merge_transactions)"
    )


# =============================================================================
# FILTERS
# =============================================================================

class DateRange(BaseModel):
    """Inclusive date range plus the preset it came from."""

    model_config = ConfigDict(frozen=True)

    preset: DateRangePreset = DateRangePreset.THIS_MONTH
    date_from: datetime.date
    date_to: datetime.date

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        if self.date_to < self.date_from:
            raise ValueError("Date range end cannot be before start")
        return self

    @property
    def day_count(self) -> int:
        return (self.date_to - self.date_from).days + 1

    def contains(self, day: datetime.date) -> bool:
        return self.date_from <= day <= self.date_to


class Filters(BaseModel):
    """
    Active transaction filters.

    All criteria must hold at once, except `tags`, where a transaction
    needs at least one of the listed tags.
    """

    model_config = ConfigDict(frozen=True)

    date_range: DateRange
    search_term: str = ""
    transaction_type: Optional[TransactionType] = Field(
        default=None,
        description="None means all types"
    )
    category_id: Optional[str] = None
    tags: tuple[str, ...] = ()


class FiltersPatch(BaseModel):
    """
    Partial filter update. Only fields explicitly set are applied,
    so `category_id=None` clears the category filter.
    """

    model_config = ConfigDict(frozen=True)

    date_range: Optional[DateRange] = None
    search_term: Optional[str] = None
    transaction_type: Optional[TransactionType] = None
    category_id: Optional[str] = None
    tags: Optional[tuple[str, ...]] = None


# =============================================================================
# APP STATE
# =============================================================================

SYNCED_FIELDS = frozenset({
    "transactions",
    "categories",
    "goals",
    "projects",
    "recurring_transactions",
    "liabilities",
    "theme",
    "view_mode",
    "filters",
    "is_subscribed",
    "privacy_mode",
})

ENTITY_FIELDS = frozenset({
    "transactions",
    "categories",
    "goals",
    "projects",
    "recurring_transactions",
    "liabilities",
})

EPHEMERAL_FIELDS = frozenset({
    "active_modal",
    "selected_transactions",
    "sync_status",
})


class SyncedAppState(BaseModel):
    """
    The syncable subset of AppState.

    This is what export produces, what import accepts, and what the sync
    collaborator pushes and pulls.
    """

    model_config = ConfigDict(frozen=True)

    transactions: tuple[Transaction, ...] = ()
    categories: tuple[Category, ...] = ()
    goals: tuple[Goal, ...] = ()
    projects: tuple[Project, ...] = ()
    recurring_transactions: tuple[RecurringTransaction, ...] = ()
    liabilities: tuple[Liability, ...] = ()
    theme: Theme = Theme.GRANDEUR
    view_mode: ViewMode = ViewMode.ALL
    filters: Optional[Filters] = None
    is_subscribed: bool = False
    privacy_mode: bool = False


class AppState(BaseModel):
    """
    The single source of truth.

    Derived fields inside the collections (goal.current_amount,
    liability.paid_amount, recurring.next_due_date) are outputs of the
    engine, never inputs.
    """

    model_config = ConfigDict(frozen=True)

    # Entities
    transactions: tuple[Transaction, ...] = ()
    categories: tuple[Category, ...] = ()
    goals: tuple[Goal, ...] = ()
    projects: tuple[Project, ...] = ()
    recurring_transactions: tuple[RecurringTransaction, ...] = ()
    liabilities: tuple[Liability, ...] = ()

    # Preferences
    theme: Theme = Theme.GRANDEUR
    view_mode: ViewMode = ViewMode.ALL
    filters: Filters
    is_subscribed: bool = False
    privacy_mode: bool = False

    # UI-only
    active_modal: Optional[ActiveModal] = None
    selected_transactions: frozenset[str] = frozenset()
    sync_status: SyncStatus = SyncStatus.DISCONNECTED
    principal: Optional[str] = None
    active_sidebar_tab: str = "report"

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def find_recurring(self, recurring_id: str) -> Optional[RecurringTransaction]:
        return next((r for r in self.recurring_transactions if r.id == recurring_id), None)

    def to_synced(self) -> SyncedAppState:
        """Project onto the syncable subset."""
        return SyncedAppState(**{name: getattr(self, name) for name in SYNCED_FIELDS})

    def to_persisted(self) -> dict[str, Any]:
        """JSON-ready dict of everything except UI-ephemeral fields."""
        return self.model_dump(mode="json", exclude=set(EPHEMERAL_FIELDS))

    @classmethod
    def from_persisted(cls, data: dict[str, Any]) -> "AppState":
        """Rebuild from a persisted dict; ephemeral fields take their defaults."""
        cleaned = {k: v for k, v in data.items() if k not in EPHEMERAL_FIELDS}
        return cls.model_validate(cleaned)
