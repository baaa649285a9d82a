"""
Intents Accepted by the State Engine

Each intent is one frozen pydantic model with a literal `kind`.
`Action` is the closed union of all of them; the reducer has exactly one
handler per member.

Intents that add an entity carry a *Draft* (no id, no derived fields).
Intents that update an entity carry the full entity; derived fields on
it are ignored and recomputed.
"""

from typing import Annotated, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from household_finance.models.finance import (
    Category,
    CategoryDraft,
    Goal,
    GoalDraft,
    Liability,
    LiabilityDraft,
    Project,
    ProjectDraft,
    RecurringDraft,
    RecurringTransaction,
    Transaction,
    TransactionDraft,
)
from household_finance.models.state import (
    ActiveModal,
    FiltersPatch,
    SyncedAppState,
    SyncStatus,
    Theme,
    ViewMode,
)


SelectionUpdater = Callable[[frozenset[str]], frozenset[str]]


class Intent(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# PREFERENCES & UI
# =============================================================================

class SetTheme(Intent):
    kind: Literal["set_theme"] = "set_theme"
    theme: Theme


class SetViewMode(Intent):
    kind: Literal["set_view_mode"] = "set_view_mode"
    view_mode: ViewMode


class UpdateFilters(Intent):
    """Apply the explicitly set fields of `patch` to the active filters."""

    kind: Literal["update_filters"] = "update_filters"
    patch: FiltersPatch


class SetSubscribed(Intent):
    kind: Literal["set_subscribed"] = "set_subscribed"
    is_subscribed: bool


class OpenModal(Intent):
    kind: Literal["open_modal"] = "open_modal"
    modal: ActiveModal


class CloseModal(Intent):
    """Close the open dialog and clear the selection."""

    kind: Literal["close_modal"] = "close_modal"


class SetSelectedTransactions(Intent):
    """
    Replace the selection, or derive it from the previous one.

    `selection` is either a set of ids or a function of the previous set,
    e.g. `toggle_selection("t1")`.
    """

    kind: Literal["set_selected_transactions"] = "set_selected_transactions"
    selection: Union[frozenset[str], SelectionUpdater]


class SetSyncStatus(Intent):
    kind: Literal["set_sync_status"] = "set_sync_status"
    status: SyncStatus


class SetPrincipal(Intent):
    kind: Literal["set_principal"] = "set_principal"
    principal: Optional[str] = None


class SetActiveSidebarTab(Intent):
    kind: Literal["set_active_sidebar_tab"] = "set_active_sidebar_tab"
    tab: str


class TogglePrivacyMode(Intent):
    kind: Literal["toggle_privacy_mode"] = "toggle_privacy_mode"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class AddTransaction(Intent):
    kind: Literal["add_transaction"] = "add_transaction"
    draft: TransactionDraft


class UpdateTransaction(Intent):
    kind: Literal["update_transaction"] = "update_transaction"
    transaction: Transaction


class DeleteTransactions(Intent):
    kind: Literal["delete_transactions"] = "delete_transactions"
    ids: tuple[str, ...]


class CategorizeTransactions(Intent):
    kind: Literal["categorize_transactions"] = "categorize_transactions"
    ids: tuple[str, ...]
    category_id: Optional[str] = None


class MergeTransactions(Intent):
    """Combine two or more transactions of one type into a single new one."""

    kind: Literal["merge_transactions"] = "merge_transactions"
    ids: tuple[str, ...]
    description: str = Field(
        ...,
        max_length=500,
        description="Description of the merged transaction"
    )


class AddTags(Intent):
    kind: Literal["add_tags"] = "add_tags"
    ids: tuple[str, ...]
    tags: tuple[str, ...]


class RemoveTags(Intent):
    kind: Literal["remove_tags"] = "remove_tags"
    ids: tuple[str, ...]
    tags: tuple[str, ...]


# =============================================================================
# CATEGORIES, GOALS, LIABILITIES, PROJECTS
# =============================================================================

class AddCategory(Intent):
    kind: Literal["add_category"] = "add_category"
    draft: CategoryDraft


class UpdateCategory(Intent):
    kind: Literal["update_category"] = "update_category"
    category: Category


class DeleteCategory(Intent):
    kind: Literal["delete_category"] = "delete_category"
    category_id: str


class DeleteUnusedCategories(Intent):
    """Remove categories no transaction or recurring rule refers to."""

    kind: Literal["delete_unused_categories"] = "delete_unused_categories"


class AddGoal(Intent):
    kind: Literal["add_goal"] = "add_goal"
    draft: GoalDraft


class UpdateGoal(Intent):
    kind: Literal["update_goal"] = "update_goal"
    goal: Goal


class DeleteGoal(Intent):
    kind: Literal["delete_goal"] = "delete_goal"
    goal_id: str


class AddLiability(Intent):
    kind: Literal["add_liability"] = "add_liability"
    draft: LiabilityDraft


class UpdateLiability(Intent):
    kind: Literal["update_liability"] = "update_liability"
    liability: Liability


class DeleteLiability(Intent):
    kind: Literal["delete_liability"] = "delete_liability"
    liability_id: str


class AddProject(Intent):
    kind: Literal["add_project"] = "add_project"
    draft: ProjectDraft


class UpdateProject(Intent):
    kind: Literal["update_project"] = "update_project"
    project: Project


class DeleteProject(Intent):
    kind: Literal["delete_project"] = "delete_project"
    project_id: str


# =============================================================================
# RECURRING
# =============================================================================

class AddRecurring(Intent):
    kind: Literal["add_recurring"] = "add_recurring"
    draft: RecurringDraft


class UpdateRecurring(Intent):
    kind: Literal["update_recurring"] = "update_recurring"
    recurring: RecurringTransaction


class DeleteRecurring(Intent):
    kind: Literal["delete_recurring"] = "delete_recurring"
    recurring_id: str


class PayBill(Intent):
    """Book today's payment for a recurring rule and move its due date on."""

    kind: Literal["pay_bill"] = "pay_bill"
    recurring_id: str


# =============================================================================
# IMPORT
# =============================================================================

class ImportData(Intent):
    """Replace every entity collection with the snapshot's; keep local preferences."""

    kind: Literal["import_data"] = "import_data"
    snapshot: SyncedAppState


Action = Annotated[
    Union[
        SetTheme,
        SetViewMode,
        UpdateFilters,
        SetSubscribed,
        OpenModal,
        CloseModal,
        SetSelectedTransactions,
        SetSyncStatus,
        SetPrincipal,
        SetActiveSidebarTab,
        TogglePrivacyMode,
        AddTransaction,
        UpdateTransaction,
        DeleteTransactions,
        CategorizeTransactions,
        MergeTransactions,
        AddTags,
        RemoveTags,
        AddCategory,
        UpdateCategory,
        DeleteCategory,
        DeleteUnusedCategories,
        AddGoal,
        UpdateGoal,
        DeleteGoal,
        AddLiability,
        UpdateLiability,
        DeleteLiability,
        AddProject,
        UpdateProject,
        DeleteProject,
        AddRecurring,
        UpdateRecurring,
        DeleteRecurring,
        PayBill,
        ImportData,
    ],
    Field(discriminator="kind"),
]

# Parses intents arriving as plain dicts (e.g. from a UI bridge)
action_adapter: TypeAdapter = TypeAdapter(Action)


def toggle_selection(transaction_id: str) -> SelectionUpdater:
    """Selection updater that flips one id in or out of the set."""
    def _toggle(previous: frozenset[str]) -> frozenset[str]:
        if transaction_id in previous:
            return previous - {transaction_id}
        return previous | {transaction_id}
    return _toggle
