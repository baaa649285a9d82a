"""
State Engine

The single mutation authority over AppState:

    transition(state, action, today) -> Transition(state, rejection)

DESIGN DECISION: The reducer is pure. It performs no I/O, never logs and
never raises for a well-typed intent. Invalid combinations (merging
fewer than two transactions, paying an ended bill, adding an already
expired series) come back as a Rejection next to the unchanged state so
the caller can tell the user.

Every change to the transaction collection recomputes goal and
liability amounts from the full post-change list.

"Today" is an argument (defaulting to the system date) so the date
dependent intents (pay bill, recurring rules, date presets) are
deterministic under test.
"""

from collections.abc import Callable, Iterable
from datetime import date
from enum import Enum
from typing import Optional, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict

from household_finance.analytics.filters import resolve_date_range
from household_finance.engine import actions as a
from household_finance.engine.recalculate import (
    recalculate_goal_amounts,
    recalculate_liability_amounts,
)
from household_finance.engine.recurrence import advance_due_date, next_due_date
from household_finance.models.finance import (
    BILL_TAG,
    Category,
    Goal,
    Liability,
    Project,
    RecurringDraft,
    RecurringTransaction,
    Transaction,
)
from household_finance.models.state import ENTITY_FIELDS, AppState, DateRangePreset


class RejectionReason(str, Enum):
    MERGE_TOO_FEW = "merge_too_few"
    MERGE_TYPE_MISMATCH = "merge_type_mismatch"
    BILL_NOT_PAYABLE = "bill_not_payable"
    RECURRING_EXPIRED = "recurring_expired"


class Rejection(BaseModel):
    """Why an intent left the state unchanged."""

    model_config = ConfigDict(frozen=True)

    reason: RejectionReason
    message: str


class Transition(BaseModel):
    """Result of applying one intent."""

    model_config = ConfigDict(frozen=True)

    state: AppState
    rejection: Optional[Rejection] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


Handler = Callable[[AppState, a.Intent, date], Transition]
_HANDLERS: dict[type, Handler] = {}

_E = TypeVar("_E", bound=BaseModel)


def _handles(action_type: type) -> Callable[[Handler], Handler]:
    def register(fn: Handler) -> Handler:
        if action_type in _HANDLERS:
            raise RuntimeError(f"Duplicate handler for {action_type.__name__}")
        _HANDLERS[action_type] = fn
        return fn
    return register


# =============================================================================
# HELPERS
# =============================================================================

def _new_id() -> str:
    return str(uuid4())


def _ok(state: AppState, **changes) -> Transition:
    return Transition(state=state.model_copy(update=changes) if changes else state)


def _reject(state: AppState, reason: RejectionReason, message: str) -> Transition:
    return Transition(state=state, rejection=Rejection(reason=reason, message=message))


def _with_transactions(
    state: AppState,
    transactions: tuple[Transaction, ...],
    **changes,
) -> Transition:
    """Replace the transactions and recompute every derived amount."""
    return _ok(
        state,
        transactions=transactions,
        goals=recalculate_goal_amounts(transactions, state.goals),
        liabilities=recalculate_liability_amounts(transactions, state.liabilities),
        **changes,
    )


def _replace(items: tuple[_E, ...], updated: _E) -> tuple[_E, ...]:
    return tuple(updated if item.id == updated.id else item for item in items)


def _without(items: tuple[_E, ...], entity_id: str) -> tuple[_E, ...]:
    return tuple(item for item in items if item.id != entity_id)


def _detach(items: Iterable[_E], field: str, entity_id: str) -> tuple[_E, ...]:
    """Clear `field` on every item that points at `entity_id`."""
    return tuple(
        item.model_copy(update={field: None}) if getattr(item, field) == entity_id else item
        for item in items
    )


def _combine_tags(*groups: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for group in groups:
        for tag in group:
            tag = tag.strip()
            if tag:
                seen.setdefault(tag, None)
    return tuple(seen)


def _common(values: list[Optional[str]]) -> Optional[str]:
    """The shared value if all are equal, else None."""
    first = values[0]
    return first if all(v == first for v in values) else None


# =============================================================================
# PREFERENCES & UI
# =============================================================================

@_handles(a.SetTheme)
def _set_theme(state: AppState, action: a.SetTheme, today: date) -> Transition:
    return _ok(state, theme=action.theme)


@_handles(a.SetViewMode)
def _set_view_mode(state: AppState, action: a.SetViewMode, today: date) -> Transition:
    return _ok(state, view_mode=action.view_mode)


@_handles(a.SetSubscribed)
def _set_subscribed(state: AppState, action: a.SetSubscribed, today: date) -> Transition:
    return _ok(state, is_subscribed=action.is_subscribed)


@_handles(a.UpdateFilters)
def _update_filters(state: AppState, action: a.UpdateFilters, today: date) -> Transition:
    """
    Merge the patch into the filters. A date range whose preset differs
    from the current one gets its dates recomputed from the preset;
    custom ranges keep the dates they were given.
    """
    patch = action.patch
    changes = {name: getattr(patch, name) for name in patch.model_fields_set}

    date_range = changes.get("date_range")
    if date_range is None:
        changes.pop("date_range", None)
    elif (
        date_range.preset != state.filters.date_range.preset
        and date_range.preset != DateRangePreset.CUSTOM
    ):
        changes["date_range"] = resolve_date_range(date_range.preset, today)

    if "tags" in changes:
        changes["tags"] = _combine_tags(changes["tags"] or ())
    if "search_term" in changes:
        changes["search_term"] = changes["search_term"] or ""

    return _ok(state, filters=state.filters.model_copy(update=changes))


@_handles(a.OpenModal)
def _open_modal(state: AppState, action: a.OpenModal, today: date) -> Transition:
    return _ok(state, active_modal=action.modal)


@_handles(a.CloseModal)
def _close_modal(state: AppState, action: a.CloseModal, today: date) -> Transition:
    return _ok(state, active_modal=None, selected_transactions=frozenset())


@_handles(a.SetSelectedTransactions)
def _set_selected(state: AppState, action: a.SetSelectedTransactions, today: date) -> Transition:
    selection = action.selection
    if callable(selection):
        selection = selection(state.selected_transactions)
    return _ok(state, selected_transactions=frozenset(selection))


@_handles(a.SetSyncStatus)
def _set_sync_status(state: AppState, action: a.SetSyncStatus, today: date) -> Transition:
    return _ok(state, sync_status=action.status)


@_handles(a.SetPrincipal)
def _set_principal(state: AppState, action: a.SetPrincipal, today: date) -> Transition:
    return _ok(state, principal=action.principal)


@_handles(a.SetActiveSidebarTab)
def _set_sidebar_tab(state: AppState, action: a.SetActiveSidebarTab, today: date) -> Transition:
    return _ok(state, active_sidebar_tab=action.tab)


@_handles(a.TogglePrivacyMode)
def _toggle_privacy(state: AppState, action: a.TogglePrivacyMode, today: date) -> Transition:
    return _ok(state, privacy_mode=not state.privacy_mode)


# =============================================================================
# TRANSACTIONS
# =============================================================================

@_handles(a.AddTransaction)
def _add_transaction(state: AppState, action: a.AddTransaction, today: date) -> Transition:
    created = Transaction(id=_new_id(), **action.draft.model_dump())
    return _with_transactions(
        state, state.transactions + (created,), active_modal=None,
    )


@_handles(a.UpdateTransaction)
def _update_transaction(state: AppState, action: a.UpdateTransaction, today: date) -> Transition:
    return _with_transactions(
        state, _replace(state.transactions, action.transaction), active_modal=None,
    )


@_handles(a.DeleteTransactions)
def _delete_transactions(state: AppState, action: a.DeleteTransactions, today: date) -> Transition:
    doomed = set(action.ids)
    remaining = tuple(t for t in state.transactions if t.id not in doomed)
    return _with_transactions(state, remaining, selected_transactions=frozenset())


@_handles(a.CategorizeTransactions)
def _categorize(state: AppState, action: a.CategorizeTransactions, today: date) -> Transition:
    targets = set(action.ids)
    transactions = tuple(
        t.model_copy(update={"category_id": action.category_id}) if t.id in targets else t
        for t in state.transactions
    )
    return _ok(state, transactions=transactions, selected_transactions=frozenset())


@_handles(a.MergeTransactions)
def _merge(state: AppState, action: a.MergeTransactions, today: date) -> Transition:
    """
    Replace two or more same-type transactions with one new transaction.

    The merged record sums the amounts, unions the tags, takes the latest
    date and keeps a category/goal/liability reference only when every
    merged transaction shares it.
    """
    targets = set(action.ids)
    merging = [t for t in state.transactions if t.id in targets]

    if len(merging) < 2:
        return _reject(
            state,
            RejectionReason.MERGE_TOO_FEW,
            "Select at least two existing transactions to merge.",
        )
    if any(t.type != merging[0].type for t in merging):
        return _reject(
            state,
            RejectionReason.MERGE_TYPE_MISMATCH,
            "Merge failed: transactions must all have the same type.",
        )

    merged = Transaction(
        id=_new_id(),
        type=merging[0].type,
        amount=sum(t.amount for t in merging),
        description=action.description,
        date=max(t.date for t in merging),
        category_id=_common([t.category_id for t in merging]),
        goal_id=_common([t.goal_id for t in merging]),
        liability_id=_common([t.liability_id for t in merging]),
        tags=_combine_tags(*(t.tags for t in merging)),
    )
    remaining = tuple(t for t in state.transactions if t.id not in targets)
    return _with_transactions(
        state,
        remaining + (merged,),
        active_modal=None,
        selected_transactions=frozenset(),
    )


@_handles(a.AddTags)
def _add_tags(state: AppState, action: a.AddTags, today: date) -> Transition:
    targets = set(action.ids)
    transactions = tuple(
        t.model_copy(update={"tags": _combine_tags(t.tags, action.tags)}) if t.id in targets else t
        for t in state.transactions
    )
    return _ok(state, transactions=transactions)


@_handles(a.RemoveTags)
def _remove_tags(state: AppState, action: a.RemoveTags, today: date) -> Transition:
    targets = set(action.ids)
    dropped = set(action.tags)
    transactions = tuple(
        t.model_copy(update={"tags": tuple(tag for tag in t.tags if tag not in dropped)})
        if t.id in targets else t
        for t in state.transactions
    )
    return _ok(state, transactions=transactions)


# =============================================================================
# CATEGORIES
# =============================================================================

@_handles(a.AddCategory)
def _add_category(state: AppState, action: a.AddCategory, today: date) -> Transition:
    created = Category(id=_new_id(), **action.draft.model_dump())
    return _ok(state, categories=state.categories + (created,))


@_handles(a.UpdateCategory)
def _update_category(state: AppState, action: a.UpdateCategory, today: date) -> Transition:
    return _ok(state, categories=_replace(state.categories, action.category))


@_handles(a.DeleteCategory)
def _delete_category(state: AppState, action: a.DeleteCategory, today: date) -> Transition:
    category_id = action.category_id
    return _ok(
        state,
        categories=_without(state.categories, category_id),
        transactions=_detach(state.transactions, "category_id", category_id),
        recurring_transactions=_detach(state.recurring_transactions, "category_id", category_id),
    )


@_handles(a.DeleteUnusedCategories)
def _delete_unused_categories(
    state: AppState,
    action: a.DeleteUnusedCategories,
    today: date,
) -> Transition:
    used = {t.category_id for t in state.transactions}
    used |= {r.category_id for r in state.recurring_transactions}
    return _ok(state, categories=tuple(c for c in state.categories if c.id in used))


# =============================================================================
# GOALS
# =============================================================================

@_handles(a.AddGoal)
def _add_goal(state: AppState, action: a.AddGoal, today: date) -> Transition:
    created = Goal(id=_new_id(), **action.draft.model_dump())
    goals = recalculate_goal_amounts(state.transactions, state.goals + (created,))
    return _ok(state, goals=goals)


@_handles(a.UpdateGoal)
def _update_goal(state: AppState, action: a.UpdateGoal, today: date) -> Transition:
    goals = recalculate_goal_amounts(state.transactions, _replace(state.goals, action.goal))
    return _ok(state, goals=goals)


@_handles(a.DeleteGoal)
def _delete_goal(state: AppState, action: a.DeleteGoal, today: date) -> Transition:
    goal_id = action.goal_id
    return _ok(
        state,
        goals=_without(state.goals, goal_id),
        transactions=_detach(state.transactions, "goal_id", goal_id),
        recurring_transactions=_detach(state.recurring_transactions, "goal_id", goal_id),
    )


# =============================================================================
# LIABILITIES
# =============================================================================

@_handles(a.AddLiability)
def _add_liability(state: AppState, action: a.AddLiability, today: date) -> Transition:
    created = Liability(id=_new_id(), **action.draft.model_dump())
    liabilities = recalculate_liability_amounts(state.transactions, state.liabilities + (created,))
    return _ok(state, liabilities=liabilities)


@_handles(a.UpdateLiability)
def _update_liability(state: AppState, action: a.UpdateLiability, today: date) -> Transition:
    liabilities = recalculate_liability_amounts(
        state.transactions, _replace(state.liabilities, action.liability),
    )
    return _ok(state, liabilities=liabilities)


@_handles(a.DeleteLiability)
def _delete_liability(state: AppState, action: a.DeleteLiability, today: date) -> Transition:
    liability_id = action.liability_id
    return _ok(
        state,
        liabilities=_without(state.liabilities, liability_id),
        transactions=_detach(state.transactions, "liability_id", liability_id),
    )


# =============================================================================
# PROJECTS
# =============================================================================

@_handles(a.AddProject)
def _add_project(state: AppState, action: a.AddProject, today: date) -> Transition:
    created = Project(id=_new_id(), **action.draft.model_dump())
    return _ok(state, projects=state.projects + (created,))


@_handles(a.UpdateProject)
def _update_project(state: AppState, action: a.UpdateProject, today: date) -> Transition:
    return _ok(state, projects=_replace(state.projects, action.project))


@_handles(a.DeleteProject)
def _delete_project(state: AppState, action: a.DeleteProject, today: date) -> Transition:
    return _ok(state, projects=_without(state.projects, action.project_id))


# =============================================================================
# RECURRING
# =============================================================================

def _schedule(rule: RecurringDraft, today: date) -> Optional[date]:
    return next_due_date(
        rule.start_date, rule.frequency, rule.interval, rule.end_date, today,
    )


@_handles(a.AddRecurring)
def _add_recurring(state: AppState, action: a.AddRecurring, today: date) -> Transition:
    due = _schedule(action.draft, today)
    if due is None:
        return _reject(
            state,
            RejectionReason.RECURRING_EXPIRED,
            "The series already ended before today.",
        )
    created = RecurringTransaction(
        id=_new_id(), next_due_date=due, **action.draft.model_dump(),
    )
    return _ok(state, recurring_transactions=state.recurring_transactions + (created,))


@_handles(a.UpdateRecurring)
def _update_recurring(state: AppState, action: a.UpdateRecurring, today: date) -> Transition:
    """Reschedule from the rule; a rule that has fully elapsed is removed."""
    rule = action.recurring
    due = _schedule(rule, today)
    if due is None:
        return _ok(
            state,
            recurring_transactions=_without(state.recurring_transactions, rule.id),
        )
    updated = rule.model_copy(update={"next_due_date": due})
    return _ok(
        state,
        recurring_transactions=_replace(state.recurring_transactions, updated),
    )


@_handles(a.DeleteRecurring)
def _delete_recurring(state: AppState, action: a.DeleteRecurring, today: date) -> Transition:
    return _ok(
        state,
        recurring_transactions=_without(state.recurring_transactions, action.recurring_id),
    )


@_handles(a.PayBill)
def _pay_bill(state: AppState, action: a.PayBill, today: date) -> Transition:
    """
    Book one occurrence of a recurring rule as a transaction dated today,
    then move the rule's due date forward by at least one interval.
    """
    rule = state.find_recurring(action.recurring_id)
    if rule is None or rule.has_ended:
        return _reject(
            state,
            RejectionReason.BILL_NOT_PAYABLE,
            "This bill does not exist or its series has ended.",
        )

    tags = _combine_tags((BILL_TAG,), rule.description.lower().split()) if rule.is_bill else ()
    payment = Transaction(
        id=_new_id(),
        type=rule.type,
        amount=rule.amount,
        description=f"Payment for: {rule.description}",
        date=today,
        category_id=rule.category_id,
        goal_id=rule.goal_id,
        tags=tags,
    )
    advanced = rule.model_copy(update={
        "next_due_date": advance_due_date(
            rule.next_due_date, rule.frequency, rule.interval, rule.end_date, today,
        ),
    })
    return _with_transactions(
        state,
        state.transactions + (payment,),
        recurring_transactions=_replace(state.recurring_transactions, advanced),
    )


# =============================================================================
# IMPORT
# =============================================================================

@_handles(a.ImportData)
def _import_data(state: AppState, action: a.ImportData, today: date) -> Transition:
    """Swap in the snapshot's entities; theme, view mode, filters and flags stay local."""
    snapshot = action.snapshot
    entities = {field: getattr(snapshot, field) for field in ENTITY_FIELDS}
    entities["goals"] = recalculate_goal_amounts(snapshot.transactions, snapshot.goals)
    entities["liabilities"] = recalculate_liability_amounts(
        snapshot.transactions, snapshot.liabilities,
    )
    return _ok(state, **entities)


# =============================================================================
# ENTRY POINTS
# =============================================================================

HANDLED_ACTIONS = frozenset(_HANDLERS)


def transition(
    state: AppState,
    action: a.Intent,
    today: Optional[date] = None,
) -> Transition:
    """Apply one intent. Returns the new state and any rejection."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Not an intent: {type(action).__name__}")
    return handler(state, action, today or date.today())


def reduce(
    state: AppState,
    action: a.Intent,
    today: Optional[date] = None,
) -> AppState:
    """Apply one intent and return only the new state."""
    return transition(state, action, today).state
