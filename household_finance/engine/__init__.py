"""
State Engine Package

Pure date arithmetic, derived-amount recalculation, the intent union,
the reducer and the store that holds the current state.
"""

from household_finance.engine.recurrence import advance_due_date, next_due_date, step
from household_finance.engine.recalculate import (
    recalculate_derived,
    recalculate_goal_amounts,
    recalculate_liability_amounts,
)
from household_finance.engine.actions import Action, Intent, action_adapter, toggle_selection
from household_finance.engine.reducer import (
    HANDLED_ACTIONS,
    Rejection,
    RejectionReason,
    Transition,
    reduce,
    transition,
)
from household_finance.engine.store import FinanceStore

__all__ = [
    "advance_due_date",
    "next_due_date",
    "step",
    "recalculate_derived",
    "recalculate_goal_amounts",
    "recalculate_liability_amounts",
    "Action",
    "Intent",
    "action_adapter",
    "toggle_selection",
    "HANDLED_ACTIONS",
    "Rejection",
    "RejectionReason",
    "Transition",
    "reduce",
    "transition",
    "FinanceStore",
]
