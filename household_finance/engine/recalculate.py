"""
Derived-Amount Recalculator

Goal progress and liability paydown are never stored as user input.
They are reductions over the full transaction list, rerun after every
change to the transactions and after any edit to a liability.

Transactions whose goal_id / liability_id point at nothing simply don't
contribute; nothing here fails on a dangling reference.
"""

from collections import defaultdict
from collections.abc import Iterable

from household_finance.models.finance import (
    Goal,
    Liability,
    Transaction,
    TransactionType,
)


def recalculate_goal_amounts(
    transactions: Iterable[Transaction],
    goals: Iterable[Goal],
) -> tuple[Goal, ...]:
    """Set each goal's current_amount to the sum of its saving transactions."""
    saved: dict[str, float] = defaultdict(float)
    for t in transactions:
        if t.type == TransactionType.SAVING and t.goal_id is not None:
            saved[t.goal_id] += t.amount

    return tuple(
        g.model_copy(update={"current_amount": saved.get(g.id, 0.0)})
        for g in goals
    )


def recalculate_liability_amounts(
    transactions: Iterable[Transaction],
    liabilities: Iterable[Liability],
) -> tuple[Liability, ...]:
    """
    Set each liability's paid_amount from its matching transactions.

    Debts count expense transactions, loans count income transactions.
    The total is capped at initial_amount.
    """
    paid: dict[tuple[str, TransactionType], float] = defaultdict(float)
    for t in transactions:
        if t.liability_id is not None:
            paid[(t.liability_id, t.type)] += t.amount

    return tuple(
        l.model_copy(update={
            "paid_amount": min(paid.get((l.id, l.payment_type), 0.0), l.initial_amount),
        })
        for l in liabilities
    )


def recalculate_derived(
    transactions: tuple[Transaction, ...],
    goals: Iterable[Goal],
    liabilities: Iterable[Liability],
) -> tuple[tuple[Goal, ...], tuple[Liability, ...]]:
    """Recompute both derived amounts together."""
    return (
        recalculate_goal_amounts(transactions, goals),
        recalculate_liability_amounts(transactions, liabilities),
    )
