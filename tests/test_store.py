"""Tests for the FinanceStore container."""

from datetime import date

from household_finance.engine import FinanceStore, RejectionReason
from household_finance.engine.actions import MergeTransactions, PayBill, SetTheme
from household_finance.models import (
    Frequency,
    RecurringTransaction,
    Theme,
    TransactionType,
)


class TestFinanceStore:

    def test_dispatch_updates_state_and_notifies(self, make_state):
        store = FinanceStore(make_state())
        seen = []
        store.subscribe(seen.append)

        result = store.dispatch(SetTheme(theme=Theme.SYNTHWAVE))

        assert result.accepted
        assert store.state.theme == Theme.SYNTHWAVE
        assert seen == [store.state]

    def test_unsubscribe(self, make_state):
        store = FinanceStore(make_state())
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        store.dispatch(SetTheme(theme=Theme.NEON))
        assert seen == []

    def test_rejection_is_remembered_and_not_broadcast(self, make_state):
        initial = make_state()
        store = FinanceStore(initial)
        seen = []
        store.subscribe(seen.append)

        store.dispatch(MergeTransactions(ids=("a", "b"), description="x"))

        assert store.state is initial
        assert store.last_rejection.reason == RejectionReason.MERGE_TOO_FEW
        assert seen == []

        store.dispatch(SetTheme(theme=Theme.NEON))
        assert store.last_rejection is None

    def test_clock_supplies_today(self, make_state):
        """Date-dependent intents use the injected clock."""
        rule = RecurringTransaction(
            id="r1",
            description="Rent",
            amount=800,
            type=TransactionType.EXPENSE,
            frequency=Frequency.MONTHLY,
            start_date=date(2024, 1, 1),
            next_due_date=date(2024, 6, 1),
        )
        store = FinanceStore(
            make_state(recurring_transactions=(rule,)),
            clock=lambda: date(2024, 6, 2),
        )
        store.dispatch(PayBill(recurring_id="r1"))

        assert store.today == date(2024, 6, 2)
        assert store.state.transactions[0].date == date(2024, 6, 2)
        assert store.state.recurring_transactions[0].next_due_date == date(2024, 7, 1)

    def test_replace_state_notifies(self, make_state):
        store = FinanceStore(make_state())
        seen = []
        store.subscribe(seen.append)
        replacement = make_state(theme=Theme.FOREST)

        store.replace_state(replacement)

        assert store.state is replacement
        assert seen == [replacement]
