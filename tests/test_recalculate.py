"""Tests for goal and liability recalculation."""

import pytest

from household_finance.engine.recalculate import (
    recalculate_derived,
    recalculate_goal_amounts,
    recalculate_liability_amounts,
)
from household_finance.models import Goal, Liability, LiabilityType, TransactionType


class TestGoalAmounts:

    def test_sums_saving_transactions_per_goal(self, make_transaction):
        """Only saving transactions count toward a goal."""
        transactions = (
            make_transaction("t1", TransactionType.SAVING, 100, goal_id="g1"),
            make_transaction("t2", TransactionType.SAVING, 50.5, goal_id="g1"),
            make_transaction("t3", TransactionType.EXPENSE, 999, goal_id="g1"),
            make_transaction("t4", TransactionType.SAVING, 20, goal_id="g2"),
        )
        goals = (
            Goal(id="g1", name="Car", target_amount=1000, current_amount=12345),
            Goal(id="g2", name="Holiday", target_amount=500),
            Goal(id="g3", name="Empty", target_amount=500, current_amount=7),
        )

        g1, g2, g3 = recalculate_goal_amounts(transactions, goals)

        assert g1.current_amount == pytest.approx(150.5)
        assert g2.current_amount == 20
        assert g3.current_amount == 0

    def test_dangling_goal_reference_is_ignored(self, make_transaction):
        transactions = (make_transaction("t1", TransactionType.SAVING, 100, goal_id="gone"),)
        goals = (Goal(id="g1", name="Car", target_amount=1000),)
        assert recalculate_goal_amounts(transactions, goals)[0].current_amount == 0


class TestLiabilityAmounts:

    def test_debt_counts_expenses_only(self, make_transaction):
        transactions = (
            make_transaction("t1", TransactionType.EXPENSE, 300, liability_id="l1"),
            make_transaction("t2", TransactionType.INCOME, 200, liability_id="l1"),
        )
        debt = Liability(id="l1", name="Car", type=LiabilityType.DEBT, initial_amount=1000)
        assert recalculate_liability_amounts(transactions, (debt,))[0].paid_amount == 300

    def test_loan_counts_income_only(self, make_transaction):
        transactions = (
            make_transaction("t1", TransactionType.INCOME, 50, liability_id="l2"),
            make_transaction("t2", TransactionType.EXPENSE, 75, liability_id="l2"),
        )
        loan = Liability(id="l2", name="Friend", type=LiabilityType.LOAN, initial_amount=100)
        assert recalculate_liability_amounts(transactions, (loan,))[0].paid_amount == 50

    def test_paid_amount_is_capped_at_initial(self, make_transaction):
        transactions = (make_transaction("t1", TransactionType.EXPENSE, 5000, liability_id="l1"),)
        debt = Liability(id="l1", name="Car", type=LiabilityType.DEBT, initial_amount=1000)
        paid = recalculate_liability_amounts(transactions, (debt,))[0]
        assert paid.paid_amount == 1000
        assert paid.remaining == 0

    def test_recalculate_derived_returns_both(self, make_transaction):
        transactions = (
            make_transaction("t1", TransactionType.SAVING, 10, goal_id="g1"),
            make_transaction("t2", TransactionType.EXPENSE, 20, liability_id="l1"),
        )
        goals, liabilities = recalculate_derived(
            transactions,
            (Goal(id="g1", name="Car", target_amount=100),),
            (Liability(id="l1", name="Car", type=LiabilityType.DEBT, initial_amount=100),),
        )
        assert goals[0].current_amount == 10
        assert liabilities[0].paid_amount == 20
