"""Tests for the debt paydown simulator."""

import pytest

from household_finance.analytics.debt import MAX_SIMULATION_MONTHS, simulate_paydown
from household_finance.models import Liability, LiabilityType, PaydownStrategy


def _debt(liability_id, balance, rate, minimum, paid=0.0) -> Liability:
    return Liability(
        id=liability_id,
        name=liability_id,
        type=LiabilityType.DEBT,
        initial_amount=balance,
        paid_amount=paid,
        interest_rate=rate,
        min_monthly_payment=minimum,
    )


class TestSimulatePaydown:

    def test_nothing_to_pay(self):
        loan = Liability(id="l", name="Friend", type=LiabilityType.LOAN, initial_amount=500)
        paid_off = _debt("done", 1000, 5, 50, paid=1000)
        plan = simulate_paydown([loan, paid_off])

        assert plan.total_months == 0
        assert plan.monthly_breakdown == []
        assert not plan.is_capped

    def test_first_month_avalanche(self):
        """Extra money goes to the highest rate after minimums."""
        plan = simulate_paydown(
            [_debt("card", 1000, 24, 50), _debt("car", 5000, 6, 100)],
            PaydownStrategy.AVALANCHE,
            extra_payment=200,
        )
        first = {p.liability_id: p for p in plan.monthly_breakdown[0].payments}

        assert first["card"].interest == pytest.approx(20)
        assert first["card"].payment == pytest.approx(250)
        assert first["card"].principal == pytest.approx(230)
        assert first["card"].remaining_balance == pytest.approx(770)

        assert first["car"].interest == pytest.approx(25)
        assert first["car"].payment == pytest.approx(100)
        assert first["car"].remaining_balance == pytest.approx(4925)

        assert plan.monthly_breakdown[0].total_payment == pytest.approx(350)

    def test_strategies_differ_in_target(self):
        """Snowball hits the smallest balance, avalanche the highest rate."""
        debts = [_debt("small", 1000, 6, 50), _debt("pricey", 5000, 24, 100)]

        avalanche = simulate_paydown(debts, PaydownStrategy.AVALANCHE, 200)
        snowball = simulate_paydown(debts, PaydownStrategy.SNOWBALL, 200)

        a_first = {p.liability_id: p for p in avalanche.monthly_breakdown[0].payments}
        s_first = {p.liability_id: p for p in snowball.monthly_breakdown[0].payments}
        assert a_first["pricey"].payment == pytest.approx(300)
        assert a_first["small"].payment == pytest.approx(50)
        assert s_first["small"].payment == pytest.approx(250)
        assert s_first["pricey"].payment == pytest.approx(100)

    def test_avalanche_never_slower_on_highest_rate(self):
        debts = [_debt("a", 3000, 20, 60), _debt("b", 1000, 5, 30)]
        avalanche = simulate_paydown(debts, PaydownStrategy.AVALANCHE, 200)
        snowball = simulate_paydown(debts, PaydownStrategy.SNOWBALL, 200)
        assert avalanche.payoff_month("a") <= snowball.payoff_month("a")

    def test_freed_minimum_rolls_over_the_same_month(self):
        plan = simulate_paydown([_debt("tiny", 30, 0, 50), _debt("big", 1000, 0, 50)])
        first = {p.liability_id: p for p in plan.monthly_breakdown[0].payments}

        assert first["tiny"].payment == pytest.approx(30)
        assert first["tiny"].remaining_balance == pytest.approx(0)
        assert first["big"].payment == pytest.approx(70)
        assert first["big"].remaining_balance == pytest.approx(930)

    def test_principal_adds_up_to_the_balances(self):
        debts = [_debt("card", 1000, 24, 50), _debt("car", 5000, 6, 100, paid=500)]
        plan = simulate_paydown(debts, PaydownStrategy.SNOWBALL, 150)

        assert not plan.is_capped
        assert plan.total_principal_paid == pytest.approx(5500, abs=0.01)
        assert plan.total_months == len(plan.monthly_breakdown)
        assert plan.monthly_breakdown[-1].total_remaining_balance == pytest.approx(0, abs=0.01)
        assert plan.total_interest_paid > 0
        assert plan.payoff_month("card") <= plan.payoff_month("car") == plan.total_months

    def test_balances_never_increase_when_minimum_covers_interest(self):
        plan = simulate_paydown([_debt("card", 2000, 18, 60), _debt("car", 4000, 4, 80)])
        previous = {"card": 2000.0, "car": 4000.0}
        for month in plan.monthly_breakdown:
            for p in month.payments:
                assert p.remaining_balance <= previous[p.liability_id] + 1e-9
                previous[p.liability_id] = p.remaining_balance

    def test_capped_when_payments_never_catch_up(self):
        """Interest of 200 a month against a minimum of 100."""
        plan = simulate_paydown([_debt("hopeless", 10000, 24, 100)])
        assert plan.total_months == MAX_SIMULATION_MONTHS
        assert plan.is_capped
        assert plan.payoff_month("hopeless") is None

    def test_negative_extra_is_ignored(self):
        plan = simulate_paydown([_debt("card", 100, 0, 50)], extra_payment=-500)
        assert plan.total_months == 2
