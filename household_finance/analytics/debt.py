"""
Debt Paydown Simulator

Month-by-month amortization of every open debt under a payoff strategy.

Each month:
1. every debt accrues a month of interest and receives its minimum
   payment (never more than balance + interest; the unused part of the
   minimum goes to the extra pool)
2. the extra pool (monthly extra budget + minimums freed this month) is
   poured into the debts in strategy order
3. debts at or below PAID_OFF_THRESHOLD drop out

The loop stops when nothing is owed or after MAX_SIMULATION_MONTHS.
Hitting the cap is not an error; the plan is flagged `is_capped`.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from household_finance.models.finance import Liability, LiabilityType
from household_finance.models.reports import (
    PAID_OFF_THRESHOLD,
    DebtPaydownPlan,
    MonthlyBreakdown,
    MonthlyPaymentDetail,
    PaydownStrategy,
)


MAX_SIMULATION_MONTHS = 600


@dataclass
class _Debt:
    liability_id: str
    interest_rate: float
    min_payment: float
    balance: float

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 100 / 12


def _open_debts(liabilities: Iterable[Liability]) -> list[_Debt]:
    return [
        _Debt(
            liability_id=l.id,
            interest_rate=l.interest_rate,
            min_payment=l.min_monthly_payment,
            balance=l.initial_amount - l.paid_amount,
        )
        for l in liabilities
        if l.type == LiabilityType.DEBT and l.initial_amount > l.paid_amount
    ]


def _prioritize(debts: list[_Debt], strategy: PaydownStrategy) -> list[_Debt]:
    """Avalanche: highest rate, then smallest balance. Snowball: the reverse priority."""
    if strategy == PaydownStrategy.AVALANCHE:
        return sorted(debts, key=lambda d: (-d.interest_rate, d.balance))
    return sorted(debts, key=lambda d: (d.balance, -d.interest_rate))


def _simulate_month(
    month: int,
    debts: list[_Debt],
    strategy: PaydownStrategy,
    extra_payment: float,
) -> MonthlyBreakdown:
    details: dict[str, dict[str, float]] = {}
    freed = 0.0

    for debt in debts:
        interest = debt.balance * debt.monthly_rate
        payment = debt.min_payment
        if debt.balance + interest < payment:
            payment = debt.balance + interest
            freed += debt.min_payment - payment
        principal = payment - interest
        debt.balance -= principal
        details[debt.liability_id] = {
            "payment": payment,
            "principal": principal,
            "interest": interest,
            "remaining_balance": debt.balance,
        }

    pool = extra_payment + freed
    for debt in _prioritize(debts, strategy):
        if pool <= 0:
            break
        if debt.balance <= 0:
            continue
        extra = min(pool, debt.balance)
        debt.balance -= extra
        pool -= extra
        detail = details[debt.liability_id]
        detail["payment"] += extra
        detail["principal"] += extra
        detail["remaining_balance"] = debt.balance

    payments = [
        MonthlyPaymentDetail(liability_id=liability_id, **values)
        for liability_id, values in details.items()
    ]
    return MonthlyBreakdown(
        month=month,
        payments=payments,
        total_payment=sum(p.payment for p in payments),
        total_interest=sum(p.interest for p in payments),
        total_principal=sum(p.principal for p in payments),
        total_remaining_balance=sum(d.balance for d in debts),
    )


def simulate_paydown(
    liabilities: Iterable[Liability],
    strategy: PaydownStrategy = PaydownStrategy.AVALANCHE,
    extra_payment: float = 0.0,
) -> DebtPaydownPlan:
    """
    Project how long paying off all open debts takes.

    Loans (money owed to the user) and fully paid debts are ignored.

    Args:
        liabilities: All liabilities; only open debts are simulated
        strategy: Order in which extra money is applied
        extra_payment: Monthly budget on top of the minimum payments

    Returns:
        The plan with per-month, per-debt detail
    """
    debts = _open_debts(liabilities)
    extra_payment = max(extra_payment, 0.0)

    breakdown: list[MonthlyBreakdown] = []
    month = 0
    while debts and month < MAX_SIMULATION_MONTHS:
        month += 1
        breakdown.append(_simulate_month(month, debts, strategy, extra_payment))
        debts = [d for d in debts if d.balance > PAID_OFF_THRESHOLD]

    return DebtPaydownPlan(
        strategy=strategy,
        total_months=month,
        total_interest_paid=sum(m.total_interest for m in breakdown),
        total_principal_paid=sum(m.total_principal for m in breakdown),
        monthly_breakdown=breakdown,
        is_capped=bool(debts),
    )
