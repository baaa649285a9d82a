"""
Reports Aggregator

Stateless summaries for the reports view. Everything except cashflow
works on the already filtered transactions; cashflow always looks at
the full history of the trailing twelve months.

Missing references never fail a report: a transaction whose category
no longer exists counts as uncategorized.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from household_finance.analytics.filters import filter_transactions, month_bounds
from household_finance.models.finance import (
    Category,
    CategoryType,
    Project,
    Transaction,
    TransactionType,
)
from household_finance.models.reports import (
    BudgetOverviewItem,
    CashflowMonth,
    ExpenseSlice,
    ProjectReport,
    ReportsData,
    SankeyGraph,
    SankeyLink,
    SankeyNode,
)
from household_finance.models.state import AppState


UNCATEGORIZED = "Uncategorized"
OTHER_INCOME = "Other income"
INCOME_NODE = "Income"
CASHFLOW_MONTHS = 12


def _sum(transactions: Iterable[Transaction], type_: TransactionType) -> float:
    return sum(t.amount for t in transactions if t.type == type_)


def budget_overview(
    transactions: Sequence[Transaction],
    categories: Iterable[Category],
) -> list[BudgetOverviewItem]:
    """Spending against budget for every budgeted expense category, fullest first."""
    items = []
    for category in categories:
        if category.type != CategoryType.EXPENSE or not category.budget:
            continue
        spent = sum(
            t.amount for t in transactions
            if t.category_id == category.id and t.type == TransactionType.EXPENSE
        )
        items.append(BudgetOverviewItem(
            category_id=category.id,
            name=category.name,
            spent=spent,
            budget=category.budget,
            percentage=spent / category.budget * 100,
        ))
    items.sort(key=lambda item: item.percentage, reverse=True)
    return items


def expense_breakdown(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> list[ExpenseSlice]:
    """Positive expenses summed per category name, largest first."""
    names = {c.id: c.name for c in categories}
    totals: dict[str, float] = defaultdict(float)
    for t in transactions:
        if t.type == TransactionType.EXPENSE and t.amount > 0:
            totals[names.get(t.category_id, UNCATEGORIZED)] += t.amount

    slices = [ExpenseSlice(name=name, value=value) for name, value in totals.items()]
    slices.sort(key=lambda s: s.value, reverse=True)
    return slices


def project_report(
    transactions: Sequence[Transaction],
    projects: Iterable[Project],
) -> list[ProjectReport]:
    """Income, expense and profit of the transactions carrying each project's tag."""
    reports = []
    for project in projects:
        tagged = [t for t in transactions if t.has_tag(project.tag)]
        income = _sum(tagged, TransactionType.INCOME)
        expense = _sum(tagged, TransactionType.EXPENSE)
        reports.append(ProjectReport(
            project_id=project.id,
            name=project.name,
            income=income,
            expense=expense,
            profit=income - expense,
            income_budget=project.income_budget,
            expense_budget=project.expense_budget,
        ))
    return reports


def cashflow(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
) -> list[CashflowMonth]:
    """Income and expense per calendar month, oldest first, ending this month."""
    today = today or date.today()
    transactions = list(transactions)

    months = []
    for offset in range(CASHFLOW_MONTHS - 1, -1, -1):
        start, end = month_bounds(today - relativedelta(months=offset))
        in_month = [t for t in transactions if start <= t.date <= end]
        months.append(CashflowMonth(
            month=start.strftime("%Y-%m"),
            label=start.strftime("%b"),
            income=_sum(in_month, TransactionType.INCOME),
            expense=_sum(in_month, TransactionType.EXPENSE),
        ))
    return months


def sankey_flow(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> SankeyGraph:
    """
    Money flow graph: income categories -> "Income" -> expense categories.

    Nodes are unique by name and links point at node indices. Only
    categorized transactions with a positive amount contribute; one link
    per category carries the summed amount.
    """
    categories = list(categories)
    income_names = {c.id: c.name for c in categories if c.type == CategoryType.INCOME}
    expense_names = {c.id: c.name for c in categories if c.type == CategoryType.EXPENSE}

    nodes: list[SankeyNode] = []
    index: dict[str, int] = {}

    def node(name: str) -> int:
        if name not in index:
            index[name] = len(nodes)
            nodes.append(SankeyNode(name=name))
        return index[name]

    hub = node(INCOME_NODE)
    inflow: dict[str, float] = defaultdict(float)
    outflow: dict[str, float] = defaultdict(float)

    for t in transactions:
        if not t.category_id or t.amount <= 0:
            continue
        if t.type == TransactionType.INCOME:
            inflow[income_names.get(t.category_id, OTHER_INCOME)] += t.amount
        elif t.type == TransactionType.EXPENSE:
            outflow[expense_names.get(t.category_id, UNCATEGORIZED)] += t.amount

    links = [
        SankeyLink(source=node(name), target=hub, value=value)
        for name, value in inflow.items()
    ]
    links += [
        SankeyLink(source=hub, target=node(name), value=value)
        for name, value in outflow.items()
    ]
    return SankeyGraph(nodes=nodes, links=links)


def build_reports(state: AppState, today: Optional[date] = None) -> ReportsData:
    """Every report for the current filters and view mode."""
    filtered = filter_transactions(state.transactions, state.filters, state.view_mode)
    return ReportsData(
        budget_overview=budget_overview(filtered, state.categories),
        expense_breakdown=expense_breakdown(filtered, state.categories),
        projects=project_report(filtered, state.projects),
        cashflow=cashflow(state.transactions, today),
        sankey=sankey_flow(filtered, state.categories),
    )
