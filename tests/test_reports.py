"""Tests for the reports aggregator."""

from datetime import date

import pytest

from household_finance.analytics.filters import default_filters
from household_finance.analytics.reports import (
    INCOME_NODE,
    OTHER_INCOME,
    UNCATEGORIZED,
    budget_overview,
    build_reports,
    cashflow,
    expense_breakdown,
    project_report,
    sankey_flow,
)
from household_finance.models import (
    AppState,
    Category,
    CategoryType,
    Project,
    TransactionType,
)


TODAY = date(2024, 3, 15)

CATEGORIES = (
    Category(id="c1", name="Salary", type=CategoryType.INCOME, budget=5000),
    Category(id="c2", name="Housing", type=CategoryType.EXPENSE, budget=1000),
    Category(id="c3", name="Food", type=CategoryType.EXPENSE, budget=400),
    Category(id="c4", name="Fun", type=CategoryType.EXPENSE),
)


class TestBudgetOverview:

    def test_spent_and_percentage(self, make_transaction):
        transactions = [
            make_transaction("rent", amount=850, category_id="c2"),
            make_transaction("heat", amount=120, category_id="c2"),
            make_transaction("refund", TransactionType.INCOME, amount=500, category_id="c2"),
            make_transaction("salary", TransactionType.INCOME, amount=3000, category_id="c1"),
        ]
        overview = budget_overview(transactions, CATEGORIES)

        assert [item.category_id for item in overview] == ["c2", "c3"]
        housing, food = overview
        assert housing.spent == 970
        assert housing.percentage == pytest.approx(97)
        assert not housing.is_over_budget
        assert food.spent == 0
        assert food.percentage == 0

    def test_over_budget(self, make_transaction):
        overview = budget_overview([make_transaction("t", amount=500, category_id="c3")], CATEGORIES)
        food = next(item for item in overview if item.category_id == "c3")
        assert food.is_over_budget
        assert food.percentage == pytest.approx(125)


class TestExpenseBreakdown:

    def test_grouped_by_name_largest_first(self, make_transaction):
        transactions = [
            make_transaction("a", amount=50, category_id="c3"),
            make_transaction("b", amount=25, category_id="c3"),
            make_transaction("c", amount=800, category_id="c2"),
            make_transaction("d", amount=10),
            make_transaction("e", amount=5, category_id="deleted"),
            make_transaction("zero", amount=0, category_id="c4"),
            make_transaction("income", TransactionType.INCOME, amount=999, category_id="c1"),
        ]
        breakdown = expense_breakdown(transactions, CATEGORIES)

        assert [(s.name, s.value) for s in breakdown] == [
            ("Housing", 800),
            ("Food", 75),
            (UNCATEGORIZED, 15),
        ]


class TestProjectReport:

    def test_tagged_income_and_expense(self, make_transaction):
        transactions = [
            make_transaction("in", TransactionType.INCOME, 1200, tags=("project-alpha",)),
            make_transaction("out", TransactionType.EXPENSE, 300, tags=("project-alpha", "business")),
            make_transaction("other", TransactionType.EXPENSE, 999),
        ]
        project = Project(id="p1", name="Alpha", tag="project-alpha", income_budget=2000)
        (report,) = project_report(transactions, [project])

        assert report.income == 1200
        assert report.expense == 300
        assert report.profit == 900
        assert report.income_budget == 2000
        assert report.expense_budget is None


class TestCashflow:

    def test_twelve_months_oldest_first(self, make_transaction):
        transactions = [
            make_transaction("old", TransactionType.INCOME, 100, day=date(2023, 4, 30)),
            make_transaction("too-old", TransactionType.INCOME, 100, day=date(2023, 3, 31)),
            make_transaction("dec", TransactionType.EXPENSE, 40, day=date(2023, 12, 24)),
            make_transaction("now", TransactionType.INCOME, 3000, day=date(2024, 3, 1)),
        ]
        months = cashflow(transactions, TODAY)

        assert len(months) == 12
        assert months[0].month == "2023-04"
        assert months[0].income == 100
        assert months[-1].month == "2024-03"
        assert months[-1].label == "Mar"
        assert months[-1].income == 3000
        december = next(m for m in months if m.month == "2023-12")
        assert december.expense == 40
        assert december.net == -40


class TestSankey:

    def test_flow_through_income_hub(self, make_transaction):
        transactions = [
            make_transaction("s1", TransactionType.INCOME, 2000, category_id="c1"),
            make_transaction("s2", TransactionType.INCOME, 1000, category_id="c1"),
            make_transaction("odd", TransactionType.INCOME, 50, category_id="c3"),
            make_transaction("rent", TransactionType.EXPENSE, 800, category_id="c2"),
            make_transaction("loose", TransactionType.EXPENSE, 10),
            make_transaction("saved", TransactionType.SAVING, 100, category_id="c2"),
        ]
        graph = sankey_flow(transactions, CATEGORIES)
        names = [n.name for n in graph.nodes]

        assert names[0] == INCOME_NODE
        assert len(names) == len(set(names))
        links = {(names[l.source], names[l.target]): l.value for l in graph.links}
        assert links == {
            ("Salary", INCOME_NODE): 3000,
            (OTHER_INCOME, INCOME_NODE): 50,
            (INCOME_NODE, "Housing"): 800,
        }

    def test_empty(self):
        graph = sankey_flow([], CATEGORIES)
        assert [n.name for n in graph.nodes] == [INCOME_NODE]
        assert graph.links == []


class TestBuildReports:

    def test_uses_filters_except_for_cashflow(self, make_transaction):
        state = AppState(
            transactions=(
                make_transaction("now", amount=100, category_id="c3"),
                make_transaction("before", amount=70, category_id="c3", day=date(2024, 1, 5)),
            ),
            categories=CATEGORIES,
            filters=default_filters(TODAY),
        )
        reports = build_reports(state, TODAY)

        assert [(s.name, s.value) for s in reports.expense_breakdown] == [("Food", 100)]
        january = next(m for m in reports.cashflow if m.month == "2024-01")
        assert january.expense == 70
