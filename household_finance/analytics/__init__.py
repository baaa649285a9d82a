"""
Analytics Package

Read-only derivations over AppState: filtering, dashboard stats,
reports, upcoming bills and the debt paydown simulation.
"""

from household_finance.analytics.filters import (
    default_filters,
    filter_transactions,
    matches_filters,
    resolve_date_range,
)
from household_finance.analytics.dashboard import (
    calculate_totals,
    calculate_trend,
    dashboard_stats,
    previous_period,
)
from household_finance.analytics.reports import (
    budget_overview,
    build_reports,
    cashflow,
    expense_breakdown,
    project_report,
    sankey_flow,
)
from household_finance.analytics.bills import upcoming_bills
from household_finance.analytics.debt import MAX_SIMULATION_MONTHS, simulate_paydown

__all__ = [
    "default_filters",
    "filter_transactions",
    "matches_filters",
    "resolve_date_range",
    "calculate_totals",
    "calculate_trend",
    "dashboard_stats",
    "previous_period",
    "budget_overview",
    "build_reports",
    "cashflow",
    "expense_breakdown",
    "project_report",
    "sankey_flow",
    "upcoming_bills",
    "MAX_SIMULATION_MONTHS",
    "simulate_paydown",
]
