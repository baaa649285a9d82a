"""
Household Finance - Source Package

A household finance tracker core: transactions, categories, goals,
recurring bills and liabilities, plus the reports derived from them.

DESIGN PRINCIPLES:
1. One state snapshot, changed only by the reducer
2. Derived amounts are always recomputed, never typed in
3. Reports are pure functions of state
4. External services (storage, receipt scan, sync) sit behind interfaces
5. A failing external service never corrupts state
"""

__version__ = "1.0.0"
__author__ = "Household Finance Team"
