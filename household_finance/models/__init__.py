"""
Data Models Package

This package contains all Pydantic models used in Household Finance.
All data flowing through the system must conform to these schemas.
"""

from household_finance.models.finance import (
    BILL_TAG,
    BUSINESS_TAG,
    SCAN_TAG,
    Category,
    CategoryDraft,
    CategoryType,
    Frequency,
    Goal,
    GoalDraft,
    GoalType,
    Liability,
    LiabilityDraft,
    LiabilityType,
    Project,
    ProjectDraft,
    RecurringDraft,
    RecurringTransaction,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from household_finance.models.state import (
    ActiveModal,
    AppState,
    DateRange,
    DateRangePreset,
    Filters,
    FiltersPatch,
    ModalKind,
    SyncedAppState,
    SyncStatus,
    Theme,
    ViewMode,
)
from household_finance.models.reports import (
    PAID_OFF_THRESHOLD,
    BudgetOverviewItem,
    CashflowMonth,
    DashboardStats,
    DebtPaydownPlan,
    ExpenseSlice,
    MonthlyBreakdown,
    MonthlyPaymentDetail,
    PaydownStrategy,
    PeriodTotals,
    ProjectReport,
    ReportsData,
    SankeyGraph,
    SankeyLink,
    SankeyNode,
    UpcomingBills,
)
from household_finance.models.scan import (
    ScannedReceipt,
    ScanOutcome,
    ValidationIssue,
    ValidationResult,
)
from household_finance.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entities
    "BILL_TAG",
    "BUSINESS_TAG",
    "SCAN_TAG",
    "Category",
    "CategoryDraft",
    "CategoryType",
    "Frequency",
    "Goal",
    "GoalDraft",
    "GoalType",
    "Liability",
    "LiabilityDraft",
    "LiabilityType",
    "Project",
    "ProjectDraft",
    "RecurringDraft",
    "RecurringTransaction",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    # State
    "ActiveModal",
    "AppState",
    "DateRange",
    "DateRangePreset",
    "Filters",
    "FiltersPatch",
    "ModalKind",
    "SyncedAppState",
    "SyncStatus",
    "Theme",
    "ViewMode",
    # Reports
    "PAID_OFF_THRESHOLD",
    "BudgetOverviewItem",
    "CashflowMonth",
    "DashboardStats",
    "DebtPaydownPlan",
    "ExpenseSlice",
    "MonthlyBreakdown",
    "MonthlyPaymentDetail",
    "PaydownStrategy",
    "PeriodTotals",
    "ProjectReport",
    "ReportsData",
    "SankeyGraph",
    "SankeyLink",
    "SankeyNode",
    "UpcomingBills",
    # Scan
    "ScannedReceipt",
    "ScanOutcome",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
