"""
Main Orchestrator for Household Finance

This module ties the pure core to its collaborators and defines the
end-to-end flows:
1. Startup (load snapshot or seed default -> recalculate -> store)
2. Intent (dispatch -> save snapshot -> audit)
3. Receipt scan (image -> scan -> validate -> add transaction)
4. Sync (login, push syncable snapshot, pull and import)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The core never does I/O; every save happens here, after the reducer
- A failing collaborator (disk, scanner, sync) never changes state;
  the failure is audited and returned as a value
- Every step is audited

Dispatches may overlap (e.g. under asyncio.gather): snapshot writes are
serialized, and the last one to run holds the latest state.
"""

import asyncio
from collections.abc import Callable
from datetime import date
from typing import Optional
from uuid import UUID

from household_finance.analytics import (
    build_reports,
    dashboard_stats,
    filter_transactions,
    simulate_paydown,
    upcoming_bills,
)
from household_finance.audit import AuditLogger, create_correlation_id
from household_finance.config import get_settings
from household_finance.engine import FinanceStore, Intent, Transition, recalculate_derived
from household_finance.engine.actions import (
    AddTransaction,
    ImportData,
    SetPrincipal,
    SetSyncStatus,
)
from household_finance.models import (
    SCAN_TAG,
    AppState,
    DashboardStats,
    DebtPaydownPlan,
    PaydownStrategy,
    ReportsData,
    ScanOutcome,
    SyncStatus,
    Transaction,
    TransactionDraft,
    TransactionType,
    UpcomingBills,
)
from household_finance.seed import default_state
from household_finance.services.scan import (
    GeminiReceiptScanner,
    ReceiptScannerInterface,
    ScanError,
    ScanUnavailableError,
)
from household_finance.services.storage import (
    CorruptSnapshotError,
    InMemoryAuditStorage,
    JsonFileStateStorage,
    StateStorageInterface,
    StorageError,
)
from household_finance.services.sync import SyncBackendInterface, SyncError
from household_finance.validation import ReceiptValidator


class FinanceSession:
    """
    One running instance of the finance tracker.

    Usage:
        session = FinanceSession(JsonFileStateStorage("state.json"))
        await session.open()
        await session.dispatch(AddTransaction(draft=...))
        report = session.reports()
    """

    def __init__(
        self,
        state_storage: StateStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        scanner: Optional[ReceiptScannerInterface] = None,
        validator: Optional[ReceiptValidator] = None,
        sync_backend: Optional[SyncBackendInterface] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self._storage = state_storage
        self._audit_logger = audit_logger or AuditLogger()
        self._scanner = scanner
        self._validator = validator
        self._sync = sync_backend
        self._clock = clock or date.today
        self._store: Optional[FinanceStore] = None
        self._save_lock = asyncio.Lock()

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def store(self) -> FinanceStore:
        if self._store is None:
            raise RuntimeError("Session is not open; call open() first")
        return self._store

    @property
    def state(self) -> AppState:
        return self.store.state

    @property
    def today(self) -> date:
        return self._clock()

    async def open(self) -> AppState:
        """
        Load the saved snapshot, or seed the default state if there is none.

        A snapshot that cannot be parsed is audited and replaced by the
        default state. Backend failures propagate.
        """
        correlation_id = create_correlation_id()
        try:
            loaded = await self._storage.load_state()
        except CorruptSnapshotError as e:
            await self._audit_logger.log_error(
                error_type="corrupt_snapshot",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            loaded = None

        seeded = loaded is None
        state = default_state(self.today) if seeded else loaded

        # Derived amounts are never trusted from disk
        goals, liabilities = recalculate_derived(
            state.transactions, state.goals, state.liabilities,
        )
        state = state.model_copy(update={"goals": goals, "liabilities": liabilities})

        self._store = FinanceStore(state, clock=self._clock)
        await self._audit_logger.log_state_loaded(
            transaction_count=len(state.transactions),
            seeded=seeded,
            correlation_id=correlation_id,
        )
        return state

    async def dispatch(
        self,
        action: Intent,
        correlation_id: Optional[UUID] = None,
    ) -> Transition:
        """Apply an intent; persist the result if it was accepted."""
        correlation_id = correlation_id or create_correlation_id()
        result = self.store.dispatch(action)

        if result.rejection is not None:
            await self._audit_logger.log_intent_rejected(
                kind=action.kind,
                reason=result.rejection.reason.value,
                message=result.rejection.message,
                correlation_id=correlation_id,
            )
            return result

        await self._audit_logger.log_intent_applied(
            kind=action.kind,
            correlation_id=correlation_id,
        )
        await self._save(correlation_id)
        return result

    async def _save(self, correlation_id: Optional[UUID] = None) -> bool:
        # One write at a time, each taking the state current when it starts
        async with self._save_lock:
            state = self.state
            try:
                await self._storage.save_state(state)
            except StorageError as e:
                await self._audit_logger.log_save_failed(
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
                return False

            await self._audit_logger.log_state_saved(
                transaction_count=len(state.transactions),
                correlation_id=correlation_id,
            )
            return True

    # =========================================================================
    # RECEIPT SCAN
    # =========================================================================

    async def scan_receipt(
        self,
        image_bytes: bytes,
        mime_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> ScanOutcome:
        """
        Scan a receipt and book it as an expense tagged `ai-scan`.

        Returns a failed outcome (state untouched) when the scanner is
        missing or unreachable, the reply is unusable, or validation
        finds an error.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._scanner is None:
            await self._audit_logger.log_scan_failed(
                error_message="Receipt scanning is not configured",
                offline=True,
                correlation_id=correlation_id,
            )
            return ScanOutcome(
                success=False,
                error="Receipt scanning is not configured",
                offline=True,
            )

        try:
            receipt = await self._scanner.scan(image_bytes, mime_type)
        except ScanUnavailableError as e:
            await self._audit_logger.log_scan_failed(
                error_message=str(e),
                offline=True,
                correlation_id=correlation_id,
            )
            return ScanOutcome(success=False, error=str(e), offline=True)
        except ScanError as e:
            await self._audit_logger.log_scan_failed(
                error_message=str(e),
                offline=False,
                correlation_id=correlation_id,
            )
            return ScanOutcome(success=False, error=str(e))

        validator = self._validator or ReceiptValidator()
        validation = validator.validate(receipt, self.today)
        if not validation.is_valid:
            await self._audit_logger.log_scan_validation_failed(
                scan_id=receipt.scan_id,
                issues=[issue.model_dump() for issue in validation.issues],
                correlation_id=correlation_id,
            )
            return ScanOutcome(
                success=False,
                receipt=receipt,
                validation=validation,
                error=validator.get_user_friendly_summary(validation),
            )

        draft = TransactionDraft(
            type=TransactionType.EXPENSE,
            amount=receipt.amount,
            description=receipt.description,
            date=receipt.date or self.today,
            tags=(SCAN_TAG,),
        )
        result = await self.dispatch(AddTransaction(draft=draft), correlation_id)
        booked: Transaction = result.state.transactions[-1]

        await self._audit_logger.log_scan_completed(
            scan_id=receipt.scan_id,
            transaction_id=booked.id,
            amount=booked.amount,
            correlation_id=correlation_id,
        )
        return ScanOutcome(
            success=True,
            receipt=receipt,
            validation=validation,
            transaction_id=booked.id,
        )

    # =========================================================================
    # SYNC
    # =========================================================================

    def _set_sync_status(self, status: SyncStatus) -> None:
        # Connection status is never persisted, so no save
        self.store.dispatch(SetSyncStatus(status=status))

    async def _sync_failed(self, error: Exception, correlation_id: UUID) -> None:
        self._set_sync_status(SyncStatus.ERROR)
        await self._audit_logger.log_external_service_error(
            service="sync",
            error_message=str(error),
            correlation_id=correlation_id,
        )

    async def login(self) -> Optional[str]:
        """Log in to the sync backend. Returns the principal, None on failure."""
        correlation_id = create_correlation_id()
        if self._sync is None:
            await self._sync_failed(SyncError("Sync is not configured"), correlation_id)
            return None

        self._set_sync_status(SyncStatus.CONNECTING)
        try:
            principal = await self._sync.login()
        except SyncError as e:
            await self._sync_failed(e, correlation_id)
            return None

        await self.dispatch(SetPrincipal(principal=principal), correlation_id)
        self._set_sync_status(SyncStatus.CONNECTED)
        await self._audit_logger.log_sync_login(
            principal=principal,
            correlation_id=correlation_id,
        )
        return principal

    async def push_sync(self) -> bool:
        """Upload the syncable part of the state."""
        correlation_id = create_correlation_id()
        if self._sync is None:
            await self._sync_failed(SyncError("Sync is not configured"), correlation_id)
            return False

        snapshot = self.state.to_synced()
        try:
            await self._sync.push(snapshot)
        except SyncError as e:
            await self._sync_failed(e, correlation_id)
            return False

        await self._audit_logger.log_sync_transferred(
            direction="push",
            transaction_count=len(snapshot.transactions),
            correlation_id=correlation_id,
        )
        return True

    async def pull_sync(self) -> bool:
        """
        Download the remote snapshot and import it.

        Returns False when nothing was stored remotely or the pull failed;
        local state is untouched in both cases.
        """
        correlation_id = create_correlation_id()
        if self._sync is None:
            await self._sync_failed(SyncError("Sync is not configured"), correlation_id)
            return False

        try:
            snapshot = await self._sync.pull()
        except SyncError as e:
            await self._sync_failed(e, correlation_id)
            return False

        if snapshot is None:
            return False

        await self.dispatch(ImportData(snapshot=snapshot), correlation_id)
        await self._audit_logger.log_sync_transferred(
            direction="pull",
            transaction_count=len(snapshot.transactions),
            correlation_id=correlation_id,
        )
        return True

    # =========================================================================
    # READ MODELS
    # =========================================================================

    def filtered_transactions(self) -> list[Transaction]:
        state = self.state
        return filter_transactions(state.transactions, state.filters, state.view_mode)

    def dashboard(self) -> DashboardStats:
        state = self.state
        return dashboard_stats(state.transactions, state.filters, state.view_mode)

    def reports(self) -> ReportsData:
        return build_reports(self.state, self.today)

    def upcoming_bills(self) -> UpcomingBills:
        return upcoming_bills(self.state.recurring_transactions, self.today)

    def debt_plan(
        self,
        strategy: PaydownStrategy = PaydownStrategy.AVALANCHE,
        extra_payment: float = 0.0,
    ) -> DebtPaydownPlan:
        return simulate_paydown(self.state.liabilities, strategy, extra_payment)


def create_session(
    state_file: Optional[str] = None,
    use_scanner: bool = True,
    sync_backend: Optional[SyncBackendInterface] = None,
) -> FinanceSession:
    """
    Factory function to create a session with the default collaborators.

    Args:
        state_file: Snapshot path (defaults to the configured state_file)
        use_scanner: Whether to attach the Gemini receipt scanner
        sync_backend: Optional identity/sync backend

    Returns:
        An unopened FinanceSession
    """
    app_settings = get_settings().app
    return FinanceSession(
        state_storage=JsonFileStateStorage(state_file or app_settings.state_file),
        audit_logger=AuditLogger(InMemoryAuditStorage(max_events=app_settings.audit_max_events)),
        scanner=GeminiReceiptScanner() if use_scanner else None,
        sync_backend=sync_backend,
    )
