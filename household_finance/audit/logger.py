"""
Audit Logger

Every applied or rejected intent, every snapshot write and every scan or
sync call ends up here: once in the structured log, and once in the
audit storage backend when the session has one.

A broken audit backend never breaks the session. Storage failures are
logged and reported as False.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from household_finance.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from household_finance.services.storage import AuditStorageInterface


structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


_LOG_LEVELS = {
    AuditSeverity.DEBUG: logging.DEBUG,
    AuditSeverity.INFO: logging.INFO,
    AuditSeverity.WARNING: logging.WARNING,
    AuditSeverity.ERROR: logging.ERROR,
    AuditSeverity.CRITICAL: logging.ERROR,
}


class AuditLogger:
    """Writes audit events to the structured log and to audit storage."""

    def __init__(self, storage: Optional[AuditStorageInterface] = None):
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Record one event.

        Returns False only when the storage backend failed; without a
        backend the event is logged locally and True is returned.
        """
        self._logger.log(_LOG_LEVELS[event.severity], "audit_event", **event.to_log_dict())

        if self._storage is None:
            return True

        try:
            return await self._storage.append_event(event)
        except Exception as e:
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_type=event.event_type.value,
                event_id=str(event.event_id),
            )
            return False

    async def log_state_loaded(
        self,
        transaction_count: int,
        seeded: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.state_loaded(
            transaction_count=transaction_count,
            seeded=seeded,
            correlation_id=correlation_id,
        ))

    async def log_state_saved(
        self,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.state_saved(
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    async def log_save_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.save_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_intent_applied(
        self,
        kind: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.intent_applied(
            kind=kind,
            correlation_id=correlation_id,
        ))

    async def log_intent_rejected(
        self,
        kind: str,
        reason: str,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an intent the engine turned down."""
        await self.log(AuditEventBuilder.intent_rejected(
            kind=kind,
            reason=reason,
            message=message,
            correlation_id=correlation_id,
        ))

    async def log_scan_completed(
        self,
        scan_id: UUID,
        transaction_id: str,
        amount: float,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.scan_completed(
            scan_id=scan_id,
            transaction_id=transaction_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_scan_failed(
        self,
        error_message: str,
        offline: bool,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.scan_failed(
            error_message=error_message,
            offline=offline,
            correlation_id=correlation_id,
        ))

    async def log_scan_validation_failed(
        self,
        scan_id: UUID,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.scan_validation_failed(
            scan_id=scan_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_sync_login(
        self,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.sync_login(
            principal=principal,
            correlation_id=correlation_id,
        ))

    async def log_sync_transferred(
        self,
        direction: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a completed push or pull."""
        await self.log(AuditEventBuilder.sync_transferred(
            direction=direction,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log external service error."""
        await self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a receipt scan).
    Pass it through all subsequent operations.
    """
    return uuid4()
