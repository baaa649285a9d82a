"""
Audit Models for Household Finance

Every intent the session applies, every save and every external call
(scan, sync) leaves an audit event. Audit logs are append-only.
"""

import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # State lifecycle
    STATE_LOADED = "state_loaded"
    STATE_SEEDED = "state_seeded"
    STATE_SAVED = "state_saved"
    SAVE_FAILED = "save_failed"

    # Intents
    INTENT_APPLIED = "intent_applied"
    INTENT_REJECTED = "intent_rejected"

    # Receipt scanning
    SCAN_COMPLETED = "scan_completed"
    SCAN_FAILED = "scan_failed"
    SCAN_VALIDATION_FAILED = "scan_validation_failed"

    # Sync
    SYNC_LOGIN = "sync_login"
    SYNC_PUSHED = "sync_pushed"
    SYNC_PULLED = "sync_pulled"
    SYNC_FAILED = "sync_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """One entry in the append-only audit trail."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What the event is about: "state", "intent", "transaction", "scan", "principal"
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    # Shared by every event of one user flow (one dispatch, one scan, one sync)
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    # Rejection reason or exception text
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Flatten to JSON-safe values for the structured log."""
        return self.model_dump(mode="json")


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.intent_applied("pay_bill", correlation_id)
        event = AuditEventBuilder.scan_failed("timeout", True, correlation_id)
    """

    @staticmethod
    def state_loaded(
        transaction_count: int,
        seeded: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = AuditEventType.STATE_SEEDED if seeded else AuditEventType.STATE_LOADED
        return AuditEvent(
            event_type=event_type,
            entity_type="state",
            correlation_id=correlation_id,
            description=(
                "No snapshot found, seeded default state"
                if seeded
                else f"State loaded with {transaction_count} transactions"
            ),
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def state_saved(
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            correlation_id=correlation_id,
            description="State snapshot saved",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def save_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            correlation_id=correlation_id,
            description="State snapshot could not be saved",
            error_message=error_message,
        )

    @staticmethod
    def intent_applied(
        kind: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTENT_APPLIED,
            severity=AuditSeverity.DEBUG,
            entity_type="intent",
            correlation_id=correlation_id,
            description=f"Intent applied: {kind}",
            details={"kind": kind},
            is_user_action=True,
        )

    @staticmethod
    def intent_rejected(
        kind: str,
        reason: str,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="intent",
            correlation_id=correlation_id,
            description=f"Intent rejected: {kind} ({reason})",
            error_code=reason,
            error_message=message,
            details={"kind": kind},
            is_user_action=True,
        )

    @staticmethod
    def scan_completed(
        scan_id: UUID,
        transaction_id: str,
        amount: float,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCAN_COMPLETED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Receipt scanned and booked: {amount:.2f}",
            details={
                "scan_id": str(scan_id),
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def scan_failed(
        error_message: str,
        offline: bool,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCAN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="scan",
            correlation_id=correlation_id,
            description="Receipt scan failed" + (" (offline)" if offline else ""),
            error_message=error_message,
            details={"offline": offline},
        )

    @staticmethod
    def scan_validation_failed(
        scan_id: UUID,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCAN_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="scan",
            entity_id=str(scan_id),
            correlation_id=correlation_id,
            description=f"Scanned receipt failed validation with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def sync_login(
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_LOGIN,
            entity_type="principal",
            entity_id=principal,
            correlation_id=correlation_id,
            description="Logged in to sync backend",
            is_user_action=True,
        )

    @staticmethod
    def sync_transferred(
        direction: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.SYNC_PUSHED
            if direction == "push"
            else AuditEventType.SYNC_PULLED
        )
        return AuditEvent(
            event_type=event_type,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"Sync {direction} of {transaction_count} transactions",
            details={
                "direction": direction,
                "transaction_count": transaction_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.SYNC_FAILED
            if service == "sync"
            else AuditEventType.EXTERNAL_SERVICE_ERROR
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
