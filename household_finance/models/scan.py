"""
Receipt Scan Models

A scanned receipt is PROPOSED data. It goes through validation before
the session turns it into a transaction, and a failed scan never touches
state: the user falls back to manual entry.
"""

import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class ScannedReceipt(BaseModel):
    """What the scan collaborator read off a receipt image."""

    model_config = ConfigDict(str_strip_whitespace=True)

    scan_id: UUID = Field(
        default_factory=uuid4,
        description="Unique ID for this scan attempt"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="Merchant name"
    )
    amount: float = Field(
        ...,
        description="Gross amount (validated downstream, may be nonsense)"
    )
    date: Optional[datetime.date] = Field(
        default=None,
        description="Receipt date, None if unreadable"
    )


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of the two-stage receipt validation.

    Stage 1: Schema validation (required values present and sane)
    Stage 2: Semantic validation (dates and amounts plausible)
    """

    scan_id: UUID
    validated_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )
    schema_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.schema_valid and self.semantic_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]


class ScanOutcome(BaseModel):
    """
    What a scan attempt produced.

    On success `transaction_id` names the transaction that was added.
    On failure `error` explains why and state is unchanged.
    """

    success: bool
    receipt: Optional[ScannedReceipt] = None
    validation: Optional[ValidationResult] = None
    transaction_id: Optional[str] = None
    error: Optional[str] = None
    offline: bool = Field(
        default=False,
        description="True when the scanner was unreachable or not configured"
    )
