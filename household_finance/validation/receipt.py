"""
Two-Stage Receipt Validation

DESIGN DECISION: A scanned receipt is checked in two distinct stages
before it may become a transaction:

STAGE 1 - SCHEMA VALIDATION:
- Amount present and positive
- Description and date present (missing ones are warnings, the user
  can fill them in)

STAGE 2 - SEMANTIC VALIDATION:
- Absurd amount detection
- Future date detection
- Unusually old date detection
- Merchant name sanity

Stage 2 only runs when stage 1 passes.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; the session decides whether to book.
"""

from datetime import date, timedelta
from typing import Optional

from household_finance.config import AppSettings, get_settings
from household_finance.models.scan import (
    ScannedReceipt,
    ValidationIssue,
    ValidationResult,
)


class ReceiptValidator:
    """Checks a ScannedReceipt before the session books it."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _validate_schema(
        self,
        receipt: ScannedReceipt,
    ) -> tuple[bool, list[ValidationIssue]]:
        """Stage 1: required fields. Returns (is_valid, issues)."""
        issues = []

        if receipt.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
                suggested_fix="Check if the total was read correctly",
            ))

        if not receipt.description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Merchant name could not be read",
                severity="warning",
                suggested_fix="Enter the description manually",
            ))

        if receipt.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Receipt date could not be read, today's date is used",
                severity="warning",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        receipt: ScannedReceipt,
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """Stage 2: plausibility of amount, date and merchant."""
        issues = []

        if receipt.amount > self._settings.max_transaction_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({receipt.amount:,.2f}) is above the allowed maximum",
                severity="error",
                suggested_fix="Enter the transaction manually",
            ))
        elif receipt.amount < 1:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({receipt.amount}) seems unusually low",
                severity="warning",
                suggested_fix="Compare with the total on the receipt",
            ))

        if receipt.date is not None:
            max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
            if receipt.date > max_future_date:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message=f"Receipt date ({receipt.date}) is in the future",
                    severity="warning",
                    suggested_fix="Check the receipt date",
                ))

            if receipt.date < today - timedelta(days=365 * 2):
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="suspicious_date",
                    message=f"Receipt date ({receipt.date}) seems unusually old",
                    severity="warning",
                    suggested_fix="The year may have been misread",
                ))

        if receipt.description:
            name = receipt.description
            alpha_count = sum(1 for c in name if c.isalpha())
            if alpha_count / len(name) < 0.3:
                issues.append(ValidationIssue(
                    field="description",
                    issue_type="suspicious_value",
                    message="Merchant name looks unusual (too many numbers/symbols)",
                    severity="warning",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate(
        self,
        receipt: ScannedReceipt,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run the full two-stage validation pipeline.

        Args:
            receipt: The scanned receipt to validate
            today: Reference date for the date checks (defaults to today)

        Returns:
            ValidationResult with all issues found
        """
        today = today or date.today()
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(receipt)
        all_issues.extend(schema_issues)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(receipt, today)
            all_issues.extend(semantic_issues)

        return ValidationResult(
            scan_id=receipt.scan_id,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=all_issues,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short plain-text summary for the scan dialog."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        errors = [issue for issue in result.issues if issue.severity == "error"]
        if errors:
            lines.append("The receipt could not be used:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
