"""Tests for two-stage receipt validation."""

from datetime import date

import pytest

from household_finance.config import AppSettings
from household_finance.models import ScannedReceipt
from household_finance.validation import ReceiptValidator


TODAY = date(2024, 3, 15)


@pytest.fixture
def validator():
    return ReceiptValidator(AppSettings(max_transaction_amount=10000, future_date_tolerance_days=7))


class TestReceiptValidator:

    def test_clean_receipt(self, validator):
        receipt = ScannedReceipt(description="Corner Market", amount=23.4, date=date(2024, 3, 14))
        result = validator.validate(receipt, TODAY)

        assert result.is_valid
        assert result.issues == []
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    def test_zero_amount_fails_schema_and_skips_semantics(self, validator):
        receipt = ScannedReceipt(description="Corner Market", amount=0, date=date(2010, 1, 1))
        result = validator.validate(receipt, TODAY)

        assert not result.schema_valid
        assert not result.semantic_valid
        assert not result.is_valid
        assert [i.field for i in result.issues] == ["amount"]

    def test_missing_fields_are_warnings(self, validator):
        result = validator.validate(ScannedReceipt(amount=12), TODAY)
        assert result.is_valid
        assert {i.field for i in result.issues} == {"description", "date"}
        assert not result.has_errors

    def test_absurd_amount_is_an_error(self, validator):
        result = validator.validate(
            ScannedReceipt(description="Car dealer", amount=25000, date=TODAY), TODAY,
        )
        assert result.schema_valid
        assert not result.semantic_valid
        assert "could not be used" in validator.get_user_friendly_summary(result)

    def test_tiny_amount_is_a_warning(self, validator):
        result = validator.validate(ScannedReceipt(description="Gum", amount=0.5, date=TODAY), TODAY)
        assert result.is_valid
        assert result.issues[0].issue_type == "suspicious_value"

    @pytest.mark.parametrize("receipt_date,issue_type", [
        (date(2024, 3, 30), "future_date"),
        (date(2021, 1, 1), "suspicious_date"),
    ])
    def test_implausible_dates_are_warnings(self, validator, receipt_date, issue_type):
        result = validator.validate(
            ScannedReceipt(description="Corner Market", amount=10, date=receipt_date), TODAY,
        )
        assert result.is_valid
        assert [i.issue_type for i in result.issues] == [issue_type]

    def test_date_within_tolerance_is_fine(self, validator):
        result = validator.validate(
            ScannedReceipt(description="Corner Market", amount=10, date=date(2024, 3, 20)), TODAY,
        )
        assert result.issues == []

    def test_symbol_heavy_description(self, validator):
        result = validator.validate(
            ScannedReceipt(description="#123-456/7", amount=10, date=TODAY), TODAY,
        )
        assert result.is_valid
        assert result.warnings == ["Merchant name looks unusual (too many numbers/symbols)"]
        assert "Please verify" in validator.get_user_friendly_summary(result)
