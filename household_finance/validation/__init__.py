"""Validation package."""

from household_finance.validation.receipt import ReceiptValidator

__all__ = ["ReceiptValidator"]
