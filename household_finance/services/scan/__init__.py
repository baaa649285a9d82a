"""Receipt scanning services package."""

from household_finance.services.scan.receipt_scanner import (
    GeminiReceiptScanner,
    ReceiptScannerInterface,
    ScanError,
    ScanParseError,
    ScanUnavailableError,
    parse_receipt_response,
)

__all__ = [
    "GeminiReceiptScanner",
    "ReceiptScannerInterface",
    "ScanError",
    "ScanParseError",
    "ScanUnavailableError",
    "parse_receipt_response",
]
