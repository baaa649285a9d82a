"""Tests for receipt scanning. No request ever reaches Gemini."""

import asyncio
from datetime import date

import pytest

from household_finance.config import AppSettings, GeminiSettings
from household_finance.services.scan import (
    GeminiReceiptScanner,
    ScanError,
    ScanParseError,
    ScanUnavailableError,
)
from household_finance.services.scan.receipt_scanner import parse_receipt_response


class TestParseReceiptResponse:

    def test_plain_json(self):
        receipt = parse_receipt_response(
            '{"description": "Corner Market", "amount": 23.4, "date": "2024-03-14"}'
        )
        assert receipt.description == "Corner Market"
        assert receipt.amount == 23.4
        assert receipt.date == date(2024, 3, 14)

    def test_fenced_json_with_comma_decimal(self):
        text = 'Here you go:\n```json\n{"description": "Bakery", "amount": "12,50", "date": null}\n```'
        receipt = parse_receipt_response(text)
        assert receipt.amount == 12.5
        assert receipt.date is None

    def test_unreadable_date_becomes_none(self):
        receipt = parse_receipt_response('{"description": "Shop", "amount": 5, "date": "14.03.2024"}')
        assert receipt.date is None

    @pytest.mark.parametrize("text", [
        "Sorry, I cannot read this receipt.",
        '{"description": "Shop", "amount": }',
        '{"description": "Shop"}',
        '{"description": "Shop", "amount": "lots"}',
    ])
    def test_unusable_replies(self, text):
        with pytest.raises(ScanParseError):
            parse_receipt_response(text)


class TestGeminiReceiptScanner:

    def _scanner(self, api_key="") -> GeminiReceiptScanner:
        return GeminiReceiptScanner(
            settings=GeminiSettings(api_key=api_key),
            app_settings=AppSettings(scan_max_image_mb=1),
        )

    def test_missing_api_key_is_unavailable(self):
        with pytest.raises(ScanUnavailableError):
            asyncio.run(self._scanner().scan(b"\x89PNG", "image/png"))

    def test_unsupported_type_is_rejected_before_any_call(self):
        with pytest.raises(ScanError) as exc_info:
            asyncio.run(self._scanner().scan(b"%PDF", "application/pdf"))
        assert not isinstance(exc_info.value, ScanUnavailableError)

    def test_empty_and_oversized_images(self):
        scanner = self._scanner()
        with pytest.raises(ScanError):
            asyncio.run(scanner.scan(b"", "image/jpeg"))
        with pytest.raises(ScanError):
            asyncio.run(scanner.scan(b"x" * (1024 * 1024 + 1), "image/jpeg"))
