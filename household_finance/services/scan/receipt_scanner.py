"""
Receipt Scanning

DESIGN DECISION: Scanning is a collaborator, not part of the core. The
contract is narrow:

    image bytes -> ScannedReceipt{description, amount, date}

A failed or offline scan raises a typed ScanError and never touches
state; the user falls back to manual entry.

The Gemini implementation sends the image with a fixed JSON-only prompt
and parses the first JSON object out of the reply. Whatever comes back
is PROPOSED data and still goes through ReceiptValidator.
"""

import datetime
import json
from abc import ABC, abstractmethod
from typing import Any, Optional

import google.generativeai as genai
from tenacity import retry, stop_after_attempt, wait_exponential

from household_finance.config import AppSettings, GeminiSettings, get_settings
from household_finance.models.scan import ScannedReceipt


RECEIPT_PROMPT = """You are reading a shopping receipt for a household finance app.

Extract:
- description: the merchant or shop name
- amount: the gross total as a number (use "." as decimal separator)
- date: the receipt date as YYYY-MM-DD, or null if it is not readable

Respond with ONLY a JSON object in this exact format:
{"description": "Shop name", "amount": 12.34, "date": "2024-01-31"}

Do not guess values that are not on the receipt."""


class ScanError(Exception):
    """Base exception for receipt scanning."""
    pass


class ScanUnavailableError(ScanError):
    """Scanning is not possible right now (offline, not configured, API down)."""
    pass


class ScanParseError(ScanError):
    """The scanner replied, but not with a usable receipt."""
    pass


class ReceiptScannerInterface(ABC):
    """Anything that turns a receipt image into a ScannedReceipt."""

    @abstractmethod
    async def scan(self, image_bytes: bytes, mime_type: str) -> ScannedReceipt:
        """
        Read a receipt image.

        Args:
            image_bytes: Raw image bytes
            mime_type: Image MIME type (e.g. image/jpeg)

        Returns:
            The extracted receipt fields

        Raises:
            ScanUnavailableError: If the service cannot be reached
            ScanParseError: If the reply is not a receipt
            ScanError: If the image itself is not acceptable
        """
        pass


def _parse_date(value: Any) -> Optional[datetime.date]:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_receipt_response(text: str) -> ScannedReceipt:
    """
    Build a ScannedReceipt from the model's reply.

    Finds the outermost JSON object in `text`; surrounding prose or code
    fences are ignored. An unreadable date becomes None.

    Raises:
        ScanParseError: If there is no JSON object or no numeric amount
    """
    start = text.find("{")
    end = text.rfind("}") + 1
    if start < 0 or end <= start:
        raise ScanParseError("No JSON object in scan response")

    try:
        data = json.loads(text[start:end])
    except json.JSONDecodeError as e:
        raise ScanParseError(f"Scan response is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise ScanParseError("Scan response is not a JSON object")

    amount = data.get("amount")
    if isinstance(amount, str):
        amount = amount.replace(",", ".")
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise ScanParseError(f"Scan response has no numeric amount: {data.get('amount')!r}")

    return ScannedReceipt(
        description=str(data.get("description") or "")[:500],
        amount=amount,
        date=_parse_date(data.get("date")),
    )


class GeminiReceiptScanner(ReceiptScannerInterface):
    """
    Receipt scanner backed by a Gemini multimodal model.

    IMPORTANT BOUNDARIES:
    1. This service ONLY extracts data - validation happens downstream
    2. It never books a transaction
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._settings = settings
        self._app_settings = app_settings
        self._model: Optional[genai.GenerativeModel] = None

    def _gemini_settings(self) -> GeminiSettings:
        if self._settings is None:
            try:
                self._settings = get_settings().gemini
            except Exception as e:
                raise ScanUnavailableError(f"Gemini is not configured: {e}")
        return self._settings

    def _get_model(self) -> genai.GenerativeModel:
        """Configure Gemini on first use."""
        if self._model is None:
            settings = self._gemini_settings()
            if not settings.api_key:
                raise ScanUnavailableError("Gemini API key is empty")
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                },
            )
        return self._model

    def _check_image(self, image_bytes: bytes, mime_type: str) -> None:
        app = self._app_settings or get_settings().app
        if not image_bytes:
            raise ScanError("Image is empty")
        if mime_type.lower() not in app.supported_formats_list:
            raise ScanError(f"Unsupported image type: {mime_type}")
        if len(image_bytes) > app.scan_max_image_bytes:
            raise ScanError(
                f"Image is larger than {app.scan_max_image_mb} MB"
            )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _generate(self, image_bytes: bytes, mime_type: str) -> str:
        response = await self._get_model().generate_content_async([
            RECEIPT_PROMPT,
            {"mime_type": mime_type, "data": image_bytes},
        ])
        return response.text.strip()

    async def scan(self, image_bytes: bytes, mime_type: str) -> ScannedReceipt:
        self._check_image(image_bytes, mime_type)
        self._get_model()

        try:
            text = await self._generate(image_bytes, mime_type)
        except ScanError:
            raise
        except Exception as e:
            raise ScanUnavailableError(f"Gemini request failed: {e}") from e

        return parse_receipt_response(text)
