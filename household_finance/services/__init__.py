"""Services package."""

from household_finance.services.scan import (
    GeminiReceiptScanner,
    ReceiptScannerInterface,
    ScanError,
    ScanParseError,
    ScanUnavailableError,
)
from household_finance.services.storage import (
    AuditStorageInterface,
    CorruptSnapshotError,
    InMemoryAuditStorage,
    InMemoryStateStorage,
    JsonFileStateStorage,
    StateStorageInterface,
    StorageError,
)
from household_finance.services.sync import (
    InMemorySyncBackend,
    NotLoggedInError,
    SyncBackendInterface,
    SyncError,
)

__all__ = [
    # Scan services
    "GeminiReceiptScanner",
    "ReceiptScannerInterface",
    "ScanError",
    "ScanParseError",
    "ScanUnavailableError",
    # Storage services
    "AuditStorageInterface",
    "CorruptSnapshotError",
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    "JsonFileStateStorage",
    "StateStorageInterface",
    "StorageError",
    # Sync services
    "InMemorySyncBackend",
    "NotLoggedInError",
    "SyncBackendInterface",
    "SyncError",
]
