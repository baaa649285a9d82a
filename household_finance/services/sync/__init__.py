"""Identity and sync services package."""

from household_finance.services.sync.interface import (
    InMemorySyncBackend,
    NotLoggedInError,
    SyncBackendInterface,
    SyncError,
)

__all__ = [
    "InMemorySyncBackend",
    "NotLoggedInError",
    "SyncBackendInterface",
    "SyncError",
]
