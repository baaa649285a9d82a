"""
Storage Services Package

Provides abstract interfaces and concrete implementations for the state
snapshot and the audit log. JSON file storage is the default backend.
"""

from household_finance.services.storage.interface import (
    AuditStorageInterface,
    CorruptSnapshotError,
    StateStorageInterface,
    StorageError,
)
from household_finance.services.storage.json_file import JsonFileStateStorage
from household_finance.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStateStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "StateStorageInterface",
    # Exceptions
    "CorruptSnapshotError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    "JsonFileStateStorage",
]
