"""
Abstract Storage Interface

DESIGN DECISION: The engine never touches storage. The session loads a
snapshot once at startup and writes the whole state after every change
through these interfaces, so the backend can be:
1. A JSON file on disk (the default)
2. Memory, for tests
3. Anything else that can store one document

The interface is intentionally small: one snapshot in, one snapshot out.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from household_finance.models.audit import AuditEvent
from household_finance.models.state import AppState


class StateStorageInterface(ABC):
    """
    Abstract interface for the persisted AppState snapshot.

    Implementations store the persisted shape (AppState minus the open
    modal, the selection and the sync connection status).
    """

    @abstractmethod
    async def load_state(self) -> Optional[AppState]:
        """
        Load the last saved snapshot.

        Returns:
            The state, or None if nothing was saved yet

        Raises:
            CorruptSnapshotError: If a snapshot exists but cannot be read
            StorageError: If the backend fails
        """
        pass

    @abstractmethod
    async def save_state(self, state: AppState) -> bool:
        """
        Replace the stored snapshot with `state`.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """
        Remove the stored snapshot.

        Returns:
            True if something was removed
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one receipt scan).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """A stored snapshot exists but does not parse as AppState."""
    pass
