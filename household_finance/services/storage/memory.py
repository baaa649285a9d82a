"""
In-Memory Storage

For tests and throwaway sessions. The state store keeps the persisted
dict rather than the AppState object, so a load goes through the same
round trip as the file backend and never returns ephemeral fields.
"""

from collections import deque
from typing import Any, Optional
from uuid import UUID

from household_finance.models.audit import AuditEvent
from household_finance.models.state import AppState
from household_finance.services.storage.interface import (
    AuditStorageInterface,
    StateStorageInterface,
)


class InMemoryStateStorage(StateStorageInterface):

    def __init__(self, initial: Optional[AppState] = None):
        self._snapshot: Optional[dict[str, Any]] = (
            initial.to_persisted() if initial is not None else None
        )
        self.save_count = 0

    async def load_state(self) -> Optional[AppState]:
        if self._snapshot is None:
            return None
        return AppState.from_persisted(self._snapshot)

    async def save_state(self, state: AppState) -> bool:
        self._snapshot = state.to_persisted()
        self.save_count += 1
        return True

    async def clear(self) -> bool:
        existed = self._snapshot is not None
        self._snapshot = None
        return existed


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit events in memory; with `max_events` only the newest are kept."""

    def __init__(self, max_events: Optional[int] = None):
        self.events: deque[AuditEvent] = deque(maxlen=max_events)

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self.events if e.correlation_id == correlation_id]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self.events))[:limit]
