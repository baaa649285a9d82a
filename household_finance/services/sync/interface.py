"""
Sync Backend Interface

The identity/sync collaborator is opaque to the core:

    login()          -> principal id
    push(snapshot)   -> stores the syncable state remotely
    pull()           -> the last pushed syncable state, if any

Only SyncedAppState crosses this boundary; UI-only fields never leave
the device.
"""

from abc import ABC, abstractmethod
from typing import Optional

from household_finance.models.state import SyncedAppState


class SyncError(Exception):
    """Base exception for sync operations."""
    pass


class NotLoggedInError(SyncError):
    """Push or pull attempted before login."""
    pass


class SyncBackendInterface(ABC):

    @abstractmethod
    async def login(self) -> str:
        """
        Authenticate with the identity provider.

        Returns:
            The principal id of the logged-in identity

        Raises:
            SyncError: If login fails
        """
        pass

    @abstractmethod
    async def push(self, snapshot: SyncedAppState) -> bool:
        """
        Store the snapshot for the logged-in principal.

        Raises:
            NotLoggedInError: If login() has not succeeded
            SyncError: If the backend rejects the upload
        """
        pass

    @abstractmethod
    async def pull(self) -> Optional[SyncedAppState]:
        """
        Fetch the stored snapshot for the logged-in principal.

        Returns:
            The snapshot, or None if nothing was pushed yet

        Raises:
            NotLoggedInError: If login() has not succeeded
            SyncError: If the backend fails
        """
        pass


class InMemorySyncBackend(SyncBackendInterface):
    """Sync backend that keeps pushed snapshots in memory, keyed by principal."""

    def __init__(self, principal: str = "local-principal"):
        self._principal = principal
        self._logged_in: Optional[str] = None
        self._snapshots: dict[str, str] = {}

    async def login(self) -> str:
        self._logged_in = self._principal
        return self._principal

    def _require_login(self) -> str:
        if self._logged_in is None:
            raise NotLoggedInError("Log in before syncing")
        return self._logged_in

    async def push(self, snapshot: SyncedAppState) -> bool:
        # Stored as JSON, the way a remote store would hold it
        self._snapshots[self._require_login()] = snapshot.model_dump_json()
        return True

    async def pull(self) -> Optional[SyncedAppState]:
        raw = self._snapshots.get(self._require_login())
        if raw is None:
            return None
        return SyncedAppState.model_validate_json(raw)
