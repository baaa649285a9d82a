"""
JSON File Storage

Keeps the persisted snapshot in a single JSON document on disk.

Every write goes to its own temporary file next to the target, which is
then renamed over it. A crash mid-write leaves the previous snapshot
intact, and concurrent writes never share a temporary file.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from household_finance.config import get_settings
from household_finance.models.state import AppState
from household_finance.services.storage.interface import (
    CorruptSnapshotError,
    StateStorageInterface,
    StorageError,
)


class JsonFileStateStorage(StateStorageInterface):
    """
    State storage backed by a JSON file.

    File layout: the output of AppState.to_persisted(), one object.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Args:
            path: Snapshot file. Defaults to the configured state_file.
        """
        self._path = Path(path or get_settings().app.state_file)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Optional[AppState]:
        if not self._path.exists():
            return None
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        try:
            return AppState.from_persisted(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            raise CorruptSnapshotError(f"Snapshot {self._path} is not valid: {e}")

    def _write(self, state: AppState) -> None:
        payload = json.dumps(state.to_persisted(), ensure_ascii=False, indent=2)
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f"{self._path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {self._path}: {e}")

    async def load_state(self) -> Optional[AppState]:
        return await asyncio.to_thread(self._read)

    async def save_state(self, state: AppState) -> bool:
        await asyncio.to_thread(self._write, state)
        return True

    async def clear(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to remove {self._path}: {e}")
        return True
