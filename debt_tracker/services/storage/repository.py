"""
Snapshot Repository

Maps a user id to a storage key and converts between stored JSON text and
LedgerSnapshot.

Missing, unparseable or schema-invalid data never stops a session: it
loads as an empty ledger and the result is flagged as recovered so the
caller can log it. The next save overwrites the bad value.
"""

import json
from typing import Optional

import pydantic
from pydantic import BaseModel

from debt_tracker.models.ledger import LedgerSnapshot
from debt_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)


DEFAULT_KEY_PREFIX = "debtTrackerData_"


class SnapshotLoad(BaseModel):
    """Outcome of loading a user's snapshot."""

    key: str
    snapshot: LedgerSnapshot
    found: bool = False
    recovered: bool = False
    reason: Optional[str] = None


class SnapshotRepository:
    """Loads and saves one JSON snapshot per user."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        default_salary_day: int = 1,
    ):
        self._storage = storage
        self._key_prefix = key_prefix
        self._default_salary_day = default_salary_day

    @property
    def storage(self) -> KeyValueStorageInterface:
        return self._storage

    def key_for(self, user_id: str) -> str:
        return f"{self._key_prefix}{user_id}"

    def empty_snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot.empty(salary_day=self._default_salary_day)

    def load(self, user_id: str) -> SnapshotLoad:
        """
        Load a user's ledger.

        Raises:
            StorageError: If the backend itself cannot be read
        """
        key = self.key_for(user_id)
        raw = self._storage.read(key)

        if raw is None:
            return SnapshotLoad(key=key, snapshot=self.empty_snapshot())

        try:
            data = json.loads(raw)
        except ValueError as e:
            return self._recovered(key, f"Invalid JSON: {e}")

        if not isinstance(data, dict):
            return self._recovered(key, f"Expected a JSON object, got {type(data).__name__}")

        # Absent or null sections fall back to their defaults
        data = {name: value for name, value in data.items() if value is not None}
        if "settings" not in data:
            data["settings"] = self.empty_snapshot().settings.model_dump(by_alias=True)
        elif isinstance(data["settings"], dict):
            data["settings"] = self._legacy_settings(data["settings"])

        try:
            snapshot = LedgerSnapshot.model_validate(data)
        except pydantic.ValidationError as e:
            return self._recovered(key, f"Invalid snapshot: {e.error_count()} error(s): {e}")

        return SnapshotLoad(key=key, snapshot=snapshot, found=True)

    def save(self, user_id: str, snapshot: LedgerSnapshot) -> str:
        """
        Persist a snapshot.

        Returns:
            The storage key written

        Raises:
            StorageError: If the snapshot cannot be serialized or written
        """
        key = self.key_for(user_id)
        try:
            payload = json.dumps(snapshot.to_storage_dict(), ensure_ascii=False)
        except ValueError as e:
            raise StorageError(f"Cannot serialize snapshot for {key}: {e}")
        self._storage.write(key, payload)
        return key

    def clear(self, user_id: str) -> None:
        self._storage.delete(self.key_for(user_id))

    def _recovered(self, key: str, reason: str) -> SnapshotLoad:
        return SnapshotLoad(
            key=key,
            snapshot=self.empty_snapshot(),
            recovered=True,
            reason=reason,
        )

    def _legacy_settings(self, settings: dict) -> dict:
        """
        Older snapshots saved the salary form unchecked.

        A missing, null or negative salaryAmount turns automation off and a
        salaryDate outside 1-31 falls back to the default day.
        """
        settings = dict(settings)

        amount = settings.get("salaryAmount")
        if amount is None or (isinstance(amount, (int, float)) and amount < 0):
            settings["salaryAmount"] = 0

        day = settings.get("salaryDate")
        if day is None or (isinstance(day, (int, float)) and not 1 <= day <= 31):
            settings["salaryDate"] = self._default_salary_day

        return settings
