"""
JSON File Storage Implementation

Each key is one UTF-8 file inside the data directory. Keys are
percent-encoded into file names, so any user name is a safe key.

Writes go to a temporary file first and are moved into place with
os.replace, so a crash mid-write leaves the previous snapshot intact.
Transient OSErrors (locked file, full disk being cleaned up) are retried
with tenacity before giving up.
"""

import os
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from debt_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)


class JsonFileStorage(KeyValueStorageInterface):
    """Key-value storage backed by one file per key."""

    def __init__(
        self,
        data_dir: Union[str, Path],
        write_attempts: int = 3,
    ):
        self._data_dir = Path(data_dir)
        self._write_attempts = write_attempts
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self._data_dir}: {e}")

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File that holds the value for `key`."""
        return self._data_dir / f"{quote(key, safe='')}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def write(self, key: str, payload: str) -> None:
        path = self.path_for(key)
        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._write_atomic(path, payload)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")

    def _write_atomic(self, path: Path, payload: str) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
