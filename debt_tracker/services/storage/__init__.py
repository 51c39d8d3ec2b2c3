"""
Storage Services Package

Provides the key-value storage interface, its file and in-memory
implementations, and the snapshot repository built on top of them.
"""

from debt_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)
from debt_tracker.services.storage.json_file import JsonFileStorage
from debt_tracker.services.storage.memory import InMemoryStorage
from debt_tracker.services.storage.repository import (
    DEFAULT_KEY_PREFIX,
    SnapshotLoad,
    SnapshotRepository,
)

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    # Snapshots
    "DEFAULT_KEY_PREFIX",
    "SnapshotLoad",
    "SnapshotRepository",
]
