"""Services package."""

from debt_tracker.services.storage import (
    DEFAULT_KEY_PREFIX,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    SnapshotLoad,
    SnapshotRepository,
    StorageError,
)

__all__ = [
    # Storage services
    "DEFAULT_KEY_PREFIX",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "SnapshotLoad",
    "SnapshotRepository",
    "StorageError",
]
