"""
Abstract Storage Interface

Ledger snapshots are stored in a plain key-value store: one JSON document
per user, under a namespaced key. This keeps the rest of the system
independent of where the bytes end up:
1. JSON files on disk for the real application
2. An in-memory dict for tests and storage-less sessions

The interface is three methods. Parsing and the corrupt-state
fallback live in the snapshot repository, not in the backends.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for string key-value storage.

    Any backend (files, browser-style local storage, a database table)
    must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key does not exist

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """
        Store text under a key, replacing any previous value.

        Args:
            key: Storage key
            payload: Text to store

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a key. Deleting a missing key is not an error.

        Raises:
            StorageError: If the backend cannot be modified
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
