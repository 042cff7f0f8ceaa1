"""
Storage Services Package

Provides the abstract interface the store persists through and concrete
implementations for local files and memory.
"""

from finance_tracker.services.storage.interface import (
    StorageError,
    StorageInterface,
    StorageWriteError,
    StoredState,
)
from finance_tracker.services.storage.keyvalue import KeyValueStorage
from finance_tracker.services.storage.json_file import JsonFileStorage
from finance_tracker.services.storage.memory import InMemoryStorage

__all__ = [
    # Interfaces
    "KeyValueStorage",
    "StorageInterface",
    "StoredState",
    # Exceptions
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
