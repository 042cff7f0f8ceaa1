"""Services package."""

from finance_tracker.services.backup import (
    ImportDecodeError,
    export_data,
    import_data,
)
from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
    StorageInterface,
    StorageWriteError,
    StoredState,
)

__all__ = [
    # Backup
    "ImportDecodeError",
    "export_data",
    "import_data",
    # Storage services
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
    "StorageInterface",
    "StorageWriteError",
    "StoredState",
]
