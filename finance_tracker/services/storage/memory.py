"""
In-Memory Storage Implementation

Keeps the encoded blobs in a dict. Saves go through the same encoders as
the file storage, so tests exercise real serialization.
"""

from typing import Optional

from finance_tracker.config import StorageSettings
from finance_tracker.services.storage.interface import StorageWriteError
from finance_tracker.services.storage.keyvalue import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """
    Dict-backed storage for tests and throwaway sessions.

    Set fail_writes to simulate a storage medium that rejects writes.
    """

    def __init__(
        self,
        blobs: Optional[dict[str, bytes]] = None,
        settings: Optional[StorageSettings] = None,
        default_currency: Optional[str] = None,
    ):
        super().__init__(settings=settings, default_currency=default_currency)
        self.blobs: dict[str, bytes] = dict(blobs or {})
        self.fail_writes = False
        self.save_count = 0

    def save(self, transactions, recurring_payments, currency) -> bool:
        saved = super().save(transactions, recurring_payments, currency)
        if saved:
            self.save_count += 1
        return saved

    def _read(self, key: str) -> Optional[bytes]:
        return self.blobs.get(key)

    def _write(self, key: str, payload: bytes) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Writes disabled for key {key}")
        self.blobs[key] = payload
