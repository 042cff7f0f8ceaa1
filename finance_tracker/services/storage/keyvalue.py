"""
Key-Value Storage Base

The dataset is stored as three independent blobs (transactions, recurring
payments, currency), one per key. Subclasses only provide raw byte access;
encoding, decoding and fallback to defaults live here.

Each key is decoded on its own: a corrupt recurring blob does not cost the
user their transactions.
"""

from abc import abstractmethod
from typing import Callable, Optional, Sequence, TypeVar

import structlog

from finance_tracker.config import StorageSettings, get_settings
from finance_tracker.models.transaction import RecurringPayment, Transaction
from finance_tracker.services.backup.codec import (
    decode_currency,
    decode_recurring,
    decode_transactions,
    encode_currency,
    encode_recurring,
    encode_transactions,
)
from finance_tracker.services.storage.interface import (
    StorageInterface,
    StorageWriteError,
    StoredState,
)

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class KeyValueStorage(StorageInterface):
    """Storage backed by a flat namespace of byte blobs."""

    def __init__(
        self,
        settings: Optional[StorageSettings] = None,
        default_currency: Optional[str] = None,
    ):
        self._settings = settings or get_settings().storage
        self._default_currency = default_currency or get_settings().app.default_currency

    @property
    def keys(self) -> tuple[str, str, str]:
        return (
            self._settings.transactions_key,
            self._settings.recurring_key,
            self._settings.currency_key,
        )

    @abstractmethod
    def _read(self, key: str) -> Optional[bytes]:
        """Return the blob stored under key, or None if there is none."""
        pass

    @abstractmethod
    def _write(self, key: str, payload: bytes) -> None:
        """
        Store payload under key, replacing the previous blob atomically.

        Raises:
            StorageWriteError: If the blob could not be written
        """
        pass

    def save(
        self,
        transactions: Sequence[Transaction],
        recurring_payments: Sequence[RecurringPayment],
        currency: str,
    ) -> bool:
        transactions_key, recurring_key, currency_key = self.keys
        try:
            self._write(transactions_key, encode_transactions(transactions))
            self._write(recurring_key, encode_recurring(recurring_payments))
            self._write(currency_key, encode_currency(currency))
        except StorageWriteError as e:
            logger.error("storage_save_failed", error=str(e))
            return False
        return True

    def load(self) -> StoredState:
        transactions_key, recurring_key, currency_key = self.keys
        return StoredState(
            transactions=self._load_key(transactions_key, decode_transactions, list),
            recurring_payments=self._load_key(recurring_key, decode_recurring, list),
            currency=self._load_key(
                currency_key, decode_currency, lambda: self._default_currency
            ),
        )

    def _load_key(
        self,
        key: str,
        decoder: Callable[[bytes], T],
        default: Callable[[], T],
    ) -> T:
        try:
            payload = self._read(key)
        except OSError as e:
            logger.warning("storage_read_failed", key=key, error=str(e))
            return default()

        if payload is None:
            return default()

        try:
            return decoder(payload)
        except ValueError as e:
            # Corrupt blob: start from defaults instead of failing startup
            logger.warning("storage_decode_failed", key=key, error=str(e))
            return default()
