"""
Abstract Storage Interface

DESIGN DECISION: The store only knows this interface.
This allows us to:
1. Keep data in JSON files on a desktop and in a key-value store elsewhere
2. Use in-memory storage for testing
3. Keep aggregation logic decoupled from the storage medium

The interface is intentionally tiny - the whole dataset is saved and loaded
at once. Personal datasets are hundreds to low thousands of records.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Sequence

from finance_tracker.models.transaction import RecurringPayment, Transaction


class StoredState(NamedTuple):
    """Everything the storage layer persists."""
    transactions: list[Transaction]
    recurring_payments: list[RecurringPayment]
    currency: str


class StorageInterface(ABC):
    """
    Abstract interface for persisting the store's collections.

    Any storage implementation (files, a key-value store, etc.)
    must implement these methods.
    """

    @abstractmethod
    def save(
        self,
        transactions: Sequence[Transaction],
        recurring_payments: Sequence[RecurringPayment],
        currency: str,
    ) -> bool:
        """
        Durably write transactions, recurring payments and currency.

        A failed write must leave the previously saved value of that key
        readable.

        Returns:
            True if every key was written, False otherwise
        """
        pass

    @abstractmethod
    def load(self) -> StoredState:
        """
        Read the persisted state.

        Missing or unreadable keys fall back to empty collections and the
        default currency. This method never raises.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageWriteError(StorageError):
    """A blob could not be written after all retries."""
    pass
