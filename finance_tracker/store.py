"""
Finance Store

This module owns the user's data for the lifetime of the application:
1. Transactions and recurring payments (CRUD)
2. The selected-month cursor every monthly statistic is scoped to
3. The currency preference

DESIGN DECISION: The store enforces these boundaries:
- Every applied mutation is persisted immediately, then audited
- Derived statistics are recomputed on every access, never cached
- Mutations targeting an unknown id are silent no-ops
- A failed import never touches the current state

Listeners registered with subscribe() receive the AuditEvent of every
applied change, which is how a UI learns it has to re-read values.
"""

import logging
import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional
from uuid import UUID

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.config import AppSettings, get_settings
from finance_tracker.display import month_year_label
from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.models.transaction import (
    CategoryShare,
    CategoryTotal,
    DailyTotal,
    RecurringPayment,
    Transaction,
    TransactionGroup,
    TransactionType,
)
from finance_tracker.queries import aggregations
from finance_tracker.services.backup import ImportDecodeError, export_data, import_data
from finance_tracker.services.storage import JsonFileStorage, StorageInterface

Listener = Callable[[AuditEvent], None]

logger = structlog.get_logger(__name__)


class FinanceStore:
    """
    In-memory collection of transactions and recurring payments.

    All public methods are safe to call from several threads: one
    re-entrant lock per store guards every mutation and every query.
    """

    def __init__(
        self,
        storage: StorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
        today: Optional[date] = None,
    ):
        """
        Create the store and load persisted state.

        Args:
            storage: Where the collections are saved after each mutation
            audit_logger: Receives an event for each change. A local-only
                          logger is created if omitted.
            settings: Application settings (defaults from environment)
            today: Initial month for the cursor (defaults to the current month)
        """
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._settings = settings or get_settings().app
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self._transactions: list[Transaction] = []
        self._recurring: list[RecurringPayment] = []
        self._currency: str = self._settings.default_currency
        self._selected_month: date = aggregations.month_start(today or date.today())

        self._load()

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def transactions(self) -> list[Transaction]:
        with self._lock:
            return list(self._transactions)

    @property
    def recurring_payments(self) -> list[RecurringPayment]:
        with self._lock:
            return list(self._recurring)

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def selected_month(self) -> date:
        """First day of the month all monthly statistics are scoped to."""
        return self._selected_month

    @property
    def month_year_label(self) -> str:
        return month_year_label(self._selected_month)

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        with self._lock:
            return next((t for t in self._transactions if t.id == transaction_id), None)

    def get_recurring(self, payment_id: UUID) -> Optional[RecurringPayment]:
        with self._lock:
            return next((p for p in self._recurring if p.id == payment_id), None)

    # =========================================================================
    # DERIVED QUERIES - CURRENT MONTH
    # =========================================================================

    @property
    def current_month_transactions(self) -> list[Transaction]:
        """Transactions in the selected month, most recent first."""
        with self._lock:
            return aggregations.month_transactions(self._transactions, self._selected_month)

    @property
    def monthly_income(self) -> Decimal:
        return aggregations.sum_amounts(self.current_month_transactions, TransactionType.INCOME)

    @property
    def monthly_expense(self) -> Decimal:
        return aggregations.sum_amounts(self.current_month_transactions, TransactionType.EXPENSE)

    @property
    def monthly_balance(self) -> Decimal:
        with self._lock:
            return self.monthly_income - self.monthly_expense

    @property
    def expenses_by_category(self) -> list[CategoryTotal]:
        return aggregations.totals_by_category(
            self.current_month_transactions, TransactionType.EXPENSE
        )

    @property
    def income_by_category(self) -> list[CategoryTotal]:
        return aggregations.totals_by_category(
            self.current_month_transactions, TransactionType.INCOME
        )

    @property
    def daily_expenses(self) -> list[DailyTotal]:
        """Expense total for every day of the selected month."""
        with self._lock:
            return aggregations.daily_totals(
                self._transactions, self._selected_month, TransactionType.EXPENSE
            )

    @property
    def recent_transactions(self) -> list[Transaction]:
        return self.current_month_transactions[: self._settings.recent_limit]

    @property
    def top_expenses(self) -> list[Transaction]:
        return aggregations.top_by_amount(
            self.current_month_transactions,
            TransactionType.EXPENSE,
            limit=self._settings.top_expenses_limit,
        )

    @property
    def average_daily_expense(self) -> Decimal:
        """Monthly expense spread over every day of the selected month."""
        with self._lock:
            return aggregations.average_daily(self._transactions, self._selected_month)

    @property
    def expense_shares(self) -> list[CategoryShare]:
        """expenses_by_category with each category's percent of monthly expense."""
        return aggregations.category_shares(
            self.current_month_transactions, TransactionType.EXPENSE
        )

    def month_history(
        self,
        type_filter: Optional[TransactionType] = None,
        search: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[TransactionGroup]:
        """Selected-month transactions, filtered, grouped by day."""
        filtered = aggregations.filter_transactions(
            self.current_month_transactions, type_filter, search
        )
        return aggregations.group_by_day(filtered, today)

    # =========================================================================
    # DERIVED QUERIES - ALL TIME
    # =========================================================================

    @property
    def total_balance(self) -> Decimal:
        """Income minus expense over every transaction, regardless of month."""
        with self._lock:
            return aggregations.balance(self._transactions)

    @property
    def total_recurring(self) -> Decimal:
        with self._lock:
            return aggregations.recurring_total(self._recurring)

    @property
    def active_recurring_payments(self) -> list[RecurringPayment]:
        with self._lock:
            return [p for p in self._recurring if p.is_active]

    # =========================================================================
    # MONTH NAVIGATION
    # =========================================================================

    def set_selected_month(self, value: date | datetime) -> None:
        """Move the cursor to the month containing value."""
        with self._lock:
            self._selected_month = aggregations.month_start(value)
            self._emit(AuditEventBuilder.month_changed(self._selected_month))

    def change_month(self, delta: int) -> None:
        """Move the cursor by delta months (negative moves backwards)."""
        with self._lock:
            self._selected_month = aggregations.shift_month(self._selected_month, delta)
            self._emit(AuditEventBuilder.month_changed(self._selected_month))

    # =========================================================================
    # TRANSACTION CRUD
    # =========================================================================

    def add_transaction(self, transaction: Transaction) -> None:
        with self._lock:
            self._transactions.append(transaction)
            self._commit(AuditEventBuilder.transaction_added(transaction))

    def update_transaction(self, transaction: Transaction) -> None:
        """Replace the stored record with the same id. Unknown ids are ignored."""
        with self._lock:
            index = self._index_of(self._transactions, transaction.id)
            if index is None:
                return
            self._transactions[index] = transaction
            self._commit(AuditEventBuilder.transaction_updated(transaction))

    def delete_transaction(self, transaction_id: UUID) -> None:
        with self._lock:
            remaining = [t for t in self._transactions if t.id != transaction_id]
            if len(remaining) == len(self._transactions):
                return
            self._transactions = remaining
            self._commit(AuditEventBuilder.transaction_deleted(transaction_id))

    def delete_transactions(self, transaction_ids: Iterable[UUID]) -> None:
        """Remove every listed id in a single save."""
        ids = set(transaction_ids)
        with self._lock:
            removed = [t.id for t in self._transactions if t.id in ids]
            if not removed:
                return
            self._transactions = [t for t in self._transactions if t.id not in ids]
            self._commit(AuditEventBuilder.transactions_deleted(removed))

    # =========================================================================
    # RECURRING CRUD
    # =========================================================================

    def add_recurring(self, payment: RecurringPayment) -> None:
        with self._lock:
            self._recurring.append(payment)
            self._commit(AuditEventBuilder.recurring_added(payment))

    def update_recurring(self, payment: RecurringPayment) -> None:
        with self._lock:
            index = self._index_of(self._recurring, payment.id)
            if index is None:
                return
            self._recurring[index] = payment
            self._commit(AuditEventBuilder.recurring_updated(payment))

    def delete_recurring(self, payment_id: UUID) -> None:
        with self._lock:
            remaining = [p for p in self._recurring if p.id != payment_id]
            if len(remaining) == len(self._recurring):
                return
            self._recurring = remaining
            self._commit(AuditEventBuilder.recurring_deleted(payment_id))

    def toggle_recurring(self, payment: RecurringPayment) -> None:
        """Pause or resume the stored payment with payment.id."""
        with self._lock:
            index = self._index_of(self._recurring, payment.id)
            if index is None:
                return
            current = self._recurring[index]
            toggled = current.model_copy(update={"is_active": not current.is_active})
            self._recurring[index] = toggled
            self._commit(AuditEventBuilder.recurring_toggled(toggled))

    # =========================================================================
    # PREFERENCES AND BULK OPERATIONS
    # =========================================================================

    def set_currency(self, currency: str) -> None:
        with self._lock:
            previous = self._currency
            if currency == previous:
                return
            self._currency = currency
            self._commit(AuditEventBuilder.currency_changed(previous, currency))

    def clear_all(self) -> None:
        """Remove every transaction and recurring payment. Currency is kept."""
        with self._lock:
            event = AuditEventBuilder.data_cleared(
                len(self._transactions), len(self._recurring)
            )
            self._transactions = []
            self._recurring = []
            self._commit(event)

    def export_json(self) -> bytes:
        """Serialize the full dataset to the backup format."""
        with self._lock:
            payload = export_data(self._transactions, self._recurring, self._currency)
            self._emit(AuditEventBuilder.data_exported(
                len(self._transactions), len(self._recurring), len(payload)
            ))
            return payload

    def import_json(self, buffer: bytes | str) -> None:
        """
        Replace the whole state with a backup.

        Import is destructive, not a merge. The new state is persisted
        immediately.

        Raises:
            ImportDecodeError: If the backup cannot be decoded. The current
                               state is left untouched.
        """
        with self._lock:
            try:
                data = import_data(buffer)
            except ImportDecodeError as e:
                self._emit(AuditEventBuilder.import_failed(str(e)))
                raise

            self._transactions = list(data.transactions)
            self._recurring = list(data.recurring_payments)
            self._currency = data.currency
            self._commit(AuditEventBuilder.data_imported(
                len(self._transactions), len(self._recurring), self._currency
            ))

    # =========================================================================
    # CHANGE NOTIFICATION
    # =========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for applied changes.

        Returns:
            A callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @staticmethod
    def _index_of(records: list, record_id: UUID) -> Optional[int]:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        return None

    def _load(self) -> None:
        state = self._storage.load()
        self._transactions = list(state.transactions)
        self._recurring = list(state.recurring_payments)
        self._currency = state.currency
        self._audit_logger.log(AuditEventBuilder.state_loaded(
            len(self._transactions), len(self._recurring)
        ))

    def _commit(self, event: AuditEvent) -> None:
        """Persist the current state, then announce the change."""
        saved = self._storage.save(self._transactions, self._recurring, self._currency)
        if not saved:
            self._audit_logger.log(AuditEventBuilder.save_failed(event.event_type))
        self._emit(event)

    def _emit(self, event: AuditEvent) -> None:
        self._audit_logger.log(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                # A broken listener must not undo or block the mutation
                logger.error(
                    "store_listener_failed",
                    error=str(e),
                    event_type=event.event_type.value,
                )


def create_store(
    data_dir: Optional[str] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> FinanceStore:
    """
    Factory function to create a store backed by JSON files.

    Args:
        data_dir: Directory for the persisted blobs. Defaults to the
                  FINANCE_STORAGE_DATA_DIR setting.
        audit_logger: Shared audit logger, if the caller keeps one.
    """
    settings = get_settings()
    logging.getLogger("finance_tracker").setLevel(
        logging.DEBUG if settings.app.debug_mode else logging.INFO
    )

    storage = JsonFileStorage(
        data_dir=data_dir,
        settings=settings.storage,
        default_currency=settings.app.default_currency,
    )
    return FinanceStore(
        storage=storage,
        audit_logger=audit_logger,
        settings=settings.app,
    )
