"""
Audit Models for the Finance Tracker

Every change the store applies is described by an AuditEvent.
The same event is:
1. Written to the structured log
2. Handed to subscribed listeners so a UI can re-read derived values

DESIGN DECISION: Events describe what changed, never the full dataset.
Amounts and ids are enough to reconstruct what happened from the log.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.transaction import RecurringPayment, Transaction


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each store operation has its own event type.
    """
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_DELETED = "transactions_deleted"

    # Recurring payments
    RECURRING_ADDED = "recurring_added"
    RECURRING_UPDATED = "recurring_updated"
    RECURRING_DELETED = "recurring_deleted"
    RECURRING_TOGGLED = "recurring_toggled"

    # Preferences and cursor
    MONTH_CHANGED = "month_changed"
    CURRENCY_CHANGED = "currency_changed"

    # Bulk data operations
    STATE_LOADED = "state_loaded"
    DATA_CLEARED = "data_cleared"
    DATA_EXPORTED = "data_exported"
    DATA_IMPORTED = "data_imported"
    IMPORT_FAILED = "import_failed"

    # Persistence
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every applied mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'recurring')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction)
        event = AuditEventBuilder.save_failed("disk full")
    """

    @staticmethod
    def transaction_added(transaction: Transaction) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction.id,
            description=f"Transaction added: {transaction.type.value} {transaction.amount}",
            details={
                "type": transaction.type.value,
                "category": transaction.category.value,
                "amount": str(transaction.amount),
                "date": transaction.date.isoformat(),
            },
        )

    @staticmethod
    def transaction_updated(transaction: Transaction) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction.id,
            description="Transaction updated",
            details={
                "type": transaction.type.value,
                "category": transaction.category.value,
                "amount": str(transaction.amount),
            },
        )

    @staticmethod
    def transaction_deleted(transaction_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def transactions_deleted(transaction_ids: Iterable[UUID]) -> AuditEvent:
        ids = [str(i) for i in transaction_ids]
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_DELETED,
            entity_type="transaction",
            description=f"{len(ids)} transactions deleted",
            details={"ids": ids},
        )

    @staticmethod
    def recurring_added(payment: RecurringPayment) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRING_ADDED,
            entity_type="recurring",
            entity_id=payment.id,
            description=f"Recurring payment added: {payment.name}",
            details={
                "amount": str(payment.amount),
                "day_of_month": payment.day_of_month,
            },
        )

    @staticmethod
    def recurring_updated(payment: RecurringPayment) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRING_UPDATED,
            entity_type="recurring",
            entity_id=payment.id,
            description=f"Recurring payment updated: {payment.name}",
        )

    @staticmethod
    def recurring_deleted(payment_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRING_DELETED,
            entity_type="recurring",
            entity_id=payment_id,
            description="Recurring payment deleted",
        )

    @staticmethod
    def recurring_toggled(payment: RecurringPayment) -> AuditEvent:
        state = "resumed" if payment.is_active else "paused"
        return AuditEvent(
            event_type=AuditEventType.RECURRING_TOGGLED,
            entity_type="recurring",
            entity_id=payment.id,
            description=f"Recurring payment {state}: {payment.name}",
            details={"is_active": payment.is_active},
        )

    @staticmethod
    def month_changed(month: date) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_CHANGED,
            severity=AuditSeverity.DEBUG,
            description=f"Selected month is now {month:%Y-%m}",
            details={"month": month.isoformat()},
        )

    @staticmethod
    def currency_changed(previous: str, current: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CURRENCY_CHANGED,
            description=f"Currency changed from {previous} to {current}",
            details={"previous": previous, "current": current},
        )

    @staticmethod
    def state_loaded(transaction_count: int, recurring_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            severity=AuditSeverity.DEBUG,
            description=(
                f"Loaded {transaction_count} transactions "
                f"and {recurring_count} recurring payments"
            ),
            details={
                "transactions": transaction_count,
                "recurring_payments": recurring_count,
            },
        )

    @staticmethod
    def data_cleared(transaction_count: int, recurring_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All transactions and recurring payments removed",
            details={
                "transactions": transaction_count,
                "recurring_payments": recurring_count,
            },
        )

    @staticmethod
    def data_exported(transaction_count: int, recurring_count: int, size_bytes: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_EXPORTED,
            description=f"Exported {size_bytes} bytes",
            details={
                "transactions": transaction_count,
                "recurring_payments": recurring_count,
                "size_bytes": size_bytes,
            },
        )

    @staticmethod
    def data_imported(transaction_count: int, recurring_count: int, currency: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_IMPORTED,
            severity=AuditSeverity.WARNING,
            description="Store state replaced from backup",
            details={
                "transactions": transaction_count,
                "recurring_payments": recurring_count,
                "currency": currency,
            },
        )

    @staticmethod
    def import_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            description="Backup could not be decoded",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(operation: AuditEventType) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"State not persisted after {operation.value}",
            details={"operation": operation.value},
        )
