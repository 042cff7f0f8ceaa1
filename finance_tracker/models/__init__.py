"""
Data Models Package

This package contains all Pydantic models used by the finance tracker.
All records the store owns and every event it emits conform to these schemas.
"""

from finance_tracker.models.transaction import (
    CategoryShare,
    CategoryTotal,
    DailyTotal,
    ExportData,
    RecurringPayment,
    Transaction,
    TransactionCategory,
    TransactionGroup,
    TransactionType,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Records
    "CategoryShare",
    "CategoryTotal",
    "DailyTotal",
    "ExportData",
    "RecurringPayment",
    "Transaction",
    "TransactionCategory",
    "TransactionGroup",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
