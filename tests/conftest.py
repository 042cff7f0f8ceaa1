"""Shared fixtures for the finance tracker tests."""

from datetime import date

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.services.storage import InMemoryStorage
from finance_tracker.store import FinanceStore


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage(default_currency="₽")


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def store(storage, audit_logger) -> FinanceStore:
    """Empty store with the cursor on March 2024."""
    return FinanceStore(storage=storage, audit_logger=audit_logger, today=date(2024, 3, 10))
