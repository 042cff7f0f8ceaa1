"""
Export / Import Codec

Serializes the full dataset to the JSON backup envelope and back.

DESIGN DECISION: Dates are written as ISO-8601 with an explicit offset and
amounts as JSON numbers, so a backup made on one device opens on another
regardless of time zone. Files written by the mobile app (UTC
timestamps ending in 'Z') are accepted as-is.

The per-key helpers at the bottom encode the same records for the local
key-value storage, so the persisted blobs and the export file can never
drift apart.
"""

import json
from typing import Iterable

from pydantic import TypeAdapter

from finance_tracker.models.transaction import (
    ExportData,
    RecurringPayment,
    Transaction,
)


class ImportDecodeError(ValueError):
    """The backup could not be parsed or does not have the expected shape."""
    pass


def export_data(
    transactions: Iterable[Transaction],
    recurring_payments: Iterable[RecurringPayment],
    currency: str,
) -> bytes:
    """Serialize the dataset to a pretty-printed UTF-8 JSON document."""
    envelope = ExportData(
        transactions=list(transactions),
        recurring_payments=list(recurring_payments),
        currency=currency,
    )
    return envelope.model_dump_json(by_alias=True, indent=2).encode("utf-8")


def import_data(buffer: bytes | str) -> ExportData:
    """
    Parse a backup document.

    Raises:
        ImportDecodeError: If the buffer is not JSON, is missing keys,
                           or holds an invalid record.
    """
    try:
        return ExportData.model_validate_json(buffer)
    except ValueError as e:
        raise ImportDecodeError(f"Invalid backup file: {e}") from e


# =============================================================================
# PER-KEY BLOBS (local storage)
# =============================================================================

_transactions_adapter = TypeAdapter(list[Transaction])
_recurring_adapter = TypeAdapter(list[RecurringPayment])


def encode_transactions(transactions: Iterable[Transaction]) -> bytes:
    return _transactions_adapter.dump_json(list(transactions), by_alias=True)


def decode_transactions(payload: bytes) -> list[Transaction]:
    return _transactions_adapter.validate_json(payload)


def encode_recurring(recurring_payments: Iterable[RecurringPayment]) -> bytes:
    return _recurring_adapter.dump_json(list(recurring_payments), by_alias=True)


def decode_recurring(payload: bytes) -> list[RecurringPayment]:
    return _recurring_adapter.validate_json(payload)


def encode_currency(currency: str) -> bytes:
    return json.dumps(currency, ensure_ascii=False).encode("utf-8")


def decode_currency(payload: bytes) -> str:
    value = json.loads(payload)
    if not isinstance(value, str) or not value:
        raise ValueError(f"Currency must be a non-empty string, got {value!r}")
    return value
