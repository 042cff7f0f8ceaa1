"""Backup (export/import) package."""

from finance_tracker.services.backup.codec import (
    ImportDecodeError,
    decode_currency,
    decode_recurring,
    decode_transactions,
    encode_currency,
    encode_recurring,
    encode_transactions,
    export_data,
    import_data,
)

__all__ = [
    "ImportDecodeError",
    "decode_currency",
    "decode_recurring",
    "decode_transactions",
    "encode_currency",
    "encode_recurring",
    "encode_transactions",
    "export_data",
    "import_data",
]
