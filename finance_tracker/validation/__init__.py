"""Input validation package."""

from finance_tracker.validation.validator import (
    InputValidationError,
    InvalidAmountError,
    TransactionValidator,
    parse_amount,
)

__all__ = [
    "InputValidationError",
    "InvalidAmountError",
    "TransactionValidator",
    "parse_amount",
]
