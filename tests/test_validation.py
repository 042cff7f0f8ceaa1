"""
Tests for input validation

Test strategy:
1. Amount text parsing accepts both decimal separators
2. Errors block record creation, warnings do not
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from finance_tracker.config import AppSettings
from finance_tracker.models.transaction import TransactionCategory, TransactionType
from finance_tracker.validation import (
    InputValidationError,
    InvalidAmountError,
    TransactionValidator,
    parse_amount,
)


@pytest.fixture
def validator() -> TransactionValidator:
    return TransactionValidator(AppSettings(max_reasonable_amount=10000))


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize("text, expected", [
        ("1500", Decimal("1500")),
        ("1500.50", Decimal("1500.50")),
        ("1500,50", Decimal("1500.50")),
        ("  42 ", Decimal("42")),
        ("0.01", Decimal("0.01")),
    ])
    def test_valid_amounts(self, text, expected):
        """Test accepted formats."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "0", "-5", "0,00", "NaN", "inf", "1,500.50"])
    def test_invalid_amounts(self, text):
        """Test rejected input."""
        with pytest.raises(InvalidAmountError):
            parse_amount(text)

    def test_digit_limit(self):
        """Test amounts are limited to what the backup file stores exactly."""
        assert parse_amount("999999999999999") == Decimal("999999999999999")
        assert parse_amount("1234567890123,45") == Decimal("1234567890123.45")
        with pytest.raises(InvalidAmountError, match="significant digits"):
            parse_amount("12345678901234567,89")


class TestTransactionValidation:
    """Tests for transaction form validation."""

    def test_valid_input(self, validator):
        """Test clean input yields no issues."""
        result, amount = validator.validate_transaction(
            TransactionType.EXPENSE, "250", TransactionCategory.FOOD
        )
        assert result.issues == []
        assert amount == Decimal("250")

    def test_wrong_category_is_error(self, validator):
        """Test an income-only category on an expense."""
        result, amount = validator.validate_transaction(
            TransactionType.EXPENSE, "250", TransactionCategory.SALARY
        )
        assert result.has_errors
        assert result.issues[0].field == "category"
        assert amount == Decimal("250")

    def test_bad_amount_is_error(self, validator):
        """Test unparseable amounts return no amount."""
        result, amount = validator.validate_transaction(
            TransactionType.INCOME, "lots", TransactionCategory.SALARY
        )
        assert result.has_errors
        assert amount is None

    def test_large_amount_is_warning(self, validator):
        """Test amounts above the configured limit only warn."""
        result, amount = validator.validate_transaction(
            TransactionType.EXPENSE, "50000", TransactionCategory.HOUSING
        )
        assert not result.has_errors
        assert len(result.warnings) == 1
        assert amount == Decimal("50000")

    def test_future_date_is_warning(self, validator):
        """Test a date well past the tolerance warns."""
        result, _ = validator.validate_transaction(
            TransactionType.EXPENSE, "5", TransactionCategory.FOOD,
            when=datetime.now() + timedelta(days=30),
        )
        assert not result.has_errors
        assert result.issues[0].issue_type == "future_date"

    def test_build_transaction(self, validator):
        """Test a transaction is built from valid input."""
        when = datetime(2024, 3, 5, 12, 0)
        t = validator.build_transaction(
            TransactionType.EXPENSE, "12,90", TransactionCategory.GROCERIES,
            note="  Milk  ", when=when,
        )
        assert t.amount == Decimal("12.90")
        assert t.note == "Milk"
        assert t.date == when.astimezone()

    def test_build_transaction_rejects_errors(self, validator):
        """Test InputValidationError carries the result."""
        with pytest.raises(InputValidationError) as exc_info:
            validator.build_transaction(
                TransactionType.EXPENSE, "0", TransactionCategory.FREELANCE
            )
        assert exc_info.value.result.error_count == 2


class TestRecurringValidation:
    """Tests for recurring payment form validation."""

    def test_valid_input(self, validator):
        """Test clean input yields no issues."""
        result, amount = validator.validate_recurring(
            "Netflix", "9.99", TransactionCategory.SUBSCRIPTIONS, 15
        )
        assert result.is_valid
        assert amount == Decimal("9.99")

    def test_missing_name(self, validator):
        """Test a blank name is an error."""
        result, _ = validator.validate_recurring(
            "   ", "10", TransactionCategory.UTILITIES, 1
        )
        assert result.has_errors
        assert result.issues[0].field == "name"

    @pytest.mark.parametrize("day", [0, 32])
    def test_day_out_of_range(self, validator, day):
        """Test days outside 1..31 are errors."""
        result, _ = validator.validate_recurring(
            "Rent", "800", TransactionCategory.HOUSING, day
        )
        assert result.has_errors

    def test_late_day_is_info(self, validator):
        """Test days past 28 only produce a note."""
        result, _ = validator.validate_recurring(
            "Rent", "800", TransactionCategory.HOUSING, 31
        )
        assert result.is_valid
        assert result.issues[0].severity == "info"

    def test_income_category_rejected(self, validator):
        """Test income-only categories cannot recur."""
        result, _ = validator.validate_recurring(
            "Job", "3000", TransactionCategory.SALARY, 1
        )
        assert result.has_errors

    def test_build_recurring(self, validator):
        """Test a new payment is built active."""
        p = validator.build_recurring("Gym", "40", TransactionCategory.HEALTH, 3)
        assert p.name == "Gym"
        assert p.day_of_month == 3
        assert p.is_active is True

    def test_build_recurring_rejects_errors(self, validator):
        """Test build_recurring raises on invalid input."""
        with pytest.raises(InputValidationError, match="Name is required"):
            validator.build_recurring("", "40", TransactionCategory.HEALTH)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
