"""
Input Validation

DESIGN DECISION: Raw form input is checked here, before a record exists.
The store trusts the records it is given; the models reject impossible
values (non-positive amounts, wrong category for the type) and this module
turns raw text into those models with readable messages.

Two kinds of findings:
- errors: the record cannot be built (missing amount, "12,3.4", wrong category)
- warnings: the record can be built but looks suspicious (far-future date,
  absurd amount)

IMPORTANT: Validation NEVER silently fixes values beyond accepting a comma
as the decimal separator.
"""

from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from finance_tracker.config import AppSettings, get_settings
from finance_tracker.models.transaction import (
    MAX_AMOUNT_DIGITS,
    Amount,
    RecurringPayment,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult

_amount_adapter = TypeAdapter(Amount)


class InvalidAmountError(ValueError):
    """Amount text is not a positive number."""
    pass


class InputValidationError(ValueError):
    """Input has error-level issues; the record was not built."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(messages or "Invalid input")


def parse_amount(text: str) -> Decimal:
    """
    Parse user-typed amount text.

    Accepts '1500', '1500.50' and '1500,50'. Surrounding whitespace is ignored.

    Raises:
        InvalidAmountError: If the text is empty, not a number, not positive,
                            or longer than MAX_AMOUNT_DIGITS significant digits
    """
    cleaned = (text or "").strip().replace(",", ".")
    if not cleaned:
        raise InvalidAmountError("Amount is required")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidAmountError(f"'{text}' is not a number")
    if not amount.is_finite():
        raise InvalidAmountError(f"'{text}' is not a number")
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero")
    try:
        return _amount_adapter.validate_python(amount)
    except ValidationError:
        raise InvalidAmountError(
            f"Amount must have at most {MAX_AMOUNT_DIGITS} significant digits"
        )


class TransactionValidator:
    """Validates form input for transactions and recurring payments."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _check_amount(self, amount_text: str, issues: list[ValidationIssue]) -> Optional[Decimal]:
        try:
            amount = parse_amount(amount_text)
        except InvalidAmountError as e:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=str(e),
                severity="error",
                suggested_fix="Enter a positive number, e.g. 1500 or 99,90",
            ))
            return None

        if amount > Decimal(str(self._settings.max_reasonable_amount)):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount {amount} is unusually large",
                severity="warning",
                suggested_fix="Check the number of digits",
            ))
        return amount

    def validate_transaction(
        self,
        transaction_type: TransactionType,
        amount_text: str,
        category: TransactionCategory,
        when: Optional[datetime] = None,
    ) -> tuple[ValidationResult, Optional[Decimal]]:
        """
        Check transaction form input.

        Returns: (result, parsed_amount). parsed_amount is None when the
        amount itself was rejected.
        """
        issues: list[ValidationIssue] = []
        amount = self._check_amount(amount_text, issues)

        if not category.is_valid_for(transaction_type):
            issues.append(ValidationIssue(
                field="category",
                issue_type="inconsistent",
                message=(
                    f"Category '{category.value}' cannot be used for "
                    f"{transaction_type.value} transactions"
                ),
                severity="error",
            ))

        if when is not None:
            now = datetime.now().astimezone()
            moment = when if when.tzinfo else when.astimezone()
            tolerance = timedelta(days=self._settings.future_date_tolerance_days)
            if moment > now + tolerance:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message=f"Date ({moment.date()}) is in the future",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))

        return ValidationResult(issues=issues), amount

    def build_transaction(
        self,
        transaction_type: TransactionType,
        amount_text: str,
        category: TransactionCategory,
        note: str = "",
        when: Optional[datetime] = None,
    ) -> Transaction:
        """
        Validate input and build a new Transaction.

        Raises:
            InputValidationError: If any error-level issue was found
        """
        result, amount = self.validate_transaction(
            transaction_type, amount_text, category, when
        )
        if result.has_errors:
            raise InputValidationError(result)

        fields = {
            "type": transaction_type,
            "amount": amount,
            "category": category,
            "note": note.strip(),
        }
        if when is not None:
            fields["date"] = when
        return Transaction(**fields)

    def validate_recurring(
        self,
        name: str,
        amount_text: str,
        category: TransactionCategory,
        day_of_month: int,
    ) -> tuple[ValidationResult, Optional[Decimal]]:
        """Check recurring payment form input."""
        issues: list[ValidationIssue] = []

        if not (name or "").strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Name is required",
                severity="error",
            ))

        amount = self._check_amount(amount_text, issues)

        if not category.is_expense_category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="inconsistent",
                message=f"Category '{category.value}' is not an expense category",
                severity="error",
            ))

        if not 1 <= day_of_month <= 31:
            issues.append(ValidationIssue(
                field="day_of_month",
                issue_type="out_of_range",
                message=f"Day of month must be between 1 and 31, got {day_of_month}",
                severity="error",
            ))
        elif day_of_month > 28:
            issues.append(ValidationIssue(
                field="day_of_month",
                issue_type="short_months",
                message=f"Some months have no day {day_of_month}",
                severity="info",
            ))

        return ValidationResult(issues=issues), amount

    def build_recurring(
        self,
        name: str,
        amount_text: str,
        category: TransactionCategory,
        day_of_month: int = 1,
    ) -> RecurringPayment:
        """
        Validate input and build a new active RecurringPayment.

        Raises:
            InputValidationError: If any error-level issue was found
        """
        result, amount = self.validate_recurring(name, amount_text, category, day_of_month)
        if result.has_errors:
            raise InputValidationError(result)

        return RecurringPayment(
            name=name,
            amount=amount,
            category=category,
            day_of_month=day_of_month,
        )
