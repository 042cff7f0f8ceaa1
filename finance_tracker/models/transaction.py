"""
Core Data Models for the Finance Tracker

These models define the records the store owns and the shapes it hands
back from its aggregate queries. They are designed to:
1. Reject impossible records (non-positive amounts, wrong categories) at construction
2. Serialize to the persisted / export JSON layout without extra glue
3. Compare by identity, not by field values

DESIGN DECISION: Amounts are Decimal in memory and plain JSON numbers on disk.
The export file stays readable by other implementations while sums stay exact;
amounts are capped at MAX_AMOUNT_DIGITS significant digits so both agree.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, NamedTuple
from uuid import UUID, uuid4

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow. Determines the sign used in balances."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCategory(str, Enum):
    """
    Supported transaction categories.

    Display metadata (labels, icons, colors) is NOT kept here.
    See finance_tracker.display for the presentation mapping.
    """
    # Expense categories
    FOOD = "food"
    TRANSPORT = "transport"
    HOUSING = "housing"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    EDUCATION = "education"
    CLOTHING = "clothing"
    SUBSCRIPTIONS = "subscriptions"
    UTILITIES = "utilities"
    RESTAURANTS = "restaurants"
    GROCERIES = "groceries"
    BEAUTY = "beauty"

    # Income categories
    SALARY = "salary"
    FREELANCE = "freelance"
    INVESTMENT = "investment"
    GIFT = "gift"

    # Common
    OTHER = "other"

    @property
    def is_expense_category(self) -> bool:
        """False only for the income-only tags."""
        return self not in _INCOME_ONLY

    def is_valid_for(self, transaction_type: TransactionType) -> bool:
        """Check whether this category may be used with the given type."""
        return self in TransactionCategory.for_type(transaction_type)

    @classmethod
    def expense_categories(cls) -> list["TransactionCategory"]:
        return [c for c in cls if c.is_expense_category]

    @classmethod
    def income_categories(cls) -> list["TransactionCategory"]:
        return [cls.SALARY, cls.FREELANCE, cls.INVESTMENT, cls.GIFT, cls.OTHER]

    @classmethod
    def for_type(cls, transaction_type: TransactionType) -> list["TransactionCategory"]:
        """Categories selectable for a transaction of the given type."""
        if transaction_type == TransactionType.INCOME:
            return cls.income_categories()
        return cls.expense_categories()


_INCOME_ONLY = frozenset({
    TransactionCategory.SALARY,
    TransactionCategory.FREELANCE,
    TransactionCategory.INVESTMENT,
})


# Amounts are written to JSON as doubles. Fifteen significant digits is the
# most a double carries exactly.
MAX_AMOUNT_DIGITS = 15


def _fits_double(v: Decimal) -> Decimal:
    significant = len(v.normalize().as_tuple().digits)
    if significant > MAX_AMOUNT_DIGITS:
        raise ValueError(
            f"Amount has {significant} significant digits, "
            f"at most {MAX_AMOUNT_DIGITS} are supported"
        )
    return v


# Positive amount, exact in memory, a JSON number when serialized.
Amount = Annotated[
    Decimal,
    Field(gt=0, description="Positive magnitude; the sign is implied by type"),
    AfterValidator(_fits_double),
    PlainSerializer(float, return_type=float, when_used="json"),
]


def _now() -> datetime:
    return datetime.now().astimezone()


# =============================================================================
# RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense record.

    CRITICAL: Identity is the id. Two records with the same fields but
    different ids are different transactions.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    type: TransactionType
    amount: Amount
    category: TransactionCategory
    note: str = Field(
        default="",
        description="Free-text note, may be empty"
    )
    date: datetime = Field(
        default_factory=_now,
        description="When the transaction happened (timezone-aware)"
    )

    @field_validator("date")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Naive datetimes are taken as local time."""
        if v.tzinfo is None:
            return v.astimezone()
        return v

    @model_validator(mode="after")
    def validate_category_for_type(self) -> "Transaction":
        if not self.category.is_valid_for(self.type):
            raise ValueError(
                f"Category '{self.category.value}' is not valid "
                f"for {self.type.value} transactions"
            )
        return self

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the transaction type."""
        if self.type == TransactionType.EXPENSE:
            return -self.amount
        return self.amount

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transaction):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class RecurringPayment(BaseModel):
    """
    A payment expected every month on a fixed day.

    Pausing a payment flips is_active; the record stays in the collection
    but no longer counts toward the recurring total.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique recurring payment ID"
    )
    name: str = Field(
        ...,
        description="Label shown to the user"
    )
    amount: Amount
    category: TransactionCategory
    day_of_month: int = Field(
        default=1,
        ge=1,
        le=31,
        alias="dayOfMonth",
        description="Day of the month the payment is due"
    )
    is_active: bool = Field(
        default=True,
        alias="isActive",
        description="Inactive payments are excluded from totals"
    )

    @field_validator("category")
    @classmethod
    def validate_expense_category(cls, v: TransactionCategory) -> TransactionCategory:
        if not v.is_expense_category:
            raise ValueError(
                f"Category '{v.value}' is not an expense category"
            )
        return v

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecurringPayment):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class ExportData(BaseModel):
    """
    Backup envelope.

    This is the only file format the core produces and accepts.
    """
    model_config = ConfigDict(populate_by_name=True)

    transactions: list[Transaction]
    recurring_payments: list[RecurringPayment] = Field(alias="recurringPayments")
    currency: str


# =============================================================================
# QUERY RESULTS
# =============================================================================

class CategoryTotal(NamedTuple):
    category: TransactionCategory
    amount: Decimal


class CategoryShare(NamedTuple):
    """A category total and its percentage of the type total."""
    category: TransactionCategory
    amount: Decimal
    percent: Decimal


class DailyTotal(NamedTuple):
    day: int
    amount: Decimal


class TransactionGroup(NamedTuple):
    """Transactions that share a calendar day."""
    key: str
    label: str
    transactions: list[Transaction]
