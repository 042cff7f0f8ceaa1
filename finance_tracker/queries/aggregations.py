"""
Aggregation Engine

DESIGN DECISION: Every statistic the store exposes is a pure function of a
transaction list and a month. Nothing here is cached and nothing here
mutates its input; the store calls these on every property access.

Dates are compared by the transaction's LOCAL calendar day. A purchase at
23:30 local time belongs to that day even if it is already tomorrow in UTC.
"""

import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable, Optional

from finance_tracker.display import category_label
from finance_tracker.models.transaction import (
    CategoryShare,
    CategoryTotal,
    DailyTotal,
    RecurringPayment,
    Transaction,
    TransactionCategory,
    TransactionGroup,
    TransactionType,
)

ZERO = Decimal("0")
CENT = Decimal("0.01")

_CATEGORY_ORDER = {category: index for index, category in enumerate(TransactionCategory)}


# =============================================================================
# MONTH ARITHMETIC
# =============================================================================

def month_start(value: date | datetime) -> date:
    """First day of the month containing value."""
    if isinstance(value, datetime):
        value = local_day(value)
    return value.replace(day=1)


def shift_month(month: date, delta: int) -> date:
    """Move a month cursor by delta whole months, rolling over years."""
    index = month.year * 12 + (month.month - 1) + delta
    year, month_index = divmod(index, 12)
    return date(year, month_index + 1, 1)


def days_in_month(month: date) -> int:
    return calendar.monthrange(month.year, month.month)[1]


def local_day(moment: datetime) -> date:
    """Calendar day of a timestamp in the local time zone."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone().date()


def in_month(moment: datetime, month: date) -> bool:
    day = local_day(moment)
    return day.year == month.year and day.month == month.month


# =============================================================================
# FILTERS AND SUMS
# =============================================================================

def newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def month_transactions(
    transactions: Iterable[Transaction],
    month: date,
) -> list[Transaction]:
    """Transactions dated in the given month, most recent first."""
    return newest_first(t for t in transactions if in_month(t.date, month))


def of_type(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> list[Transaction]:
    return [t for t in transactions if t.type == transaction_type]


def sum_amounts(
    transactions: Iterable[Transaction],
    transaction_type: Optional[TransactionType] = None,
) -> Decimal:
    """Sum of amounts, optionally restricted to one type."""
    return sum(
        (
            t.amount
            for t in transactions
            if transaction_type is None or t.type == transaction_type
        ),
        ZERO,
    )


def balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expense."""
    return sum((t.signed_amount for t in transactions), ZERO)


def recurring_total(payments: Iterable[RecurringPayment]) -> Decimal:
    """Monthly cost of the active recurring payments."""
    return sum((p.amount for p in payments if p.is_active), ZERO)


# =============================================================================
# BREAKDOWNS
# =============================================================================

def totals_by_category(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> list[CategoryTotal]:
    """
    Sum amounts per category for one transaction type.

    Sorted by amount descending; equal amounts keep category declaration
    order. Categories without transactions are omitted.
    """
    totals: dict[TransactionCategory, Decimal] = defaultdict(lambda: ZERO)
    for t in transactions:
        if t.type == transaction_type:
            totals[t.category] += t.amount

    ordered = sorted(
        totals.items(),
        key=lambda item: (-item[1], _CATEGORY_ORDER[item[0]]),
    )
    return [CategoryTotal(category, amount) for category, amount in ordered]


def daily_totals(
    transactions: Iterable[Transaction],
    month: date,
    transaction_type: TransactionType = TransactionType.EXPENSE,
) -> list[DailyTotal]:
    """
    One entry per day of the month, ascending, zero for days without activity.

    Transactions outside the month are ignored.
    """
    per_day: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for t in transactions:
        if t.type != transaction_type:
            continue
        day = local_day(t.date)
        if day.year == month.year and day.month == month.month:
            per_day[day.day] += t.amount

    return [
        DailyTotal(day, per_day.get(day, ZERO))
        for day in range(1, days_in_month(month) + 1)
    ]


def top_by_amount(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    limit: int = 5,
) -> list[Transaction]:
    """
    Largest transactions of one type.

    Ties are broken by date (newest first), then by id, so the result is
    stable across calls.
    """
    candidates = of_type(transactions, transaction_type)
    candidates.sort(key=lambda t: str(t.id))
    candidates.sort(key=lambda t: t.date, reverse=True)
    candidates.sort(key=lambda t: t.amount, reverse=True)
    return candidates[:limit]


def average_daily(
    transactions: Iterable[Transaction],
    month: date,
    transaction_type: TransactionType = TransactionType.EXPENSE,
) -> Decimal:
    """
    Month total of one type divided by the number of days in the month.

    Rounded to cents.
    """
    total = sum((d.amount for d in daily_totals(transactions, month, transaction_type)), ZERO)
    return (total / days_in_month(month)).quantize(CENT, rounding=ROUND_HALF_EVEN)


def percent_of(amount: Decimal, total: Decimal) -> Decimal:
    """amount as a percentage of total, rounded to cents; 0 when total is not positive."""
    if total <= 0:
        return ZERO.quantize(CENT)
    return (amount * 100 / total).quantize(CENT, rounding=ROUND_HALF_EVEN)


def category_shares(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> list[CategoryShare]:
    """totals_by_category with each category's share of the type total."""
    totals = totals_by_category(transactions, transaction_type)
    grand_total = sum((t.amount for t in totals), ZERO)
    return [
        CategoryShare(t.category, t.amount, percent_of(t.amount, grand_total))
        for t in totals
    ]


# =============================================================================
# HISTORY
# =============================================================================

def relative_day_label(day: date, today: Optional[date] = None) -> str:
    """'Today', 'Yesterday', or e.g. '15 March'."""
    today = today or date.today()
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day.day} {calendar.month_name[day.month]}"


def group_by_day(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
) -> list[TransactionGroup]:
    """
    Group transactions by local calendar day.

    Groups are ordered newest day first; transactions inside a group are
    ordered newest first.
    """
    groups: dict[date, list[Transaction]] = defaultdict(list)
    for t in transactions:
        groups[local_day(t.date)].append(t)

    return [
        TransactionGroup(
            key=day.isoformat(),
            label=relative_day_label(day, today),
            transactions=newest_first(groups[day]),
        )
        for day in sorted(groups, reverse=True)
    ]


def filter_transactions(
    transactions: Iterable[Transaction],
    type_filter: Optional[TransactionType] = None,
    search: Optional[str] = None,
) -> list[Transaction]:
    """
    Narrow a list by type and by a case-insensitive text search.

    The search matches the note, the category tag and the category's
    display name.
    """
    result = list(transactions)
    if type_filter is not None:
        result = [t for t in result if t.type == type_filter]

    needle = (search or "").strip().casefold()
    if needle:
        result = [
            t
            for t in result
            if needle in t.note.casefold()
            or needle in t.category.value
            or needle in category_label(t.category).casefold()
        ]
    return result
