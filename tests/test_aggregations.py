"""
Tests for the aggregation engine

All timestamps are naive datetimes, which the models read as local time,
so the expected calendar days do not depend on the machine's time zone.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_tracker.models.transaction import TransactionCategory, TransactionType
from finance_tracker.queries import (
    average_daily,
    balance,
    category_shares,
    daily_totals,
    days_in_month,
    filter_transactions,
    group_by_day,
    month_start,
    month_transactions,
    percent_of,
    recurring_total,
    relative_day_label,
    shift_month,
    sum_amounts,
    top_by_amount,
    totals_by_category,
)

from tests.factories import expense, income, recurring


class TestMonthArithmetic:
    """Tests for month cursor helpers."""

    @pytest.mark.parametrize("month, delta, expected", [
        (date(2024, 3, 1), 1, date(2024, 4, 1)),
        (date(2024, 3, 1), -1, date(2024, 2, 1)),
        (date(2024, 12, 1), 1, date(2025, 1, 1)),
        (date(2024, 1, 1), -1, date(2023, 12, 1)),
        (date(2024, 1, 1), -13, date(2022, 12, 1)),
        (date(2024, 5, 1), 0, date(2024, 5, 1)),
    ])
    def test_shift_month(self, month, delta, expected):
        """Test shifting rolls over year boundaries."""
        assert shift_month(month, delta) == expected

    @pytest.mark.parametrize("month, expected", [
        (date(2024, 2, 1), 29),
        (date(2023, 2, 1), 28),
        (date(2024, 4, 1), 30),
        (date(2024, 12, 1), 31),
    ])
    def test_days_in_month(self, month, expected):
        """Test month lengths including leap years."""
        assert days_in_month(month) == expected

    def test_month_start(self):
        """Test month_start accepts dates and datetimes."""
        assert month_start(date(2024, 3, 17)) == date(2024, 3, 1)
        assert month_start(datetime(2024, 3, 31, 23, 59)) == date(2024, 3, 1)


class TestSums:
    """Tests for totals and balances."""

    def test_sums_by_type(self):
        """Test income, expense and balance."""
        txs = [
            income(1000, datetime(2024, 3, 1)),
            expense(200, datetime(2024, 3, 2)),
            expense("50.25", datetime(2024, 3, 3)),
        ]
        assert sum_amounts(txs, TransactionType.INCOME) == Decimal("1000")
        assert sum_amounts(txs, TransactionType.EXPENSE) == Decimal("250.25")
        assert sum_amounts(txs) == Decimal("1250.25")
        assert balance(txs) == Decimal("749.75")

    def test_empty_sums_are_zero(self):
        """Test empty inputs give exact zero."""
        assert sum_amounts([]) == Decimal("0")
        assert balance([]) == Decimal("0")
        assert recurring_total([]) == Decimal("0")

    def test_recurring_total_counts_active_only(self):
        """Test paused payments are excluded."""
        payments = [
            recurring(amount="30"),
            recurring(amount="12.5"),
            recurring(amount="100", active=False),
        ]
        assert recurring_total(payments) == Decimal("42.5")

    def test_month_transactions_scoping_and_order(self):
        """Test only the month's transactions are kept, newest first."""
        early = expense(1, datetime(2024, 3, 1, 0, 0))
        late = expense(2, datetime(2024, 3, 31, 23, 59))
        outside = expense(3, datetime(2024, 4, 1, 0, 0))
        previous = expense(4, datetime(2024, 2, 29, 23, 59))

        result = month_transactions([early, outside, late, previous], date(2024, 3, 1))
        assert result == [late, early]


class TestBreakdowns:
    """Tests for category, daily and top breakdowns."""

    def test_totals_by_category_sorted_descending(self):
        """Test categories are summed and sorted by amount."""
        txs = [
            expense(100, datetime(2024, 3, 1), TransactionCategory.FOOD),
            expense(300, datetime(2024, 3, 2), TransactionCategory.HOUSING),
            expense(50, datetime(2024, 3, 3), TransactionCategory.FOOD),
            income(5000, datetime(2024, 3, 4)),
        ]
        result = totals_by_category(txs, TransactionType.EXPENSE)
        assert [(r.category, r.amount) for r in result] == [
            (TransactionCategory.HOUSING, Decimal("300")),
            (TransactionCategory.FOOD, Decimal("150")),
        ]

    def test_totals_by_category_ties_follow_declaration_order(self):
        """Test equal totals are ordered like the category enum."""
        txs = [
            expense(10, datetime(2024, 3, 1), TransactionCategory.HEALTH),
            expense(10, datetime(2024, 3, 1), TransactionCategory.FOOD),
            expense(10, datetime(2024, 3, 1), TransactionCategory.TRANSPORT),
        ]
        result = totals_by_category(txs, TransactionType.EXPENSE)
        assert [r.category for r in result] == [
            TransactionCategory.FOOD,
            TransactionCategory.TRANSPORT,
            TransactionCategory.HEALTH,
        ]

    def test_daily_totals_cover_every_day(self):
        """Test one entry per day, zero-filled, ascending."""
        txs = [
            expense(10, datetime(2024, 2, 1, 9)),
            expense(5, datetime(2024, 2, 1, 18)),
            expense(7, datetime(2024, 2, 29, 12)),
            expense(99, datetime(2024, 3, 1, 0, 1)),
            income(500, datetime(2024, 2, 10)),
        ]
        result = daily_totals(txs, date(2024, 2, 1))
        assert len(result) == 29
        assert [d.day for d in result] == list(range(1, 30))
        assert result[0].amount == Decimal("15")
        assert result[28].amount == Decimal("7")
        assert result[9].amount == Decimal("0")
        assert sum(d.amount for d in result) == Decimal("22")

    def test_top_by_amount(self):
        """Test the largest transactions of one type, limited."""
        txs = [expense(n, datetime(2024, 3, n)) for n in range(1, 9)]
        txs.append(income(10000, datetime(2024, 3, 9)))

        result = top_by_amount(txs, TransactionType.EXPENSE, limit=3)
        assert [t.amount for t in result] == [Decimal("8"), Decimal("7"), Decimal("6")]

    def test_top_by_amount_ties_prefer_newest(self):
        """Test equal amounts are ordered by date, newest first."""
        older = expense(50, datetime(2024, 3, 1))
        newer = expense(50, datetime(2024, 3, 20))
        assert top_by_amount([older, newer], TransactionType.EXPENSE) == [newer, older]

    def test_top_by_amount_short_list(self):
        """Test fewer candidates than the limit."""
        only = expense(1, datetime(2024, 3, 1))
        assert top_by_amount([only], TransactionType.EXPENSE, limit=5) == [only]
        assert top_by_amount([], TransactionType.EXPENSE) == []

    def test_average_daily_uses_month_length(self):
        """Test the average divides by every day of the month."""
        txs = [
            expense(29, datetime(2024, 2, 3)),
            expense(29, datetime(2024, 2, 29)),
            expense(500, datetime(2024, 3, 1)),
            income(1000, datetime(2024, 2, 10)),
        ]
        assert average_daily(txs, date(2024, 2, 1)) == Decimal("2.00")
        assert average_daily(txs, date(2024, 2, 1), TransactionType.INCOME) == Decimal("34.48")
        assert average_daily([], date(2024, 4, 1)) == Decimal("0.00")

    def test_percent_of(self):
        """Test percentages are rounded to cents and safe for an empty total."""
        assert percent_of(Decimal("1"), Decimal("3")) == Decimal("33.33")
        assert percent_of(Decimal("2"), Decimal("3")) == Decimal("66.67")
        assert percent_of(Decimal("5"), Decimal("0")) == Decimal("0.00")

    def test_category_shares(self):
        """Test shares follow totals_by_category order and sum to 100."""
        txs = [
            expense(150, datetime(2024, 3, 1), TransactionCategory.FOOD),
            expense(50, datetime(2024, 3, 2), TransactionCategory.TRANSPORT),
            expense(50, datetime(2024, 3, 3), TransactionCategory.FOOD),
            income(999, datetime(2024, 3, 4)),
        ]
        shares = category_shares(txs, TransactionType.EXPENSE)
        assert [(s.category, s.amount, s.percent) for s in shares] == [
            (TransactionCategory.FOOD, Decimal("200"), Decimal("80.00")),
            (TransactionCategory.TRANSPORT, Decimal("50"), Decimal("20.00")),
        ]
        assert category_shares([], TransactionType.EXPENSE) == []


class TestHistory:
    """Tests for grouping and filtering the history list."""

    def test_relative_day_label(self):
        """Test Today, Yesterday and day-month labels."""
        today = date(2024, 3, 10)
        assert relative_day_label(date(2024, 3, 10), today) == "Today"
        assert relative_day_label(date(2024, 3, 9), today) == "Yesterday"
        assert relative_day_label(date(2024, 3, 15), today) == "15 March"
        assert relative_day_label(date(2024, 2, 29), today) == "29 February"

    def test_yesterday_across_month_boundary(self):
        """Test 'Yesterday' on the first of a month."""
        assert relative_day_label(date(2024, 2, 29), date(2024, 3, 1)) == "Yesterday"

    def test_group_by_day(self):
        """Test groups are newest day first with newest transactions first."""
        morning = expense(1, datetime(2024, 3, 10, 8))
        evening = expense(2, datetime(2024, 3, 10, 20))
        before = expense(3, datetime(2024, 3, 9, 12))
        old = expense(4, datetime(2024, 3, 2, 12))

        groups = group_by_day([old, morning, before, evening], today=date(2024, 3, 10))

        assert [g.key for g in groups] == ["2024-03-10", "2024-03-09", "2024-03-02"]
        assert [g.label for g in groups] == ["Today", "Yesterday", "2 March"]
        assert groups[0].transactions == [evening, morning]

    def test_group_by_day_empty(self):
        """Test no transactions means no groups."""
        assert group_by_day([]) == []

    def test_filter_by_type(self):
        """Test the type filter."""
        spent = expense(1, datetime(2024, 3, 1))
        earned = income(2, datetime(2024, 3, 1))
        assert filter_transactions([spent, earned], TransactionType.INCOME) == [earned]
        assert filter_transactions([spent, earned]) == [spent, earned]

    def test_filter_by_search(self):
        """Test search matches note, tag and display name, ignoring case."""
        pizza = expense(1, datetime(2024, 3, 1), note="Pizza with Anna")
        taxi = expense(2, datetime(2024, 3, 1), TransactionCategory.TRANSPORT)
        gift = income(3, datetime(2024, 3, 1), TransactionCategory.GIFT)
        txs = [pizza, taxi, gift]

        assert filter_transactions(txs, search="pizza") == [pizza]
        assert filter_transactions(txs, search="  ANNA ") == [pizza]
        assert filter_transactions(txs, search="transport") == [taxi]
        assert filter_transactions(txs, search="Gifts") == [gift]
        assert filter_transactions(txs, search="") == txs
        assert filter_transactions(txs, search="nothing matches") == []

    def test_filter_combines_type_and_search(self):
        """Test both filters apply together."""
        gift_out = expense(1, datetime(2024, 3, 1), TransactionCategory.GIFT)
        gift_in = income(2, datetime(2024, 3, 1), TransactionCategory.GIFT)
        result = filter_transactions([gift_out, gift_in], TransactionType.EXPENSE, "gift")
        assert result == [gift_out]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
