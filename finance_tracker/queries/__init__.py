"""Aggregation query package."""

from finance_tracker.queries.aggregations import (
    average_daily,
    balance,
    category_shares,
    daily_totals,
    days_in_month,
    filter_transactions,
    group_by_day,
    local_day,
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

__all__ = [
    "average_daily",
    "balance",
    "category_shares",
    "daily_totals",
    "days_in_month",
    "filter_transactions",
    "group_by_day",
    "local_day",
    "month_start",
    "month_transactions",
    "percent_of",
    "recurring_total",
    "relative_day_label",
    "shift_month",
    "sum_amounts",
    "top_by_amount",
    "totals_by_category",
]
