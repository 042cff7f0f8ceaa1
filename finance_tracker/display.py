"""
Presentation Mapping

Display metadata for categories and helpers for formatting amounts.
Nothing in the store's arithmetic reads this module; it exists so a UI
has one table to look labels, icons and colors up in.
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal
from typing import NamedTuple

from finance_tracker.models.transaction import TransactionCategory, TransactionType


class CategoryDisplay(NamedTuple):
    name: str
    icon: str
    emoji: str
    color: str


CATEGORY_DISPLAY: dict[TransactionCategory, CategoryDisplay] = {
    TransactionCategory.FOOD: CategoryDisplay("Food", "cart.fill", "🛒", "#FF9500"),
    TransactionCategory.TRANSPORT: CategoryDisplay("Transport", "car.fill", "🚗", "#007AFF"),
    TransactionCategory.HOUSING: CategoryDisplay("Housing", "house.fill", "🏠", "#AF52DE"),
    TransactionCategory.ENTERTAINMENT: CategoryDisplay("Entertainment", "film.fill", "🎬", "#FF2D55"),
    TransactionCategory.HEALTH: CategoryDisplay("Health", "heart.fill", "💊", "#FF3B30"),
    TransactionCategory.EDUCATION: CategoryDisplay("Education", "book.fill", "📚", "#5856D6"),
    TransactionCategory.CLOTHING: CategoryDisplay("Clothing", "tshirt.fill", "👕", "#30B0C7"),
    TransactionCategory.SUBSCRIPTIONS: CategoryDisplay("Subscriptions", "iphone", "📱", "#32ADE6"),
    TransactionCategory.UTILITIES: CategoryDisplay("Utilities", "bolt.fill", "💡", "#FFCC00"),
    TransactionCategory.RESTAURANTS: CategoryDisplay("Restaurants", "fork.knife", "🍽️", "#E68033"),
    TransactionCategory.GROCERIES: CategoryDisplay("Groceries", "leaf.fill", "🥑", "#34C759"),
    TransactionCategory.BEAUTY: CategoryDisplay("Beauty", "sparkles", "💅", "#F26699"),
    TransactionCategory.SALARY: CategoryDisplay("Salary", "banknote.fill", "💰", "#34C759"),
    TransactionCategory.FREELANCE: CategoryDisplay("Freelance", "laptopcomputer", "💻", "#00C7BE"),
    TransactionCategory.INVESTMENT: CategoryDisplay("Investment", "chart.line.uptrend.xyaxis", "📈", "#3380E6"),
    TransactionCategory.GIFT: CategoryDisplay("Gifts", "gift.fill", "🎁", "#AF52DE"),
    TransactionCategory.OTHER: CategoryDisplay("Other", "square.grid.2x2.fill", "📦", "#8E8E93"),
}

TYPE_LABELS: dict[TransactionType, str] = {
    TransactionType.INCOME: "Income",
    TransactionType.EXPENSE: "Expense",
}

# Symbol -> name, in the order a currency picker shows them
SUPPORTED_CURRENCIES: dict[str, str] = {
    "₽": "Ruble",
    "$": "Dollar",
    "€": "Euro",
    "₸": "Tenge",
    "₴": "Hryvnia",
    "£": "Pound",
    "¥": "Yen",
}


def category_label(category: TransactionCategory) -> str:
    return CATEGORY_DISPLAY[category].name


def month_year_label(month: date) -> str:
    """E.g. 'March 2024'."""
    return f"{calendar.month_name[month.month]} {month.year}"


def _group_thousands(amount: Decimal) -> str:
    whole = int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))
    return f"{whole:,}".replace(",", " ")


def format_currency(amount: Decimal | float, currency: str) -> str:
    """
    Format an amount without fraction digits, thousands separated by spaces.

    Negative amounts get a leading minus: format_currency(-1500, "$") == "-1 500 $".
    """
    value = Decimal(str(amount))
    formatted = _group_thousands(abs(value))
    if value < 0:
        return f"-{formatted} {currency}"
    return f"{formatted} {currency}"


def format_signed(amount: Decimal | float, currency: str, transaction_type: TransactionType) -> str:
    """Amount prefixed with '+' for income and '-' for expense."""
    prefix = "+" if transaction_type == TransactionType.INCOME else "-"
    return f"{prefix}{_group_thousands(abs(Decimal(str(amount))))} {currency}"
