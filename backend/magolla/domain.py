"""Farm ledger records and the display config shared by every router."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

ExpenseCategory = Literal["feeds", "salaries", "supplies", "miscellaneous"]
ProductType = Literal["broilers", "eggs"]
PaymentMethod = Literal["mpesa", "kcb", "absa", "cash"]
PaymentStatus = Literal["paid", "pending", "overdue"]
BankAccount = Literal["mpesa", "kcb", "absa", "cash"]
HealthStatus = Literal["excellent", "good", "warning", "danger"]
CostTrend = Literal["decreasing", "stable", "increasing"]

EXPENSE_CATEGORIES: tuple[str, ...] = ("feeds", "salaries", "supplies", "miscellaneous")
PRODUCT_TYPES: tuple[str, ...] = ("broilers", "eggs")
PAYMENT_STATUSES: tuple[str, ...] = ("paid", "pending", "overdue")


@dataclass(frozen=True)
class Expense:
    id: str
    date: date
    category: ExpenseCategory
    amount: Decimal
    payment_method: PaymentMethod
    created_at: datetime
    notes: str | None = None


@dataclass(frozen=True)
class Revenue:
    id: str
    date: date
    product_type: ProductType
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    created_at: datetime
    customer_name: str | None = None
    due_date: date | None = None
    transaction_code: str | None = None


@dataclass(frozen=True)
class BankBalance:
    id: str
    account: BankAccount
    balance: Decimal
    as_of_date: date


@dataclass(frozen=True)
class FeedInventory:
    id: str
    date: date
    bags_remaining: int
    kg_per_bag: Decimal
    daily_consumption_rate: Decimal  # kg per day


@dataclass(frozen=True)
class NewExpense:
    date: date
    category: ExpenseCategory
    amount: Decimal
    payment_method: PaymentMethod
    notes: str | None = None


@dataclass(frozen=True)
class NewRevenue:
    date: date
    product_type: ProductType
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    customer_name: str | None = None
    due_date: date | None = None


CATEGORY_CONFIG: dict[str, dict[str, str]] = {
    "feeds": {"icon": "🌾", "label": "Feeds", "color": "warning"},
    "salaries": {"icon": "💰", "label": "Salaries", "color": "info"},
    "supplies": {"icon": "🏥", "label": "Supplies", "color": "success"},
    "miscellaneous": {"icon": "📦", "label": "Miscellaneous", "color": "muted"},
}

PAYMENT_METHOD_CONFIG: dict[str, dict[str, str]] = {
    "mpesa": {"icon": "📱", "label": "M-Pesa"},
    "kcb": {"icon": "🏦", "label": "KCB Bank"},
    "absa": {"icon": "🏦", "label": "Absa Bank"},
    "cash": {"icon": "💵", "label": "Cash"},
}

PAYMENT_STATUS_CONFIG: dict[str, dict[str, str]] = {
    "paid": {"icon": "✓", "label": "Paid", "color": "success"},
    "pending": {"icon": "⏳", "label": "Pending", "color": "warning"},
    "overdue": {"icon": "🚨", "label": "Overdue", "color": "danger"},
}
