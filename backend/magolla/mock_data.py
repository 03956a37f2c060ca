"""Sample ledger for Magolla Farm (Kenyan poultry operation), amounts in KES."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from .domain import BankBalance, Expense, FeedInventory, Revenue

# (days_ago, category, amount, payment_method, notes)
SAMPLE_EXPENSES = [
    (0, "feeds", "45000", "mpesa", "Supplier A bulk"),
    (1, "salaries", "20000", "kcb", "Worker 1 - December"),
    (2, "supplies", "8500", "cash", "Vaccines batch 3"),
    (3, "feeds", "42000", "mpesa", "Weekly restock"),
    (4, "miscellaneous", "3500", "cash", "Transport"),
    (5, "salaries", "18000", "kcb", "Worker 2 - December"),
    (6, "feeds", "48000", "mpesa", "Supplier B"),
    (7, "supplies", "12000", "absa", "Equipment repair"),
    (8, "feeds", "44000", "mpesa", "Regular order"),
    (9, "miscellaneous", "5500", "cash", "Electricity"),
    (10, "feeds", "46000", "mpesa", "Supplier A"),
    (11, "salaries", "15000", "kcb", "Worker 3"),
    (12, "feeds", "43000", "mpesa", "Weekly order"),
    (13, "supplies", "6800", "cash", "Cleaning supplies"),
    (14, "feeds", "47000", "mpesa", "Bulk purchase"),
]

# (days_ago, product_type, quantity, unit_price, customer, method, status, due_days_ago)
SAMPLE_REVENUE = [
    (0, "eggs", 50, "360", "Hotel Savanna", "mpesa", "paid", None),
    (0, "broilers", 100, "825", "Nairobi Butchery", "kcb", "paid", None),
    (1, "eggs", 45, "360", "Restaurant Jambo", "mpesa", "paid", None),
    (1, "broilers", 80, "800", "City Market", "absa", "paid", None),
    (2, "eggs", 55, "360", "Supermart Kenya", "mpesa", "pending", -5),
    (3, "broilers", 150, "850", "Hotel Intercontinental", "kcb", "paid", None),
    (4, "eggs", 48, "360", "Local Shop Karibu", "cash", "paid", None),
    (5, "eggs", 42, "355", "Mama Njeri Kiosk", "mpesa", "overdue", 12),
    (6, "broilers", 120, "820", "Westlands Butcher", "absa", "paid", None),
    (7, "eggs", 60, "360", "Hotel Savanna", "mpesa", "paid", None),
    (8, "broilers", 90, "810", "Nairobi Butchery", "kcb", "pending", -2),
    (9, "eggs", 52, "360", "Restaurant Jambo", "mpesa", "paid", None),
    (10, "broilers", 110, "830", "Karen Meats", "absa", "overdue", 17),
    (11, "eggs", 46, "360", "Local Shop Karibu", "cash", "paid", None),
    (12, "eggs", 58, "360", "Supermart Kenya", "mpesa", "paid", None),
]

SAMPLE_BALANCES = [
    ("mpesa", "180000"),
    ("kcb", "650000"),
    ("absa", "380000"),
    ("cash", "30000"),
]


def _days_ago(today: date, days: int) -> date:
    return today - timedelta(days=days)


def build_expenses(today: date) -> list[Expense]:
    expenses: list[Expense] = []
    for index, (days_ago, category, amount, method, notes) in enumerate(SAMPLE_EXPENSES, start=1):
        occurred_on = _days_ago(today, days_ago)
        expenses.append(
            Expense(
                id=str(index),
                date=occurred_on,
                category=category,
                amount=Decimal(amount),
                payment_method=method,
                notes=notes,
                created_at=datetime.combine(occurred_on, time.min),
            )
        )
    return expenses


def build_revenue(today: date) -> list[Revenue]:
    revenue: list[Revenue] = []
    for index, row in enumerate(SAMPLE_REVENUE, start=1):
        days_ago, product_type, quantity, unit_price, customer, method, status, due_days_ago = row
        occurred_on = _days_ago(today, days_ago)
        price = Decimal(unit_price)
        revenue.append(
            Revenue(
                id=str(index),
                date=occurred_on,
                product_type=product_type,
                quantity=quantity,
                unit_price=price,
                total_amount=price * quantity,
                customer_name=customer,
                payment_method=method,
                payment_status=status,
                due_date=_days_ago(today, due_days_ago) if due_days_ago is not None else None,
                created_at=datetime.combine(occurred_on, time.min),
            )
        )
    return revenue


def build_bank_balances(today: date) -> list[BankBalance]:
    return [
        BankBalance(id=str(index), account=account, balance=Decimal(balance), as_of_date=today)
        for index, (account, balance) in enumerate(SAMPLE_BALANCES, start=1)
    ]


def build_feed_inventory(today: date) -> FeedInventory:
    # 100 kg per day feeds roughly 5000 birds.
    return FeedInventory(
        id="1",
        date=today,
        bags_remaining=24,
        kg_per_bag=Decimal("50"),
        daily_consumption_rate=Decimal("100"),
    )
