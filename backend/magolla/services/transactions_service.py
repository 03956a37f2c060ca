"""Combined sales/expense ledger used by the transactions list."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal

from magolla.domain import CATEGORY_CONFIG, Expense, Revenue
from magolla.services.calculations import quantize_amount

TransactionType = Literal["income", "expense"]

ALLOWED_SORTS = {
    "date_asc": (lambda item: item["date"], False),
    "date_desc": (lambda item: item["date"], True),
    "amount_asc": (lambda item: abs(item["amount"]), False),
    "amount_desc": (lambda item: abs(item["amount"]), True),
}


def build_ledger(revenue: list[Revenue], expenses: list[Expense]) -> list[dict[str, Any]]:
    """Sales as positive amounts, expenses as negative amounts."""
    income_items = [
        {
            "id": sale.id,
            "date": sale.date,
            "description": f"{sale.product_type} sale - {sale.customer_name or 'Customer'}",
            "category": sale.product_type,
            "amount": sale.total_amount,
            "type": "income",
            "account": sale.payment_method,
        }
        for sale in revenue
    ]
    expense_items = [
        {
            "id": expense.id,
            "date": expense.date,
            "description": expense.notes or CATEGORY_CONFIG[expense.category]["label"],
            "category": expense.category,
            "amount": -expense.amount,
            "type": "expense",
            "account": expense.payment_method,
        }
        for expense in expenses
    ]
    return [*income_items, *expense_items]


def filter_ledger(
    items: list[dict[str, Any]],
    *,
    types: list[TransactionType] | None = None,
    q: str | None = None,
    categories: list[str] | None = None,
) -> list[dict[str, Any]]:
    filtered = items

    if types:
        filtered = [item for item in filtered if item["type"] in types]

    search = q.strip().lower() if q else ""
    if search:
        filtered = [
            item
            for item in filtered
            if search in item["description"].lower() or search in item["category"].lower()
        ]

    if categories:
        filtered = [item for item in filtered if item["category"] in categories]

    return filtered


def sort_ledger(items: list[dict[str, Any]], sort_by: str | None) -> list[dict[str, Any]]:
    """Apply comma-separated sort keys; unknown keys are ignored, default newest first."""
    keys = [key.strip() for key in sort_by.split(",")] if sort_by else []
    keys = [key for key in keys if key in ALLOWED_SORTS] or ["date_desc"]

    ordered = list(items)
    # Stable sorts applied in reverse give the first key the highest priority.
    for key in reversed(keys):
        key_fn, descending = ALLOWED_SORTS[key]
        ordered.sort(key=key_fn, reverse=descending)
    return ordered


def ledger_stats(items: list[dict[str, Any]]) -> dict[str, Decimal | int]:
    total_income = sum((item["amount"] for item in items if item["type"] == "income"), Decimal("0.00"))
    total_expenses = abs(sum((item["amount"] for item in items if item["type"] == "expense"), Decimal("0.00")))
    return {
        "total_income": quantize_amount(total_income),
        "total_expenses": quantize_amount(total_expenses),
        "net_cash_flow": quantize_amount(total_income - total_expenses),
        "count": len(items),
    }
