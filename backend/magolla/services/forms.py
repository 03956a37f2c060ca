"""Entry-form rules for recording expenses and sales."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from magolla.domain import NewExpense, NewRevenue
from magolla.services.calculations import quantize_amount
from magolla.services.formatters import format_kes_full


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _entry_date(occurred_on: date | None, today: date) -> date:
    if occurred_on is None:
        return today
    if occurred_on > today:
        raise ValueError("Date cannot be in the future")
    return occurred_on


def prepare_expense(
    *,
    amount: Decimal | None,
    occurred_on: date | None,
    category: str,
    payment_method: str,
    notes: str | None,
    today: date,
) -> NewExpense:
    if amount is None or amount <= 0:
        raise ValueError("Please enter a valid amount")

    return NewExpense(
        date=_entry_date(occurred_on, today),
        category=category,
        amount=quantize_amount(amount),
        payment_method=payment_method,
        notes=_clean_text(notes),
    )


def default_unit_price(product_type: str, *, egg_price: int, broiler_price: int) -> Decimal:
    return Decimal(egg_price if product_type == "eggs" else broiler_price)


def prepare_revenue(
    *,
    product_type: str,
    quantity: int | None,
    unit_price: Decimal | None,
    occurred_on: date | None,
    customer_name: str | None,
    payment_method: str,
    payment_status: str,
    due_date: date | None,
    today: date,
    egg_price: int = 360,
    broiler_price: int = 820,
    pending_due_days: int = 7,
) -> NewRevenue:
    """Compute the sale total and fill the product price and pending due date defaults."""
    if quantity is None or quantity <= 0:
        raise ValueError("Please enter quantity")

    if unit_price is None:
        unit_price = default_unit_price(product_type, egg_price=egg_price, broiler_price=broiler_price)
    if unit_price < 0:
        raise ValueError("Price cannot be negative")

    if payment_status == "pending" and due_date is None:
        due_date = today + timedelta(days=pending_due_days)

    return NewRevenue(
        date=_entry_date(occurred_on, today),
        product_type=product_type,
        quantity=quantity,
        unit_price=quantize_amount(unit_price),
        total_amount=quantize_amount(unit_price * quantity),
        customer_name=_clean_text(customer_name),
        payment_method=payment_method,
        payment_status=payment_status,
        due_date=due_date,
    )


def expense_saved_message(amount: Decimal) -> str:
    return f"Expense added: {format_kes_full(amount)}"


def sale_saved_message(total_amount: Decimal) -> str:
    return f"Sale recorded: {format_kes_full(total_amount)}"
