from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

from magolla.domain import EXPENSE_CATEGORIES, PRODUCT_TYPES, Expense, Revenue

from .calculations import quantize_amount
from .reports_dates import month_label, shift_months

ZERO = Decimal("0.00")
DEFAULT_TAX_RATE = Decimal("16")
INVOICE_DUE_DAYS = 30


def _rounded_percentage(part: Decimal, total: Decimal) -> int:
    """Nearest int percentage for share columns."""
    if total <= ZERO:
        return 0
    ratio = (part * Decimal("100")) / total
    return int(ratio.to_integral_value(rounding=ROUND_HALF_UP))


def profit_and_loss(
    revenue: list[Revenue],
    expenses: list[Expense],
    start_inclusive: date,
    end_exclusive: date,
) -> dict:
    """Income by product and expenses by category for [start_inclusive, end_exclusive)."""
    income_by_product = {product: ZERO for product in PRODUCT_TYPES}
    expense_by_category = {category: ZERO for category in EXPENSE_CATEGORIES}

    for sale in revenue:
        if start_inclusive <= sale.date < end_exclusive:
            income_by_product[sale.product_type] += sale.total_amount

    for expense in expenses:
        if start_inclusive <= expense.date < end_exclusive:
            expense_by_category[expense.category] += expense.amount

    total_income = quantize_amount(sum(income_by_product.values(), ZERO))
    total_expenses = quantize_amount(sum(expense_by_category.values(), ZERO))
    net_profit = total_income - total_expenses

    return {
        "income": [
            {
                "name": product,
                "amount": quantize_amount(amount),
                "percentage": _rounded_percentage(amount, total_income),
            }
            for product, amount in income_by_product.items()
        ],
        "expenses": [
            {
                "name": category,
                "amount": quantize_amount(amount),
                "percentage": _rounded_percentage(amount, total_expenses),
            }
            for category, amount in expense_by_category.items()
        ],
        "total_income": total_income,
        "total_expenses": total_expenses,
        "net_profit": net_profit,
        "profit_margin": float(net_profit / total_income * Decimal("100")) if total_income > ZERO else 0.0,
    }


def monthly_aggregates(
    revenue: list[Revenue],
    expenses: list[Expense],
    month_starts: list[date],
) -> dict[date, tuple[Decimal, Decimal]]:
    """Map month start -> (expense, income) over the months in `month_starts`."""
    if not month_starts:
        return {}

    window_start = month_starts[0]
    window_end = shift_months(month_starts[-1], 1)
    expense_totals: dict[date, Decimal] = defaultdict(lambda: ZERO)
    income_totals: dict[date, Decimal] = defaultdict(lambda: ZERO)

    for sale in revenue:
        if window_start <= sale.date < window_end:
            income_totals[shift_months(sale.date, 0)] += sale.total_amount

    for expense in expenses:
        if window_start <= expense.date < window_end:
            expense_totals[shift_months(expense.date, 0)] += expense.amount

    months = set(expense_totals) | set(income_totals)
    return {month: (expense_totals[month], income_totals[month]) for month in months}


def build_trend_series(
    month_starts: list[date],
    aggregates: dict[date, tuple[Decimal, Decimal]],
) -> list[dict[str, Decimal | str]]:
    """Build a zero-filled, oldest->newest monthly trend series."""
    items: list[dict[str, Decimal | str]] = []
    for month_start in month_starts:
        expense, income = aggregates.get(month_start, (ZERO, ZERO))
        items.append(
            {
                "month": month_label(month_start),
                "expense_amount": quantize_amount(expense),
                "income_amount": quantize_amount(income),
                "net_amount": quantize_amount(income - expense),
            }
        )
    return items


def invoice_number(now: datetime) -> str:
    """INV- followed by the last 6 digits of the millisecond timestamp."""
    millis = int(now.timestamp() * 1000)
    return f"INV-{str(millis)[-6:]}"


def build_invoice(
    *,
    items: list[dict],
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    issued_on: date,
    due_date: date | None = None,
) -> dict:
    """Price each line (qty x rate) and total the invoice with tax."""
    if not items:
        raise ValueError("Invoice needs at least one line item")

    lines = []
    for item in items:
        amount = quantize_amount(Decimal(item["qty"]) * item["rate"])
        lines.append({**item, "amount": amount})

    subtotal = quantize_amount(sum((line["amount"] for line in lines), ZERO))
    tax = quantize_amount(subtotal * tax_rate / Decimal("100"))

    return {
        "date": issued_on,
        "due_date": due_date or issued_on + timedelta(days=INVOICE_DUE_DAYS),
        "items": lines,
        "tax_rate": tax_rate,
        "subtotal": subtotal,
        "tax": tax,
        "total": subtotal + tax,
    }
