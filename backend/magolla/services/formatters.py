"""Number, currency and date formatting for Kenyan-facing dashboard copy."""

from __future__ import annotations

import calendar
import math
from datetime import date
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP


def _grouped(amount: Decimal | int | float) -> str:
    """'45000' -> '45,000'; keeps up to 3 significant fraction digits like en-KE locale output."""
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        return f"{int(value):,}"
    text = f"{value.quantize(Decimal('0.001'), rounding=ROUND_HALF_UP):,}"
    return text.rstrip("0").rstrip(".")


def _one_decimal(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def format_kes(amount: Decimal | int | float, show_full: bool = False) -> str:
    """
    Abbreviate KES amounts for cards.

    1240000 -> "1.2M", 45000 -> "45K", 850 -> "850"
    """
    if show_full:
        return _grouped(amount)

    value = Decimal(str(amount))
    magnitude = abs(value)

    if magnitude >= Decimal("1000000000"):
        return f"{_one_decimal(value / Decimal('1000000000'))}B"
    if magnitude >= Decimal("1000000"):
        return f"{_one_decimal(value / Decimal('1000000'))}M"
    if magnitude >= Decimal("1000"):
        # Halves round toward positive infinity: -1500 -> -1K.
        thousands = (value / Decimal("1000") + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
        return f"{int(thousands)}K"
    return _grouped(value)


def format_kes_full(amount: Decimal | int | float) -> str:
    return f"{_grouped(amount)} KES"


def format_percentage(value: float, decimals: int = 1) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_date_ke(value: date) -> str:
    """DD/MM/YYYY."""
    return value.strftime("%d/%m/%Y")


def format_date_short(value: date) -> str:
    return f"{value.day} {calendar.month_abbr[value.month]}"


def format_date_stacked(value: date) -> dict[str, str]:
    return {"month": calendar.month_abbr[value.month], "day": str(value.day)}


def relative_time(value: date, today: date) -> str:
    diff_days = (today - value).days

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days > 0:
        return f"{diff_days} days ago"
    if diff_days == -1:
        return "Tomorrow"
    return f"In {abs(diff_days)} days"


def days_from_due(due_date: date, today: date) -> dict[str, int | str | bool]:
    diff_days = (today - due_date).days

    if diff_days > 0:
        return {"days": diff_days, "label": f"{diff_days} days late", "is_overdue": True}
    if diff_days == 0:
        return {"days": 0, "label": "Due today", "is_overdue": False}
    return {"days": abs(diff_days), "label": f"Due in {abs(diff_days)} days", "is_overdue": False}


def safe_number(value: Decimal | int | float | None, fallback: str = "—") -> str:
    if value is None:
        return fallback
    if isinstance(value, Decimal):
        if not value.is_finite():
            return fallback
    elif math.isnan(value) or math.isinf(value):
        return fallback
    return format_kes(value)
