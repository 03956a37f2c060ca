from __future__ import annotations
"""
Derived dashboard metrics over the in-memory ledger.

Every function is pure and receives `today` explicitly, so the same inputs
always produce the same cards. "Last N days" windows contain the entries
dated after `today - N days`, i.e. today plus the N-1 days before it.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

from magolla.domain import EXPENSE_CATEGORIES, Expense, Revenue

ZERO = Decimal("0.00")
MONEY_QUANT = Decimal("0.01")
NO_EXPENSE_RUNWAY_DAYS = 999


def quantize_amount(value: Decimal) -> Decimal:
    """Normalize money values to 2-decimal precision."""
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def _round_int(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _sum(values: Iterable[Decimal]) -> Decimal:
    return quantize_amount(sum(values, ZERO))


def _revenue_on(revenue: list[Revenue], day: date) -> Decimal:
    return _sum(r.total_amount for r in revenue if r.date == day)


def _expenses_on(expenses: list[Expense], day: date) -> Decimal:
    return _sum(e.amount for e in expenses if e.date == day)


def _day_totals(revenue: list[Revenue], expenses: list[Expense], day: date) -> dict[str, Decimal]:
    day_revenue = _revenue_on(revenue, day)
    day_expenses = _expenses_on(expenses, day)
    return {
        "revenue": day_revenue,
        "expenses": day_expenses,
        "profit": day_revenue - day_expenses,
    }


def today_totals(revenue: list[Revenue], expenses: list[Expense], today: date) -> dict[str, Decimal]:
    """Revenue, expenses and profit for entries dated today."""
    return _day_totals(revenue, expenses, today)


def yesterday_totals(revenue: list[Revenue], expenses: list[Expense], today: date) -> dict[str, Decimal]:
    """Same totals for the day before `today`."""
    return _day_totals(revenue, expenses, today - timedelta(days=1))


def percentage_change(current: Decimal, previous: Decimal) -> float:
    """Relative change in percent; a zero baseline reports 100 for growth, else 0."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return float((current - previous) / previous * Decimal("100"))


def week_bounds(today: date) -> tuple[date, date]:
    """Monday..Sunday (inclusive) of the week containing `today`."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def _week_totals(revenue: list[Revenue], expenses: list[Expense], start: date, end: date) -> dict[str, Decimal | int]:
    week_revenue = _sum(r.total_amount for r in revenue if start <= r.date <= end)
    week_costs = _sum(e.amount for e in expenses if start <= e.date <= end)
    crates = sum(r.quantity for r in revenue if start <= r.date <= end and r.product_type == "eggs")
    return {
        "revenue": week_revenue,
        "costs": week_costs,
        "profit": week_revenue - week_costs,
        "crates": crates,
    }


def week_comparison(revenue: list[Revenue], expenses: list[Expense], today: date) -> dict:
    this_start, this_end = week_bounds(today)
    last_start = this_start - timedelta(days=7)
    last_end = this_start - timedelta(days=1)

    this_week = _week_totals(revenue, expenses, this_start, this_end)
    last_week = _week_totals(revenue, expenses, last_start, last_end)

    return {
        "this_week": this_week,
        "last_week": last_week,
        "percentage_changes": {
            key: percentage_change(Decimal(this_week[key]), Decimal(last_week[key]))
            for key in ("revenue", "costs", "profit", "crates")
        },
    }


def cost_breakdown(expenses: list[Expense], today: date, days: int = 30) -> dict[str, Decimal]:
    """Per-category spend for the last `days` days, every category present."""
    cutoff = today - timedelta(days=days)
    breakdown = {category: ZERO for category in EXPENSE_CATEGORIES}
    total = ZERO

    for expense in expenses:
        if expense.date <= cutoff:
            continue
        breakdown[expense.category] += expense.amount
        total += expense.amount

    breakdown["total"] = total
    return {key: quantize_amount(value) for key, value in breakdown.items()}


def _margin_score(profit_margin: Decimal) -> int:
    if profit_margin > 25:
        return 100
    if profit_margin >= 15:
        return 70
    return 40


def _runway_score(runway_days: Decimal) -> int:
    if runway_days > 90:
        return 100
    if runway_days >= 30:
        return 60
    return 20


def health_status(score: int) -> str:
    if score < 60:
        return "danger"
    if score < 70:
        return "warning"
    if score < 80:
        return "good"
    return "excellent"


def financial_health(
    revenue: list[Revenue],
    expenses: list[Expense],
    cash_on_hand: Decimal,
    today: date,
) -> dict:
    """
    Score farm finances 0-100 from three weighted signals:

    - profit margin over the last 30 days (40%)
    - cash runway at the 30-day average burn (30%)
    - expense trend between the two halves of the window (30%)
    """
    window_start = today - timedelta(days=30)
    half_cutoff = today - timedelta(days=15)

    recent_revenue = _sum(r.total_amount for r in revenue if r.date > window_start)
    recent_expenses = _sum(e.amount for e in expenses if e.date > window_start)

    profit_margin = ZERO
    if recent_revenue > 0:
        profit_margin = (recent_revenue - recent_expenses) / recent_revenue * Decimal("100")

    # cash / (expenses / 30), kept as one division so whole-day runways floor exactly.
    if recent_expenses > 0:
        runway_days = cash_on_hand * Decimal("30") / recent_expenses
    else:
        runway_days = Decimal(NO_EXPENSE_RUNWAY_DAYS)

    first_half = _sum(e.amount for e in expenses if window_start < e.date <= half_cutoff)
    second_half = _sum(e.amount for e in expenses if e.date > half_cutoff)

    cost_change = ZERO
    if first_half > 0:
        cost_change = (second_half - first_half) / first_half * Decimal("100")

    cost_trend = "stable"
    trend_score = 70
    if cost_change < -5:
        cost_trend = "decreasing"
        trend_score = 100
    elif cost_change > 10:
        cost_trend = "increasing"
        trend_score = 40

    weighted = _margin_score(profit_margin) * 4 + _runway_score(runway_days) * 3 + trend_score * 3
    score = _round_int(Decimal(weighted) / Decimal("10"))

    floored_runway = int(runway_days.to_integral_value(rounding=ROUND_FLOOR))

    recommendation = "Your farm finances are in great shape. Keep up the excellent work!"
    if cost_trend == "increasing":
        recommendation = (
            f"Feed costs increased {_round_int(abs(cost_change))}% recently. "
            "Consider bulk purchasing or negotiating with suppliers."
        )
    elif runway_days < 30:
        recommendation = (
            f"Cash runway is only {floored_runway} days. "
            "Focus on collecting pending payments and reducing non-essential expenses."
        )
    elif profit_margin < 15:
        recommendation = (
            f"Profit margin is low at {_round_int(profit_margin)}%. "
            "Consider reviewing pricing or reducing costs."
        )

    return {
        "score": score,
        "status": health_status(score),
        "profit_margin": float(profit_margin),
        "cash_runway_days": floored_runway,
        "cost_trend": cost_trend,
        "cost_change_pct": float(cost_change),
        "recommendation": recommendation,
    }


def daily_data_points(
    revenue: list[Revenue],
    expenses: list[Expense],
    today: date,
    days: int = 30,
) -> list[dict]:
    """Zero-filled per-day series ending today, oldest first."""
    revenue_by_day: dict[date, Decimal] = defaultdict(lambda: ZERO)
    expenses_by_day: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for r in revenue:
        revenue_by_day[r.date] += r.total_amount
    for e in expenses:
        expenses_by_day[e.date] += e.amount

    points: list[dict] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_revenue = quantize_amount(revenue_by_day[day])
        day_expenses = quantize_amount(expenses_by_day[day])
        points.append(
            {
                "date": day,
                "revenue": day_revenue,
                "expenses": day_expenses,
                "profit": day_revenue - day_expenses,
            }
        )
    return points


def last_n_days_revenue(revenue: list[Revenue], today: date, days: int = 7) -> list[Decimal]:
    return [point["revenue"] for point in daily_data_points(revenue, [], today, days)]


def last_n_days_profit(revenue: list[Revenue], expenses: list[Expense], today: date, days: int = 7) -> list[Decimal]:
    return [point["profit"] for point in daily_data_points(revenue, expenses, today, days)]


def quick_metrics(
    revenue: list[Revenue],
    expenses: list[Expense],
    today: date,
    *,
    days: int = 30,
    default_egg_price: int = 360,
    default_feed_cost_per_crate: int = 125,
) -> dict[str, int]:
    """Per-crate egg economics for the last `days` days, rounded to whole shillings."""
    cutoff = today - timedelta(days=days)
    egg_sales = [r for r in revenue if r.date > cutoff and r.product_type == "eggs"]
    recent_expenses = [e for e in expenses if e.date > cutoff]

    total_crates = sum(r.quantity for r in egg_sales)

    avg_egg_price = Decimal(default_egg_price)
    if egg_sales:
        avg_egg_price = sum((r.unit_price for r in egg_sales), ZERO) / Decimal(len(egg_sales))

    feed_costs = _sum(e.amount for e in recent_expenses if e.category == "feeds")
    total_costs = _sum(e.amount for e in recent_expenses)

    feed_cost_per_crate = Decimal(default_feed_cost_per_crate)
    cost_per_crate = ZERO
    if total_crates > 0:
        feed_cost_per_crate = feed_costs / Decimal(total_crates)
        cost_per_crate = total_costs / Decimal(total_crates)

    return {
        "avg_egg_price": _round_int(avg_egg_price),
        "feed_cost_per_crate": _round_int(feed_cost_per_crate),
        "break_even_price": _round_int(cost_per_crate),
        "profit_per_crate": _round_int(avg_egg_price - cost_per_crate),
    }
