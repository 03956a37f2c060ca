from datetime import date, datetime, timedelta
from decimal import Decimal

from magolla.domain import Expense, Revenue
from magolla.mock_data import build_expenses, build_revenue
from magolla.services.calculations import (
    cost_breakdown,
    daily_data_points,
    financial_health,
    health_status,
    last_n_days_revenue,
    percentage_change,
    quick_metrics,
    today_totals,
    week_bounds,
    week_comparison,
    yesterday_totals,
)

# A Wednesday.
TODAY = date(2026, 3, 4)


def _expense(days_ago: int, amount: str, category: str = "feeds") -> Expense:
    occurred_on = TODAY - timedelta(days=days_ago)
    return Expense(
        id=f"e{days_ago}",
        date=occurred_on,
        category=category,
        amount=Decimal(amount),
        payment_method="mpesa",
        created_at=datetime(2026, 1, 1),
    )


def _sale(days_ago: int, amount: str, product_type: str = "broilers", quantity: int = 1) -> Revenue:
    occurred_on = TODAY - timedelta(days=days_ago)
    return Revenue(
        id=f"r{days_ago}",
        date=occurred_on,
        product_type=product_type,
        quantity=quantity,
        unit_price=Decimal(amount) / quantity,
        total_amount=Decimal(amount),
        payment_method="mpesa",
        payment_status="paid",
        created_at=datetime(2026, 1, 1),
    )


def test_today_and_yesterday_totals_from_sample_ledger() -> None:
    revenue = build_revenue(TODAY)
    expenses = build_expenses(TODAY)

    today = today_totals(revenue, expenses, TODAY)
    assert today == {
        "revenue": Decimal("100500.00"),
        "expenses": Decimal("45000.00"),
        "profit": Decimal("55500.00"),
    }

    yesterday = yesterday_totals(revenue, expenses, TODAY)
    assert yesterday["revenue"] == Decimal("80200.00")
    assert yesterday["profit"] == Decimal("60200.00")


def test_percentage_change_handles_zero_baseline() -> None:
    assert percentage_change(Decimal("150"), Decimal("100")) == 50.0
    assert percentage_change(Decimal("50"), Decimal("100")) == -50.0
    assert percentage_change(Decimal("5"), Decimal("0")) == 100.0
    assert percentage_change(Decimal("0"), Decimal("0")) == 0.0
    assert percentage_change(Decimal("-5"), Decimal("0")) == 0.0


def test_week_bounds_start_on_monday() -> None:
    assert week_bounds(TODAY) == (date(2026, 3, 2), date(2026, 3, 8))
    # Sunday belongs to the week that started six days earlier.
    assert week_bounds(date(2026, 3, 8)) == (date(2026, 3, 2), date(2026, 3, 8))
    assert week_bounds(date(2026, 3, 2)) == (date(2026, 3, 2), date(2026, 3, 8))


def test_week_comparison_sample_ledger() -> None:
    result = week_comparison(build_revenue(TODAY), build_expenses(TODAY), TODAY)

    assert result["this_week"]["revenue"] == Decimal("200500.00")
    assert result["this_week"]["costs"] == Decimal("73500.00")
    assert result["this_week"]["crates"] == 150
    assert result["last_week"]["revenue"] == Decimal("371310.00")
    assert result["last_week"]["costs"] == Decimal("173000.00")
    assert result["last_week"]["crates"] == 202
    assert round(result["percentage_changes"]["crates"], 2) == -25.74


def test_cost_breakdown_includes_every_category_and_window_edge() -> None:
    expenses = [
        _expense(0, "1000", "feeds"),
        _expense(29, "500", "salaries"),
        _expense(30, "9999", "supplies"),
    ]

    result = cost_breakdown(expenses, TODAY)

    assert result == {
        "feeds": Decimal("1000.00"),
        "salaries": Decimal("500.00"),
        "supplies": Decimal("0.00"),
        "miscellaneous": Decimal("0.00"),
        "total": Decimal("1500.00"),
    }


def test_cost_breakdown_sample_ledger() -> None:
    result = cost_breakdown(build_expenses(TODAY), TODAY)

    assert result["feeds"] == Decimal("315000.00")
    assert result["salaries"] == Decimal("53000.00")
    assert result["supplies"] == Decimal("27300.00")
    assert result["miscellaneous"] == Decimal("9000.00")
    assert result["total"] == Decimal("404300.00")


def test_health_status_thresholds() -> None:
    assert health_status(80) == "excellent"
    assert health_status(79) == "good"
    assert health_status(70) == "good"
    assert health_status(69) == "warning"
    assert health_status(60) == "warning"
    assert health_status(59) == "danger"


def test_financial_health_sample_ledger_is_excellent() -> None:
    result = financial_health(
        build_revenue(TODAY),
        build_expenses(TODAY),
        Decimal("1240000"),
        TODAY,
    )

    assert result["score"] == 91
    assert result["status"] == "excellent"
    assert result["cash_runway_days"] == 92
    assert result["cost_trend"] == "stable"
    assert round(result["profit_margin"], 1) == 42.3
    assert result["recommendation"].startswith("Your farm finances are in great shape")


def test_financial_health_rising_costs_drive_recommendation() -> None:
    expenses = [_expense(20, "1000"), _expense(5, "2000")]
    revenue = [_sale(1, "10000")]

    result = financial_health(revenue, expenses, Decimal("1000000"), TODAY)

    assert result["cost_trend"] == "increasing"
    assert result["cost_change_pct"] == 100.0
    assert result["score"] == 82
    assert result["recommendation"] == (
        "Feed costs increased 100% recently. Consider bulk purchasing or negotiating with suppliers."
    )


def test_financial_health_short_runway() -> None:
    expenses = [_expense(20, "1000"), _expense(5, "1000")]
    revenue = [_sale(0, "10000")]

    result = financial_health(revenue, expenses, Decimal("1000"), TODAY)

    assert result["cash_runway_days"] == 15
    assert result["score"] == 67
    assert result["status"] == "warning"
    assert result["recommendation"].startswith("Cash runway is only 15 days.")


def test_financial_health_low_margin() -> None:
    expenses = [_expense(20, "4500"), _expense(5, "4500")]
    revenue = [_sale(0, "10000")]

    result = financial_health(revenue, expenses, Decimal("1000000"), TODAY)

    assert result["profit_margin"] == 10.0
    assert result["score"] == 67
    assert result["recommendation"] == "Profit margin is low at 10%. Consider reviewing pricing or reducing costs."


def test_financial_health_falling_costs_score_full_trend() -> None:
    expenses = [_expense(20, "2000"), _expense(5, "1000")]
    revenue = [_sale(0, "100000")]

    result = financial_health(revenue, expenses, Decimal("1000000"), TODAY)

    assert result["cost_trend"] == "decreasing"
    assert result["score"] == 100


def test_financial_health_without_expenses_reports_max_runway() -> None:
    result = financial_health([], [], Decimal("0"), TODAY)

    assert result["cash_runway_days"] == 999
    assert result["profit_margin"] == 0.0
    assert result["cost_trend"] == "stable"
    assert result["score"] == 67


def test_daily_data_points_zero_filled_oldest_first() -> None:
    points = daily_data_points([_sale(1, "500")], [_expense(0, "200")], TODAY, days=3)

    assert [p["date"] for p in points] == [date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 4)]
    assert [p["revenue"] for p in points] == [Decimal("0.00"), Decimal("500.00"), Decimal("0.00")]
    assert points[-1]["profit"] == Decimal("-200.00")


def test_last_7_days_revenue_sample_ledger() -> None:
    series = last_n_days_revenue(build_revenue(TODAY), TODAY, 7)

    assert series == [
        Decimal("98400.00"),
        Decimal("14910.00"),
        Decimal("17280.00"),
        Decimal("127500.00"),
        Decimal("19800.00"),
        Decimal("80200.00"),
        Decimal("100500.00"),
    ]


def test_quick_metrics_sample_ledger() -> None:
    result = quick_metrics(build_revenue(TODAY), build_expenses(TODAY), TODAY)

    assert result == {
        "avg_egg_price": 359,
        "feed_cost_per_crate": 691,
        "break_even_price": 887,
        "profit_per_crate": -527,
    }


def test_quick_metrics_without_egg_sales_uses_defaults() -> None:
    result = quick_metrics([_sale(0, "8200", "broilers", 10)], [], TODAY)

    assert result == {
        "avg_egg_price": 360,
        "feed_cost_per_crate": 125,
        "break_even_price": 0,
        "profit_per_crate": 360,
    }
