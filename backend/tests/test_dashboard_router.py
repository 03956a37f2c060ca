from datetime import date
from decimal import Decimal

from fastapi import FastAPI
from fastapi.testclient import TestClient

import magolla.dashboard as dashboard_router
from magolla.domain import NewExpense
from magolla.store import DashboardStore

TODAY = date(2026, 3, 4)


def _app_with_overrides():
    store = DashboardStore(clock=lambda: TODAY)
    store.load_dashboard_data()

    app = FastAPI()
    app.include_router(dashboard_router.router)
    app.dependency_overrides[dashboard_router.get_store] = lambda: store
    return app, store


def test_today_metrics() -> None:
    app, _ = _app_with_overrides()

    with TestClient(app) as client:
        response = client.get("/dashboard/today")

    assert response.status_code == 200
    payload = response.json()
    assert payload["revenue"] == "100500.00"
    assert payload["expenses"] == "45000.00"
    assert payload["profit"] == "55500.00"
    assert round(payload["revenue_change"], 1) == 25.3


def test_cash_and_feed_restock() -> None:
    app, _ = _app_with_overrides()

    with TestClient(app) as client:
        cash = client.get("/dashboard/cash").json()
        feed = client.get("/dashboard/feed-restock").json()

    assert cash == {"currency": "KES", "cash_on_hand": "1240000.00", "display": "1.2M"}
    assert feed == {"days_until_restock": 12}


def test_week_comparison() -> None:
    app, _ = _app_with_overrides()

    with TestClient(app) as client:
        payload = client.get("/dashboard/week-comparison").json()

    assert payload["this_week"]["revenue"] == "200500.00"
    assert payload["this_week"]["crates"] == 150
    assert payload["last_week"]["costs"] == "173000.00"
    assert payload["percentage_changes"]["crates"] < 0


def test_cost_breakdown_and_health() -> None:
    app, _ = _app_with_overrides()

    with TestClient(app) as client:
        breakdown = client.get("/dashboard/cost-breakdown").json()
        health = client.get("/dashboard/health").json()

    assert breakdown == {
        "feeds": "315000.00",
        "salaries": "53000.00",
        "supplies": "27300.00",
        "miscellaneous": "9000.00",
        "total": "404300.00",
    }
    assert health["score"] == 91
    assert health["status"] == "excellent"
    assert health["cash_runway_days"] == 92
    assert health["cost_trend"] == "stable"


def test_trend_quick_metrics_and_sparklines() -> None:
    app, _ = _app_with_overrides()

    with TestClient(app) as client:
        trend = client.get("/dashboard/trend").json()
        quick = client.get("/dashboard/quick-metrics").json()
        sparklines = client.get("/dashboard/sparklines").json()

    assert len(trend["items"]) == 30
    assert trend["items"][-1] == {
        "date": "2026-03-04",
        "revenue": "100500.00",
        "expenses": "45000.00",
        "profit": "55500.00",
    }
    assert trend["items"][0]["revenue"] == "0.00"
    assert quick == {
        "avg_egg_price": 359,
        "feed_cost_per_crate": 691,
        "break_even_price": 887,
        "profit_per_crate": -527,
    }
    assert len(sparklines["revenue"]) == 7
    assert sparklines["revenue"][-1] == "100500.00"
    assert sparklines["profit"][-1] == "55500.00"


def test_summary_contains_every_card() -> None:
    app, _ = _app_with_overrides()

    with TestClient(app) as client:
        payload = client.get("/dashboard/summary").json()

    assert payload["as_of"] == "2026-03-04"
    assert set(payload) == {
        "as_of",
        "today",
        "cash",
        "feed_restock",
        "week_comparison",
        "cost_breakdown",
        "health",
        "quick_metrics",
        "sparklines",
    }
    assert payload["health"]["score"] == 91
    assert payload["cash"]["display"] == "1.2M"
    assert payload["feed_restock"] == {"days_until_restock": 12}
    assert payload["sparklines"]["profit"][-1] == "55500.00"


def test_reload_restores_sample_data() -> None:
    app, store = _app_with_overrides()
    store.add_expense(NewExpense(date=TODAY, category="feeds", amount=Decimal("1000"), payment_method="cash"))
    assert len(store.list_expenses()) == 16

    with TestClient(app) as client:
        response = client.post("/dashboard/reload")

    assert response.status_code == 204
    assert len(store.list_expenses()) == 15


def test_display_config_labels() -> None:
    app, _ = _app_with_overrides()

    with TestClient(app) as client:
        payload = client.get("/dashboard/display-config").json()

    assert payload["categories"]["feeds"]["label"] == "Feeds"
    assert payload["payment_methods"]["mpesa"]["label"] == "M-Pesa"
    assert payload["payment_statuses"]["overdue"]["color"] == "danger"
