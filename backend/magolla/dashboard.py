"""
Dashboard API router.

Fetch and display:

- today vs yesterday hero metrics
- cash on hand and feed restock countdown
- this week vs last week
- 30-day cost breakdown and financial health score
- trend chart points, sparklines and per-crate quick metrics
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, field_serializer

from .config import settings
from .domain import (
    CATEGORY_CONFIG,
    PAYMENT_METHOD_CONFIG,
    PAYMENT_STATUS_CONFIG,
    CostTrend,
    HealthStatus,
)
from .services.formatters import format_kes
from .store import DashboardStore, get_store

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _money(value: Decimal) -> str:
    """Serialize Decimal values to fixed 2-decimal amount strings."""
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class TodayMetricsResponse(BaseModel):
    """Hero card: today's totals and the change vs yesterday."""
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    revenue_change: float
    profit_change: float

    @field_serializer("revenue", "expenses", "profit")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class CashResponse(BaseModel):
    currency: str
    cash_on_hand: Decimal
    display: str

    @field_serializer("cash_on_hand")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class FeedRestockResponse(BaseModel):
    days_until_restock: int


class WeekTotals(BaseModel):
    revenue: Decimal
    costs: Decimal
    profit: Decimal
    crates: int

    @field_serializer("revenue", "costs", "profit")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class WeekChanges(BaseModel):
    revenue: float
    costs: float
    profit: float
    crates: float


class WeekComparisonResponse(BaseModel):
    this_week: WeekTotals
    last_week: WeekTotals
    percentage_changes: WeekChanges


class CostBreakdownResponse(BaseModel):
    feeds: Decimal
    salaries: Decimal
    supplies: Decimal
    miscellaneous: Decimal
    total: Decimal

    @field_serializer("feeds", "salaries", "supplies", "miscellaneous", "total")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class FinancialHealthResponse(BaseModel):
    score: int
    status: HealthStatus
    profit_margin: float
    cash_runway_days: int
    cost_trend: CostTrend
    cost_change_pct: float
    recommendation: str


class DailyDataPoint(BaseModel):
    date: date
    revenue: Decimal
    expenses: Decimal
    profit: Decimal

    @field_serializer("revenue", "expenses", "profit")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class TrendResponse(BaseModel):
    items: list[DailyDataPoint]


class QuickMetricsResponse(BaseModel):
    avg_egg_price: int
    feed_cost_per_crate: int
    break_even_price: int
    profit_per_crate: int


class SparklinesResponse(BaseModel):
    """Last 7 days, oldest first."""
    revenue: list[Decimal]
    profit: list[Decimal]

    @field_serializer("revenue", "profit")
    def serialize_series(self, values: list[Decimal]) -> list[str]:
        return [_money(value) for value in values]


class DisplayConfigResponse(BaseModel):
    """Icons, labels and colours the dashboard uses for each enumeration."""
    categories: dict[str, dict[str, str]]
    payment_methods: dict[str, dict[str, str]]
    payment_statuses: dict[str, dict[str, str]]


class DashboardSummaryResponse(BaseModel):
    """Every dashboard card in one payload."""
    as_of: date
    today: TodayMetricsResponse
    cash: CashResponse
    feed_restock: FeedRestockResponse
    week_comparison: WeekComparisonResponse
    cost_breakdown: CostBreakdownResponse
    health: FinancialHealthResponse
    quick_metrics: QuickMetricsResponse
    sparklines: SparklinesResponse


def _cash(cash_on_hand: Decimal) -> CashResponse:
    return CashResponse(
        currency=settings.currency,
        cash_on_hand=cash_on_hand,
        display=format_kes(cash_on_hand),
    )


def _sparklines(store: DashboardStore) -> SparklinesResponse:
    return SparklinesResponse(
        revenue=store.last_7_days_revenue(),
        profit=store.last_7_days_profit(),
    )


@router.get("/today", response_model=TodayMetricsResponse)
async def today_metrics(store: DashboardStore = Depends(get_store)) -> TodayMetricsResponse:
    return TodayMetricsResponse(**store.today_metrics())


@router.get("/cash", response_model=CashResponse)
async def cash_on_hand(store: DashboardStore = Depends(get_store)) -> CashResponse:
    return _cash(store.cash_on_hand())


@router.get("/feed-restock", response_model=FeedRestockResponse)
async def feed_restock(store: DashboardStore = Depends(get_store)) -> FeedRestockResponse:
    return FeedRestockResponse(days_until_restock=store.days_until_feed_restock())


@router.get("/week-comparison", response_model=WeekComparisonResponse)
async def week_comparison(store: DashboardStore = Depends(get_store)) -> WeekComparisonResponse:
    return WeekComparisonResponse.model_validate(store.week_comparison())


@router.get("/cost-breakdown", response_model=CostBreakdownResponse)
async def cost_breakdown(store: DashboardStore = Depends(get_store)) -> CostBreakdownResponse:
    return CostBreakdownResponse(**store.cost_breakdown())


@router.get("/health", response_model=FinancialHealthResponse)
async def financial_health(store: DashboardStore = Depends(get_store)) -> FinancialHealthResponse:
    """
    Financial health score (0-100).

    Example response:
    {
      "score": 79,
      "status": "good",
      "profit_margin": 58.4,
      "cash_runway_days": 271,
      "cost_trend": "stable",
      "cost_change_pct": 3.2,
      "recommendation": "Your farm finances are in great shape. Keep up the excellent work!"
    }
    """
    return FinancialHealthResponse(**store.financial_health())


@router.get("/trend", response_model=TrendResponse)
async def trend(store: DashboardStore = Depends(get_store)) -> TrendResponse:
    return TrendResponse(items=[DailyDataPoint(**point) for point in store.trend_data()])


@router.get("/quick-metrics", response_model=QuickMetricsResponse)
async def quick_metrics(store: DashboardStore = Depends(get_store)) -> QuickMetricsResponse:
    return QuickMetricsResponse(**store.quick_metrics())


@router.get("/sparklines", response_model=SparklinesResponse)
async def sparklines(store: DashboardStore = Depends(get_store)) -> SparklinesResponse:
    return _sparklines(store)


@router.get("/summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(store: DashboardStore = Depends(get_store)) -> DashboardSummaryResponse:
    cards = store.summary()
    return DashboardSummaryResponse(
        as_of=cards["as_of"],
        today=TodayMetricsResponse(**cards["today"]),
        cash=_cash(cards["cash_on_hand"]),
        feed_restock=FeedRestockResponse(days_until_restock=cards["days_until_restock"]),
        week_comparison=WeekComparisonResponse.model_validate(cards["week_comparison"]),
        cost_breakdown=CostBreakdownResponse(**cards["cost_breakdown"]),
        health=FinancialHealthResponse(**cards["health"]),
        quick_metrics=QuickMetricsResponse(**cards["quick_metrics"]),
        sparklines=SparklinesResponse(**cards["sparklines"]),
    )


@router.post("/reload", status_code=204)
async def reload_dashboard(store: DashboardStore = Depends(get_store)) -> Response:
    """Discard recorded entries and reload the sample dataset."""
    store.load_dashboard_data()
    return Response(status_code=204)


@router.get("/display-config", response_model=DisplayConfigResponse)
async def display_config() -> DisplayConfigResponse:
    return DisplayConfigResponse(
        categories=CATEGORY_CONFIG,
        payment_methods=PAYMENT_METHOD_CONFIG,
        payment_statuses=PAYMENT_STATUS_CONFIG,
    )
