from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_serializer

from .config import settings
from .services.reports_dates import (
    list_month_starts,
    month_label,
    month_last_day,
    month_start_end_exclusive,
    parse_month,
)
from .services.reports_service import (
    DEFAULT_TAX_RATE,
    build_invoice,
    build_trend_series,
    invoice_number,
    monthly_aggregates,
    profit_and_loss,
)
from .store import DashboardStore, get_store

router = APIRouter(prefix="/reports", tags=["reports"])


def _money(value: Decimal) -> str:
    """Serialize Decimal values as fixed 2-decimal strings."""
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class StatementLine(BaseModel):
    name: str
    amount: Decimal
    percentage: int

    @field_serializer("amount")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class ProfitAndLossResponse(BaseModel):
    currency: str
    month: str
    month_start: date
    month_end: date
    income: list[StatementLine]
    expenses: list[StatementLine]
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_margin: float

    @field_serializer("total_income", "total_expenses", "net_profit")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class TrendItem(BaseModel):
    month: str
    expense_amount: Decimal
    income_amount: Decimal
    net_amount: Decimal

    @field_serializer("expense_amount", "income_amount", "net_amount")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class TrendsResponse(BaseModel):
    currency: str
    items: list[TrendItem]


class InvoiceLineIn(BaseModel):
    description: str = Field(min_length=1, max_length=240)
    qty: int = Field(default=1, ge=1)
    rate: Decimal = Field(ge=Decimal("0"), max_digits=12, decimal_places=2)


class InvoiceRequest(BaseModel):
    client_name: str = Field(min_length=1, max_length=160)
    client_address: str | None = Field(default=None, max_length=400)
    items: list[InvoiceLineIn] = Field(min_length=1)
    tax_rate: Decimal = Field(default=DEFAULT_TAX_RATE, ge=Decimal("0"), le=Decimal("100"))
    notes: str | None = None
    due_date: date | None = None
    occurred_on: date | None = Field(default=None, alias="date")


class InvoiceLineOut(BaseModel):
    description: str
    qty: int
    rate: Decimal
    amount: Decimal

    @field_serializer("rate", "amount")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class InvoiceResponse(BaseModel):
    invoice_number: str
    currency: str
    client_name: str
    client_address: str | None
    date: date
    due_date: date
    items: list[InvoiceLineOut]
    tax_rate: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    notes: str | None

    @field_serializer("subtotal", "tax", "total")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)

    @field_serializer("tax_rate")
    def serialize_rate(self, value: Decimal) -> str:
        return format(value.normalize(), "f")


@router.get("/profit-and-loss", response_model=ProfitAndLossResponse)
async def reports_profit_and_loss(
    month: str | None = Query(default=None, description="YYYY-MM"),
    store: DashboardStore = Depends(get_store),
) -> ProfitAndLossResponse:
    """
    Profit & loss statement for one month.

    Example response:
    {
      "currency": "KES",
      "month": "2026-03",
      "month_start": "2026-03-01",
      "month_end": "2026-03-31",
      "income": [{"name": "broilers", "amount": "82500.00", "percentage": 82}, ...],
      "expenses": [{"name": "feeds", "amount": "45000.00", "percentage": 100}, ...],
      "total_income": "100500.00",
      "total_expenses": "45000.00",
      "net_profit": "55500.00",
      "profit_margin": 55.22
    }
    """
    month_start = parse_month(month, today=store.today())
    month_start, month_end_exclusive = month_start_end_exclusive(month_start)

    data = profit_and_loss(store.list_revenue(), store.list_expenses(), month_start, month_end_exclusive)

    return ProfitAndLossResponse(
        currency=settings.currency,
        month=month_label(month_start),
        month_start=month_start,
        month_end=month_last_day(month_start),
        income=[StatementLine(**line) for line in data["income"]],
        expenses=[StatementLine(**line) for line in data["expenses"]],
        total_income=data["total_income"],
        total_expenses=data["total_expenses"],
        net_profit=data["net_profit"],
        profit_margin=data["profit_margin"],
    )


@router.get("/trends", response_model=TrendsResponse)
async def reports_trends(
    months: int = Query(default=6, ge=1, le=24),
    store: DashboardStore = Depends(get_store),
) -> TrendsResponse:
    """Expense/income/net totals for the last N months (including current month), oldest -> newest."""
    current_month_start = parse_month(None, today=store.today())
    month_starts = list_month_starts(current_month_start, months)

    aggregates = monthly_aggregates(store.list_revenue(), store.list_expenses(), month_starts)

    return TrendsResponse(
        currency=settings.currency,
        items=[TrendItem(**item) for item in build_trend_series(month_starts, aggregates)],
    )


@router.post("/invoice", response_model=InvoiceResponse)
async def reports_invoice(
    payload: InvoiceRequest,
    store: DashboardStore = Depends(get_store),
) -> InvoiceResponse:
    """Price an invoice draft: line amounts, subtotal, tax and total."""
    try:
        data = build_invoice(
            items=[item.model_dump() for item in payload.items],
            tax_rate=payload.tax_rate,
            issued_on=payload.occurred_on or store.today(),
            due_date=payload.due_date,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return InvoiceResponse(
        invoice_number=invoice_number(datetime.now(timezone.utc)),
        currency=settings.currency,
        client_name=payload.client_name,
        client_address=payload.client_address,
        notes=payload.notes,
        items=[InvoiceLineOut(**line) for line in data["items"]],
        date=data["date"],
        due_date=data["due_date"],
        tax_rate=data["tax_rate"],
        subtotal=data["subtotal"],
        tax=data["tax"],
        total=data["total"],
    )
