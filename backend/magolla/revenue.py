from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field, field_serializer, field_validator

from .config import settings
from .domain import PaymentMethod, PaymentStatus, ProductType
from .services.formatters import days_from_due, relative_time
from .services.forms import prepare_revenue, sale_saved_message
from .store import DashboardStore, get_store

router = APIRouter(prefix="/revenue", tags=["revenue"])


def _money(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class RevenueCreate(BaseModel):
    product_type: ProductType = "eggs"
    quantity: int | None = None
    unit_price: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    customer_name: str | None = Field(default=None, max_length=160)
    payment_method: PaymentMethod = "mpesa"
    payment_status: PaymentStatus = "paid"
    due_date: date | None = None
    occurred_on: date | None = Field(default=None, alias="date")

    @field_validator("customer_name", mode="before")
    @classmethod
    def clean_text(cls, value: str | None) -> str | None:
        if value is None:
            return None

        if isinstance(value, str):
            trimmed = value.strip()
            return trimmed or None

        return value


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class RevenueResponse(BaseModel):
    id: str
    date: date
    product_type: ProductType
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    customer_name: str | None
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    due_date: date | None
    transaction_code: str | None
    created_at: datetime

    @field_serializer("unit_price", "total_amount")
    def serialize_amount(self, value: Decimal) -> str:
        return _money(value)


class RevenueCreateResponse(BaseModel):
    sale: RevenueResponse
    message: str


class PaymentCard(BaseModel):
    """A sale as shown in the customer payments tracker."""
    sale: RevenueResponse
    sold_label: str
    due_label: str | None
    days_from_due: int | None


class PaymentColumn(BaseModel):
    count: int
    items: list[PaymentCard]


class PaymentsByStatusResponse(BaseModel):
    paid: PaymentColumn
    pending: PaymentColumn
    overdue: PaymentColumn


def to_revenue_response(sale) -> RevenueResponse:
    return RevenueResponse.model_validate(sale, from_attributes=True)


@router.get("", response_model=list[RevenueResponse])
async def list_revenue(
    status: PaymentStatus | None = Query(default=None),
    store: DashboardStore = Depends(get_store),
) -> list[RevenueResponse]:
    return [to_revenue_response(r) for r in store.list_revenue(status)]


@router.get("/payments", response_model=PaymentsByStatusResponse)
async def payments_by_status(
    limit: int = Query(default=5, ge=1, le=100),
    store: DashboardStore = Depends(get_store),
) -> PaymentsByStatusResponse:
    """
    Customer payments grouped into paid / pending / overdue columns.

    Each column reports its full count and the first `limit` cards. Unpaid
    cards carry a due label such as "5 days late" or "Due in 2 days".
    """
    today = store.today()
    columns: dict[str, PaymentColumn] = {}

    for status, sales in store.payments_by_status().items():
        cards = []
        for sale in sales[:limit]:
            due_info = days_from_due(sale.due_date, today) if sale.due_date else None
            cards.append(
                PaymentCard(
                    sale=to_revenue_response(sale),
                    sold_label=relative_time(sale.date, today),
                    due_label=due_info["label"] if due_info else None,
                    days_from_due=due_info["days"] if due_info else None,
                )
            )
        columns[status] = PaymentColumn(count=len(sales), items=cards)

    return PaymentsByStatusResponse(**columns)


@router.post("", response_model=RevenueCreateResponse, status_code=201)
async def create_revenue(
    payload: RevenueCreate,
    store: DashboardStore = Depends(get_store),
) -> RevenueCreateResponse:
    """
    Record a sale. The total is quantity x unit price; pending sales without
    a due date are due `pending_due_days` after today.

    Example response:
    {
      "sale": {"id": "...", "product_type": "eggs", "quantity": 50, "unit_price": "360.00",
               "total_amount": "18000.00", "payment_status": "paid", ...},
      "message": "Sale recorded: 18,000 KES"
    }
    """
    try:
        new_revenue = prepare_revenue(
            product_type=payload.product_type,
            quantity=payload.quantity,
            unit_price=payload.unit_price,
            occurred_on=payload.occurred_on,
            customer_name=payload.customer_name,
            payment_method=payload.payment_method,
            payment_status=payload.payment_status,
            due_date=payload.due_date,
            today=store.today(),
            egg_price=settings.default_egg_price,
            broiler_price=settings.default_broiler_price,
            pending_due_days=settings.pending_due_days,
        )
        sale = store.add_revenue(new_revenue)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return RevenueCreateResponse(
        sale=to_revenue_response(sale),
        message=sale_saved_message(sale.total_amount),
    )


@router.patch("/{revenue_id}/payment-status", response_model=RevenueResponse)
async def update_payment_status(
    revenue_id: str,
    payload: PaymentStatusUpdate,
    store: DashboardStore = Depends(get_store),
) -> RevenueResponse:
    try:
        sale = store.update_payment_status(revenue_id, payload.payment_status)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail="Sale not found") from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return to_revenue_response(sale)


@router.delete("/{revenue_id}", status_code=204)
async def delete_revenue(
    revenue_id: str,
    store: DashboardStore = Depends(get_store),
) -> Response:
    try:
        store.delete_revenue(revenue_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail="Sale not found") from exc

    return Response(status_code=204)
