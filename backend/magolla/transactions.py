from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, field_serializer

from .services.transactions_service import (
    TransactionType,
    build_ledger,
    filter_ledger,
    ledger_stats,
    sort_ledger,
)
from .store import DashboardStore, get_store

router = APIRouter(tags=["transactions"])


def _money(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class TransactionItem(BaseModel):
    id: str
    date: date
    description: str
    category: str
    amount: Decimal
    type: TransactionType
    account: str

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return _money(value)


class TransactionStats(BaseModel):
    total_income: Decimal
    total_expenses: Decimal
    net_cash_flow: Decimal
    count: int

    @field_serializer("total_income", "total_expenses", "net_cash_flow")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    stats: TransactionStats
    limit: int
    offset: int
    total: int


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    type_filter: list[TransactionType] | None = Query(default=None, alias="type"),
    q: str | None = Query(default=None),
    category: list[str] | None = Query(default=None),
    sort_by: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: DashboardStore = Depends(get_store),
) -> TransactionListResponse:
    """
    Sales and expenses in one ledger, newest first by default.

    Stats cover every matching row, not just the returned page.

    Example response:
    {
      "items": [
        {"id": "1", "date": "2026-03-02", "description": "eggs sale - Hotel Savanna",
         "category": "eggs", "amount": "18000.00", "type": "income", "account": "mpesa"}
      ],
      "stats": {"total_income": "18000.00", "total_expenses": "0.00", "net_cash_flow": "18000.00", "count": 1},
      "limit": 50,
      "offset": 0,
      "total": 1
    }
    """
    revenue = store.list_revenue()
    expenses = store.list_expenses()

    items = filter_ledger(
        build_ledger(revenue, expenses),
        types=type_filter,
        q=q,
        categories=category,
    )
    items = sort_ledger(items, sort_by)

    return TransactionListResponse(
        items=[TransactionItem(**item) for item in items[offset:offset + limit]],
        stats=TransactionStats(**ledger_stats(items)),
        limit=limit,
        offset=offset,
        total=len(items),
    )


@router.delete("/transactions/{transaction_type}/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_type: TransactionType,
    transaction_id: str,
    store: DashboardStore = Depends(get_store),
) -> Response:
    try:
        if transaction_type == "income":
            store.delete_revenue(transaction_id)
        else:
            store.delete_expense(transaction_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail="Transaction not found") from exc

    return Response(status_code=204)
