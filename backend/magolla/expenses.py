from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field, field_serializer, field_validator

from .domain import ExpenseCategory, PaymentMethod
from .services.forms import expense_saved_message, prepare_expense
from .store import DashboardStore, get_store

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _money(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class ExpenseCreate(BaseModel):
    amount: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    occurred_on: date | None = Field(default=None, alias="date")
    category: ExpenseCategory = "feeds"
    payment_method: PaymentMethod = "mpesa"
    notes: str | None = Field(default=None, max_length=240)

    @field_validator("notes", mode="before")
    @classmethod
    def clean_text(cls, value: str | None) -> str | None:
        if value is None:
            return None

        if isinstance(value, str):
            trimmed = value.strip()
            return trimmed or None

        return value


class ExpenseResponse(BaseModel):
    id: str
    date: date
    category: ExpenseCategory
    amount: Decimal
    payment_method: PaymentMethod
    notes: str | None
    created_at: datetime

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return _money(value)


class ExpenseCreateResponse(BaseModel):
    expense: ExpenseResponse
    message: str


def to_expense_response(expense) -> ExpenseResponse:
    return ExpenseResponse.model_validate(expense, from_attributes=True)


@router.get("", response_model=list[ExpenseResponse])
async def list_expenses(
    limit: int | None = Query(default=None, ge=1, le=500),
    store: DashboardStore = Depends(get_store),
) -> list[ExpenseResponse]:
    """All expenses, newest entries first."""
    return [to_expense_response(e) for e in store.list_expenses(limit)]


@router.get("/recent", response_model=list[ExpenseResponse])
async def recent_expenses(
    limit: int | None = Query(default=None, ge=1, le=100),
    store: DashboardStore = Depends(get_store),
) -> list[ExpenseResponse]:
    """Expenses ordered by date, most recent first."""
    return [to_expense_response(e) for e in store.recent_expenses(limit)]


@router.post("", response_model=ExpenseCreateResponse, status_code=201)
async def create_expense(
    payload: ExpenseCreate,
    store: DashboardStore = Depends(get_store),
) -> ExpenseCreateResponse:
    """
    Record an expense.

    Example response:
    {
      "expense": {"id": "...", "date": "2026-03-02", "category": "feeds", "amount": "45000.00", ...},
      "message": "Expense added: 45,000 KES"
    }
    """
    try:
        new_expense = prepare_expense(
            amount=payload.amount,
            occurred_on=payload.occurred_on,
            category=payload.category,
            payment_method=payload.payment_method,
            notes=payload.notes,
            today=store.today(),
        )
        expense = store.add_expense(new_expense)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return ExpenseCreateResponse(
        expense=to_expense_response(expense),
        message=expense_saved_message(expense.amount),
    )


@router.delete("/{expense_id}", status_code=204)
async def delete_expense(
    expense_id: str,
    store: DashboardStore = Depends(get_store),
) -> Response:
    try:
        store.delete_expense(expense_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail="Expense not found") from exc

    return Response(status_code=204)
