from datetime import date
from decimal import Decimal

import pytest

from magolla.services.forms import (
    expense_saved_message,
    prepare_expense,
    prepare_revenue,
    sale_saved_message,
)

TODAY = date(2026, 3, 4)


def _revenue_kwargs(**overrides):
    kwargs = {
        "product_type": "eggs",
        "quantity": 50,
        "unit_price": None,
        "occurred_on": None,
        "customer_name": None,
        "payment_method": "mpesa",
        "payment_status": "paid",
        "due_date": None,
        "today": TODAY,
    }
    kwargs.update(overrides)
    return kwargs


def test_prepare_expense_defaults_date_and_trims_notes() -> None:
    new_expense = prepare_expense(
        amount=Decimal("45000"),
        occurred_on=None,
        category="feeds",
        payment_method="mpesa",
        notes="   ",
        today=TODAY,
    )

    assert new_expense.date == TODAY
    assert new_expense.amount == Decimal("45000.00")
    assert new_expense.notes is None


@pytest.mark.parametrize("amount", [None, Decimal("0"), Decimal("-10")])
def test_prepare_expense_rejects_missing_or_non_positive_amount(amount) -> None:
    with pytest.raises(ValueError, match="Please enter a valid amount"):
        prepare_expense(
            amount=amount,
            occurred_on=TODAY,
            category="feeds",
            payment_method="cash",
            notes=None,
            today=TODAY,
        )


def test_prepare_expense_rejects_future_date() -> None:
    with pytest.raises(ValueError, match="Date cannot be in the future"):
        prepare_expense(
            amount=Decimal("100"),
            occurred_on=date(2026, 3, 5),
            category="supplies",
            payment_method="cash",
            notes=None,
            today=TODAY,
        )


def test_prepare_revenue_uses_default_prices() -> None:
    eggs = prepare_revenue(**_revenue_kwargs())
    assert eggs.unit_price == Decimal("360.00")
    assert eggs.total_amount == Decimal("18000.00")

    broilers = prepare_revenue(**_revenue_kwargs(product_type="broilers", quantity=10))
    assert broilers.unit_price == Decimal("820.00")
    assert broilers.total_amount == Decimal("8200.00")


def test_prepare_revenue_pending_sale_gets_due_date() -> None:
    pending = prepare_revenue(**_revenue_kwargs(payment_status="pending"))
    assert pending.due_date == date(2026, 3, 11)

    explicit = prepare_revenue(**_revenue_kwargs(payment_status="pending", due_date=date(2026, 3, 20)))
    assert explicit.due_date == date(2026, 3, 20)

    paid = prepare_revenue(**_revenue_kwargs())
    assert paid.due_date is None


def test_prepare_revenue_validation_errors() -> None:
    with pytest.raises(ValueError, match="Please enter quantity"):
        prepare_revenue(**_revenue_kwargs(quantity=None))
    with pytest.raises(ValueError, match="Please enter quantity"):
        prepare_revenue(**_revenue_kwargs(quantity=0))
    with pytest.raises(ValueError, match="Price cannot be negative"):
        prepare_revenue(**_revenue_kwargs(unit_price=Decimal("-1")))
    with pytest.raises(ValueError, match="Date cannot be in the future"):
        prepare_revenue(**_revenue_kwargs(occurred_on=date(2026, 4, 1)))


def test_saved_messages() -> None:
    assert expense_saved_message(Decimal("45000.00")) == "Expense added: 45,000 KES"
    assert sale_saved_message(Decimal("127500.00")) == "Sale recorded: 127,500 KES"
