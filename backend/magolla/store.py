"""
In-memory dashboard state shared by the API routers.

The store holds the farm ledger (sales, expenses, balances, feed stock) and
exposes the derived dashboard metrics over it. Reads and writes go through a
reentrant lock so one store can be shared by every thread that serves requests,
and `summary()` holds it while building all cards from one consistent ledger.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_FLOOR
from uuid import uuid4

from fastapi import HTTPException

from . import mock_data
from .config import settings
from .domain import (
    PAYMENT_STATUSES,
    BankBalance,
    Expense,
    FeedInventory,
    NewExpense,
    NewRevenue,
    Revenue,
)
from .services import calculations

logger = logging.getLogger(__name__)


class DashboardStore:
    def __init__(self, *, clock: Callable[[], date] = date.today) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self.expenses: list[Expense] = []
        self.revenue: list[Revenue] = []
        self.bank_balances: list[BankBalance] = []
        self.feed_inventory: FeedInventory | None = None
        self.is_loading = False
        self.error: str | None = None

    def today(self) -> date:
        return self._clock()

    def _snapshot(self) -> tuple[list[Revenue], list[Expense]]:
        with self._lock:
            return list(self.revenue), list(self.expenses)

    # -- loading -----------------------------------------------------------

    def load_dashboard_data(self) -> None:
        """Replace the ledger with the sample dataset dated relative to today."""
        today = self.today()
        with self._lock:
            self.is_loading = True
            self.error = None
            try:
                self.expenses = mock_data.build_expenses(today)
                self.revenue = mock_data.build_revenue(today)
                self.bank_balances = mock_data.build_bank_balances(today)
                self.feed_inventory = mock_data.build_feed_inventory(today)
            except Exception as exc:
                self.error = str(exc)
                logger.exception("Failed to load dashboard data")
                raise
            finally:
                self.is_loading = False

        logger.info(
            "Loaded dashboard data: %d expenses, %d sales, %d balances",
            len(self.expenses),
            len(self.revenue),
            len(self.bank_balances),
        )

    # -- mutations ---------------------------------------------------------

    def add_expense(self, new_expense: NewExpense) -> Expense:
        if new_expense.amount <= 0:
            raise ValueError("Amount must be greater than 0")

        expense = Expense(
            id=str(uuid4()),
            date=new_expense.date,
            category=new_expense.category,
            amount=new_expense.amount,
            payment_method=new_expense.payment_method,
            notes=new_expense.notes,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self.expenses = [expense, *self.expenses]

        logger.info("Added %s expense %s: %s", expense.category, expense.id, expense.amount)
        return expense

    def add_revenue(self, new_revenue: NewRevenue) -> Revenue:
        if new_revenue.quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        sale = Revenue(
            id=str(uuid4()),
            date=new_revenue.date,
            product_type=new_revenue.product_type,
            quantity=new_revenue.quantity,
            unit_price=new_revenue.unit_price,
            total_amount=new_revenue.total_amount,
            customer_name=new_revenue.customer_name,
            payment_method=new_revenue.payment_method,
            payment_status=new_revenue.payment_status,
            due_date=new_revenue.due_date,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self.revenue = [sale, *self.revenue]

        logger.info("Recorded %s sale %s: %s", sale.product_type, sale.id, sale.total_amount)
        return sale

    def delete_expense(self, expense_id: str) -> None:
        with self._lock:
            remaining = [e for e in self.expenses if e.id != expense_id]
            if len(remaining) == len(self.expenses):
                logger.warning("Expense %s not found", expense_id)
                raise LookupError("Expense not found")
            self.expenses = remaining

        logger.info("Deleted expense %s", expense_id)

    def delete_revenue(self, revenue_id: str) -> None:
        with self._lock:
            remaining = [r for r in self.revenue if r.id != revenue_id]
            if len(remaining) == len(self.revenue):
                logger.warning("Sale %s not found", revenue_id)
                raise LookupError("Sale not found")
            self.revenue = remaining

        logger.info("Deleted sale %s", revenue_id)

    def update_payment_status(self, revenue_id: str, status: str) -> Revenue:
        if status not in PAYMENT_STATUSES:
            raise ValueError(f"Unknown payment status: {status}")

        with self._lock:
            updated: Revenue | None = None
            next_revenue: list[Revenue] = []
            for sale in self.revenue:
                if sale.id == revenue_id:
                    sale = replace(sale, payment_status=status)
                    updated = sale
                next_revenue.append(sale)

            if updated is None:
                logger.warning("Sale %s not found", revenue_id)
                raise LookupError("Sale not found")
            self.revenue = next_revenue

        logger.info("Sale %s marked %s", revenue_id, status)
        return updated

    # -- lookups -----------------------------------------------------------

    def list_expenses(self, limit: int | None = None) -> list[Expense]:
        with self._lock:
            items = list(self.expenses)
        return items if limit is None else items[:limit]

    def list_revenue(self, status: str | None = None) -> list[Revenue]:
        with self._lock:
            items = list(self.revenue)
        if status is None:
            return items
        return [r for r in items if r.payment_status == status]

    def list_bank_balances(self) -> list[BankBalance]:
        with self._lock:
            return list(self.bank_balances)

    # -- derived metrics ---------------------------------------------------

    def today_metrics(self) -> dict:
        revenue, expenses = self._snapshot()
        today = self.today()
        current = calculations.today_totals(revenue, expenses, today)
        previous = calculations.yesterday_totals(revenue, expenses, today)
        return {
            **current,
            "revenue_change": calculations.percentage_change(current["revenue"], previous["revenue"]),
            "profit_change": calculations.percentage_change(current["profit"], previous["profit"]),
        }

    def cash_on_hand(self) -> Decimal:
        return sum((b.balance for b in self.list_bank_balances()), Decimal("0.00"))

    def days_until_feed_restock(self) -> int:
        inventory = self.feed_inventory
        if inventory is None or inventory.daily_consumption_rate <= 0:
            return 0
        total_kg = Decimal(inventory.bags_remaining) * inventory.kg_per_bag
        days = (total_kg / inventory.daily_consumption_rate).to_integral_value(rounding=ROUND_FLOOR)
        return int(days)

    def week_comparison(self) -> dict:
        revenue, expenses = self._snapshot()
        return calculations.week_comparison(revenue, expenses, self.today())

    def cost_breakdown(self) -> dict[str, Decimal]:
        _, expenses = self._snapshot()
        return calculations.cost_breakdown(expenses, self.today(), settings.metrics_window_days)

    def financial_health(self) -> dict:
        revenue, expenses = self._snapshot()
        return calculations.financial_health(revenue, expenses, self.cash_on_hand(), self.today())

    def trend_data(self) -> list[dict]:
        revenue, expenses = self._snapshot()
        return calculations.daily_data_points(revenue, expenses, self.today(), settings.metrics_window_days)

    def quick_metrics(self) -> dict[str, int]:
        revenue, expenses = self._snapshot()
        return calculations.quick_metrics(
            revenue,
            expenses,
            self.today(),
            days=settings.metrics_window_days,
            default_egg_price=settings.default_egg_price,
        )

    def recent_expenses(self, limit: int | None = None) -> list[Expense]:
        _, expenses = self._snapshot()
        if limit is None:
            limit = settings.recent_expenses_limit
        return sorted(expenses, key=lambda e: e.date, reverse=True)[:limit]

    def payments_by_status(self) -> dict[str, list[Revenue]]:
        revenue, _ = self._snapshot()
        return {status: [r for r in revenue if r.payment_status == status] for status in PAYMENT_STATUSES}

    def last_7_days_revenue(self) -> list[Decimal]:
        revenue, _ = self._snapshot()
        return calculations.last_n_days_revenue(revenue, self.today(), 7)

    def last_7_days_profit(self) -> list[Decimal]:
        revenue, expenses = self._snapshot()
        return calculations.last_n_days_profit(revenue, expenses, self.today(), 7)

    def summary(self) -> dict:
        """Every dashboard card computed under one hold of the lock."""
        with self._lock:
            return {
                "as_of": self.today(),
                "today": self.today_metrics(),
                "cash_on_hand": self.cash_on_hand(),
                "days_until_restock": self.days_until_feed_restock(),
                "week_comparison": self.week_comparison(),
                "cost_breakdown": self.cost_breakdown(),
                "health": self.financial_health(),
                "quick_metrics": self.quick_metrics(),
                "sparklines": {
                    "revenue": self.last_7_days_revenue(),
                    "profit": self.last_7_days_profit(),
                },
            }


# Shared store used by FastAPI dependencies.
store: DashboardStore | None = None


def init_store() -> None:
    global store

    store = DashboardStore()
    if settings.seed_mock_data:
        store.load_dashboard_data()


def close_store() -> None:
    global store

    store = None


def get_store() -> DashboardStore:
    if store is None:
        # Centralized guard to avoid obscure None-type errors in route handlers.
        raise HTTPException(status_code=500, detail="Dashboard store is not initialized")
    return store
