"""Revenue, COGS and profit totals over the ledgers."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from profit_manager.models import Expense, Order
from profit_manager.money import sum_money


@dataclass(frozen=True)
class ProfitSummary:
    total_revenue: Decimal
    total_cogs: Decimal
    gross_profit: Decimal
    total_expenses: Decimal
    net_profit: Decimal


def compute_profit(orders: Iterable[Order], expenses: Iterable[Expense]) -> ProfitSummary:
    """Recompute every total from scratch. Empty ledgers give all zeros."""
    orders = list(orders)
    total_revenue = sum_money(order.subtotal for order in orders)
    total_cogs = sum_money(order.cogs for order in orders)
    gross_profit = total_revenue - total_cogs
    total_expenses = sum_money(expense.amount for expense in expenses)
    return ProfitSummary(
        total_revenue=total_revenue,
        total_cogs=total_cogs,
        gross_profit=gross_profit,
        total_expenses=total_expenses,
        net_profit=gross_profit - total_expenses,
    )
