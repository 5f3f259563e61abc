"""Rich text rendering helpers for the panes."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from rich.text import Text

from profit_manager.models import Expense, MenuItem, Order
from profit_manager.money import format_money
from profit_manager.profit import ProfitSummary


def profit_style(amount: Decimal) -> str:
    """Green for a profit, red for a loss."""
    if amount < 0:
        return "bold #ff6b6b"
    return "bold #5fbf72"


def short_id(entity_id: str) -> str:
    return entity_id[:8]


def format_timestamp(timestamp: str) -> str:
    """Render a stored ISO timestamp in local time; unparsable values pass through."""
    try:
        moment = datetime.fromisoformat(timestamp)
    except ValueError:
        return timestamp
    return moment.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_menu_item(item: MenuItem) -> Text:
    text = Text()
    text.append(item.name, style="bold")
    text.append(f"  Price {format_money(item.price)} • Cost {format_money(item.cost)}")
    if item.inventory is not None:
        stock_style = "#ffb3b3" if item.inventory == 0 else "dim"
        text.append(f"  Inv {item.inventory}", style=stock_style)
    return text


def format_cart_line(item: MenuItem, qty: int) -> Text:
    text = Text()
    text.append(item.name, style="bold")
    text.append(f"  {format_money(item.price)} x {qty} = {format_money(item.price * qty)}")
    return text


def format_order(order: Order) -> Text:
    text = Text()
    text.append(f"Order {short_id(order.id)}", style="bold")
    text.append(f"  {format_timestamp(order.timestamp)}", style="dim")
    text.append(f"  Subtotal {format_money(order.subtotal)}  COGS {format_money(order.cogs)}")
    for line in order.items:
        text.append(f"\n      {line.qty} x {line.name} @ {format_money(line.price)} (cost {format_money(line.cost)})")
    if order.note:
        text.append(f"\n      Note: {order.note}", style="italic")
    return text


def format_expense(expense: Expense) -> Text:
    text = Text()
    text.append(expense.name, style="bold")
    text.append(f"  {format_money(expense.amount)}")
    return text


def format_summary(summary: ProfitSummary) -> Text:
    text = Text()
    rows = (
        ("Revenue", summary.total_revenue),
        ("COGS", summary.total_cogs),
        ("Gross Profit", summary.gross_profit),
        ("Expenses", summary.total_expenses),
    )
    for label, amount in rows:
        text.append(f"{label:<14}{format_money(amount):>12}\n")
    text.append(f"{'Net Profit':<14}", style="bold")
    text.append(f"{format_money(summary.net_profit):>12}", style=profit_style(summary.net_profit))
    return text
