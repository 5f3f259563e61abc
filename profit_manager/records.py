"""JSON record conversion for the persisted collections.

Money is written as decimal strings. Numbers are accepted on read so data
saved with plain floats still loads.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from profit_manager.models import Expense, MenuItem, Order, OrderLine
from profit_manager.money import parse_money

logger = logging.getLogger(__name__)

T = TypeVar("T")


def menu_item_to_record(item: MenuItem) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": item.id,
        "name": item.name,
        "price": str(item.price),
        "cost": str(item.cost),
    }
    if item.inventory is not None:
        record["inventory"] = item.inventory
    return record


def menu_item_from_record(record: dict[str, Any]) -> MenuItem:
    inventory = record.get("inventory")
    return MenuItem(
        id=str(record["id"]),
        name=str(record["name"]),
        price=parse_money(record["price"]),
        cost=parse_money(record["cost"]),
        inventory=_parse_inventory(inventory),
    )


def order_to_record(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "timestamp": order.timestamp,
        "items": [
            {
                "itemId": line.item_id,
                "name": line.name,
                "price": str(line.price),
                "cost": str(line.cost),
                "qty": line.qty,
            }
            for line in order.items
        ],
        "subtotal": str(order.subtotal),
        "cogs": str(order.cogs),
        "note": order.note,
    }


def order_from_record(record: dict[str, Any]) -> Order:
    lines = tuple(
        OrderLine(
            item_id=str(line["itemId"]),
            name=str(line["name"]),
            price=parse_money(line["price"]),
            cost=parse_money(line["cost"]),
            qty=_parse_qty(line["qty"]),
        )
        for line in record["items"]
    )
    return Order(
        id=str(record["id"]),
        timestamp=str(record["timestamp"]),
        items=lines,
        subtotal=parse_money(record["subtotal"]),
        cogs=parse_money(record["cogs"]),
        note=str(record.get("note") or ""),
    )


def expense_to_record(expense: Expense) -> dict[str, Any]:
    return {"id": expense.id, "name": expense.name, "amount": str(expense.amount)}


def expense_from_record(record: dict[str, Any]) -> Expense:
    return Expense(
        id=str(record["id"]),
        name=str(record["name"]),
        amount=parse_money(record.get("amount") or 0),
    )


def decode_collection(key: str, raw: Any, decoder: Callable[[dict[str, Any]], T]) -> list[T]:
    """Decode a stored list, dropping records that do not parse.

    Anything other than a list (including a missing value) becomes empty.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("stored %s is %s, not a list; starting empty", key, type(raw).__name__)
        return []

    decoded: list[T] = []
    for index, record in enumerate(raw):
        try:
            decoded.append(decoder(record))
        except (AttributeError, KeyError, OverflowError, TypeError, ValueError) as exc:
            logger.warning("skipping malformed %s record #%d: %r", key, index, exc)
    return decoded


def _parse_inventory(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return max(0, _parse_count(value))


def _parse_qty(value: Any) -> int:
    qty = _parse_count(value)
    if qty < 1:
        raise ValueError(f"Order line qty must be positive: {value!r}")
    return qty


def _parse_count(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Not a whole number: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Not a whole number: {value!r}")
    return int(value)
