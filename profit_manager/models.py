"""Domain models for the profit manager."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable
from uuid import uuid4


@dataclass(frozen=True)
class MenuItem:
    """A sellable menu item. ``inventory`` is None when stock is not tracked."""

    id: str
    name: str
    price: Decimal
    cost: Decimal
    inventory: int | None = None

    @property
    def tracks_inventory(self) -> bool:
        return self.inventory is not None


@dataclass
class CartLine:
    """A staged cart row referencing a live menu item."""

    item_id: str
    qty: int


@dataclass(frozen=True)
class OrderLine:
    """Menu item pricing copied into an order when it is placed."""

    item_id: str
    name: str
    price: Decimal
    cost: Decimal
    qty: int

    @property
    def line_total(self) -> Decimal:
        return self.price * self.qty

    @property
    def line_cost(self) -> Decimal:
        return self.cost * self.qty


@dataclass(frozen=True)
class Order:
    """A finalized order. Never mutated after creation."""

    id: str
    timestamp: str
    items: tuple[OrderLine, ...]
    subtotal: Decimal
    cogs: Decimal
    note: str = ""


@dataclass(frozen=True)
class Expense:
    """A named operating expense for the day."""

    id: str
    name: str
    amount: Decimal


IdFactory = Callable[[], str]


def new_id() -> str:
    """Default id factory."""
    return uuid4().hex
