"""Order and expense ledgers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterable, Iterator

from profit_manager.cart import Cart
from profit_manager.catalog import Catalog
from profit_manager.models import Expense, IdFactory, Order, OrderLine, new_id
from profit_manager.money import sum_money

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderLedger:
    """Finalized orders, newest first."""

    def __init__(
        self,
        orders: Iterable[Order] = (),
        id_factory: IdFactory = new_id,
        clock: Clock = utc_now,
    ) -> None:
        self._id_factory = id_factory
        self._clock = clock
        self._orders: list[Order] = list(orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(list(self._orders))

    def __len__(self) -> int:
        return len(self._orders)

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    def replace_all(self, orders: Iterable[Order]) -> None:
        self._orders = list(orders)

    def place_order(self, cart: Cart, catalog: Catalog, note: str = "") -> Order | None:
        """Snapshot the cart into a new order.

        Decrements tracked inventory for every ordered line and empties the
        cart. Returns None when the cart is empty or none of its lines still
        resolve to a menu item.
        """
        if cart.is_empty():
            return None

        lines = tuple(
            OrderLine(item_id=item.id, name=item.name, price=item.price, cost=item.cost, qty=qty)
            for item, qty in cart.resolve(catalog)
        )
        if not lines:
            logger.info("place_order skipped: %d cart line(s) no longer on the menu", len(cart))
            cart.clear()
            return None

        order = Order(
            id=self._id_factory(),
            timestamp=self._clock().isoformat(),
            items=lines,
            subtotal=sum_money(line.line_total for line in lines),
            cogs=sum_money(line.line_cost for line in lines),
            note=note,
        )
        self._orders.insert(0, order)

        for line in lines:
            catalog.decrement_inventory(line.item_id, line.qty)
        cart.clear()
        return order

    def clear_all(self) -> None:
        self._orders.clear()


class ExpenseLedger:
    """Named expense amounts in the order they were entered."""

    def __init__(self, expenses: Iterable[Expense] = (), id_factory: IdFactory = new_id) -> None:
        self._id_factory = id_factory
        self._expenses: list[Expense] = list(expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(list(self._expenses))

    def __len__(self) -> int:
        return len(self._expenses)

    @property
    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    def replace_all(self, expenses: Iterable[Expense]) -> None:
        self._expenses = list(expenses)

    def add(self, name: str, amount: Decimal) -> str:
        expense_id = self._id_factory()
        self._expenses.append(Expense(id=expense_id, name=name, amount=amount))
        return expense_id

    def remove(self, expense_id: str) -> bool:
        before = len(self._expenses)
        self._expenses = [expense for expense in self._expenses if expense.id != expense_id]
        return len(self._expenses) != before

    def clear_all(self) -> None:
        self._expenses.clear()
