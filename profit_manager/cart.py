"""Transient order cart staged before an order is placed."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator

from profit_manager.catalog import Catalog
from profit_manager.models import CartLine, MenuItem
from profit_manager.money import sum_money


class Cart:
    """Cart lines in the order they were first added."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def qty_for(self, item_id: str) -> int:
        line = self._find(item_id)
        return 0 if line is None else line.qty

    def add_line(self, item_id: str) -> None:
        line = self._find(item_id)
        if line is not None:
            line.qty += 1
            return
        self._lines.append(CartLine(item_id=item_id, qty=1))

    def set_qty(self, item_id: str, qty: int) -> None:
        """Overwrite a line's qty; zero or less drops the line."""
        if qty <= 0:
            self._lines = [line for line in self._lines if line.item_id != item_id]
            return
        line = self._find(item_id)
        if line is not None:
            line.qty = qty

    def clear(self) -> None:
        self._lines.clear()

    def resolve(self, catalog: Catalog) -> list[tuple[MenuItem, int]]:
        """Pair each line with its live menu item, skipping deleted items."""
        resolved: list[tuple[MenuItem, int]] = []
        for line in self._lines:
            item = catalog.get(line.item_id)
            if item is None:
                continue
            resolved.append((item, line.qty))
        return resolved

    def total(self, catalog: Catalog) -> Decimal:
        return sum_money(item.price * qty for item, qty in self.resolve(catalog))

    def _find(self, item_id: str) -> CartLine | None:
        for line in self._lines:
            if line.item_id == item_id:
                return line
        return None
