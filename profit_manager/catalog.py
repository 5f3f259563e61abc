"""Menu catalog: the sellable items with price, cost and optional stock."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Iterable, Iterator, Mapping

from profit_manager.models import IdFactory, MenuItem, new_id

logger = logging.getLogger(__name__)

_PATCHABLE_FIELDS = ("name", "price", "cost", "inventory")


class Catalog:
    """Insertion-ordered menu items keyed by id."""

    def __init__(self, items: Iterable[MenuItem] = (), id_factory: IdFactory = new_id) -> None:
        self._id_factory = id_factory
        self._items: dict[str, MenuItem] = {}
        self.replace_all(items)

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    @property
    def items(self) -> list[MenuItem]:
        return list(self._items.values())

    def get(self, item_id: str) -> MenuItem | None:
        return self._items.get(item_id)

    def replace_all(self, items: Iterable[MenuItem]) -> None:
        self._items = {item.id: item for item in items}

    def add(self, name: str, price: Decimal, cost: Decimal, inventory: int | None = None) -> str:
        """Append a new item and return its fresh id.

        Price and cost are stored as given; a negative value is not rejected.
        """
        item_id = self._id_factory()
        self._items[item_id] = MenuItem(id=item_id, name=name, price=price, cost=cost, inventory=inventory)
        logger.debug("catalog add id=%s name=%r", item_id, name)
        return item_id

    def update(self, item_id: str, patch: Mapping[str, Any]) -> MenuItem | None:
        """Merge the known fields of ``patch`` into an item. Unknown ids are ignored."""
        current = self._items.get(item_id)
        if current is None:
            return None

        changes = {key: patch[key] for key in _PATCHABLE_FIELDS if key in patch}
        updated = replace(current, **changes)
        self._items[item_id] = updated
        logger.debug("catalog update id=%s fields=%s", item_id, sorted(changes))
        return updated

    def remove(self, item_id: str) -> bool:
        """Delete an item. Carts and past orders keep their own references."""
        removed = self._items.pop(item_id, None)
        if removed is not None:
            logger.debug("catalog remove id=%s", item_id)
        return removed is not None

    def decrement_inventory(self, item_id: str, qty: int) -> None:
        """Take ``qty`` off tracked stock, flooring at zero."""
        item = self._items.get(item_id)
        if item is None or item.inventory is None:
            return
        self._items[item_id] = replace(item, inventory=max(0, item.inventory - qty))
