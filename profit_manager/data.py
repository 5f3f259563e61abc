"""Sample menu data."""

from __future__ import annotations

from profit_manager.constant import SAMPLE_MENU
from profit_manager.models import IdFactory, MenuItem, new_id
from profit_manager.money import parse_money


def sample_menu(id_factory: IdFactory = new_id) -> list[MenuItem]:
    """Build fresh sample menu items, each with a new id."""
    items: list[MenuItem] = []
    for row in SAMPLE_MENU:
        inventory = row.get("inventory")
        items.append(
            MenuItem(
                id=id_factory(),
                name=str(row["name"]),
                price=parse_money(row["price"]),
                cost=parse_money(row["cost"]),
                inventory=int(inventory) if inventory is not None else None,
            )
        )
    return items
