"""Editable static data: storage keys, sample menu and export layout."""

from __future__ import annotations

MENU_KEY = "rpm_menu"
ORDERS_KEY = "rpm_orders"
EXPENSES_KEY = "rpm_expenses"

STORAGE_KEYS: tuple[str, ...] = (MENU_KEY, ORDERS_KEY, EXPENSES_KEY)

# Raw sample rows consumed by profit_manager.data (which wraps them into MenuItem instances).
SAMPLE_MENU: list[dict[str, str | int | None]] = [
    {"name": "Chicken Burger", "price": "7.50", "cost": "3.00", "inventory": 50},
    {"name": "Fries", "price": "3.00", "cost": "0.60", "inventory": 200},
    {"name": "Coke", "price": "1.50", "cost": "0.20", "inventory": 100},
]

ORDERS_CSV_HEADER: tuple[str, ...] = (
    "orderId",
    "timestamp",
    "itemName",
    "price",
    "cost",
    "qty",
    "orderSubtotal",
    "orderCogs",
)

ORDERS_CSV_FILENAME = "orders_{day}.csv"
