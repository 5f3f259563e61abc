"""Application state and the operations the UI drives."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from profit_manager.cart import Cart
from profit_manager.catalog import Catalog
from profit_manager.constant import EXPENSES_KEY, MENU_KEY, ORDERS_KEY
from profit_manager.data import sample_menu
from profit_manager.export import export_filename, export_orders_csv
from profit_manager.ledger import Clock, ExpenseLedger, OrderLedger, utc_now
from profit_manager.models import Expense, IdFactory, MenuItem, Order, new_id
from profit_manager.persistence import KeyValueStore, StorageError
from profit_manager.profit import ProfitSummary, compute_profit
from profit_manager.records import (
    decode_collection,
    expense_from_record,
    expense_to_record,
    menu_item_from_record,
    menu_item_to_record,
    order_from_record,
    order_to_record,
)

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything the app holds in memory."""

    catalog: Catalog
    cart: Cart = field(default_factory=Cart)
    orders: OrderLedger = field(default_factory=OrderLedger)
    expenses: ExpenseLedger = field(default_factory=ExpenseLedger)


class ProfitController:
    """Owns the app state and saves each collection after it changes.

    Storage failures never propagate: unreadable collections load as empty and
    failed writes are logged while the in-memory state stays authoritative.
    """

    def __init__(
        self,
        store: KeyValueStore,
        id_factory: IdFactory = new_id,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.id_factory = id_factory
        self.clock = clock
        self.state = AppState(
            catalog=Catalog(id_factory=id_factory),
            orders=OrderLedger(id_factory=id_factory, clock=clock),
            expenses=ExpenseLedger(id_factory=id_factory),
        )
        self.last_storage_error: str | None = None

    @property
    def catalog(self) -> Catalog:
        return self.state.catalog

    @property
    def cart(self) -> Cart:
        return self.state.cart

    @property
    def orders(self) -> list[Order]:
        return self.state.orders.orders

    @property
    def expenses(self) -> list[Expense]:
        return self.state.expenses.expenses

    # ----- startup -----

    def load(self) -> None:
        """Read all three collections from the store. The cart starts empty."""
        self.state.catalog.replace_all(decode_collection(MENU_KEY, self._load(MENU_KEY), menu_item_from_record))
        self.state.orders.replace_all(decode_collection(ORDERS_KEY, self._load(ORDERS_KEY), order_from_record))
        self.state.expenses.replace_all(
            decode_collection(EXPENSES_KEY, self._load(EXPENSES_KEY), expense_from_record)
        )
        self.state.cart.clear()
        logger.info(
            "loaded menu=%d orders=%d expenses=%d",
            len(self.state.catalog),
            len(self.state.orders),
            len(self.state.expenses),
        )

    # ----- menu -----

    def add_menu_item(self, name: str, price: Decimal, cost: Decimal, inventory: int | None = None) -> str:
        item_id = self.state.catalog.add(name, price, cost, inventory)
        logger.info("menu item added id=%s name=%r", item_id, name)
        self._save_menu()
        return item_id

    def update_menu_item(self, item_id: str, patch: Mapping[str, Any]) -> MenuItem | None:
        updated = self.state.catalog.update(item_id, patch)
        if updated is None:
            return None
        logger.info("menu item updated id=%s", item_id)
        self._save_menu()
        return updated

    def remove_menu_item(self, item_id: str) -> bool:
        removed = self.state.catalog.remove(item_id)
        if removed:
            logger.info("menu item removed id=%s", item_id)
            self._save_menu()
        return removed

    # ----- cart -----

    def add_to_cart(self, item_id: str) -> None:
        self.state.cart.add_line(item_id)

    def set_cart_qty(self, item_id: str, qty: int) -> None:
        self.state.cart.set_qty(item_id, qty)

    def clear_cart(self) -> None:
        self.state.cart.clear()

    def cart_lines(self) -> list[tuple[MenuItem, int]]:
        return self.state.cart.resolve(self.state.catalog)

    def cart_total(self) -> Decimal:
        return self.state.cart.total(self.state.catalog)

    # ----- orders -----

    def place_order(self, note: str = "") -> Order | None:
        """Turn the cart into an order, then save menu stock and the ledger."""
        order = self.state.orders.place_order(self.state.cart, self.state.catalog, note=note.strip())
        if order is None:
            return None
        logger.info(
            "order placed id=%s lines=%d subtotal=%s cogs=%s",
            order.id,
            len(order.items),
            order.subtotal,
            order.cogs,
        )
        self._save_menu()
        self._save_orders()
        return order

    # ----- expenses -----

    def add_expense(self, name: str, amount: Decimal) -> str:
        expense_id = self.state.expenses.add(name, amount)
        logger.info("expense added id=%s name=%r amount=%s", expense_id, name, amount)
        self._save_expenses()
        return expense_id

    def remove_expense(self, expense_id: str) -> bool:
        removed = self.state.expenses.remove(expense_id)
        if removed:
            logger.info("expense removed id=%s", expense_id)
            self._save_expenses()
        return removed

    # ----- bulk actions -----

    def reset_day(self) -> None:
        """Drop today's orders and expenses. The menu is kept."""
        self.state.orders.clear_all()
        self.state.expenses.clear_all()
        logger.info("day reset")
        self._save_orders()
        self._save_expenses()

    def seed_sample(self) -> None:
        """Replace the menu with the sample items and empty both ledgers."""
        self.state.catalog.replace_all(sample_menu(self.id_factory))
        self.state.orders.clear_all()
        self.state.expenses.clear_all()
        logger.info("sample menu loaded")
        self._save_menu()
        self._save_orders()
        self._save_expenses()

    def clear_all_storage(self) -> None:
        """Wipe the store, then reload as a fresh start would."""
        try:
            self.store.clear_all()
        except StorageError as exc:
            self._record_storage_error("clear_all", exc)
        self.load()

    # ----- reporting -----

    def summary(self) -> ProfitSummary:
        return compute_profit(self.state.orders, self.state.expenses)

    def export_orders(self) -> str:
        return export_orders_csv(self.state.orders)

    def write_orders_export(self, directory: str | Path, day: date | None = None) -> Path:
        """Write the orders CSV into ``directory`` and return the file path."""
        day = day or self.clock().date()
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / export_filename(day)
        path.write_text(self.export_orders(), encoding="utf-8")
        logger.info("exported %d order(s) to %s", len(self.state.orders), path)
        return path

    # ----- storage -----

    def _load(self, key: str) -> Any | None:
        try:
            return self.store.load(key)
        except StorageError as exc:
            logger.warning("treating %s as empty: %s", key, exc)
            return None

    def _save_menu(self) -> None:
        self._save(MENU_KEY, self.state.catalog, menu_item_to_record)

    def _save_orders(self) -> None:
        self._save(ORDERS_KEY, self.state.orders, order_to_record)

    def _save_expenses(self) -> None:
        self._save(EXPENSES_KEY, self.state.expenses, expense_to_record)

    def _save(self, key: str, collection: Iterable[Any], encoder: Callable[[Any], dict[str, Any]]) -> None:
        try:
            self.store.save(key, [encoder(entry) for entry in collection])
        except StorageError as exc:
            self._record_storage_error(f"save {key}", exc)
            return
        self.last_storage_error = None

    def _record_storage_error(self, action: str, exc: StorageError) -> None:
        logger.exception("storage %s failed: %s", action, exc)
        self.last_storage_error = f"Storage {action} failed: {exc}"
