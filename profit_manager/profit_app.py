"""Main Textual app class."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from profit_manager.config import DB_PATH, EXPORT_DIR
from profit_manager.confirm_modal import ConfirmModal
from profit_manager.controller import ProfitController
from profit_manager.form_modal import FormModal, FormValues
from profit_manager.forms import (
    EXPENSE_FIELDS,
    MENU_ITEM_FIELDS,
    ORDER_NOTE_FIELDS,
    menu_item_edit_patch,
    menu_item_form_values,
    parse_expense_form,
    parse_menu_item_form,
    validation_error,
)
from profit_manager.money import format_money
from profit_manager.persistence import SqliteStore
from profit_manager.rendering import (
    format_cart_line,
    format_expense,
    format_menu_item,
    format_order,
    format_summary,
    short_id,
)

logger = logging.getLogger(__name__)

PANES = ("menu", "cart", "expenses")
PANE_TITLES = {"menu": "Menu", "cart": "Order Cart", "expenses": "Expenses"}


class ProfitManagerApp(App):
    """A Textual app for tracking orders, menu costs, expenses and profit."""

    TITLE = "Restaurant Profit Manager"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #left-pane {
        width: 3fr;
        border: round $primary;
        padding: 0 1;
    }

    #right-pane {
        width: 2fr;
        border: round $secondary;
        padding: 0 1;
    }

    #menu-list, #cart-list, #expenses-list {
        height: auto;
        max-height: 10;
        border: tall $surface;
        padding: 0 1;
        margin-bottom: 1;
    }

    #orders-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #summary {
        border: tall $surface;
        padding: 0 1;
        margin-bottom: 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: auto;
    }

    .pane-title {
        text-style: bold;
    }
    """

    active_pane = reactive("menu")
    menu_index = reactive(0)
    cart_index = reactive(0)
    expense_index = reactive(0)

    BINDINGS = [
        Binding("ctrl+s", "place_order", "Place order", priority=True),
        Binding("ctrl+r", "reset_day", "Reset day", priority=True),
        Binding("ctrl+l", "clear_storage", "Clear storage", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, controller: ProfitController | None = None, export_dir: str | Path = EXPORT_DIR) -> None:
        super().__init__()
        self.controller = controller or ProfitController(SqliteStore(DB_PATH))
        self.export_dir = Path(export_dir)
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="left-pane"):
                yield Static(id="menu-title", classes="pane-title")
                yield Static(id="menu-list")
                yield Static(id="cart-title", classes="pane-title")
                yield Static(id="cart-list")
                yield Static(id="orders-title", classes="pane-title")
                yield Static(id="orders-list")
            with Vertical(id="right-pane"):
                yield Static("Today's Summary", classes="pane-title")
                yield Static(id="summary")
                yield Static(id="expenses-title", classes="pane-title")
                yield Static(id="expenses-list")
                yield Static(id="status-bar")

    def on_mount(self) -> None:
        self.controller.load()
        self._set_status(self.controller.last_storage_error or "Ready")
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        # While a modal is active, let the modal own keyboard handling.
        if isinstance(self.screen, ModalScreen):
            return

        if event.key in {"left", "right"}:
            self._cycle_pane(-1 if event.key == "left" else 1)
            event.stop()
            return

        if event.key in {"up", "down"}:
            self._move_selection(-1 if event.key == "up" else 1)
            event.stop()
            return

        if event.key == "enter":
            self._add_selected_to_cart()
            event.stop()
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        char = event.character
        if char == "+":
            self._adjust_selected_qty(1)
        elif char == "-":
            self._adjust_selected_qty(-1)
        elif char.lower() == "h":
            self._cycle_pane(-1)
        elif char.lower() == "l":
            self._cycle_pane(1)
        elif char.lower() == "j":
            self._move_selection(1)
        elif char.lower() == "k":
            self._move_selection(-1)
        elif char.lower() == "a":
            self._add_selected_to_cart()
        elif char.lower() == "n":
            self._open_new_form()
        elif char.lower() == "e":
            self._open_edit_menu_item()
        elif char.lower() == "d":
            self._delete_selected()
        elif char.lower() == "c":
            self.controller.clear_cart()
            self._set_status("Cart cleared")
            self._refresh_all()
        elif char.lower() == "s":
            self.controller.seed_sample()
            self.menu_index = self.cart_index = self.expense_index = 0
            self._set_status(self.controller.last_storage_error or "Sample menu loaded")
            self._refresh_all()
        elif char.lower() == "x":
            self._export_orders()
        else:
            return
        event.stop()

    # ----- actions -----

    def action_place_order(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if not self.controller.cart_lines():
            # Drop any lines whose menu item was deleted.
            self.controller.clear_cart()
            self._set_status("Cart is empty")
            self._refresh_all()
            return
        self.push_screen(FormModal("Place Order", ORDER_NOTE_FIELDS), self._on_order_note)

    def action_reset_day(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.push_screen(
            ConfirmModal("Reset Day", "Reset today's orders and expenses? This won't delete the menu."),
            self._on_reset_day_confirmed,
        )

    def action_clear_storage(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.push_screen(
            ConfirmModal("Clear All Storage", "Delete the menu, orders and expenses from local storage?"),
            self._on_clear_storage_confirmed,
        )

    # ----- modal callbacks -----

    def _on_order_note(self, values: FormValues | None) -> None:
        if values is None:
            self._set_status("Order cancelled")
            self._refresh_all()
            return
        order = self.controller.place_order(values.get("note", ""))
        if order is None:
            self._set_status("Nothing to order")
        else:
            self._set_status(
                self.controller.last_storage_error
                or f"Order {short_id(order.id)} placed: {format_money(order.subtotal)}"
            )
        self.cart_index = 0
        self._refresh_all()

    def _on_reset_day_confirmed(self, confirmed: bool | None) -> None:
        if not confirmed:
            self._set_status("Reset cancelled")
            self._refresh_all()
            return
        self.controller.reset_day()
        self.expense_index = 0
        self._set_status(self.controller.last_storage_error or "Day reset")
        self._refresh_all()

    def _on_clear_storage_confirmed(self, confirmed: bool | None) -> None:
        if not confirmed:
            self._set_status("Clear cancelled")
            self._refresh_all()
            return
        self.controller.clear_all_storage()
        self.active_pane = "menu"
        self.menu_index = self.cart_index = self.expense_index = 0
        self._set_status(self.controller.last_storage_error or "All storage cleared")
        self._refresh_all()

    def _on_menu_item_added(self, values: FormValues | None) -> None:
        if values is None:
            return
        fields = parse_menu_item_form(values)
        self.controller.add_menu_item(**fields)
        self.menu_index = len(self.controller.catalog) - 1
        self._set_status(self.controller.last_storage_error or f"Added {fields['name']}")
        self._refresh_all()

    def _on_expense_added(self, values: FormValues | None) -> None:
        if values is None:
            return
        name, amount = parse_expense_form(values)
        self.controller.add_expense(name, amount)
        self.expense_index = len(self.controller.expenses) - 1
        self._set_status(self.controller.last_storage_error or f"Expense {name} added")
        self._refresh_all()

    # ----- pane operations -----

    def _cycle_pane(self, delta: int) -> None:
        idx = PANES.index(self.active_pane)
        self.active_pane = PANES[(idx + delta) % len(PANES)]
        self._refresh_all()

    def _pane_size(self, pane: str) -> int:
        if pane == "menu":
            return len(self.controller.catalog)
        if pane == "cart":
            return len(self.controller.cart_lines())
        return len(self.controller.expenses)

    def _move_selection(self, delta: int) -> None:
        total = self._pane_size(self.active_pane)
        if total == 0:
            return
        if self.active_pane == "menu":
            self.menu_index = (self.menu_index + delta) % total
        elif self.active_pane == "cart":
            self.cart_index = (self.cart_index + delta) % total
        else:
            self.expense_index = (self.expense_index + delta) % total
        self._refresh_all()

    def _selected_menu_item_id(self) -> str | None:
        items = self.controller.catalog.items
        if not (0 <= self.menu_index < len(items)):
            return None
        return items[self.menu_index].id

    def _selected_cart_item(self) -> tuple[str, int] | None:
        lines = self.controller.cart_lines()
        if not (0 <= self.cart_index < len(lines)):
            return None
        item, qty = lines[self.cart_index]
        return item.id, qty

    def _selected_expense_id(self) -> str | None:
        expenses = self.controller.expenses
        if not (0 <= self.expense_index < len(expenses)):
            return None
        return expenses[self.expense_index].id

    def _add_selected_to_cart(self) -> None:
        if self.active_pane != "menu":
            return
        item_id = self._selected_menu_item_id()
        if item_id is None:
            return
        self.controller.add_to_cart(item_id)
        item = self.controller.catalog.get(item_id)
        self._set_status(f"Added {item.name} to cart" if item else "Added to cart")
        self._refresh_all()

    def _adjust_selected_qty(self, delta: int) -> None:
        if self.active_pane == "menu" and delta > 0:
            self._add_selected_to_cart()
            return
        if self.active_pane != "cart":
            return
        selected = self._selected_cart_item()
        if selected is None:
            return
        item_id, qty = selected
        self.controller.set_cart_qty(item_id, qty + delta)
        self._refresh_all()

    def _open_new_form(self) -> None:
        if self.active_pane == "expenses":
            self.push_screen(
                FormModal("Add Expense", EXPENSE_FIELDS, validate=validation_error(parse_expense_form)),
                self._on_expense_added,
            )
            return
        self.push_screen(
            FormModal("Add Menu Item", MENU_ITEM_FIELDS, validate=validation_error(parse_menu_item_form)),
            self._on_menu_item_added,
        )

    def _open_edit_menu_item(self) -> None:
        if self.active_pane != "menu":
            return
        item_id = self._selected_menu_item_id()
        item = self.controller.catalog.get(item_id) if item_id else None
        if item is None:
            return

        def _on_edited(values: FormValues | None) -> None:
            if values is None:
                return
            self.controller.update_menu_item(item.id, menu_item_edit_patch(values))
            self._set_status(self.controller.last_storage_error or f"Updated {values['name']}")
            self._refresh_all()

        self.push_screen(
            FormModal(
                "Edit Menu Item",
                MENU_ITEM_FIELDS,
                initial=menu_item_form_values(item),
                validate=validation_error(parse_menu_item_form),
            ),
            _on_edited,
        )

    def _delete_selected(self) -> None:
        if self.active_pane == "menu":
            item_id = self._selected_menu_item_id()
            if item_id is None:
                return
            self.controller.remove_menu_item(item_id)
            self._set_status(self.controller.last_storage_error or "Menu item deleted")
        elif self.active_pane == "cart":
            selected = self._selected_cart_item()
            if selected is None:
                return
            self.controller.set_cart_qty(selected[0], 0)
        else:
            expense_id = self._selected_expense_id()
            if expense_id is None:
                return
            self.controller.remove_expense(expense_id)
            self._set_status(self.controller.last_storage_error or "Expense deleted")
        self._refresh_all()

    def _export_orders(self) -> None:
        try:
            path = self.controller.write_orders_export(self.export_dir)
        except OSError as exc:
            logger.exception("order export failed")
            self._set_status(f"Export failed: {exc}")
        else:
            self._set_status(f"Exported {len(self.controller.orders)} order(s) to {path}")
        self._refresh_all()

    def _set_status(self, message: str) -> None:
        self.system_status = message

    # ----- rendering -----

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _clamp_indices(self) -> None:
        for pane, attr in (("menu", "menu_index"), ("cart", "cart_index"), ("expenses", "expense_index")):
            total = self._pane_size(pane)
            current = getattr(self, attr)
            if total == 0:
                setattr(self, attr, 0)
            elif current >= total:
                setattr(self, attr, total - 1)

    def _refresh_all(self) -> None:
        try:
            self.query_one("#status-bar", Static)
        except NoMatches:
            return
        self._clamp_indices()
        self._refresh_titles()
        self._refresh_menu()
        self._refresh_cart()
        self._refresh_orders()
        self._refresh_summary()
        self._refresh_expenses()
        self._refresh_status()

    def _refresh_titles(self) -> None:
        for pane in PANES:
            title = Text()
            if pane == self.active_pane:
                title.append("▶ ", style="bold #5fbf72")
            title.append(PANE_TITLES[pane])
            if pane == "cart":
                title.append(f"  Total {format_money(self.controller.cart_total())}", style="dim")
            self.query_one(f"#{pane}-title", Static).update(title)
        self.query_one("#orders-title", Static).update(f"Orders ({len(self.controller.orders)})")

    def _render_rows(self, widget: Static, rows: list[Text], selected: int | None, empty: str) -> None:
        if not rows:
            widget.update(empty)
            return

        visible_rows = self._visible_rows(widget)
        start, end = self._window_bounds(len(rows), visible_rows, selected)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == selected else "  "
            lines.append(pointer)
            lines.append_text(rows[idx])

        if end < len(rows):
            lines.append("\n⋮", style="dim")

        widget.update(lines)

    def _refresh_menu(self) -> None:
        rows = [format_menu_item(item) for item in self.controller.catalog]
        selected = self.menu_index if self.active_pane == "menu" else None
        self._render_rows(
            self.query_one("#menu-list", Static),
            rows,
            selected,
            "No menu items. Press n to add one or s for the sample menu.",
        )

    def _refresh_cart(self) -> None:
        rows = [format_cart_line(item, qty) for item, qty in self.controller.cart_lines()]
        selected = self.cart_index if self.active_pane == "cart" else None
        self._render_rows(
            self.query_one("#cart-list", Static),
            rows,
            selected,
            "Cart is empty. Add items from the menu.",
        )

    def _refresh_expenses(self) -> None:
        rows = [format_expense(expense) for expense in self.controller.expenses]
        selected = self.expense_index if self.active_pane == "expenses" else None
        self._render_rows(
            self.query_one("#expenses-list", Static),
            rows,
            selected,
            "No expenses recorded.",
        )

    def _refresh_orders(self) -> None:
        orders_widget = self.query_one("#orders-list", Static)
        orders = self.controller.orders
        if not orders:
            orders_widget.update("(no orders yet)")
            return
        lines = Text()
        for idx, order in enumerate(orders):
            if idx > 0:
                lines.append("\n")
            lines.append_text(format_order(order))
        orders_widget.update(lines)

    def _refresh_summary(self) -> None:
        summary = self.controller.summary()
        self.query_one("#summary", Static).update(format_summary(summary))
        self.sub_title = f"Net: {format_money(summary.net_profit)}"

    def _refresh_status(self) -> None:
        help_text = (
            "h/l pane  j/k move  Enter/a add  +/- qty  n new  e edit  d delete  c clear cart\n"
            "s sample  x export CSV  Ctrl+S order  Ctrl+R reset day  Ctrl+L clear storage  Ctrl+Q quit"
        )
        self.query_one("#status-bar", Static).update(f"{help_text}\n{self.system_status or 'Ready'}")
