"""Form field layouts and parsing of submitted form values."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable

from profit_manager.form_modal import FormField, FormValues
from profit_manager.models import MenuItem
from profit_manager.money import parse_money

MENU_ITEM_FIELDS = [
    FormField("name", "Name", required=True),
    FormField("price", "Price (sale)", required=True),
    FormField("cost", "Cost (COGS)", required=True),
    FormField("inventory", "Inventory (optional)"),
]

EXPENSE_FIELDS = [
    FormField("name", "Expense name", required=True),
    FormField("amount", "Amount", required=True),
]

ORDER_NOTE_FIELDS = [
    FormField("note", "Note (optional)"),
]


def parse_inventory(text: str) -> int | None:
    """Blank means untracked; otherwise a whole number of at least zero."""
    raw = text.strip()
    if not raw:
        return None
    try:
        count = int(raw)
    except ValueError as exc:
        raise ValueError("Inventory must be a whole number.") from exc
    if count < 0:
        raise ValueError("Inventory cannot be negative.")
    return count


def parse_menu_item_form(values: FormValues) -> dict[str, Any]:
    """Turn submitted menu item text into catalog fields.

    Raises ValueError naming the first bad field.
    """
    name = values.get("name", "").strip()
    if not name:
        raise ValueError("Name is required.")
    try:
        price = parse_money(values.get("price", ""))
    except ValueError as exc:
        raise ValueError(f"Price: {exc}") from exc
    try:
        cost = parse_money(values.get("cost", ""))
    except ValueError as exc:
        raise ValueError(f"Cost: {exc}") from exc
    inventory = parse_inventory(values.get("inventory", ""))
    return {"name": name, "price": price, "cost": cost, "inventory": inventory}


def menu_item_edit_patch(values: FormValues) -> dict[str, Any]:
    """Parse an edit form. A blank inventory leaves the current count as it is."""
    patch = parse_menu_item_form(values)
    if patch["inventory"] is None:
        del patch["inventory"]
    return patch


def parse_expense_form(values: FormValues) -> tuple[str, Decimal]:
    name = values.get("name", "").strip()
    if not name:
        raise ValueError("Expense name is required.")
    try:
        amount = parse_money(values.get("amount", ""))
    except ValueError as exc:
        raise ValueError(f"Amount: {exc}") from exc
    return name, amount


def menu_item_form_values(item: MenuItem) -> FormValues:
    """Pre-fill values for editing an existing item."""
    return {
        "name": item.name,
        "price": str(item.price),
        "cost": str(item.cost),
        "inventory": "" if item.inventory is None else str(item.inventory),
    }


def validation_error(parser: Callable[[FormValues], Any]) -> Callable[[FormValues], str | None]:
    """Adapt a parser into a form validator returning the error text, if any."""

    def _validate(values: FormValues) -> str | None:
        try:
            parser(values)
        except ValueError as exc:
            return str(exc)
        return None

    return _validate
