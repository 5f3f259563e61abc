"""
Tests for ProfitController: state ownership, saving after every change,
and fail-open loading.
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from profit_manager.constant import EXPENSES_KEY, MENU_KEY, ORDERS_KEY
from profit_manager.controller import ProfitController
from profit_manager.persistence import MemoryStore, StorageError


class FailingSaveStore(MemoryStore):
    def save(self, key, value):
        raise StorageError("disk full", key=key)


def _stored(store, key):
    return json.loads(store.raw[key])


def test_menu_changes_are_saved_immediately(controller, store):
    item_id = controller.add_menu_item("Soup", Decimal("4.00"), Decimal("1.20"), inventory=5)
    assert _stored(store, MENU_KEY) == [
        {"id": item_id, "name": "Soup", "price": "4.00", "cost": "1.20", "inventory": 5}
    ]

    controller.update_menu_item(item_id, {"price": Decimal("4.50")})
    assert _stored(store, MENU_KEY)[0]["price"] == "4.50"

    controller.remove_menu_item(item_id)
    assert _stored(store, MENU_KEY) == []


def test_untracked_inventory_is_not_written(controller, store):
    controller.add_menu_item("Water", Decimal("1"), Decimal("0"))
    assert "inventory" not in _stored(store, MENU_KEY)[0]


def test_cart_changes_are_not_persisted(controller, store):
    item_id = controller.add_menu_item("Soup", Decimal("4"), Decimal("1"))
    saved_before = dict(store.raw)

    controller.add_to_cart(item_id)
    controller.set_cart_qty(item_id, 3)

    assert store.raw == saved_before
    assert controller.cart_total() == Decimal("12")


def test_place_order_saves_menu_and_orders(controller, store):
    burger = controller.add_menu_item("Chicken Burger", Decimal("7.5"), Decimal("3.0"), inventory=50)
    fries = controller.add_menu_item("Fries", Decimal("3.0"), Decimal("0.6"))
    controller.add_to_cart(burger)
    controller.add_to_cart(burger)
    controller.add_to_cart(fries)

    order = controller.place_order("  no onions ")

    assert order.subtotal == Decimal("18.0")
    assert order.cogs == Decimal("6.6")
    assert order.note == "no onions"
    assert order.timestamp == "2025-03-14T12:30:00+00:00"
    assert controller.cart.is_empty()
    assert controller.catalog.get(burger).inventory == 48
    assert controller.catalog.get(fries).inventory is None

    stored_orders = _stored(store, ORDERS_KEY)
    assert stored_orders[0]["subtotal"] == "18.0"
    assert stored_orders[0]["items"][0] == {
        "itemId": burger,
        "name": "Chicken Burger",
        "price": "7.5",
        "cost": "3.0",
        "qty": 2,
    }
    assert _stored(store, MENU_KEY)[0]["inventory"] == 48


def test_place_order_on_empty_cart_writes_nothing(controller, store):
    assert controller.place_order() is None
    assert ORDERS_KEY not in store.raw


def test_state_survives_restart(store, id_factory, clock):
    first = ProfitController(store, id_factory=id_factory, clock=clock)
    first.load()
    item_id = first.add_menu_item("Soup", Decimal("4"), Decimal("1"), inventory=2)
    first.add_to_cart(item_id)
    first.place_order("window")
    first.add_expense("Gas", Decimal("5.25"))

    second = ProfitController(store, id_factory=id_factory, clock=clock)
    second.load()

    assert second.catalog.items == first.catalog.items
    assert second.orders == first.orders
    assert second.expenses == first.expenses
    assert second.cart.is_empty()
    assert second.summary() == first.summary()


def test_summary_matches_net_profit_formula(controller):
    item_id = controller.add_menu_item("Soup", Decimal("4.00"), Decimal("1.50"))
    controller.add_to_cart(item_id)
    controller.add_to_cart(item_id)
    controller.place_order()
    controller.add_expense("Ice", Decimal("2.25"))

    summary = controller.summary()

    assert summary.total_revenue == Decimal("8.00")
    assert summary.total_cogs == Decimal("3.00")
    assert summary.gross_profit == Decimal("5.00")
    assert summary.net_profit == Decimal("2.75")


def test_remove_expense(controller, store):
    rent = controller.add_expense("Rent", Decimal("100"))
    controller.add_expense("Gas", Decimal("10"))

    assert controller.remove_expense(rent) is True
    assert [row["name"] for row in _stored(store, EXPENSES_KEY)] == ["Gas"]
    assert controller.remove_expense("missing") is False


def test_reset_day_keeps_catalog(controller, store):
    item_id = controller.add_menu_item("Soup", Decimal("4"), Decimal("1"))
    controller.add_to_cart(item_id)
    controller.place_order()
    controller.add_expense("Gas", Decimal("10"))
    menu_before = controller.catalog.items

    controller.reset_day()

    assert controller.orders == []
    assert controller.expenses == []
    assert controller.catalog.items == menu_before
    assert _stored(store, ORDERS_KEY) == []
    assert _stored(store, EXPENSES_KEY) == []
    assert len(_stored(store, MENU_KEY)) == 1


def test_seed_sample_replaces_menu_and_clears_ledgers(controller, store):
    controller.add_menu_item("Soup", Decimal("4"), Decimal("1"))
    controller.add_expense("Gas", Decimal("10"))

    controller.seed_sample()

    assert [item.name for item in controller.catalog] == ["Chicken Burger", "Fries", "Coke"]
    burger = controller.catalog.items[0]
    assert (burger.price, burger.cost, burger.inventory) == (Decimal("7.50"), Decimal("3.00"), 50)
    assert controller.orders == []
    assert controller.expenses == []
    assert len(_stored(store, MENU_KEY)) == 3


def test_clear_all_storage_restarts_empty(controller, store):
    controller.seed_sample()
    controller.add_to_cart(controller.catalog.items[0].id)

    controller.clear_all_storage()

    assert store.raw == {}
    assert len(controller.catalog) == 0
    assert controller.orders == []
    assert controller.expenses == []
    assert controller.cart.is_empty()


def test_load_treats_malformed_json_as_empty(id_factory, clock):
    store = MemoryStore({MENU_KEY: "{oops", ORDERS_KEY: '{"not": "a list"}', EXPENSES_KEY: "[]"})
    ctrl = ProfitController(store, id_factory=id_factory, clock=clock)

    ctrl.load()

    assert len(ctrl.catalog) == 0
    assert ctrl.orders == []
    assert ctrl.expenses == []


def test_load_skips_malformed_records_and_accepts_numbers(id_factory, clock):
    menu = [
        {"id": 1, "name": "Chicken Burger", "price": 7.5, "cost": 3.0, "inventory": 50},
        {"id": 2, "name": "Broken"},
        "not even a dict",
    ]
    expenses = [{"id": 9, "name": "Gas", "amount": 0.1}]
    store = MemoryStore({MENU_KEY: json.dumps(menu), EXPENSES_KEY: json.dumps(expenses)})
    ctrl = ProfitController(store, id_factory=id_factory, clock=clock)

    ctrl.load()

    assert [(item.id, item.price) for item in ctrl.catalog] == [("1", Decimal("7.5"))]
    assert ctrl.expenses[0].amount == Decimal("0.1")


def test_failed_save_keeps_memory_state(id_factory, clock):
    ctrl = ProfitController(FailingSaveStore(), id_factory=id_factory, clock=clock)
    ctrl.load()

    item_id = ctrl.add_menu_item("Soup", Decimal("4"), Decimal("1"))

    assert ctrl.catalog.get(item_id) is not None
    assert "disk full" in ctrl.last_storage_error


def test_clear_all_twice_is_harmless(controller):
    controller.reset_day()
    controller.reset_day()
    assert controller.orders == []
    assert controller.expenses == []


def test_write_orders_export(controller, tmp_path):
    item_id = controller.add_menu_item("Soup", Decimal("4"), Decimal("1"))
    controller.add_to_cart(item_id)
    controller.place_order()

    path = controller.write_orders_export(tmp_path / "exports")

    assert path.name == "orders_2025-03-14.csv"
    rows = path.read_text(encoding="utf-8").split("\n")
    assert len(rows) == 2
    assert rows[1].startswith('"id-2","2025-03-14T12:30:00+00:00","Soup"')


def test_write_orders_export_with_explicit_day(controller, tmp_path):
    path = controller.write_orders_export(tmp_path, day=date(2024, 1, 2))
    assert path.name == "orders_2024-01-02.csv"
    assert path.read_text(encoding="utf-8").count("\n") == 0


@pytest.mark.parametrize("qty", [0, -1])
def test_set_cart_qty_non_positive_drops_line(controller, qty):
    item_id = controller.add_menu_item("Soup", Decimal("4"), Decimal("1"))
    controller.add_to_cart(item_id)
    controller.set_cart_qty(item_id, qty)
    assert controller.cart_lines() == []


INFINITE_QTY_ORDER = (
    ', {"id": "o4", "timestamp": "t", "subtotal": "0", "cogs": "0",'
    ' "items": [{"itemId": "b", "name": "Tea", "price": "2", "cost": "0.5", "qty": Infinity}]}]'
)


def test_load_skips_records_with_infinite_or_fractional_counts(id_factory, clock):
    menu = (
        '[{"id": "a", "name": "Soup", "price": "4", "cost": "1", "inventory": Infinity},'
        ' {"id": "b", "name": "Tea", "price": "2", "cost": "0.5", "inventory": 3}]'
    )
    line = {"itemId": "b", "name": "Tea", "price": "2", "cost": "0.5"}
    orders = [
        {"id": "o1", "timestamp": "t", "items": [dict(line, qty=2.7)], "subtotal": "5.4", "cogs": "1.35"},
        {"id": "o2", "timestamp": "t", "items": [dict(line, qty=0)], "subtotal": "0", "cogs": "0"},
        {"id": "o3", "timestamp": "t", "items": [dict(line, qty=2.0)], "subtotal": "4", "cogs": "1"},
    ]
    store = MemoryStore({MENU_KEY: menu, ORDERS_KEY: json.dumps(orders)[:-1] + INFINITE_QTY_ORDER})
    ctrl = ProfitController(store, id_factory=id_factory, clock=clock)

    ctrl.load()

    assert [item.id for item in ctrl.catalog] == ["b"]
    assert [order.id for order in ctrl.orders] == ["o3"]
    assert ctrl.orders[0].items[0].qty == 2


def test_load_treats_deeply_nested_json_as_empty(id_factory, clock):
    store = MemoryStore({ORDERS_KEY: "[" * 100000 + "]" * 100000})
    ctrl = ProfitController(store, id_factory=id_factory, clock=clock)

    ctrl.load()

    assert ctrl.orders == []
