"""CSV export of the order ledger."""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from profit_manager.constant import ORDERS_CSV_FILENAME, ORDERS_CSV_HEADER
from profit_manager.models import Order


def export_orders_csv(orders: Iterable[Order]) -> str:
    """Render one quoted row per (order, line item) pair under a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(ORDERS_CSV_HEADER)
    for order in orders:
        for line in order.items:
            writer.writerow(
                [
                    order.id,
                    order.timestamp,
                    line.name,
                    line.price,
                    line.cost,
                    line.qty,
                    order.subtotal,
                    order.cogs,
                ]
            )
    return buffer.getvalue().removesuffix("\n")


def export_filename(day: date) -> str:
    return ORDERS_CSV_FILENAME.format(day=day.isoformat())
