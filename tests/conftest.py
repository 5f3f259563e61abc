"""
Pytest configuration and shared fixtures.

The controller fixtures use the in-memory store, a counting id factory and
a fixed clock so ids and timestamps are predictable.
"""

import itertools
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to sys.path so profit_manager imports without installing.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from profit_manager.catalog import Catalog  # noqa: E402
from profit_manager.controller import ProfitController  # noqa: E402
from profit_manager.persistence import MemoryStore  # noqa: E402

FIXED_NOW = datetime(2025, 3, 14, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def controller(store, id_factory, clock):
    ctrl = ProfitController(store, id_factory=id_factory, clock=clock)
    ctrl.load()
    return ctrl


@pytest.fixture
def catalog(id_factory):
    return Catalog(id_factory=id_factory)


@pytest.fixture
def burger_and_fries(catalog):
    """Item A = burger (tracked stock 50), item B = fries (untracked)."""
    burger = catalog.add("Chicken Burger", Decimal("7.5"), Decimal("3.0"), inventory=50)
    fries = catalog.add("Fries", Decimal("3.0"), Decimal("0.6"))
    return burger, fries
