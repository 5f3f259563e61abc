from decimal import Decimal

import pytest

from profit_manager.money import format_money, parse_money, round_money, sum_money


def test_parse_money_accepts_strings_and_numbers():
    assert parse_money("7.50") == Decimal("7.50")
    assert parse_money(" $3 ") == Decimal("3")
    assert parse_money(2) == Decimal("2")
    # Floats go through str() so 0.6 stays 0.6.
    assert parse_money(0.6) == Decimal("0.6")


@pytest.mark.parametrize("bad", ["", "   ", "abc", "NaN", "Infinity", None, True, [1]])
def test_parse_money_rejects_non_amounts(bad):
    with pytest.raises(ValueError):
        parse_money(bad)


def test_parse_money_keeps_negative_values():
    assert parse_money("-1.25") == Decimal("-1.25")


def test_repeated_addition_does_not_drift():
    total = sum_money(Decimal("0.1") for _ in range(10))
    assert total == Decimal("1.0")


def test_round_money_half_up():
    assert round_money(Decimal("2.005")) == Decimal("2.01")
    assert round_money(Decimal("2.004")) == Decimal("2.00")


def test_format_money():
    assert format_money(Decimal("18")) == "$18.00"
    assert format_money(Decimal("6.6")) == "$6.60"
    assert format_money(Decimal("-1.2")) == "-$1.20"
    assert format_money(Decimal("-0.001")) == "$0.00"


@pytest.mark.parametrize("huge", ["1e30", "12345678901234567890123456789", Decimal("-1E+12")])
def test_parse_money_rejects_amounts_too_large(huge):
    with pytest.raises(ValueError, match="too large"):
        parse_money(huge)


def test_format_money_handles_totals_beyond_default_precision():
    assert format_money(Decimal("1e30")) == "$1" + "0" * 30 + ".00"
    assert format_money(Decimal("1e-30")) == "$0.00"
