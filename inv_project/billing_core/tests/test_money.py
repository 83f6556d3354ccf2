from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from billing_core.money import format_money, round2, to_decimal


def test_round2_is_half_up():
    assert round2(Decimal("2.345")) == Decimal("2.35")
    assert round2(Decimal("2.344")) == Decimal("2.34")
    assert round2("13.5") == Decimal("13.50")


def test_float_input_keeps_its_decimal_digits():
    # 19.99 as a float must not turn into 19.989999...
    assert to_decimal(19.99) == Decimal("19.99")


@pytest.mark.parametrize("bad", [None, "", "abc", True, "NaN", "Infinity"])
def test_to_decimal_rejects_non_numbers(bad):
    with pytest.raises(ValidationError):
        to_decimal(bad, "amount")


def test_format_money_always_two_places():
    assert format_money(Decimal("5")) == "5.00"
    assert format_money(Decimal("0.105")) == "0.11"
    assert format_money(None) is None


@pytest.mark.parametrize("huge", ["1e30", "-1e30", Decimal("12345678901234567")])
def test_to_decimal_rejects_amounts_too_large_to_store(huge):
    with pytest.raises(ValidationError):
        to_decimal(huge, "amount")


def test_largest_storable_amount_is_accepted():
    assert to_decimal("9999999999999999.99") == Decimal("9999999999999999.99")


def test_round2_overflow_is_a_validation_error():
    with pytest.raises(ValidationError):
        round2(Decimal("1e40"))
