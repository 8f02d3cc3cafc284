"""
Unit price tests — one board against one rule.

Tests:
1-3.  Formula and rounding
4-5.  Material multiplier and mitre charge
6-8.  Dimension checks and line totals
"""

from decimal import Decimal

import pytest

from stairquote.pricing.domain import BoardType, PricingRule
from stairquote.pricing.errors import InvalidDimension, InvalidOrder
from stairquote.pricing.unit_price import line_total, round_currency, unit_price


def _rule(base="0", length="0", width="0", mitre="0", multiplier="1"):
    return PricingRule(
        base_price=Decimal(base),
        length_charge_rate=Decimal(length),
        width_charge_rate=Decimal(width),
        mitre_charge=Decimal(mitre),
        material_multiplier=Decimal(multiplier),
        board_type=BoardType.TREAD,
        material_id=1,
    )


# ============================================================
# Formula and rounding
# ============================================================

def test_unit_price_formula_exact_cents():
    """10 + 2*40.75 + 3*11.25 = 125.25 with no drift."""
    rule = _rule(base="10", length="2", width="3")
    price = unit_price(rule, Decimal("40.75"), Decimal("11.25"))
    assert price == Decimal("125.25")
    assert str(price) == "125.25"


def test_unit_price_rounds_half_up():
    """0.125 rounds to 0.13, not banker's 0.12."""
    rule = _rule(length="1")
    assert unit_price(rule, Decimal("0.125"), Decimal("0")) == Decimal("0.13")
    assert round_currency(Decimal("2.345")) == Decimal("2.35")
    assert round_currency(Decimal("2.344")) == Decimal("2.34")


def test_unit_price_accepts_floats_without_binary_noise():
    rule = _rule(length="1")
    assert unit_price(rule, 0.1 + 0.2, 0) == Decimal("0.30")


# ============================================================
# Multiplier and mitre
# ============================================================

def test_material_multiplier_scales_whole_price():
    """(10 + 5 mitre) * 1.35 = 20.25"""
    rule = _rule(base="10", mitre="5", multiplier="1.35")
    assert unit_price(rule, 0, 0, mitred=True) == Decimal("20.25")


def test_mitre_charge_skipped_when_not_mitred():
    rule = _rule(base="10", mitre="5", multiplier="1.35")
    assert unit_price(rule, 0, 0, mitred=False) == Decimal("13.50")


# ============================================================
# Dimension checks and line totals
# ============================================================

def test_zero_dimensions_are_valid():
    rule = _rule(base="7.50", length="3", width="4")
    assert unit_price(rule, Decimal("0"), Decimal("0")) == Decimal("7.50")


def test_negative_dimension_rejected():
    rule = _rule(base="10")
    with pytest.raises(InvalidDimension) as exc:
        unit_price(rule, Decimal("-1"), Decimal("5"))
    assert exc.value.field == "length"
    assert isinstance(exc.value, InvalidOrder)

    with pytest.raises(InvalidDimension):
        unit_price(rule, Decimal("5"), Decimal("-0.01"))


def test_line_total_is_unit_times_quantity():
    assert line_total(Decimal("81.40"), 2) == Decimal("162.80")
    with pytest.raises(InvalidDimension):
        line_total(Decimal("81.40"), 0)


def test_negative_rates_rejected_at_construction():
    with pytest.raises(ValueError):
        _rule(length="-0.5")
    with pytest.raises(ValueError):
        _rule(multiplier="-1")
