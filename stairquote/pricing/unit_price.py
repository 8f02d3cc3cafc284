"""
Unit price for one tread, riser or stringer.

    unit = (base + length_rate * length + width_rate * width + mitre) * multiplier

Computed in Decimal and rounded half-up to cents exactly once, on the final
unit price. Line totals are unit price x whole quantity, so they stay exact.
"""

from decimal import Decimal, ROUND_HALF_UP

from .domain import PricingRule, to_decimal
from .errors import InvalidDimension

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_currency(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def check_dimension(field: str, value, allow_zero: bool = True) -> Decimal:
    """Return value as Decimal, or raise InvalidDimension. Never clamps."""
    value = to_decimal(value)
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidDimension(field, value, allow_zero=allow_zero)
    return value


def unit_price(rule: PricingRule, length, width, mitred: bool = True) -> Decimal:
    """Price a single board against one rule. Zero dimensions are valid."""
    length = check_dimension("length", length)
    width = check_dimension("width", width)
    raw = (
        rule.base_price
        + rule.length_charge_rate * length
        + rule.width_charge_rate * width
        + (rule.mitre_charge if mitred else ZERO)
    ) * rule.material_multiplier
    return round_currency(raw)


def line_total(price: Decimal, quantity: int) -> Decimal:
    if quantity < 1:
        raise InvalidDimension("quantity", quantity, allow_zero=False)
    return price * quantity
