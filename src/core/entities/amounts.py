"""Rounding rules shared by every monetary and quantity field."""

import math

MONEY_PLACES = 2
QUANTITY_PLACES = 3

# Half a cent: two money values closer than this are considered equal.
MONEY_EPSILON = 0.005


def round_money(value: float) -> float:
    return round(float(value), MONEY_PLACES) + 0.0


def round_quantity(value: float) -> float:
    return round(float(value), QUANTITY_PLACES) + 0.0


def is_positive_finite(value: object) -> bool:
    """True for real numbers that are finite and strictly greater than zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def outstanding(grand_total: float, paid_amount: float) -> float:
    """Due amount for an invoice: never negative."""
    return round_money(max(0.0, grand_total - paid_amount))
