"""Tests for rounding helpers."""

import math

import pytest

from src.core.entities.amounts import (
    is_positive_finite,
    outstanding,
    round_money,
    round_quantity,
)


class TestRounding:
    def test_round_money_two_places(self):
        assert round_money(10.456) == 10.46
        assert round_money(0.1 + 0.2) == 0.3

    def test_round_money_has_no_negative_zero(self):
        assert math.copysign(1.0, round_money(-0.001)) == 1.0

    def test_round_quantity_three_places(self):
        assert round_quantity(1.23456) == 1.235


class TestIsPositiveFinite:
    @pytest.mark.parametrize("value", [1, 0.001, 50.5])
    def test_accepts_positive_numbers(self, value):
        assert is_positive_finite(value)

    @pytest.mark.parametrize(
        "value", [0, -1, float("nan"), float("inf"), "5", None, True]
    )
    def test_rejects_everything_else(self, value):
        assert not is_positive_finite(value)


class TestOutstanding:
    def test_due_is_total_minus_paid(self):
        assert outstanding(1000.0, 400.0) == 600.0

    def test_overpayment_clamps_to_zero(self):
        assert outstanding(1000.0, 1200.0) == 0.0
