"""
Tests for money parsing and service-order totals.
"""
from dataclasses import dataclass
from decimal import Decimal

import pytest

from oficina.services.totals import D, line_subtotal, order_total, parse_money, parts_total


@dataclass
class Line:
    price: Decimal
    quantity: int


class TestParseMoney:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("35,90", Decimal("35.90")),
            ("R$ 1.234,56", Decimal("1234.56")),
            ("1234.56", Decimal("1234.56")),
            ("1.234", Decimal("1234.00")),
            ("  80 ", Decimal("80.00")),
            (150, Decimal("150.00")),
            (25.5, Decimal("25.50")),
        ],
    )
    def test_parses_user_input(self, raw, expected):
        assert parse_money(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "R$", "NaN", "Infinity", True])
    def test_invalid_input_is_none(self, raw):
        assert parse_money(raw) is None

    def test_rounds_to_cents(self):
        assert parse_money("10,005") == Decimal("10.01")


class TestTotals:
    def test_d_treats_none_as_zero(self):
        assert D(None) == Decimal("0.00")

    def test_line_subtotal(self):
        assert line_subtotal(Decimal("35.90"), 2) == Decimal("71.80")

    def test_parts_total_of_no_lines_is_zero(self):
        assert parts_total([]) == Decimal("0.00")

    def test_parts_total_sums_lines(self):
        lines = [Line(Decimal("35.90"), 2), Line(Decimal("25.50"), 1)]
        assert parts_total(lines) == Decimal("97.30")

    def test_order_total_adds_labor(self):
        lines = [Line(Decimal("35.90"), 2), Line(Decimal("25.50"), 1)]
        assert order_total(lines, "150,00") == Decimal("247.30")

    @pytest.mark.parametrize("labor", [None, "", "abc"])
    def test_order_total_with_invalid_labor_counts_parts_only(self, labor):
        assert order_total([Line(Decimal("10.00"), 3)], labor) == Decimal("30.00")
