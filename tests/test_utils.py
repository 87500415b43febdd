"""Unit tests for amount normalization and fixed-point formatting."""
from __future__ import annotations

import numbers
from decimal import Decimal
from fractions import Fraction

import pytest

from currency_modules.utils import log_exceptions, normalize_amount, number_format


# ---------------------------------------------------------------------------
# normalize_amount
# ---------------------------------------------------------------------------

class TestNormalizeAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, 0.0),
            ("", 0.0),
            ("$1,234.56", 1234.56),
            ("-42.5 EUR", -42.5),
            ("1 000 000", 1000000.0),
            (".5", 0.5),
            ("-.5", -0.5),
            ("12.", 12.0),
        ],
    )
    def test_strings(self, raw, expected):
        assert normalize_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "-", ".", "--5", "€", "CHF"])
    def test_unparseable_strings_are_zero(self, raw):
        assert normalize_amount(raw) == 0.0

    def test_longest_valid_prefix_wins(self):
        assert normalize_amount("1.2.3") == 1.2
        assert normalize_amount("5-3") == 5.0

    def test_numbers_pass_through(self):
        assert normalize_amount(7) == 7.0
        assert normalize_amount(-3.25) == -3.25
        assert normalize_amount(Decimal("1.25")) == 1.25
        assert normalize_amount(True) == 1.0
        assert normalize_amount(Fraction(3, 2)) == 1.5

    def test_other_real_types_pass_through(self):
        class Amount:
            def __init__(self, value):
                self._value = value

            def __float__(self):
                return float(self._value)

        numbers.Real.register(Amount)
        assert normalize_amount(Amount(1234.5)) == 1234.5

    def test_result_is_float(self):
        assert isinstance(normalize_amount(7), float)

    @pytest.mark.parametrize(
        "raw",
        [float("inf"), float("-inf"), float("nan"), 10 ** 400, "1" + "0" * 400, [1, 2], object()],
    )
    def test_degenerate_input_is_zero(self, raw):
        assert normalize_amount(raw) == 0.0


# ---------------------------------------------------------------------------
# number_format
# ---------------------------------------------------------------------------

class TestNumberFormat:
    def test_grouping_and_decimals(self):
        assert number_format(1234.56, 2) == "1,234.56"
        assert number_format(1234567.891, 3) == "1,234,567.891"

    def test_zero_decimals_omits_separator(self):
        assert number_format(1234.56, 0) == "1,235"

    def test_custom_separators(self):
        assert number_format(-1234.5, 2, ",", ".") == "-1.234,50"
        assert number_format(1234567.891, 3, ".", "") == "1234567.891"
        assert number_format(1234567.5, 1, ",", " ") == "1 234 567,5"

    def test_rounds_half_away_from_zero(self):
        assert number_format(1.005, 2) == "1.01"
        assert number_format(0.125, 2) == "0.13"
        assert number_format(-0.125, 2) == "-0.13"
        assert number_format(2.5, 0) == "3"

    def test_no_negative_zero(self):
        assert number_format(-0.001, 2) == "0.00"
        assert number_format(-0.4, 0) == "0"

    def test_small_numbers(self):
        assert number_format(0, 2) == "0.00"
        assert number_format(999, 4) == "999.0000"

    def test_large_numbers(self):
        assert number_format(1e30, 2) == "1,000,000,000,000,000,000,000,000,000,000.00"

    def test_negative_decimals_treated_as_zero(self):
        assert number_format(1234.56, -1) == "1,235"

    def test_non_finite_renders_zero(self):
        assert number_format(float("inf"), 2) == "0.00"


# ---------------------------------------------------------------------------
# log_exceptions
# ---------------------------------------------------------------------------

class TestLogExceptions:
    def test_swallows_by_default(self):
        with log_exceptions("Fehler"):
            raise RuntimeError("boom")

    def test_reraises_when_requested(self):
        with pytest.raises(RuntimeError, match="boom"):
            with log_exceptions("Fehler", continue_on_error=False):
                raise RuntimeError("boom")
