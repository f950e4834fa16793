# Overview: Pytest coverage for money tolerance and rounding helpers.

import pytest

from cloudbill.services.money import MONEY_EPSILON, round2, round_places, to_number, within_tolerance


class TestWithinTolerance:
    @pytest.mark.parametrize("a, b", [
        (10.0, 10.0),
        (10.0, 10.009),
        (10.009, 10.0),
        (0.1 + 0.2, 0.3),
        (-5.0, -5.005),
    ])
    def test_close_values_agree(self, a, b):
        assert within_tolerance(a, b)

    @pytest.mark.parametrize("a, b", [
        (10.0, 10.02),
        (10.0, 9.98),
        (27.0, 100.0),
    ])
    def test_distant_values_disagree(self, a, b):
        assert not within_tolerance(a, b)

    def test_exact_epsilon_difference_is_a_mismatch(self):
        """The comparison is strict: |a - b| == epsilon is not within tolerance."""
        assert MONEY_EPSILON == 0.01
        assert not within_tolerance(0.0, 0.01)
        assert not within_tolerance(0.01, 0.0)

    def test_custom_epsilon(self):
        assert within_tolerance(1.0, 1.4, epsilon=0.5)
        assert not within_tolerance(1.0, 1.5, epsilon=0.5)


class TestRound2:
    def test_rounds_half_up(self):
        assert round2(2.675) == 2.68
        assert round2(0.125) == 0.13
        assert round2(1.005) == 1.01

    def test_absorbs_float_drift(self):
        assert round2(27 - 0.1 * 27) == 24.3
        assert round2(0.1 + 0.2) == 0.3

    def test_negative_values(self):
        assert round2(-1.234) == -1.23

    def test_other_precisions(self):
        assert round_places(0.33335, 4) == 0.3334
        assert round_places(0.333, 4) == 0.333
        assert round_places(2.5, 0) == 3.0


class TestToNumber:
    @pytest.mark.parametrize("raw, expected", [
        (5, 5.0),
        (2.5, 2.5),
        ("10", 10.0),
        (" 3.25 ", 3.25),
    ])
    def test_numeric_values(self, raw, expected):
        assert to_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", True, [], {}, "nan", "inf"])
    def test_missing_or_non_numeric_is_zero(self, raw):
        assert to_number(raw) == 0.0
