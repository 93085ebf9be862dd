"""Tests for pm_common.fixed_point — e6 integer arithmetic utilities."""

from src.pm_common.fixed_point import (
    I64_MAX,
    I64_MIN,
    calc_fee,
    ceil_div,
    e6_to_display,
    e6_to_float,
    fits_i64,
)


class TestCeilDiv:
    def test_exact(self) -> None:
        assert ceil_div(10, 5) == 2

    def test_rounds_up(self) -> None:
        assert ceil_div(11, 5) == 3

    def test_negative_numerator_rounds_toward_zero(self) -> None:
        # ceil(-11 / 5) = ceil(-2.2) = -2
        assert ceil_div(-11, 5) == -2


class TestCalcFee:
    def test_basic(self) -> None:
        # 52_495_844 * 25 / 10000 = 131_239.61 → 131_240
        assert calc_fee(52_495_844, 25) == 131_240

    def test_exact_no_rounding(self) -> None:
        assert calc_fee(1_000_000, 100) == 10_000

    def test_ceiling_rounds_up(self) -> None:
        assert calc_fee(1, 1) == 1

    def test_zero_fee_rate(self) -> None:
        assert calc_fee(6_500_000, 0) == 0

    def test_non_positive_amount(self) -> None:
        assert calc_fee(0, 25) == 0
        assert calc_fee(-100, 25) == 0


class TestFitsI64:
    def test_bounds(self) -> None:
        assert fits_i64(I64_MAX)
        assert fits_i64(I64_MIN)
        assert not fits_i64(I64_MAX + 1)
        assert not fits_i64(I64_MIN - 1)


class TestDisplay:
    def test_float(self) -> None:
        assert e6_to_float(650_000) == 0.65

    def test_basic(self) -> None:
        assert e6_to_display(1_500_000) == "$1.50"

    def test_zero(self) -> None:
        assert e6_to_display(0) == "$0.00"

    def test_negative(self) -> None:
        assert e6_to_display(-250_000) == "-$0.25"

    def test_large(self) -> None:
        assert e6_to_display(1_500_000_000) == "$1,500.00"

    def test_truncates_sub_cent(self) -> None:
        assert e6_to_display(19_999) == "$0.01"

    def test_whole_dollars(self) -> None:
        assert e6_to_display(7_000_000, decimals=0) == "$7"
