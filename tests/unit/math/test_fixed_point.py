"""Tests for WAD fixed-point primitives and LogExpMath exp / ln."""

from decimal import Decimal

import pytest

from rmm.math.fixed_point import (
    InvalidExponent,
    XOutOfBounds,
    div_trunc,
    div_wad_down,
    div_wad_signed,
    div_wad_up,
    exp,
    ln,
    mul_div_down,
    mul_div_up,
    mul_wad_down,
    mul_wad_signed,
    mul_wad_up,
    sqrt_wad,
)
from rmm.safe_int import UINT256_MAX, DivisionByZero, Int256Overflow, Uint256Overflow
from tests.helpers import WAD


class TestUnsignedRounding:
    """mul/div primitives round in the requested direction."""

    def test_mul_wad_exact(self):
        """Exact products are identical in both directions."""
        assert mul_wad_down(3 * WAD // 2, 2 * WAD) == 3 * WAD
        assert mul_wad_up(3 * WAD // 2, 2 * WAD) == 3 * WAD

    def test_mul_wad_rounding(self):
        """1 wei * 1 wei rounds to 0 down and 1 up."""
        assert mul_wad_down(1, 1) == 0
        assert mul_wad_up(1, 1) == 1

    def test_mul_wad_up_zero(self):
        """Rounding up never turns zero into one."""
        assert mul_wad_up(0, WAD) == 0

    def test_div_wad_rounding(self):
        """1/3 is ...333 down and ...334 up."""
        assert div_wad_down(WAD, 3 * WAD) == 333_333_333_333_333_333
        assert div_wad_up(WAD, 3 * WAD) == 333_333_333_333_333_334

    def test_mul_div_full_width_intermediate(self):
        """The product may exceed uint256 as long as the result fits."""
        assert mul_div_down(UINT256_MAX, UINT256_MAX, UINT256_MAX) == UINT256_MAX
        assert mul_div_up(UINT256_MAX, 2, 2) == UINT256_MAX

    def test_result_overflow_raises(self):
        """A result past uint256 raises instead of wrapping."""
        with pytest.raises(Uint256Overflow):
            mul_div_down(UINT256_MAX, 2, 1)

    def test_negative_operand_raises(self):
        """Unsigned primitives reject negative inputs."""
        with pytest.raises(Uint256Overflow):
            mul_wad_down(-1, WAD)
        with pytest.raises(Uint256Overflow):
            div_wad_up(WAD, -WAD)

    def test_division_by_zero_raises(self):
        """Zero denominators raise DivisionByZero (a ZeroDivisionError)."""
        with pytest.raises(DivisionByZero):
            div_wad_down(WAD, 0)
        with pytest.raises(ZeroDivisionError):
            mul_div_up(1, 1, 0)


class TestSignedPrimitives:
    """Signed mul/div truncate toward zero."""

    def test_mul_wad_signed(self):
        """Signs multiply as expected."""
        assert mul_wad_signed(-3 * WAD, WAD // 2) == -3 * WAD // 2
        assert mul_wad_signed(-WAD, -WAD) == WAD

    def test_mul_wad_signed_truncates_toward_zero(self):
        """A tiny negative product truncates to 0, not -1."""
        assert mul_wad_signed(-1, 1) == 0

    def test_div_wad_signed(self):
        """-1/3 truncates toward zero."""
        assert div_wad_signed(-WAD, 3 * WAD) == -333_333_333_333_333_333

    def test_div_wad_signed_by_zero(self):
        """Signed division by zero raises."""
        with pytest.raises(DivisionByZero):
            div_wad_signed(WAD, 0)

    def test_int256_overflow(self):
        """Results outside int256 raise."""
        with pytest.raises(Int256Overflow):
            mul_wad_signed(2**254, 4 * WAD)


class TestSqrt:
    """sqrt_wad rounds down."""

    def test_perfect_squares(self):
        """Perfect squares are exact."""
        assert sqrt_wad(4 * WAD) == 2 * WAD
        assert sqrt_wad(WAD // 4) == WAD // 2
        assert sqrt_wad(0) == 0

    def test_sqrt_two(self):
        """sqrt(2) truncated to 18 decimals."""
        assert sqrt_wad(2 * WAD) == 1_414_213_562_373_095_048


class TestExpLn:
    """Natural exponential and logarithm."""

    def test_exp_zero(self):
        """e^0 is exactly one."""
        assert exp(0) == WAD

    def test_exp_one(self):
        """e^1 matches Euler's number."""
        assert abs(exp(WAD) - 2_718_281_828_459_045_235) <= 10**5

    def test_exp_negative(self):
        """e^-1 is the reciprocal of e."""
        assert abs(exp(-WAD) - 367_879_441_171_442_321) <= 10**5

    def test_exp_out_of_range(self):
        """Exponents beyond the supported range raise."""
        with pytest.raises(InvalidExponent):
            exp(131 * WAD)
        with pytest.raises(InvalidExponent):
            exp(-42 * WAD)

    def test_ln_one(self):
        """ln(1) is exactly zero."""
        assert ln(WAD) == 0

    def test_ln_two(self):
        """ln(2) matches the known constant."""
        assert abs(ln(2 * WAD) - 693_147_180_559_945_309) <= 10**5

    def test_ln_near_one_uses_precise_path(self):
        """ln(1.05) is accurate to within a few wei."""
        expected = int(Decimal("1.05").ln() * WAD)
        assert abs(ln(105 * WAD // 100) - expected) <= 10

    def test_ln_below_one_is_negative(self):
        """ln(x) < 0 for 0 < x < 1."""
        assert ln(WAD // 2) < 0

    def test_ln_non_positive_raises(self):
        """ln is undefined at and below zero."""
        with pytest.raises(XOutOfBounds):
            ln(0)
        with pytest.raises(XOutOfBounds):
            ln(-WAD)

    def test_exp_ln_inverse(self):
        """exp(ln(x)) recovers x to high relative precision."""
        for x in (WAD // 10, 3 * WAD, 2000 * WAD):
            assert abs(exp(ln(x)) - x) <= x // 10**12


class TestDivTrunc:
    """Signed division truncates toward zero."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [(7, 3, 2), (-7, 3, -2), (7, -3, -2), (-7, -3, 2), (0, -5, 0), (6, 3, 2)],
    )
    def test_truncates_toward_zero(self, a, b, expected):
        """Unlike //, the quotient of mixed signs rounds up toward zero."""
        assert div_trunc(a, b) == expected

    def test_division_by_zero(self):
        """A zero divisor raises DivisionByZero."""
        with pytest.raises(DivisionByZero):
            div_trunc(1, 0)
