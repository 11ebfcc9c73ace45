"""WAD fixed-point math library.

18-decimal fixed-point arithmetic with explicit rounding direction, plus the
natural exponential and logarithm used by the pricing formulas. The exp/ln
routines follow the digit-extraction scheme of Balancer's LogExpMath.sol:
https://github.com/balancer-labs/balancer-v2-monorepo/blob/6c9e24e22d0c46cca6dd15861d3d33da61a60b98/pkg/solidity-utils/contracts/math/LogExpMath.sol

All values are stored as integers scaled by 10^18. Products are formed at
full width before dividing, so only the final result is range-checked.
"""

from __future__ import annotations

import math

from rmm.safe_int import DivisionByZero, to_int256, to_uint256

__all__ = [
    # Errors
    "LogExpMathError",
    "XOutOfBounds",
    "InvalidExponent",
    # Unsigned primitives
    "mul_div_down",
    "mul_div_up",
    "mul_wad_down",
    "mul_wad_up",
    "div_wad_down",
    "div_wad_up",
    "sqrt_wad",
    # Signed primitives
    "div_trunc",
    "mul_wad_signed",
    "div_wad_signed",
    # Transcendentals
    "exp",
    "ln",
    # Constants
    "MIN_NATURAL_EXPONENT",
    "MAX_NATURAL_EXPONENT",
    "ONE_18",
    "ONE_20",
    "ONE_36",
]

# =============================================================================
# Constants (matching Solidity exactly)
# =============================================================================

ONE_18 = 10**18
ONE_20 = 10**20
ONE_36 = 10**36

MAX_NATURAL_EXPONENT = 130 * ONE_18  # e^130 is the max we can handle
MIN_NATURAL_EXPONENT = -41 * ONE_18  # e^-41 is close to zero

LN_36_LOWER_BOUND = ONE_18 - 10**17  # 0.9 in fixed-point
LN_36_UPPER_BOUND = ONE_18 + 10**17  # 1.1 in fixed-point

# Pre-computed constants for digit extraction
# x values represent exponents (powers of 2), a values are e^x

# 18-decimal precision constants (for large values)
X_18 = {
    0: 128 * ONE_18,  # 2^7
    1: 64 * ONE_18,  # 2^6
}
A_18 = {
    0: 38877084059945950922200000000000000000000000000000000000,  # e^128
    1: 6235149080811616882910000000,  # e^64
}

# 20-decimal precision constants (for medium values)
X_20 = {
    2: 3_200_000_000_000_000_000_000,  # 32 * ONE_20 = 2^5
    3: 1_600_000_000_000_000_000_000,  # 16 * ONE_20 = 2^4
    4: 800_000_000_000_000_000_000,  # 8 * ONE_20 = 2^3
    5: 400_000_000_000_000_000_000,  # 4 * ONE_20 = 2^2
    6: 200_000_000_000_000_000_000,  # 2 * ONE_20 = 2^1
    7: 100_000_000_000_000_000_000,  # 1 * ONE_20 = 2^0
    8: 50_000_000_000_000_000_000,  # 0.5 * ONE_20 = 2^-1
    9: 25_000_000_000_000_000_000,  # 0.25 * ONE_20 = 2^-2
    10: 12_500_000_000_000_000_000,  # 0.125 * ONE_20 = 2^-3
    11: 6_250_000_000_000_000_000,  # 0.0625 * ONE_20 = 2^-4
}
A_20 = {
    2: 7_896_296_018_268_069_516_100_000_000_000_000,  # e^32
    3: 888_611_052_050_787_263_676_000_000,  # e^16
    4: 298_095_798_704_172_827_474_000,  # e^8
    5: 5_459_815_003_314_423_907_810,  # e^4
    6: 738_905_609_893_065_022_723,  # e^2
    7: 271_828_182_845_904_523_536,  # e^1
    8: 164_872_127_070_012_814_685,  # e^0.5
    9: 128_402_541_668_774_148_407,  # e^0.25
    10: 113_314_845_306_682_631_683,  # e^0.125
    11: 106_449_445_891_785_942_956,  # e^0.0625
}


# =============================================================================
# Error classes
# =============================================================================


class LogExpMathError(Exception):
    """Base error for LogExpMath operations."""

    pass


class XOutOfBounds(LogExpMathError):
    """Argument to ln is not strictly positive or not representable."""

    pass


class InvalidExponent(LogExpMathError):
    """Exponent is outside the range exp can represent."""

    pass


# =============================================================================
# Signed division
# =============================================================================


def div_trunc(a: int, b: int) -> int:
    """Integer division with truncation toward zero (matching Solidity).

    Python's // operator rounds toward negative infinity, but Solidity
    truncates toward zero. This matters for negative numbers.

    Raises:
        DivisionByZero: If b is zero

    Examples:
        Python: -7 // 3 = -3 (rounds toward -inf)
        Solidity: -7 / 3 = -2 (truncates toward zero)
    """
    if b == 0:
        raise DivisionByZero(f"Division by zero: {a} / 0")

    # Same sign: floor and truncate agree on the non-negative result
    if (a >= 0) == (b >= 0):
        return a // b
    return -(abs(a) // abs(b))


# =============================================================================
# Unsigned WAD primitives
# =============================================================================


def mul_div_down(x: int, y: int, denominator: int) -> int:
    """floor(x * y / denominator) with a full-width intermediate.

    Raises:
        Uint256Overflow: If an operand is negative or the result exceeds uint256
        DivisionByZero: If denominator is zero
    """
    x, y, denominator = to_uint256(x), to_uint256(y), to_uint256(denominator)
    if denominator == 0:
        raise DivisionByZero(f"mul_div_down by zero: {x} * {y} / 0")
    return to_uint256((x * y) // denominator)


def mul_div_up(x: int, y: int, denominator: int) -> int:
    """ceil(x * y / denominator) with a full-width intermediate.

    Raises:
        Uint256Overflow: If an operand is negative or the result exceeds uint256
        DivisionByZero: If denominator is zero
    """
    x, y, denominator = to_uint256(x), to_uint256(y), to_uint256(denominator)
    if denominator == 0:
        raise DivisionByZero(f"mul_div_up by zero: {x} * {y} / 0")
    product = x * y
    if product == 0:
        return 0
    return to_uint256((product - 1) // denominator + 1)


def mul_wad_down(a: int, b: int) -> int:
    """floor(a * b / WAD)"""
    return mul_div_down(a, b, ONE_18)


def mul_wad_up(a: int, b: int) -> int:
    """ceil(a * b / WAD)"""
    return mul_div_up(a, b, ONE_18)


def div_wad_down(a: int, b: int) -> int:
    """floor(a * WAD / b)"""
    return mul_div_down(a, ONE_18, b)


def div_wad_up(a: int, b: int) -> int:
    """ceil(a * WAD / b)"""
    return mul_div_up(a, ONE_18, b)


def sqrt_wad(x: int) -> int:
    """Square root of a WAD value, rounded down.

    sqrt(x / 1e18) * 1e18 == isqrt(x * 1e18), so the integer square root of
    the rescaled value is exact up to the final floor.
    """
    return math.isqrt(to_uint256(x) * ONE_18)


# =============================================================================
# Signed WAD primitives
# =============================================================================


def mul_wad_signed(a: int, b: int) -> int:
    """a * b / WAD for signed values, truncating toward zero.

    Raises:
        Int256Overflow: If the result leaves the int256 range
    """
    return to_int256(div_trunc(a * b, ONE_18))


def div_wad_signed(a: int, b: int) -> int:
    """a * WAD / b for signed values, truncating toward zero.

    Raises:
        DivisionByZero: If b is zero
        Int256Overflow: If the result leaves the int256 range
    """
    return to_int256(div_trunc(a * ONE_18, b))


# =============================================================================
# Transcendentals (matching LogExpMath.sol)
# =============================================================================


def _ln(a: int) -> int:
    """Compute natural logarithm of a (18-decimal fixed-point).

    Uses digit extraction and Taylor series for arctanh.

    Args:
        a: Input value, must be positive (a > 0). Zero raises DivisionByZero.

    Returns:
        ln(a) as 18-decimal fixed-point integer.

    Note: This function uses Python's // operator directly (not div_trunc)
    because after the a < ONE_18 check and recursive call, all subsequent
    operations involve positive values only, where // behaves identically
    to Solidity truncation.
    """
    if a < ONE_18:
        # ln(a) = -ln(1/a)
        return -_ln((ONE_18 * ONE_18) // a)

    sum_val = 0

    # Extract large powers of e (18-decimal precision)
    for i in range(2):
        if a >= A_18[i] * ONE_18:
            a //= A_18[i]
            sum_val += X_18[i]

    # Scale up to 20-decimal precision
    sum_val *= 100
    a *= 100

    # Extract medium powers of e (20-decimal precision)
    for i in range(2, 12):
        if a >= A_20[i]:
            a = (a * ONE_20) // A_20[i]
            sum_val += X_20[i]

    # ln(a) = 2 * arctanh((a-1)/(a+1)) = 2 * (z + z^3/3 + z^5/5 + ...)
    z = ((a - ONE_20) * ONE_20) // (a + ONE_20)
    z_squared = (z * z) // ONE_20

    num = z
    series_sum = num

    # 6 terms total: z + z^3/3 + z^5/5 + z^7/7 + z^9/9 + z^11/11
    for i in range(3, 12, 2):
        num = (num * z_squared) // ONE_20
        series_sum += num // i

    series_sum *= 2

    return (sum_val + series_sum) // 100


def _ln_36(x: int) -> int:
    """Compute natural logarithm with 36-decimal precision.

    Used when x is close to 1 for better accuracy.

    Args:
        x: Input value in 18-decimal fixed-point, should be close to ONE_18.

    Returns:
        ln(x) as 36-decimal fixed-point integer.
    """
    x *= ONE_18  # Scale to 36 decimals

    # z can be negative when original input < 1, use truncation division
    z = div_trunc((x - ONE_36) * ONE_36, x + ONE_36)
    z_squared = div_trunc(z * z, ONE_36)

    num = z
    series_sum = num

    # 8 terms total: z + z^3/3 + ... + z^15/15
    for i in range(3, 16, 2):
        num = div_trunc(num * z_squared, ONE_36)
        series_sum += div_trunc(num, i)

    return series_sum * 2


def ln(x: int) -> int:
    """Natural logarithm of a positive WAD value.

    Inputs within 10% of 1.0 take the 36-decimal path, matching how
    LogExpMath.pow() picks its logarithm.

    Raises:
        XOutOfBounds: If x is not strictly positive
    """
    if x <= 0:
        raise XOutOfBounds(f"ln argument must be positive, got {x}")
    if LN_36_LOWER_BOUND < x < LN_36_UPPER_BOUND:
        return div_trunc(_ln_36(x), ONE_18)
    return _ln(x)


def exp(x: int) -> int:
    """Compute e^x where x is 18-decimal fixed-point.

    Args:
        x: Exponent in 18-decimal fixed-point (can be negative).

    Returns:
        e^x as 18-decimal fixed-point integer.

    Raises:
        InvalidExponent: If x is outside [MIN_NATURAL_EXPONENT, MAX_NATURAL_EXPONENT]
    """
    if not (MIN_NATURAL_EXPONENT <= x <= MAX_NATURAL_EXPONENT):
        raise InvalidExponent(f"Exponent {x} outside valid range")

    if x < 0:
        # e^-x = 1 / e^x
        return (ONE_18 * ONE_18) // exp(-x)

    # Extract large powers of e (18-decimal)
    if x >= X_18[0]:
        x -= X_18[0]
        first_an = A_18[0]
    elif x >= X_18[1]:
        x -= X_18[1]
        first_an = A_18[1]
    else:
        first_an = 1

    # Scale to 20-decimal precision
    x *= 100

    # Extract medium powers of e (20-decimal)
    product = ONE_20
    for i in range(2, 10):
        if x >= X_20[i]:
            x -= X_20[i]
            product = (product * A_20[i]) // ONE_20

    # Taylor series: e^x = 1 + x + x^2/2! + ... + x^12/12!
    series_sum = ONE_20
    term = x
    series_sum += term

    for i in range(2, 13):
        term = ((term * x) // ONE_20) // i
        series_sum += term

    return (((product * series_sum) // ONE_20) * first_an) // 100
