"""Checked integer casts and arithmetic for fixed-point reserve math.

Python integers never wrap, so the only way to reproduce the on-chain
failure semantics is to check the representable range explicitly at the
points where fixed-width arithmetic would have cast or overflowed:
- Unsigned values must lie in [0, 2^256 - 1]
- Signed values must lie in [-2^255, 2^255 - 1]
- Unsigned subtraction below zero raises Underflow
- Division by zero raises DivisionByZero (also a ZeroDivisionError)

Usage pattern:
    from rmm.safe_int import checked_add, checked_sub, to_int256

    def apply_swap(reserve_in: int, reserve_out: int, amount_in: int, amount_out: int):
        # Reserves stay unsigned across the update
        return checked_add(reserve_in, amount_in), checked_sub(reserve_out, amount_out)

    def spread(a: int, b: int) -> int:
        # Signed results are range-checked on the way out
        return to_int256(a - b)
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1
INT256_MAX = 2**255 - 1
INT256_MIN = -(2**255)


class SafeIntError(ArithmeticError):
    """Base class for checked arithmetic errors."""

    pass


class DivisionByZero(SafeIntError, ZeroDivisionError):
    """Division by zero in a fixed-point or checked operation."""

    pass


class Underflow(SafeIntError):
    """Unsigned subtraction would produce a negative result."""

    pass


class Overflow(SafeIntError):
    """Value does not fit the target integer representation."""

    pass


class Uint256Overflow(Overflow):
    """Value is negative or exceeds 2^256 - 1."""

    pass


class Int256Overflow(Overflow):
    """Value is outside [-2^255, 2^255 - 1]."""

    pass


def to_uint256(value: int) -> int:
    """Cast to the unsigned 256-bit range.

    Raises:
        Uint256Overflow: If value is negative or exceeds 2^256 - 1
    """
    if value < 0:
        raise Uint256Overflow(f"Negative value cannot be uint256: {value}")
    if value > UINT256_MAX:
        raise Uint256Overflow(f"Value exceeds uint256 max: {value}")
    return value


def to_int256(value: int) -> int:
    """Cast to the signed 256-bit range.

    Raises:
        Int256Overflow: If value is outside [-2^255, 2^255 - 1]
    """
    if value < INT256_MIN or value > INT256_MAX:
        raise Int256Overflow(f"Value outside int256 range: {value}")
    return value


def checked_add(a: int, b: int) -> int:
    """Add two unsigned values, failing instead of wrapping.

    Raises:
        Uint256Overflow: If either operand or the sum leaves the uint256 range
    """
    return to_uint256(to_uint256(a) + to_uint256(b))


def checked_sub(a: int, b: int) -> int:
    """Subtract two unsigned values, failing instead of wrapping.

    Raises:
        Underflow: If b > a
        Uint256Overflow: If either operand leaves the uint256 range
    """
    a, b = to_uint256(a), to_uint256(b)
    if b > a:
        raise Underflow(f"Underflow: {a} - {b} = {a - b}")
    return a - b
