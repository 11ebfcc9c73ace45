"""Curve error classes.

Arithmetic-level failures (overflow, division by zero) live in rmm.safe_int;
these cover parameter validation and solver policy.
"""


class CurveError(Exception):
    """Base error for trading-curve operations."""

    pass


class InvalidCurveParameters(CurveError):
    """Curve parameters violate strike/sigma/tau/mean/width constraints."""

    pass


class DomainError(CurveError):
    """A reserve or liquidity input is outside the curve's valid range.

    Raised by closed-form conversions and quotes when a reserve ratio
    exceeds 1.0, or when an output would drain a reserve.
    """

    pass


class InvalidFeeError(CurveError):
    """Swap fee must be in range [0, WAD)."""

    pass


class NonConvergence(CurveError):
    """Root finder stopped without meeting tolerance (strict mode), or a
    bisection was asked to search an interval that does not bracket a root."""

    pass
