"""Standard normal PDF, CDF and quantile (inverse CDF) in WAD fixed point.

Inputs and outputs are 18-decimal integers. Internally everything runs at
54 decimals so that upper-tail probabilities near 1e-18 still carry ~18
significant digits after the cancellation in 1/2 - phi(t) * S(t).

- pdf: phi(x) = exp(-x^2/2) / sqrt(2*pi)
- cdf: Marsaglia's series Phi(x) = 1/2 + phi(x) * (x + x^3/3 + x^5/15 + ...),
  all terms positive; saturates to exactly 0 / WAD for |x| >= 9
- ppf: Acklam's rational approximation (relative error < 1.15e-9) refined by
  Halley steps against the series CDF. p > 1/2 is routed through -ppf(1 - p),
  so ppf(WAD - p) == -ppf(p) holds exactly. p <= 0 and p >= WAD saturate to
  the quantile of the nearest representable probability (1 wei / WAD - 1 wei),
  about -/+ 8.7572 WAD.
"""

from __future__ import annotations

import math
from decimal import Decimal, localcontext

from rmm.math.fixed_point import ONE_18, div_trunc, ln

__all__ = [
    "pdf",
    "cdf",
    "ppf",
    "HALF_WAD",
    "CDF_SATURATION",
]

HALF_WAD = ONE_18 // 2

# |x| at and beyond which cdf returns exactly 0 or WAD (Phi(-9) ~ 1.1e-19)
CDF_SATURATION = 9 * ONE_18

# phi(10) ~ 7.7e-23, below one wei
_PDF_CUTOFF = 10 * ONE_18

_ONE = 10**54
_HALF = _ONE // 2
_UPSCALE = _ONE // ONE_18

# Acklam's split between central and tail regions: 0.02425
_P_LOW = 2425 * 10**13

_REFINEMENT_STEPS = 2


def _fixed(literal: str) -> int:
    """Exact decimal literal -> internal 54-decimal integer."""
    with localcontext() as ctx:
        ctx.prec = 100
        return int(Decimal(literal) * _ONE)


def _compute_ln2() -> int:
    # ln 2 = 2 * atanh(1/3) = 2 * sum_k 1 / ((2k + 1) * 3^(2k + 1))
    guard = 10**10
    power = _ONE * guard // 3
    total = 0
    k = 0
    while power:
        total += power // (2 * k + 1)
        power //= 9
        k += 1
    return 2 * total // guard


_PI = _fixed("3.141592653589793238462643383279502884197169399375105820")
_SQRT_2PI = math.isqrt(2 * _PI * _ONE)
_INV_SQRT_2PI = _ONE * _ONE // _SQRT_2PI
_LN2 = _compute_ln2()

# Acklam coefficients, central region numerator/denominator
_A = tuple(
    _fixed(c)
    for c in (
        "-3.969683028665376e+01",
        "2.209460984245205e+02",
        "-2.759285104469687e+02",
        "1.383577518672690e+02",
        "-3.066479806614716e+01",
        "2.506628277459239e+00",
    )
)
_B = tuple(
    _fixed(c)
    for c in (
        "-5.447609879822406e+01",
        "1.615858368580409e+02",
        "-1.556989798598866e+02",
        "6.680131188771972e+01",
        "-1.328068155288572e+01",
    )
) + (_ONE,)

# Acklam coefficients, tail region numerator/denominator
_C = tuple(
    _fixed(c)
    for c in (
        "-7.784894002430293e-03",
        "-3.223964580411365e-01",
        "-2.400758277161838e+00",
        "-2.549732539343734e+00",
        "4.374664141464968e+00",
        "2.938163982698783e+00",
    )
)
_D = tuple(
    _fixed(c)
    for c in (
        "7.784695709041462e-03",
        "3.224671290700398e-01",
        "2.445134137142996e+00",
        "3.754408661907416e+00",
    )
) + (_ONE,)


# =============================================================================
# Internal 54-decimal routines
# =============================================================================


def _exp(x: int) -> int:
    """e^x at internal precision.

    Reduces x = k*ln2 + r with |r| <= ln2/2, sums the Taylor series of e^r
    until terms vanish, then shifts by 2^k.
    """
    k = (x + _LN2 // 2) // _LN2
    r = x - k * _LN2

    term = _ONE
    total = _ONE
    n = 1
    while term:
        term = div_trunc(term * r, n * _ONE)
        total += term
        n += 1

    if k >= 0:
        return total << k
    return total >> -k


def _pdf(x: int) -> int:
    return _INV_SQRT_2PI * _exp(-(x * x) // (2 * _ONE)) // _ONE


def _upper_tail(t: int) -> int:
    """Q(t) = 1 - Phi(t) for t >= 0."""
    t_squared = t * t // _ONE

    # S(t) = t + t^3/3 + t^5/(3*5) + ..., all terms positive
    term = t
    series = t
    n = 3
    while term:
        term = term * t_squared // (n * _ONE)
        series += term
        n += 2

    return max(0, _HALF - _pdf(t) * series // _ONE)


def _cdf(x: int) -> int:
    if x < 0:
        return _upper_tail(-x)
    return _ONE - _upper_tail(x)


def _horner(coefficients: tuple[int, ...], x: int) -> int:
    acc = 0
    for c in coefficients:
        acc = div_trunc(acc * x, _ONE) + c
    return acc


def _acklam(p: int) -> int:
    """Initial quantile estimate for a WAD probability 0 < p < 1/2."""
    if p < _P_LOW:
        # q = sqrt(-2 ln p)
        q = math.isqrt(-2 * ln(p) * _UPSCALE * _ONE)
        return div_trunc(_horner(_C, q) * _ONE, _horner(_D, q))

    q = p * _UPSCALE - _HALF
    r = q * q // _ONE
    numerator = div_trunc(_horner(_A, r) * q, _ONE)
    return div_trunc(numerator * _ONE, _horner(_B, r))


def _refine(x: int, p: int) -> int:
    """Halley steps on Phi(x) - p, with f'' = -x * phi(x)."""
    for _ in range(_REFINEMENT_STEPS):
        e = _cdf(x) - p
        u = div_trunc(e * _ONE, _pdf(x))
        x -= div_trunc(u * _ONE, _ONE + div_trunc(x * u, 2 * _ONE))
    return x


# =============================================================================
# Public WAD interface
# =============================================================================


def pdf(x: int) -> int:
    """Standard normal density at x, rounded down to WAD."""
    if abs(x) >= _PDF_CUTOFF:
        return 0
    return _pdf(x * _UPSCALE) // _UPSCALE


def cdf(x: int) -> int:
    """Standard normal CDF at x, rounded down to WAD.

    Saturates to exactly 0 for x <= -9 WAD and exactly WAD for x >= 9 WAD.
    """
    if x <= -CDF_SATURATION:
        return 0
    if x >= CDF_SATURATION:
        return ONE_18
    return _cdf(x * _UPSCALE) // _UPSCALE


def ppf(p: int) -> int:
    """Quantile of the standard normal for a WAD probability.

    Strictly increasing on [1, WAD - 1]. Probabilities outside that range
    saturate to the boundary quantiles instead of failing.
    """
    if p <= 0:
        p = 1
    elif p >= ONE_18:
        p = ONE_18 - 1

    if p == HALF_WAD:
        return 0
    if p > HALF_WAD:
        return -ppf(ONE_18 - p)

    x = _refine(_acklam(p), p * _UPSCALE)
    return div_trunc(x, _UPSCALE)
