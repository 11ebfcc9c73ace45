"""Closed-form reserve and liquidity conversions.

Each function solves the invariant for one unknown with O(1) Gaussian
evaluations. With k the pool's invariant (0 on the reference curve):

    quote = scale * L * cdf(ppf(1 - base / L) + k - spread)
    base  = L * (1 - cdf(ppf(quote / (scale * L)) + spread - k))

These are both standalone queries and the initial guesses for the root
finder, which typically converges from them in one or two Newton steps.
"""

from __future__ import annotations

from rmm.constants import WAD
from rmm.math.fixed_point import (
    div_wad_down,
    div_wad_signed,
    ln,
    mul_wad_down,
)
from rmm.math.gaussian import cdf, ppf

from .errors import DomainError
from .params import CurveVariant, ReserveState


def ratio_of(amount: int, total: int, name: str) -> int:
    """amount / total as a WAD fraction, failing loudly outside [0, 1]."""
    if total <= 0:
        raise DomainError(f"{name} denominator must be positive, got {total}")
    ratio = div_wad_down(amount, total)
    if ratio > WAD:
        raise DomainError(f"{name} ratio {ratio} exceeds 1.0 ({amount} > {total})")
    return ratio


def quote_given_base(
    base: int,
    liquidity: int,
    params: CurveVariant,
    *,
    invariant: int = 0,
) -> int:
    """Quote reserve that puts (base, quote, liquidity) on the curve.

    Args:
        base: Base reserve (WAD, at most liquidity)
        liquidity: Total liquidity (WAD, positive)
        params: Curve variant
        invariant: Target invariant k (default: the reference curve, 0)

    Returns:
        Quote reserve, rounded down

    Raises:
        DomainError: If liquidity is not positive or base > liquidity
    """
    u = ratio_of(base, liquidity, "base/liquidity")
    z = ppf(WAD - u) + invariant - params.spread
    capacity = mul_wad_down(params.scale, liquidity)
    return mul_wad_down(capacity, cdf(z))


def base_given_quote(
    quote: int,
    liquidity: int,
    params: CurveVariant,
    *,
    invariant: int = 0,
) -> int:
    """Base reserve that puts (base, quote, liquidity) on the curve.

    Args:
        quote: Quote reserve (WAD, at most scale * liquidity)
        liquidity: Total liquidity (WAD, positive)
        params: Curve variant
        invariant: Target invariant k (default: the reference curve, 0)

    Returns:
        Base reserve, rounded down

    Raises:
        DomainError: If liquidity is not positive or quote > scale * liquidity
    """
    capacity = mul_wad_down(params.scale, liquidity)
    v = ratio_of(quote, capacity, "quote/capacity")
    z = ppf(v) + params.spread - invariant
    return mul_wad_down(liquidity, WAD - cdf(z))


def liquidity_given_base_and_quote_at_reference_tau(
    base: int,
    quote: int,
    params: CurveVariant,
) -> int:
    """Liquidity for a deposit on the zero-spread reference curve.

    With spread = 0 the invariant reduces to base / L + quote / (scale * L) = 1,
    so L = base + quote / scale exactly. At a positive spread this is a lower
    bound on the true liquidity and seeds the liquidity solve.
    """
    return base + div_wad_down(quote, params.scale)


def liquidity_given_base_and_price(base: int, price: int, params: CurveVariant) -> int:
    """Liquidity such that `base` sits where the spot price equals `price`.

    Inverts price = scale * exp(z * spread - convexity) for z = ppf(1 - base / L),
    then L = base / (1 - cdf(z)).

    Raises:
        DomainError: If the spread is zero (price does not pin the composition)
            or the implied base share rounds to zero
        XOutOfBounds: If price is not positive
    """
    spread = params.spread
    if spread == 0:
        raise DomainError("spot price does not determine reserves when spread is zero")

    log_moneyness = ln(div_wad_down(price, params.scale))
    z = div_wad_signed(log_moneyness + params.convexity, spread)
    base_share = WAD - cdf(z)
    if base_share == 0:
        raise DomainError(f"price {price} implies an empty base reserve")
    return div_wad_down(base, base_share)


def reserves_given_base_and_price(base: int, price: int, params: CurveVariant) -> ReserveState:
    """Initial pool state for a base deposit at a target spot price."""
    liquidity = liquidity_given_base_and_price(base, price, params)
    quote = quote_given_base(base, liquidity, params)
    return ReserveState(base=base, quote=quote, liquidity=liquidity)
