"""Trading-function invariant and its partial derivatives.

    k = ppf(base / L) + ppf(quote / (scale * L)) + spread

The partials come from d/du ppf(u) = 1 / pdf(ppf(u)). A density that rounds
to zero in the far tail makes the derivative effectively infinite; those
cases return None so the root finder can stop instead of dividing by zero.

Reserve ratios above 1.0 are not rejected here: ppf saturates, which keeps
the invariant evaluable for Newton iterates that leave the domain.
"""

from __future__ import annotations

from rmm.constants import WAD
from rmm.math.fixed_point import div_wad_down, div_wad_up, mul_wad_down, mul_wad_up
from rmm.math.gaussian import pdf, ppf

from .params import CurveVariant


def _base_ratio(base: int, liquidity: int) -> int:
    return div_wad_up(base, liquidity)


def _quote_ratio(quote: int, liquidity: int, params: CurveVariant) -> int:
    return div_wad_up(quote, mul_wad_up(liquidity, params.scale))


def trading_function(base: int, quote: int, liquidity: int, params: CurveVariant) -> int:
    """Evaluate the invariant k for the given reserves.

    Args:
        base: Base reserve (WAD)
        quote: Quote reserve (WAD)
        liquidity: Total liquidity (WAD, must be positive)
        params: Curve variant

    Returns:
        k as a signed WAD integer; 0 on the reference curve

    Raises:
        DivisionByZero: If liquidity is zero
        Uint256Overflow: If a reserve is negative
    """
    a = ppf(_base_ratio(base, liquidity))
    b = ppf(_quote_ratio(quote, liquidity, params))
    return a + b + params.spread


def derivative_wrt_base(base: int, liquidity: int, params: CurveVariant) -> int | None:
    """dk/dbase = 1 / (L * pdf(ppf(base / L))).

    Returns:
        Derivative as a WAD integer, or None if the density underflows
    """
    _ = params  # base partial does not depend on the price scale
    density = pdf(ppf(_base_ratio(base, liquidity)))
    denominator = mul_wad_down(liquidity, density)
    if denominator == 0:
        return None
    return div_wad_down(WAD, denominator)


def derivative_wrt_quote(quote: int, liquidity: int, params: CurveVariant) -> int | None:
    """dk/dquote = 1 / (scale * L * pdf(ppf(quote / (scale * L)))).

    Returns:
        Derivative as a WAD integer, or None if the density underflows
    """
    density = pdf(ppf(_quote_ratio(quote, liquidity, params)))
    denominator = mul_wad_down(mul_wad_down(params.scale, liquidity), density)
    if denominator == 0:
        return None
    return div_wad_down(WAD, denominator)


def derivative_wrt_liquidity(
    base: int, quote: int, liquidity: int, params: CurveVariant
) -> int | None:
    """dk/dL = -(u / pdf(ppf(u)) + v / pdf(ppf(v))) / L

    where u = base / L and v = quote / (scale * L). Always negative: adding
    liquidity at fixed reserves lowers the invariant.

    Returns:
        Derivative as a signed WAD integer, or None if a density underflows
    """
    u = _base_ratio(base, liquidity)
    v = _quote_ratio(quote, liquidity, params)
    density_u = pdf(ppf(u))
    density_v = pdf(ppf(v))
    if density_u == 0 or density_v == 0:
        return None

    weighted = div_wad_down(u, density_u) + div_wad_down(v, density_v)
    return -div_wad_down(weighted, liquidity)
