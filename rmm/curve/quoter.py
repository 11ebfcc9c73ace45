"""Swap quoting, spot price and liquidity accounting.

Every function here is pure: it reads a ReserveState and returns values
for the caller to apply. A swap holds liquidity fixed while it moves the
reserves along the pool's realized invariant, then credits the skimmed
fee back to the pool as liquidity growth.

Swap pipeline (exact input, base in):
    fee_amount = amount_in * fee        (rounded up)
    base'      = base + amount_in - fee_amount
    quote'     = root of k(base', quote', L) = k(base, quote, L)
    amount_out = quote - quote'
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from rmm.constants import WAD
from rmm.math.fixed_point import (
    MIN_NATURAL_EXPONENT,
    exp,
    mul_div_down,
    mul_div_up,
    mul_wad_down,
    mul_wad_signed,
    mul_wad_up,
)
from rmm.math.gaussian import ppf
from rmm.safe_int import checked_add, checked_sub

from .config import DEFAULT_SOLVER_CONFIG, SolverConfig
from .errors import DomainError, InvalidFeeError
from .params import Asset, CurveVariant, ReserveState
from .reserves import (
    base_given_quote,
    liquidity_given_base_and_quote_at_reference_tau,
    quote_given_base,
    ratio_of,
)
from .root_finding import PrecomputedQuery, Unknown, lift_to_invariant, solve_query
from .trading_function import trading_function

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """Result of a simulated swap.

    Attributes:
        token_in: Side of the pool the trader pays in
        amount_in: Gross amount paid in, fee included
        amount_out: Amount paid out of the other side
        fee_amount: Part of amount_in kept as fee
        delta_liquidity: Liquidity growth credited for the fee
        reserves_after: Pool state once the swap is applied
    """

    token_in: Asset
    amount_in: int
    amount_out: int
    fee_amount: int
    delta_liquidity: int
    reserves_after: ReserveState


@dataclass(frozen=True)
class DepositQuote:
    """Liquidity minted for a deposit and the amounts it consumes."""

    delta_liquidity: int
    base_amount: int
    quote_amount: int


def _validate_fee(fee: int) -> None:
    if not 0 <= fee < WAD:
        raise InvalidFeeError(f"fee must be in [0, {WAD}), got {fee}")


def compute_invariant(reserves: ReserveState, params: CurveVariant) -> int:
    """Realized invariant k of the pool (0 on the reference curve)."""
    return trading_function(reserves.base, reserves.quote, reserves.liquidity, params)


def compute_spot_price(reserves: ReserveState, params: CurveVariant) -> int:
    """Marginal price of base in quote at the current reserves.

        price = scale * exp(ppf(1 - base / L) * spread - convexity)

    At zero spread (options form at maturity) this is exactly the scale.
    Below e^-41 the price saturates to 0 instead of failing; wide curves
    reach that far with base close to liquidity.

    Raises:
        DomainError: If liquidity is zero or base exceeds liquidity
    """
    spread = params.spread
    if spread == 0:
        return params.scale

    u = ratio_of(reserves.base, reserves.liquidity, "base/liquidity")
    exponent = mul_wad_signed(ppf(WAD - u), spread) - params.convexity
    if exponent < MIN_NATURAL_EXPONENT:
        return 0
    return mul_wad_down(params.scale, exp(exponent))


def _liquidity_for_fee(
    fee_amount: int,
    reserves: ReserveState,
    params: CurveVariant,
    token_in: Asset,
) -> int:
    """Convert a fee into liquidity units at the current spot price.

    Liquidity grows in proportion to the value the fee adds to the pool:
        delta_L = L * fee_value / (price * base + quote)
    """
    if fee_amount == 0:
        return 0

    price = compute_spot_price(reserves, params)
    pool_value = mul_wad_down(price, reserves.base) + reserves.quote
    if pool_value == 0:
        raise DomainError("cannot price a fee against an empty pool")

    if token_in is Asset.BASE:
        fee_value = mul_wad_down(price, fee_amount)
    else:
        fee_value = fee_amount
    return mul_div_down(reserves.liquidity, fee_value, pool_value)


def fee_driven_liquidity_growth(
    amount_in: int,
    reserves: ReserveState,
    fee: int,
    params: CurveVariant,
    *,
    token_in: Asset = Asset.BASE,
) -> int:
    """Liquidity growth from the fee skimmed off a trade of amount_in.

    Args:
        amount_in: Gross input amount (WAD)
        reserves: Pool state before the trade
        fee: Fee rate as a WAD fraction in [0, WAD)
        params: Curve variant
        token_in: Asset the fee is denominated in

    Returns:
        delta_L, rounded down

    Raises:
        InvalidFeeError: If fee is outside [0, WAD)
    """
    _validate_fee(fee)
    return _liquidity_for_fee(mul_wad_up(amount_in, fee), reserves, params, token_in)


def _solve_on_curve(query: PrecomputedQuery, guess: int, config: SolverConfig) -> int:
    """Solve for a reserve, then round it so the pool never loses invariant.

    Lifting the solved reserve to the first non-negative residual makes
    k_after >= k_before: amounts out round down and amounts in round up.
    """
    solved = solve_query(query, guess, config)
    _, upper = query.domain()
    return lift_to_invariant(query.evaluate, solved, upper)


def _solve_base(
    quote: int,
    reserves: ReserveState,
    params: CurveVariant,
    invariant: int,
    config: SolverConfig,
) -> int:
    """Base reserve on the realized curve for a given quote reserve."""
    guess = base_given_quote(quote, reserves.liquidity, params, invariant=invariant)
    if params.spread == 0 and guess > 0:
        # Start one wei inside the boundary of the degenerate curve
        guess -= 1
    query = PrecomputedQuery(
        unknown=Unknown.BASE,
        base=0,
        quote=quote,
        liquidity=reserves.liquidity,
        params=params,
        invariant=invariant,
    )
    return _solve_on_curve(query, guess, config)


def _solve_quote(
    base: int,
    reserves: ReserveState,
    params: CurveVariant,
    invariant: int,
    config: SolverConfig,
) -> int:
    """Quote reserve on the realized curve for a given base reserve."""
    guess = quote_given_base(base, reserves.liquidity, params, invariant=invariant)
    if params.spread == 0 and guess > 0:
        guess -= 1
    query = PrecomputedQuery(
        unknown=Unknown.QUOTE,
        base=base,
        quote=0,
        liquidity=reserves.liquidity,
        params=params,
        invariant=invariant,
    )
    return _solve_on_curve(query, guess, config)


def _apply(
    reserves: ReserveState,
    token_in: Asset,
    amount_in: int,
    amount_out: int,
    delta_liquidity: int,
) -> ReserveState:
    if token_in is Asset.BASE:
        base = checked_add(reserves.base, amount_in)
        quote = checked_sub(reserves.quote, amount_out)
    else:
        base = checked_sub(reserves.base, amount_out)
        quote = checked_add(reserves.quote, amount_in)
    return ReserveState(
        base=base,
        quote=quote,
        liquidity=checked_add(reserves.liquidity, delta_liquidity),
    )


def simulate_exact_input(
    amount_in: int,
    reserves: ReserveState,
    params: CurveVariant,
    *,
    token_in: Asset = Asset.BASE,
    fee: int = 0,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> SwapQuote:
    """Simulate selling exactly amount_in of token_in.

    The fee-free part of the input moves the reserves along the pool's
    realized invariant; the fee is credited as liquidity growth.

    Raises:
        InvalidFeeError: If fee is outside [0, WAD)
        DomainError: If the input pushes a reserve ratio above 1.0
        NonConvergence: In strict mode, if the root finder fails
    """
    _validate_fee(fee)
    fee_amount = mul_wad_up(amount_in, fee)
    net_in = amount_in - fee_amount
    invariant = compute_invariant(reserves, params)

    if token_in is Asset.BASE:
        new_base = checked_add(reserves.base, net_in)
        new_quote = _solve_quote(new_base, reserves, params, invariant, config)
        amount_out = reserves.quote - new_quote
    else:
        new_quote = checked_add(reserves.quote, net_in)
        new_base = _solve_base(new_quote, reserves, params, invariant, config)
        amount_out = reserves.base - new_base

    if amount_out <= 0:
        logger.debug(
            "swap_output_non_positive",
            token_in=token_in.value,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        amount_out = 0

    delta_liquidity = _liquidity_for_fee(fee_amount, reserves, params, token_in)
    return SwapQuote(
        token_in=token_in,
        amount_in=amount_in,
        amount_out=amount_out,
        fee_amount=fee_amount,
        delta_liquidity=delta_liquidity,
        reserves_after=_apply(reserves, token_in, amount_in, amount_out, delta_liquidity),
    )


def simulate_exact_output(
    amount_out: int,
    reserves: ReserveState,
    params: CurveVariant,
    *,
    token_in: Asset = Asset.BASE,
    fee: int = 0,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> SwapQuote:
    """Simulate buying exactly amount_out of the asset opposite token_in.

    Solves for the fee-free input on the realized invariant, then grosses
    it up so that the fee-free part of the gross equals what the curve needs:
        gross = net / (1 - fee)      (rounded up)

    Raises:
        InvalidFeeError: If fee is outside [0, WAD)
        DomainError: If amount_out would drain the output reserve
        NonConvergence: In strict mode, if the root finder fails
    """
    _validate_fee(fee)
    token_out = token_in.other
    reserve_out = reserves.reserve(token_out)
    if amount_out >= reserve_out:
        raise DomainError(
            f"amount_out {amount_out} must be less than the {token_out.value} reserve {reserve_out}"
        )

    invariant = compute_invariant(reserves, params)
    if token_in is Asset.BASE:
        new_quote = reserves.quote - amount_out
        new_base = _solve_base(new_quote, reserves, params, invariant, config)
        net_in = new_base - reserves.base
    else:
        new_base = reserves.base - amount_out
        new_quote = _solve_quote(new_base, reserves, params, invariant, config)
        net_in = new_quote - reserves.quote

    if net_in <= 0:
        logger.debug(
            "swap_input_non_positive",
            token_in=token_in.value,
            amount_out=amount_out,
            amount_in=net_in,
        )
        net_in = 0

    amount_in = mul_div_up(net_in, WAD, WAD - fee)
    fee_amount = amount_in - net_in
    delta_liquidity = _liquidity_for_fee(fee_amount, reserves, params, token_in)
    return SwapQuote(
        token_in=token_in,
        amount_in=amount_in,
        amount_out=amount_out,
        fee_amount=fee_amount,
        delta_liquidity=delta_liquidity,
        reserves_after=_apply(reserves, token_in, amount_in, amount_out, delta_liquidity),
    )


def quote_exact_input(
    amount_in: int,
    reserves: ReserveState,
    params: CurveVariant,
    *,
    token_in: Asset = Asset.BASE,
    fee: int = 0,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> int:
    """Amount of the other asset received for exactly amount_in of token_in."""
    return simulate_exact_input(
        amount_in, reserves, params, token_in=token_in, fee=fee, config=config
    ).amount_out


def quote_exact_output(
    amount_out: int,
    reserves: ReserveState,
    params: CurveVariant,
    *,
    token_in: Asset = Asset.BASE,
    fee: int = 0,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> int:
    """Amount of token_in required to receive exactly amount_out."""
    return simulate_exact_output(
        amount_out, reserves, params, token_in=token_in, fee=fee, config=config
    ).amount_in


def solve_liquidity(
    base: int,
    quote: int,
    params: CurveVariant,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> int:
    """Liquidity L that puts (base, quote, L) on the reference curve k = 0.

    Seeded by L0 = base + quote / scale, which is exact at zero spread and a
    lower bound otherwise (k(L0) = spread > 0 and k decreases in L).

    Raises:
        DomainError: If both reserves are zero
    """
    if base == 0 and quote == 0:
        raise DomainError("cannot solve liquidity for an empty deposit")

    guess = liquidity_given_base_and_quote_at_reference_tau(base, quote, params)
    if params.spread == 0:
        return guess

    query = PrecomputedQuery(
        unknown=Unknown.LIQUIDITY,
        base=base,
        quote=quote,
        liquidity=0,
        params=params,
    )
    return solve_query(query, guess, config)


def liquidity_given_deposit(
    base_amount: int,
    quote_amount: int,
    reserves: ReserveState,
    params: CurveVariant,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> DepositQuote:
    """Liquidity minted for a deposit of up to (base_amount, quote_amount).

    An existing pool mints the smaller of the proportional shares and takes
    each asset in the pool's current ratio (rounded up, never above what was
    offered). An empty pool takes the whole deposit and solves for L.

    Raises:
        DomainError: If the deposit cannot mint any liquidity
    """
    if reserves.liquidity == 0:
        liquidity = solve_liquidity(base_amount, quote_amount, params, config)
        return DepositQuote(
            delta_liquidity=liquidity,
            base_amount=base_amount,
            quote_amount=quote_amount,
        )

    shares = []
    if reserves.base > 0:
        shares.append(mul_div_down(base_amount, reserves.liquidity, reserves.base))
    if reserves.quote > 0:
        shares.append(mul_div_down(quote_amount, reserves.liquidity, reserves.quote))
    if not shares:
        raise DomainError("pool has liquidity but no reserves")

    delta_liquidity = min(shares)
    return DepositQuote(
        delta_liquidity=delta_liquidity,
        base_amount=mul_div_up(delta_liquidity, reserves.base, reserves.liquidity),
        quote_amount=mul_div_up(delta_liquidity, reserves.quote, reserves.liquidity),
    )
