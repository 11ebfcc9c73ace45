"""Newton-Raphson and bisection root finding over the trading function.

The default mode runs a plain, undamped Newton iteration that:
1. Stops (without signalling) when the derivative is zero or underflows
2. Stops when either |step| or |residual| is within tolerance, committing
   the last step
3. Returns the last iterate when the iteration budget runs out
4. Never clamps iterates into the physical domain

SolverConfig can opt into strict failure, domain clamping, and a
bracketing bisection fallback; all three are off by default.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from rmm.constants import WAD
from rmm.math.fixed_point import div_trunc, mul_wad_down

from .config import DEFAULT_SOLVER_CONFIG, SolverConfig
from .errors import DomainError, NonConvergence
from .params import CurveVariant
from .trading_function import (
    derivative_wrt_base,
    derivative_wrt_liquidity,
    derivative_wrt_quote,
    trading_function,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class RootResult:
    """Outcome of one root-finding run.

    Attributes:
        value: Final iterate
        iterations: Number of iterations performed
        converged: True if a tolerance check fired
    """

    value: int
    iterations: int
    converged: bool


class Unknown(str, Enum):
    """The quantity a PrecomputedQuery solves for."""

    BASE = "base"
    QUOTE = "quote"
    LIQUIDITY = "liquidity"


@dataclass(frozen=True)
class PrecomputedQuery:
    """Everything held fixed across the iterations of one solve.

    The slot named by `unknown` is ignored; the iterate takes its place.

    Attributes:
        unknown: Which of base / quote / liquidity is being solved for
        base: Base reserve (WAD)
        quote: Quote reserve (WAD)
        liquidity: Total liquidity (WAD)
        params: Curve variant
        invariant: Target invariant k
    """

    unknown: Unknown
    base: int
    quote: int
    liquidity: int
    params: CurveVariant
    invariant: int = 0

    def evaluate(self, x: int) -> int:
        """Residual k(x) - invariant."""
        if self.unknown is Unknown.BASE:
            k = trading_function(x, self.quote, self.liquidity, self.params)
        elif self.unknown is Unknown.QUOTE:
            k = trading_function(self.base, x, self.liquidity, self.params)
        else:
            k = trading_function(self.base, self.quote, x, self.params)
        return k - self.invariant

    def derivative(self, x: int) -> int | None:
        """dk/dx at the iterate, or None if the density underflows."""
        if self.unknown is Unknown.BASE:
            return derivative_wrt_base(x, self.liquidity, self.params)
        if self.unknown is Unknown.QUOTE:
            return derivative_wrt_quote(x, self.liquidity, self.params)
        return derivative_wrt_liquidity(self.base, self.quote, x, self.params)

    def domain(self) -> tuple[int, int | None]:
        """Admissible interval for the unknown (upper None = unbounded)."""
        if self.unknown is Unknown.BASE:
            return 0, self.liquidity
        if self.unknown is Unknown.QUOTE:
            return 0, mul_wad_down(self.params.scale, self.liquidity)
        # L must cover both reserves for the ratios to stay within [0, 1]
        return max(self.base, div_trunc(self.quote * WAD, self.params.scale)), None


def _clamp(x: int, lower: int | None, upper: int | None) -> int:
    if lower is not None and x < lower:
        return lower
    if upper is not None and x > upper:
        return upper
    return x


def newton_raphson(
    initial_guess: int,
    evaluate: Callable[[int], int],
    derivative: Callable[[int], int | None],
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
    *,
    lower: int | None = None,
    upper: int | None = None,
) -> RootResult:
    """Run Newton-Raphson from initial_guess.

    Algorithm:
        x_next = x - f(x) * WAD / f'(x)
        stop when |x - x_next| <= tolerance or |f(x)| <= tolerance,
        committing x_next in either case

    Bounds are only applied when config.clamp_domain is set.

    Args:
        initial_guess: Starting iterate
        evaluate: Residual function f(x), signed WAD
        derivative: f'(x) as signed WAD, or None for "no progress possible"
        config: Solver configuration
        lower: Lower bound for clamping
        upper: Upper bound for clamping

    Returns:
        RootResult with the last iterate
    """
    x = initial_guess
    tolerance = config.tolerance

    for iteration in range(1, config.max_iterations + 1):
        dfx = derivative(x)
        if not dfx:
            logger.debug("newton_no_progress", iteration=iteration, x=x)
            return RootResult(value=x, iterations=iteration, converged=False)

        fx = evaluate(x)
        x_next = x - div_trunc(fx * WAD, dfx)
        if config.clamp_domain:
            x_next = _clamp(x_next, lower, upper)

        if abs(x - x_next) <= tolerance or abs(fx) <= tolerance:
            return RootResult(value=x_next, iterations=iteration, converged=True)
        x = x_next

    return RootResult(value=x, iterations=config.max_iterations, converged=False)


def bisection(
    evaluate: Callable[[int], int],
    lower: int,
    upper: int,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> RootResult:
    """Bisect a monotone function over [lower, upper].

    Stops when the residual or the bracket width is within tolerance.

    Raises:
        NonConvergence: If f(lower) and f(upper) have the same sign
    """
    f_lower = evaluate(lower)
    if f_lower == 0:
        return RootResult(value=lower, iterations=0, converged=True)
    f_upper = evaluate(upper)
    if f_upper == 0:
        return RootResult(value=upper, iterations=0, converged=True)
    if (f_lower > 0) == (f_upper > 0):
        raise NonConvergence(
            f"Interval [{lower}, {upper}] does not bracket a root "
            f"(f(lower)={f_lower}, f(upper)={f_upper})"
        )

    for iteration in range(1, config.max_bisection_iterations + 1):
        mid = (lower + upper) // 2
        f_mid = evaluate(mid)
        if abs(f_mid) <= config.tolerance or upper - lower <= config.tolerance:
            return RootResult(value=mid, iterations=iteration, converged=True)
        if (f_mid > 0) == (f_lower > 0):
            lower, f_lower = mid, f_mid
        else:
            upper = mid

    return RootResult(
        value=(lower + upper) // 2,
        iterations=config.max_bisection_iterations,
        converged=False,
    )


def find_root(
    initial_guess: int,
    evaluate: Callable[[int], int],
    derivative: Callable[[int], int | None],
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
    *,
    lower: int | None = None,
    upper: int | None = None,
) -> int:
    """Solve f(x) = 0 and apply the configured non-convergence policy.

    Returns:
        The root estimate. In the default mode this is Newton's last
        iterate whether or not it converged.

    Raises:
        NonConvergence: In strict mode, if neither Newton nor the optional
            bisection fallback met tolerance
    """
    result = newton_raphson(
        initial_guess, evaluate, derivative, config, lower=lower, upper=upper
    )
    if result.converged:
        return result.value

    logger.debug(
        "newton_did_not_converge",
        initial_guess=initial_guess,
        value=result.value,
        iterations=result.iterations,
    )

    if config.bisection_fallback and lower is not None and upper is not None:
        logger.debug("bisection_fallback", lower=lower, upper=upper)
        result = bisection(evaluate, lower, upper, config)
        if result.converged:
            return result.value

    if config.strict:
        raise NonConvergence(
            f"Root finder stopped after {result.iterations} iterations "
            f"without meeting tolerance {config.tolerance} (last value {result.value})"
        )
    return result.value


def solve_query(
    query: PrecomputedQuery,
    initial_guess: int,
    config: SolverConfig = DEFAULT_SOLVER_CONFIG,
) -> int:
    """find_root over a PrecomputedQuery, bounded by its domain."""
    lower, upper = query.domain()
    if upper is None and config.bisection_fallback:
        # Liquidity has no natural ceiling; bracket by doubling from the guess
        upper = max(initial_guess, lower + 1)
        while query.evaluate(upper) > 0:
            upper *= 2
    return find_root(
        initial_guess,
        query.evaluate,
        query.derivative,
        config,
        lower=lower,
        upper=upper,
    )


def lift_to_invariant(
    evaluate: Callable[[int], int],
    value: int,
    upper: int,
) -> int:
    """Smallest x >= value with f(x) >= 0, for f non-decreasing in x.

    The invariant is a step function of each reserve: one wei of a reserve
    ratio moves k by |d ppf / du|, about 2.5 wei at the median and far more in
    the tails. Newton's last iterate can land on either side of that step, so
    a solved reserve is lifted until the realized invariant is restored. The
    result overshoots k by at most one such step above value's own residual.

    Raises:
        DomainError: If f stays negative up to upper
    """
    if evaluate(value) >= 0:
        return value
    if value >= upper or evaluate(upper) < 0:
        raise DomainError(f"invariant cannot be restored at or below {upper}")

    # Gallop up from value, then bisect for the first non-negative residual
    lower, step = value, 1
    high = min(value + step, upper)
    while evaluate(high) < 0:
        lower = high
        step *= 2
        high = min(value + step, upper)
    while high - lower > 1:
        mid = (lower + high) // 2
        if evaluate(mid) >= 0:
            high = mid
        else:
            lower = mid

    logger.debug("invariant_lifted", value=value, lifted=high)
    return high
