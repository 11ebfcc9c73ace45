"""Log-normal trading curves (RMM).

This package prices swaps on the two curve variants that share the invariant
k = ppf(base / L) + ppf(quote / (scale * L)) + spread:
- OptionsReplication (covered-call replication, strike / sigma / tau)
- SimplifiedLogNormal (mean / width)
"""

# Solver configuration
from .config import DEFAULT_SOLVER_CONFIG, HARDENED_SOLVER_CONFIG, SolverConfig

# Errors
from .errors import (
    CurveError,
    DomainError,
    InvalidCurveParameters,
    InvalidFeeError,
    NonConvergence,
)

# Curve parameters and reserves
from .params import (
    Asset,
    CurveVariant,
    OptionsReplication,
    ReserveState,
    SimplifiedLogNormal,
    sigma_sqrt_tau,
    tau_years_from_seconds,
)

# Snapshot parsing
from .parsing import ParsedPool, parse_curve, parse_pool, parse_reserves

# Quoting
from .quoter import (
    DepositQuote,
    SwapQuote,
    compute_invariant,
    compute_spot_price,
    fee_driven_liquidity_growth,
    liquidity_given_deposit,
    quote_exact_input,
    quote_exact_output,
    simulate_exact_input,
    simulate_exact_output,
    solve_liquidity,
)

# Closed-form conversions
from .reserves import (
    base_given_quote,
    liquidity_given_base_and_price,
    liquidity_given_base_and_quote_at_reference_tau,
    quote_given_base,
    reserves_given_base_and_price,
)

# Root finding
from .root_finding import (
    PrecomputedQuery,
    RootResult,
    Unknown,
    bisection,
    find_root,
    lift_to_invariant,
    newton_raphson,
    solve_query,
)

# Trading function
from .trading_function import (
    derivative_wrt_base,
    derivative_wrt_liquidity,
    derivative_wrt_quote,
    trading_function,
)

__all__ = [
    # Config
    "DEFAULT_SOLVER_CONFIG",
    "HARDENED_SOLVER_CONFIG",
    "SolverConfig",
    # Errors
    "CurveError",
    "DomainError",
    "InvalidCurveParameters",
    "InvalidFeeError",
    "NonConvergence",
    # Params
    "Asset",
    "CurveVariant",
    "OptionsReplication",
    "ReserveState",
    "SimplifiedLogNormal",
    "sigma_sqrt_tau",
    "tau_years_from_seconds",
    # Parsing
    "ParsedPool",
    "parse_curve",
    "parse_pool",
    "parse_reserves",
    # Quoting
    "DepositQuote",
    "SwapQuote",
    "compute_invariant",
    "compute_spot_price",
    "fee_driven_liquidity_growth",
    "liquidity_given_deposit",
    "quote_exact_input",
    "quote_exact_output",
    "simulate_exact_input",
    "simulate_exact_output",
    "solve_liquidity",
    # Closed forms
    "base_given_quote",
    "liquidity_given_base_and_price",
    "liquidity_given_base_and_quote_at_reference_tau",
    "quote_given_base",
    "reserves_given_base_and_price",
    # Root finding
    "PrecomputedQuery",
    "RootResult",
    "Unknown",
    "bisection",
    "find_root",
    "lift_to_invariant",
    "newton_raphson",
    "solve_query",
    # Trading function
    "derivative_wrt_base",
    "derivative_wrt_liquidity",
    "derivative_wrt_quote",
    "trading_function",
]
