"""Root-finding configuration."""

from dataclasses import dataclass

from rmm.constants import (
    DEFAULT_MAX_BISECTION_ITERATIONS,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
)


@dataclass(frozen=True)
class SolverConfig:
    """Per-call configuration for the Newton-Raphson / bisection solvers.

    Defaults: 20 Newton steps and an absolute 10-wei tolerance. Results are
    best effort with no failure signal, and iterates are never clamped.

    Attributes:
        max_iterations: Newton-Raphson iteration budget (default: 20)
        tolerance: Absolute tolerance in wei, applied to both the step size
            and the residual (default: 10)
        strict: If True, raise NonConvergence when Newton stops without
            meeting tolerance. If False, return the last iterate.
        clamp_domain: If True, clamp each Newton iterate into the unknown's
            admissible domain (e.g. [0, liquidity] for the base reserve).
        bisection_fallback: If True, bisect over the admissible domain when
            Newton stops without meeting tolerance.
        max_bisection_iterations: Bisection iteration budget (default: 256)
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance: int = DEFAULT_TOLERANCE

    # Behavior flags
    strict: bool = False
    clamp_domain: bool = False
    bisection_fallback: bool = False
    max_bisection_iterations: int = DEFAULT_MAX_BISECTION_ITERATIONS


# Default configuration instance
DEFAULT_SOLVER_CONFIG = SolverConfig()

# Hardened configuration: clamp iterates, fall back to bisection, fail loudly
HARDENED_SOLVER_CONFIG = SolverConfig(strict=True, clamp_domain=True, bisection_fallback=True)
