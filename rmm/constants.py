"""Numeric constants that form part of the pricing contract.

Changing any of these is a behavioral break for callers that persist
reserves or compare quotes across versions.
"""

# 18-decimal fixed-point scale: WAD represents 1.0
WAD = 10**18

# Default Newton-Raphson budget and absolute tolerance (in wei of the residual/step)
DEFAULT_MAX_ITERATIONS = 20
DEFAULT_TOLERANCE = 10

# Bisection needs ~log2(range / tolerance) steps; 256 covers any uint256 bracket
DEFAULT_MAX_BISECTION_ITERATIONS = 256

# Fixed day count for tau: 365-day year, no calendar awareness
SECONDS_PER_YEAR = 365 * 86_400

# Magnitude bound for the simplified log-normal width parameter
MAX_WIDTH = 10 * WAD
