"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Curve parameters and common amounts
- factories: Curve, pool and snapshot factory functions
"""

from tests.helpers.constants import (
    DEFAULT_TOLERANCE,
    FEE_30_BPS,
    HALF_LIQUIDITY,
    LIQUIDITY,
    MEAN,
    ONE_DAY,
    SEVEN_DAYS,
    SIGMA,
    STRIKE,
    THIRTY_DAYS,
    WAD,
    WIDTH,
)
from tests.helpers.factories import make_options, make_pool, make_simplified, make_snapshot

__all__ = [
    # Constants
    "WAD",
    "DEFAULT_TOLERANCE",
    "ONE_DAY",
    "SEVEN_DAYS",
    "THIRTY_DAYS",
    "STRIKE",
    "SIGMA",
    "MEAN",
    "WIDTH",
    "LIQUIDITY",
    "HALF_LIQUIDITY",
    "FEE_30_BPS",
    # Factories
    "make_options",
    "make_simplified",
    "make_pool",
    "make_snapshot",
]
