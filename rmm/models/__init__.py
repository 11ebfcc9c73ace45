"""Pydantic models for pool snapshots handed in by a host."""

from rmm.models.pool import CurveKind, PoolSnapshot
from rmm.models.types import Int256, Uint256

__all__ = [
    # Types
    "Int256",
    "Uint256",
    # Pool models
    "CurveKind",
    "PoolSnapshot",
]
