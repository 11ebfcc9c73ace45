"""Pool snapshot parsing.

Functions to turn a host-provided PoolSnapshot into typed curve values.
Malformed or incomplete snapshots are logged and skipped (None), never raised.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from rmm.constants import WAD
from rmm.models.pool import CurveKind, PoolSnapshot

from .errors import CurveError
from .params import CurveVariant, OptionsReplication, ReserveState, SimplifiedLogNormal

logger = structlog.get_logger()


@dataclass(frozen=True)
class ParsedPool:
    """Typed view of a pool snapshot."""

    params: CurveVariant
    reserves: ReserveState
    fee: int


def _require(snapshot: PoolSnapshot, *fields: str) -> dict[str, int] | None:
    """Collect integer fields, logging the first one that is missing."""
    values = {}
    for name in fields:
        raw = getattr(snapshot, name)
        if raw is None:
            logger.warning(
                "snapshot_missing_field",
                kind=snapshot.kind.value,
                field=name,
            )
            return None
        values[name] = int(raw)
    return values


def parse_curve(snapshot: PoolSnapshot) -> CurveVariant | None:
    """Build the curve variant named by snapshot.kind.

    Returns None if a required field is missing or the parameters are invalid.
    """
    if snapshot.kind is CurveKind.OPTIONS_REPLICATION:
        values = _require(snapshot, "strike", "sigma", "tau_seconds")
        if values is None:
            return None
        factory = OptionsReplication
    else:
        values = _require(snapshot, "mean", "width")
        if values is None:
            return None
        factory = SimplifiedLogNormal

    try:
        return factory(**values)
    except CurveError as e:
        logger.warning("snapshot_invalid_curve", kind=snapshot.kind.value, error=str(e))
        return None


def parse_reserves(snapshot: PoolSnapshot) -> ReserveState:
    """Reserves and liquidity from a snapshot (Uint256 fields are non-negative)."""
    return ReserveState(
        base=int(snapshot.reserve_base),
        quote=int(snapshot.reserve_quote),
        liquidity=int(snapshot.liquidity),
    )


def parse_pool(snapshot: PoolSnapshot) -> ParsedPool | None:
    """Parse a full snapshot into curve parameters, reserves and fee.

    Returns None if the curve is invalid, the fee is not below 1.0, or the
    reserves exceed what the liquidity can back.
    """
    params = parse_curve(snapshot)
    if params is None:
        return None

    fee = int(snapshot.swap_fee)
    if fee >= WAD:
        logger.warning("snapshot_invalid_fee", fee=fee)
        return None

    reserves = parse_reserves(snapshot)
    if reserves.liquidity > 0 and (
        reserves.base > reserves.liquidity
        or reserves.quote * WAD > params.scale * reserves.liquidity
    ):
        logger.warning(
            "snapshot_reserves_out_of_range",
            base=reserves.base,
            quote=reserves.quote,
            liquidity=reserves.liquidity,
        )
        return None

    return ParsedPool(params=params, reserves=reserves, fee=fee)
