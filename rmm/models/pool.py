"""Pool snapshot model.

A host hands the engine the pool's stored state as JSON. Every amount is an
18-decimal fixed-point integer serialized as a decimal string.
"""

from enum import Enum

from pydantic import BaseModel, Field

from rmm.models.types import Int256, Uint256


class CurveKind(str, Enum):
    """Which trading-curve variant the pool uses."""

    OPTIONS_REPLICATION = "optionsReplication"
    SIMPLIFIED_LOG_NORMAL = "simplifiedLogNormal"


class PoolSnapshot(BaseModel):
    """Stored state of one pool.

    Options-replication pools carry strike/sigma/tauSeconds; simplified
    log-normal pools carry mean/width. Fields for the other variant are
    ignored.
    """

    kind: CurveKind
    reserve_base: Uint256 = Field(alias="reserveBase")
    reserve_quote: Uint256 = Field(alias="reserveQuote")
    liquidity: Uint256

    # Options replication
    strike: Uint256 | None = None
    sigma: Uint256 | None = None
    tau_seconds: Uint256 | None = Field(default=None, alias="tauSeconds")

    # Simplified log-normal
    mean: Uint256 | None = None
    width: Int256 | None = None

    swap_fee: Uint256 = Field(
        default="0",
        alias="swapFee",
        description="Swap fee as an 18-decimal fraction of the input amount.",
    )

    model_config = {"populate_by_name": True}
