"""Curve parameter and reserve dataclasses.

The two trading-curve variants share one formula set; each exposes the
pieces that differ between them:

    k = ppf(base / L) + ppf(quote / (scale * L)) + spread

| Variant             | scale  | spread        | convexity    |
|---------------------|--------|---------------|--------------|
| OptionsReplication  | strike | sigma*sqrt(t) | spread^2 / 2 |
| SimplifiedLogNormal | mean   | width         | 0            |
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rmm.constants import MAX_WIDTH, SECONDS_PER_YEAR, WAD
from rmm.math.fixed_point import mul_wad_down, sqrt_wad

from .errors import DomainError, InvalidCurveParameters


class Asset(str, Enum):
    """Which side of the pool a token amount refers to."""

    BASE = "base"
    QUOTE = "quote"

    @property
    def other(self) -> Asset:
        return Asset.QUOTE if self is Asset.BASE else Asset.BASE


def tau_years_from_seconds(seconds: int) -> int:
    """Convert seconds to a WAD year fraction on a fixed 365-day year."""
    if seconds < 0:
        raise InvalidCurveParameters(f"tau must be non-negative, got {seconds}")
    return seconds * WAD // SECONDS_PER_YEAR


def sigma_sqrt_tau(sigma: int, tau_years: int) -> int:
    """sigma * sqrt(tau) in WAD, both factors rounded down."""
    return mul_wad_down(sigma, sqrt_wad(tau_years))


@dataclass(frozen=True)
class OptionsReplication:
    """Curve replicating a covered call struck at `strike`.

    Attributes:
        strike: Strike price in quote per base (WAD, must be positive)
        sigma: Annualized volatility (WAD). May be zero only at maturity.
        tau_seconds: Time remaining to maturity in seconds
    """

    strike: int
    sigma: int
    tau_seconds: int

    def __post_init__(self) -> None:
        if self.strike <= 0:
            raise InvalidCurveParameters(f"strike must be positive, got {self.strike}")
        if self.tau_seconds < 0:
            raise InvalidCurveParameters(f"tau must be non-negative, got {self.tau_seconds}")
        if self.sigma < 0 or (self.sigma == 0 and self.tau_seconds != 0):
            raise InvalidCurveParameters(
                f"sigma must be positive before maturity, got {self.sigma}"
            )

    @property
    def tau_years(self) -> int:
        return tau_years_from_seconds(self.tau_seconds)

    @property
    def scale(self) -> int:
        return self.strike

    @property
    def spread(self) -> int:
        """sigma * sqrt(tau); exactly zero at maturity."""
        if self.tau_seconds == 0:
            return 0
        return sigma_sqrt_tau(self.sigma, self.tau_years)

    @property
    def convexity(self) -> int:
        """sigma^2 * tau / 2, the drift term of the spot price."""
        spread = self.spread
        return mul_wad_down(spread, spread) // 2


@dataclass(frozen=True)
class SimplifiedLogNormal:
    """Two-parameter log-normal curve.

    Attributes:
        mean: Price scale in quote per base (WAD, must be positive)
        width: Signed spread added to the invariant (WAD, |width| <= 10 WAD)
    """

    mean: int
    width: int

    def __post_init__(self) -> None:
        if self.mean <= 0:
            raise InvalidCurveParameters(f"mean must be positive, got {self.mean}")
        if abs(self.width) > MAX_WIDTH:
            raise InvalidCurveParameters(
                f"|width| must not exceed {MAX_WIDTH}, got {self.width}"
            )

    @property
    def scale(self) -> int:
        return self.mean

    @property
    def spread(self) -> int:
        return self.width

    @property
    def convexity(self) -> int:
        return 0


CurveVariant = OptionsReplication | SimplifiedLogNormal


@dataclass(frozen=True)
class ReserveState:
    """Reserves and liquidity related by the trading function.

    Attributes:
        base: Base (risky) token reserve in WAD
        quote: Quote (stable) token reserve in WAD
        liquidity: Total liquidity L in WAD
    """

    base: int
    quote: int
    liquidity: int

    def __post_init__(self) -> None:
        if self.base < 0 or self.quote < 0 or self.liquidity < 0:
            raise DomainError(
                f"reserves must be non-negative, got base={self.base} "
                f"quote={self.quote} liquidity={self.liquidity}"
            )

    def reserve(self, asset: Asset) -> int:
        """Get the reserve for one side of the pool."""
        return self.base if asset is Asset.BASE else self.quote
