"""Tests for turning pool snapshots into typed curve values."""

from rmm.curve import (
    OptionsReplication,
    SimplifiedLogNormal,
    parse_curve,
    parse_pool,
    parse_reserves,
)
from rmm.models import PoolSnapshot
from tests.helpers import LIQUIDITY, SEVEN_DAYS, SIGMA, STRIKE, WAD, make_snapshot


def _snapshot(**overrides) -> PoolSnapshot:
    return PoolSnapshot.model_validate(make_snapshot(**overrides))


def _simplified(**overrides) -> PoolSnapshot:
    fields = {
        "kind": "simplifiedLogNormal",
        "reserveQuote": str(460 * WAD),
        "strike": None,
        "sigma": None,
        "tauSeconds": None,
        "mean": str(WAD),
        "width": str(10**17),
    }
    fields.update(overrides)
    return _snapshot(**fields)


class TestParseCurve:
    """Curve variant selection and validation."""

    def test_options_replication(self):
        """An options snapshot yields OptionsReplication."""
        params = parse_curve(_snapshot())
        assert params == OptionsReplication(
            strike=STRIKE, sigma=SIGMA, tau_seconds=SEVEN_DAYS
        )

    def test_simplified(self):
        """A simplified snapshot yields SimplifiedLogNormal."""
        params = parse_curve(_simplified(width="-100000000000000000"))
        assert params == SimplifiedLogNormal(mean=WAD, width=-(10**17))

    def test_missing_field(self):
        """A missing required field skips the pool."""
        assert parse_curve(_snapshot(sigma=None)) is None
        assert parse_curve(_simplified(mean=None)) is None

    def test_invalid_parameters(self):
        """Parameters that fail validation skip the pool."""
        assert parse_curve(_snapshot(strike="0")) is None
        assert parse_curve(_snapshot(sigma="0")) is None
        assert parse_curve(_simplified(width=str(11 * WAD))) is None


class TestParsePool:
    """Full snapshot parsing."""

    def test_valid_pool(self):
        """Reserves, liquidity and fee come through as ints."""
        parsed = parse_pool(_snapshot())
        assert parsed is not None
        assert parsed.reserves.base == 500 * WAD
        assert parsed.reserves.liquidity == LIQUIDITY
        assert parsed.fee == 3 * 10**15

    def test_parse_reserves(self):
        """parse_reserves reads the three amounts."""
        reserves = parse_reserves(_simplified())
        assert (reserves.base, reserves.quote, reserves.liquidity) == (
            500 * WAD,
            460 * WAD,
            LIQUIDITY,
        )

    def test_fee_of_one_rejected(self):
        """A 100% fee is not a usable pool."""
        assert parse_pool(_snapshot(swapFee=str(WAD))) is None

    def test_base_above_liquidity_rejected(self):
        """Reserves that the liquidity cannot back are rejected."""
        assert parse_pool(_snapshot(reserveBase=str(LIQUIDITY + 1))) is None

    def test_quote_above_capacity_rejected(self):
        """quote > scale * L is rejected."""
        assert parse_pool(_simplified(reserveQuote=str(LIQUIDITY + 1))) is None

    def test_empty_pool_accepted(self):
        """A pool with no liquidity yet parses (first deposit pending)."""
        parsed = parse_pool(_snapshot(reserveBase="0", reserveQuote="0", liquidity="0"))
        assert parsed is not None
        assert parsed.reserves.liquidity == 0

    def test_invalid_curve_propagates(self):
        """An invalid curve makes the whole pool invalid."""
        assert parse_pool(_snapshot(tauSeconds=None)) is None
