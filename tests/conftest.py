"""Pytest configuration and fixtures."""

import pytest

from rmm.curve import OptionsReplication, ReserveState, SimplifiedLogNormal
from tests.helpers import make_options, make_pool, make_simplified


@pytest.fixture
def options_params() -> OptionsReplication:
    """Options-replication curve: strike 2000, 100% vol, 7 days to maturity."""
    return make_options()


@pytest.fixture
def expired_options_params() -> OptionsReplication:
    """Options-replication curve at maturity (zero spread)."""
    return make_options(tau_seconds=0)


@pytest.fixture
def simplified_params() -> SimplifiedLogNormal:
    """Simplified log-normal curve: mean 1.0, width 0.1."""
    return make_simplified()


@pytest.fixture
def options_pool(options_params: OptionsReplication) -> ReserveState:
    """1000-liquidity options pool with half of it in base."""
    return make_pool(options_params)


@pytest.fixture
def simplified_pool(simplified_params: SimplifiedLogNormal) -> ReserveState:
    """1000-liquidity simplified pool with half of it in base."""
    return make_pool(simplified_params)
