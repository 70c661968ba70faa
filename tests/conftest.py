"""Pytest configuration and fixtures."""

import pytest

from fee_engine.api.endpoints import set_engine
from fee_engine.chain.memory import InMemoryChain
from tests.helpers.factories import FeeSetup, make_chain, make_fee_setup


@pytest.fixture
def chain() -> InMemoryChain:
    """Chain with test tokens minted to the administrator and no pools."""
    return make_chain()


@pytest.fixture
def fee_setup() -> FeeSetup:
    """Reference deployment with only the first pool registered."""
    return make_fee_setup()


@pytest.fixture
def two_pool_setup() -> FeeSetup:
    """Reference deployment with both pools registered."""
    return make_fee_setup(register_second=True)


@pytest.fixture(autouse=True)
def _reset_api_engine():
    """Keep the API's installed engine from leaking between tests."""
    yield
    set_engine(None)
