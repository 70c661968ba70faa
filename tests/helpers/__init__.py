"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token and party addresses, amount helpers
- factories: In-memory chain, engine and processor builders
"""

from tests.helpers.constants import (
    ADMIN,
    BURN_ADDRESS,
    E18,
    ENGINE,
    FEE_HANDLER,
    STRANGER,
    TARGET,
    TEAM_WALLET,
    TOKEN1,
    TOKEN2,
    UNRELATED,
    expand_to_18_decimals,
)
from tests.helpers.factories import (
    FeeSetup,
    add_liquidity,
    make_chain,
    make_engine,
    make_fee_setup,
    make_processor,
)

__all__ = [
    # Constants
    "ADMIN",
    "BURN_ADDRESS",
    "E18",
    "ENGINE",
    "FEE_HANDLER",
    "STRANGER",
    "TARGET",
    "TEAM_WALLET",
    "TOKEN1",
    "TOKEN2",
    "UNRELATED",
    "expand_to_18_decimals",
    # Factories
    "FeeSetup",
    "add_liquidity",
    "make_chain",
    "make_engine",
    "make_fee_setup",
    "make_processor",
]
