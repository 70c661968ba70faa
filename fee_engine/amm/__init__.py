"""AMM math and router calldata encoding."""

from fee_engine.amm.constant_product import (
    DEFAULT_FEE_MULTIPLIER,
    ConstantProductAMM,
    constant_product,
)
from fee_engine.amm.encoding import encode_remove_liquidity, encode_swap_exact_tokens

__all__ = [
    "ConstantProductAMM",
    "DEFAULT_FEE_MULTIPLIER",
    "constant_product",
    "encode_remove_liquidity",
    "encode_swap_exact_tokens",
]
