"""ABI encoding of router calls issued by the fee engine.

Calldata follows the UniswapV2-style Router02 interface the fee engine
drives: removeLiquidity for withdrawals and swapExactTokensForTokens for
conversion into the target asset.
"""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]

from fee_engine.models.types import checked_address

# removeLiquidity(address,address,uint256,uint256,uint256,address,uint256)
REMOVE_LIQUIDITY_SELECTOR = "0xbaa2abde"
# swapExactTokensForTokens(uint256,uint256,address[],address,uint256)
SWAP_EXACT_TOKENS_SELECTOR = "0x38ed1739"


def _address_bytes(name: str, address: str) -> bytes:
    return bytes.fromhex(checked_address(name, address)[2:])


def encode_remove_liquidity(
    token_a: str,
    token_b: str,
    liquidity: int,
    amount_a_min: int,
    amount_b_min: int,
    to: str,
    deadline: int,
) -> str:
    """Encode a removeLiquidity call as 0x-prefixed calldata.

    Raises:
        ValueError: If any address is invalid
    """
    encoded_args = encode(
        ["address", "address", "uint256", "uint256", "uint256", "address", "uint256"],
        [
            _address_bytes("token_a", token_a),
            _address_bytes("token_b", token_b),
            liquidity,
            amount_a_min,
            amount_b_min,
            _address_bytes("recipient", to),
            deadline,
        ],
    )
    return REMOVE_LIQUIDITY_SELECTOR + encoded_args.hex()


def encode_swap_exact_tokens(
    amount_in: int,
    amount_out_min: int,
    path: list[str],
    to: str,
    deadline: int,
) -> str:
    """Encode a swapExactTokensForTokens call as 0x-prefixed calldata.

    Raises:
        ValueError: If any address is invalid or the path has fewer than two tokens
    """
    if len(path) < 2:
        raise ValueError(f"Swap path needs at least two tokens, got {len(path)}")
    path_bytes = [_address_bytes(f"path[{i}]", addr) for i, addr in enumerate(path)]

    encoded_args = encode(
        ["uint256", "uint256", "address[]", "address", "uint256"],
        [amount_in, amount_out_min, path_bytes, _address_bytes("recipient", to), deadline],
    )
    return SWAP_EXACT_TOKENS_SELECTOR + encoded_args.hex()
