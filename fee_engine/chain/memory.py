"""In-memory reference implementation of the engine's collaborators.

Models a UniswapV2-style exchange closely enough to reproduce on-chain fee
processing amounts exactly:
- TokenLedger keeps balances and total supplies of every token, including
  pool shares (a pair's shares are the token at the pair's address)
- ConstantProductPair reads its reserves from its ledger balances and locks
  MINIMUM_LIQUIDITY on the first mint
- SimulatedRouter adds/removes liquidity and swaps along a path, reverting
  on expired deadlines and unmet minimums
- InMemoryChain ties them together and provides snapshot/restore so the
  engine can roll back a failed cycle
"""

from __future__ import annotations

import copy
import hashlib
import math
from dataclasses import dataclass, field

import structlog

from fee_engine.amm.constant_product import constant_product
from fee_engine.amm.encoding import encode_remove_liquidity, encode_swap_exact_tokens
from fee_engine.constants import (
    BPS_DENOMINATOR,
    DEFAULT_ROUTER_FEE_BPS,
    MINIMUM_LIQUIDITY,
    ZERO_ADDRESS,
)
from fee_engine.errors import ExternalCallFailure
from fee_engine.models.types import normalize_address
from fee_engine.safe_int import S

logger = structlog.get_logger()

ROUTER_ADDRESS = "0x7a250d5630b4cf539739df2c5dacb4c659f2488d"


class Revert(ExternalCallFailure):
    """A simulated contract call reverted."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass
class LedgerState:
    balances: dict[str, dict[str, int]] = field(default_factory=dict)
    supplies: dict[str, int] = field(default_factory=dict)


class TokenLedger:
    """Balances of every token, keyed by normalized address."""

    def __init__(self) -> None:
        self._state = LedgerState()

    def balance_of(self, token: str, holder: str) -> int:
        token_balances = self._state.balances.get(normalize_address(token), {})
        return token_balances.get(normalize_address(holder), 0)

    def total_supply(self, token: str) -> int:
        return self._state.supplies.get(normalize_address(token), 0)

    def transfer(self, token: str, sender: str, to: str, amount: int) -> None:
        """Move `amount` of `token` from `sender` to `to`.

        Raises:
            Revert: If the amount is negative or exceeds the sender's balance
        """
        if amount < 0:
            raise Revert("TRANSFER_NEGATIVE_AMOUNT")
        token_norm = normalize_address(token)
        sender_norm = normalize_address(sender)
        balances = self._state.balances.setdefault(token_norm, {})
        if balances.get(sender_norm, 0) < amount:
            raise Revert("TRANSFER_AMOUNT_EXCEEDS_BALANCE")
        balances[sender_norm] -= amount
        to_norm = normalize_address(to)
        balances[to_norm] = balances.get(to_norm, 0) + amount

    def mint(self, token: str, to: str, amount: int) -> None:
        token_norm = normalize_address(token)
        new_supply = (S(self.total_supply(token_norm)) + S(amount)).value
        balances = self._state.balances.setdefault(token_norm, {})
        to_norm = normalize_address(to)
        balances[to_norm] = balances.get(to_norm, 0) + amount
        self._state.supplies[token_norm] = new_supply

    def burn(self, token: str, holder: str, amount: int) -> None:
        token_norm = normalize_address(token)
        holder_norm = normalize_address(holder)
        balances = self._state.balances.setdefault(token_norm, {})
        if balances.get(holder_norm, 0) < amount:
            raise Revert("BURN_AMOUNT_EXCEEDS_BALANCE")
        balances[holder_norm] -= amount
        self._state.supplies[token_norm] = self.total_supply(token_norm) - amount

    def snapshot(self) -> LedgerState:
        return copy.deepcopy(self._state)

    def restore(self, state: LedgerState) -> None:
        self._state = copy.deepcopy(state)


def pair_address(token_a: str, token_b: str) -> str:
    """Deterministic pair address for a token pair (order independent)."""
    token0, token1 = sorted((normalize_address(token_a), normalize_address(token_b)))
    digest = hashlib.sha256(bytes.fromhex(token0[2:]) + bytes.fromhex(token1[2:])).hexdigest()
    return "0x" + digest[-40:]


class ConstantProductPair:
    """A constant product pool whose reserves are its ledger balances."""

    def __init__(self, token_a: str, token_b: str, ledger: TokenLedger) -> None:
        token_a_norm = normalize_address(token_a)
        token_b_norm = normalize_address(token_b)
        if token_a_norm == token_b_norm:
            raise Revert("IDENTICAL_ADDRESSES")
        self.token0, self.token1 = sorted((token_a_norm, token_b_norm))
        self.address = pair_address(self.token0, self.token1)
        self._ledger = ledger

    def __repr__(self) -> str:
        return f"ConstantProductPair({self.address[-8:]}: {self.token0[-8:]}/{self.token1[-8:]})"

    def get_reserves(self) -> tuple[int, int]:
        return (
            self._ledger.balance_of(self.token0, self.address),
            self._ledger.balance_of(self.token1, self.address),
        )

    def reserves_for(self, token_in: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        reserve0, reserve1 = self.get_reserves()
        token_in_norm = normalize_address(token_in)
        if token_in_norm == self.token0:
            return reserve0, reserve1
        if token_in_norm == self.token1:
            return reserve1, reserve0
        raise Revert(f"Token {token_in} not in pair")

    def total_supply(self) -> int:
        return self._ledger.total_supply(self.address)

    def balance_of(self, holder: str) -> int:
        return self._ledger.balance_of(self.address, holder)

    def transfer(self, sender: str, to: str, amount: int) -> None:
        self._ledger.transfer(self.address, sender, to, amount)

    def mint(self, sender: str, to: str, amount0: int, amount1: int) -> int:
        """Deposit both assets from `sender` and mint shares to `to`.

        Returns:
            Shares minted to `to`
        """
        reserve0, reserve1 = self.get_reserves()
        supply = self.total_supply()
        if supply == 0:
            liquidity = math.isqrt((S(amount0) * S(amount1)).value) - MINIMUM_LIQUIDITY
        else:
            liquidity = (
                S(amount0)
                .mul_div(supply, reserve0)
                .min(S(amount1).mul_div(supply, reserve1))
                .value
            )
        if liquidity <= 0:
            raise Revert("INSUFFICIENT_LIQUIDITY_MINTED")

        self._ledger.transfer(self.token0, sender, self.address, amount0)
        self._ledger.transfer(self.token1, sender, self.address, amount1)
        if supply == 0:
            self._ledger.mint(self.address, ZERO_ADDRESS, MINIMUM_LIQUIDITY)
        self._ledger.mint(self.address, to, liquidity)
        return liquidity

    def preview_burn(self, liquidity: int) -> tuple[int, int]:
        """(amount0, amount1) paid out for burning `liquidity` shares."""
        reserve0, reserve1 = self.get_reserves()
        supply = self.total_supply()
        if supply == 0:
            raise Revert("INSUFFICIENT_LIQUIDITY")
        return (
            constant_product.liquidity_value(liquidity, reserve0, supply),
            constant_product.liquidity_value(liquidity, reserve1, supply),
        )

    def burn(self, sender: str, liquidity: int, to: str) -> tuple[int, int]:
        """Burn `sender`'s shares and pay the underlying assets to `to`."""
        amount0, amount1 = self.preview_burn(liquidity)
        if amount0 == 0 or amount1 == 0:
            raise Revert("INSUFFICIENT_LIQUIDITY_BURNED")
        self._ledger.burn(self.address, sender, liquidity)
        self._ledger.transfer(self.token0, self.address, to, amount0)
        self._ledger.transfer(self.token1, self.address, to, amount1)
        return amount0, amount1

    def send(self, token: str, amount: int, to: str) -> None:
        """Pay out swap proceeds."""
        self._ledger.transfer(token, self.address, to, amount)


@dataclass(frozen=True)
class RouterCall:
    """An executed router call, recorded as calldata."""

    method: str
    sender: str
    calldata: str


class SimulatedRouter:
    """UniswapV2 Router02-style router over an InMemoryChain."""

    def __init__(
        self,
        chain: InMemoryChain,
        fee_bps: int = DEFAULT_ROUTER_FEE_BPS,
        address: str = ROUTER_ADDRESS,
    ) -> None:
        if not 0 <= fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {fee_bps}")
        self.address = normalize_address(address)
        self.fee_bps = fee_bps
        self.call_log: list[RouterCall] = []
        self._chain = chain

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - fee_bps); 9980 for 20 bps."""
        return BPS_DENOMINATOR - self.fee_bps

    def _ensure(self, deadline: int) -> None:
        if deadline < self._chain.timestamp():
            raise Revert("EXPIRED")

    def add_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int, int]:
        """Deposit liquidity at the current price, creating the pair if needed.

        Returns:
            (amount_a, amount_b, liquidity)
        """
        self._ensure(deadline)
        pair = self._chain.get_pair(token_a, token_b) or self._chain.create_pair(token_a, token_b)
        reserve_a, reserve_b = pair.reserves_for(token_a)

        if reserve_a == 0 and reserve_b == 0:
            amount_a, amount_b = amount_a_desired, amount_b_desired
        else:
            amount_b_optimal = constant_product.quote(amount_a_desired, reserve_a, reserve_b)
            if amount_b_optimal <= amount_b_desired:
                if amount_b_optimal < amount_b_min:
                    raise Revert("INSUFFICIENT_B_AMOUNT")
                amount_a, amount_b = amount_a_desired, amount_b_optimal
            else:
                amount_a_optimal = constant_product.quote(amount_b_desired, reserve_b, reserve_a)
                if amount_a_optimal < amount_a_min:
                    raise Revert("INSUFFICIENT_A_AMOUNT")
                amount_a, amount_b = amount_a_optimal, amount_b_desired

        if normalize_address(token_a) == pair.token0:
            liquidity = pair.mint(sender, to, amount_a, amount_b)
        else:
            liquidity = pair.mint(sender, to, amount_b, amount_a)
        return amount_a, amount_b, liquidity

    def remove_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int]:
        self._ensure(deadline)
        pair = self._chain.pair_for(token_a, token_b)
        amount0, amount1 = pair.preview_burn(liquidity)
        a_is_token0 = normalize_address(token_a) == pair.token0
        amount_a, amount_b = (amount0, amount1) if a_is_token0 else (amount1, amount0)
        if amount_a < amount_a_min:
            raise Revert("INSUFFICIENT_A_AMOUNT")
        if amount_b < amount_b_min:
            raise Revert("INSUFFICIENT_B_AMOUNT")

        pair.burn(sender, liquidity, to)
        self._record(
            "removeLiquidity",
            sender,
            encode_remove_liquidity(
                normalize_address(token_a),
                normalize_address(token_b),
                liquidity,
                amount_a_min,
                amount_b_min,
                normalize_address(to),
                deadline,
            ),
        )
        return amount_a, amount_b

    def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        if len(path) < 2:
            raise Revert("INVALID_PATH")
        reserves = [
            self._chain.pair_for(token_in, token_out).reserves_for(token_in)
            for token_in, token_out in zip(path, path[1:])
        ]
        return constant_product.get_amounts_out(amount_in, reserves, self.fee_multiplier)

    def swap_exact_tokens_for_tokens(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        self._ensure(deadline)
        amounts = self.get_amounts_out(amount_in, path)
        if amounts[-1] == 0 or amounts[-1] < amount_out_min:
            raise Revert("INSUFFICIENT_OUTPUT_AMOUNT")

        pairs = [self._chain.pair_for(a, b) for a, b in zip(path, path[1:])]
        self._chain.ledger.transfer(path[0], sender, pairs[0].address, amount_in)
        for i, pair in enumerate(pairs):
            recipient = pairs[i + 1].address if i + 1 < len(pairs) else to
            pair.send(path[i + 1], amounts[i + 1], recipient)

        self._record(
            "swapExactTokensForTokens",
            sender,
            encode_swap_exact_tokens(
                amount_in,
                amount_out_min,
                [normalize_address(p) for p in path],
                normalize_address(to),
                deadline,
            ),
        )
        return amounts

    def _record(self, method: str, sender: str, calldata: str) -> None:
        self.call_log.append(RouterCall(method=method, sender=normalize_address(sender), calldata=calldata))
        logger.debug("router_call", method=method, sender=sender[-8:])


@dataclass(frozen=True)
class ChainSnapshot:
    ledger: LedgerState
    timestamp: int
    call_count: int


class InMemoryChain:
    """Ledger, pairs, router and clock behind the Host protocol."""

    def __init__(
        self,
        *,
        fee_bps: int = DEFAULT_ROUTER_FEE_BPS,
        start_time: int = 1_700_000_000,
    ) -> None:
        self.ledger = TokenLedger()
        self.router = SimulatedRouter(self, fee_bps)
        self._pairs: dict[frozenset[str], ConstantProductPair] = {}
        self._time = start_time

    # --- Host ---

    def timestamp(self) -> int:
        return self._time

    def advance(self, seconds: int) -> None:
        self._time += seconds

    def snapshot(self) -> ChainSnapshot:
        return ChainSnapshot(
            ledger=self.ledger.snapshot(),
            timestamp=self._time,
            call_count=len(self.router.call_log),
        )

    def restore(self, snapshot: ChainSnapshot) -> None:
        self.ledger.restore(snapshot.ledger)
        self._time = snapshot.timestamp
        del self.router.call_log[snapshot.call_count :]

    # --- Pair factory ---

    def create_pair(self, token_a: str, token_b: str) -> ConstantProductPair:
        key = frozenset([normalize_address(token_a), normalize_address(token_b)])
        if key in self._pairs:
            raise Revert("PAIR_EXISTS")
        pair = ConstantProductPair(token_a, token_b, self.ledger)
        self._pairs[key] = pair
        return pair

    def get_pair(self, token_a: str, token_b: str) -> ConstantProductPair | None:
        key = frozenset([normalize_address(token_a), normalize_address(token_b)])
        return self._pairs.get(key)

    def pair_for(self, token_a: str, token_b: str) -> ConstantProductPair:
        pair = self.get_pair(token_a, token_b)
        if pair is None:
            raise Revert("PAIR_NOT_FOUND")
        return pair
