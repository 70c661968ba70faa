"""One processing cycle over every registered pool.

For each pool, in registry order:

1. Split: the engine's shares go to the team wallet and the fee handler.
2. Withdraw: all of the handler's shares of the pool are removed through
   the router, with floors from WithdrawalCalculator.
3. Threshold: if the guaranteed target-asset amount is below the configured
   minimum, the pool is skipped (or, in strict mode, the cycle aborts).
4. Swap: the pool's non-target asset held at the handler is converted
   into the target asset, with the floor from SwapAdvisor.
5. Burn: the target asset this pool produced (withdrawn, swapped, and
   carried over from an earlier skipped cycle) goes to the burn address.

A skipped pool's withdrawn assets are recorded in `carried` and stay at
the handler until that same pool burns; they are never attributed to
another pool.

BatchProcessor performs no rollback itself. It raises on hard failures and
raises InvalidAmount when no pool burned anything; FeeEngine wraps it in a
snapshot/restore transaction.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from fee_engine.chain.base import AssetLedger, Host, LiquidityPool, Router
from fee_engine.constants import DEADLINE_WINDOW
from fee_engine.errors import InvalidAmount, InvalidPool, ReentrantCall, ThresholdShortfall
from fee_engine.fees.config import SplitConfig
from fee_engine.fees.result import (
    Burned,
    CycleReport,
    PoolOutcome,
    ShortfallMode,
    SkipReason,
    Skipped,
)
from fee_engine.fees.splitter import ShareSplit, fee_splitter
from fee_engine.fees.swap_advisor import SwapQuote, swap_advisor
from fee_engine.fees.withdrawal import WithdrawalMinimums, withdrawal_calculator
from fee_engine.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class CycleParties:
    """Addresses a cycle moves assets between."""

    engine: str
    team_wallet: str
    fee_handler: str
    burn_address: str
    target_token: str


def pool_assets(pool: LiquidityPool, target_token: str) -> tuple[str, str]:
    """(target, other) assets of a pool.

    Raises:
        InvalidPool: If the pool does not contain the target asset
    """
    token0 = normalize_address(pool.token0)
    token1 = normalize_address(pool.token1)
    target = normalize_address(target_token)
    if token0 == target:
        return token0, token1
    if token1 == target:
        return token1, token0
    raise InvalidPool(f"Pool {pool.address} does not hold target asset {target_token}")


def target_reserves(pool: LiquidityPool, target_token: str) -> tuple[int, int]:
    """Pool reserves ordered as (target, other)."""
    reserve0, reserve1 = pool.get_reserves()
    if normalize_address(pool.token0) == normalize_address(target_token):
        return reserve0, reserve1
    return reserve1, reserve0


class BatchProcessor:
    """Drives split -> withdraw -> swap -> burn for a sequence of pools."""

    def __init__(
        self,
        *,
        parties: CycleParties,
        router: Router,
        ledger: AssetLedger,
        host: Host,
        config: SplitConfig,
        mode: ShortfallMode = ShortfallMode.SKIP,
        carried: dict[str, tuple[int, int]] | None = None,
    ) -> None:
        self.parties = parties
        self.router = router
        self.ledger = ledger
        self.host = host
        self.config = config
        self.mode = mode
        # Pool address -> (target, other) held at the handler from earlier cycles.
        # Mutated in place; the owner restores it when a cycle is rolled back.
        self.carried = carried if carried is not None else {}
        # Pools already entered this cycle
        self._processed: set[str] = set()

    def _deadline(self) -> int:
        return self.host.timestamp() + DEADLINE_WINDOW

    def run(self, pools: Iterable[LiquidityPool]) -> CycleReport:
        """Process every pool in order.

        Returns:
            CycleReport with one outcome per pool

        Raises:
            InvalidAmount: If no pool burned a non-zero amount
            ThresholdShortfall: In strict mode, on the first shortfall
            FeeEngineError: Any hard failure from a collaborator or calculation
        """
        report = CycleReport(mode=self.mode)
        for pool in pools:
            report.outcomes.append(self.process_pool(pool))

        if not report.succeeded:
            raise InvalidAmount(
                f"invalid amount: no pool burned anything ({len(report.outcomes)} processed)"
            )
        return report

    def split_shares(self, pool: LiquidityPool) -> ShareSplit:
        """Send the engine's shares of `pool` to the team wallet and the handler.

        Afterwards the engine holds no shares of the pool.
        """
        shares = pool.balance_of(self.parties.engine)
        split = fee_splitter.split(shares, self.config.team_bps)
        if split.team > 0:
            pool.transfer(self.parties.engine, self.parties.team_wallet, split.team)
        if split.handler > 0:
            pool.transfer(self.parties.engine, self.parties.fee_handler, split.handler)
        logger.info(
            "pool_split",
            pool=normalize_address(pool.address)[-8:],
            team=split.team,
            handler=split.handler,
        )
        return split

    def withdrawal_floors(self, pool: LiquidityPool, share_amount: int) -> WithdrawalMinimums:
        """Floors for burning `share_amount`, ordered (target, other)."""
        reserve_target, reserve_other = target_reserves(pool, self.parties.target_token)
        return withdrawal_calculator.min_amounts(
            reserve_target,
            reserve_other,
            share_amount,
            pool.total_supply(),
            self.config.slippage_bps,
        )

    def swap_quote(self, pool: LiquidityPool, amount_in: int) -> SwapQuote:
        """Quote converting `amount_in` of the pool's other asset into the target."""
        reserve_target, reserve_other = target_reserves(pool, self.parties.target_token)
        return swap_advisor.quote(
            amount_in,
            reserve_other,
            reserve_target,
            self.router.fee_multiplier,
            self.config.slippage_bps,
        )

    def process_pool(self, pool: LiquidityPool) -> PoolOutcome:
        address = normalize_address(pool.address)
        if address in self._processed:
            raise ReentrantCall(f"Pool {pool.address} already entered this cycle")
        self._processed.add(address)

        target, other = pool_assets(pool, self.parties.target_token)
        handler = self.parties.fee_handler

        if pool.balance_of(self.parties.engine) == 0:
            logger.info("pool_skipped", pool=address[-8:], reason=SkipReason.NO_SHARES.value)
            return Skipped(pool=address, reason=SkipReason.NO_SHARES)

        split = self.split_shares(pool)

        # Everything the handler holds for this pool: shares left over from
        # earlier dust splits and assets from an earlier skipped cycle.
        shares = pool.balance_of(handler)
        target_held, other_held = self.carried.pop(address, (0, 0))

        floors = self.withdrawal_floors(pool, shares)
        withdrawn = (0, 0)
        if floors.amount_a > 0 and floors.amount_b > 0:
            withdrawn = self.router.remove_liquidity(
                handler,
                target,
                other,
                shares,
                floors.amount_a_min,
                floors.amount_b_min,
                handler,
                self._deadline(),
            )
            target_held += withdrawn[0]
            other_held += withdrawn[1]
            logger.info(
                "pool_withdrawn",
                pool=address[-8:],
                shares=shares,
                target_amount=withdrawn[0],
                other_amount=withdrawn[1],
            )

        if floors.amount_a_min < self.config.min_target_amount:
            if self.mode is ShortfallMode.STRICT:
                raise ThresholdShortfall(address, floors.amount_a_min, self.config.min_target_amount)
            self._carry(address, target_held, other_held)
            logger.info(
                "pool_skipped",
                pool=address[-8:],
                reason=SkipReason.BELOW_THRESHOLD.value,
                target_floor=floors.amount_a_min,
                threshold=self.config.min_target_amount,
            )
            return Skipped(
                pool=address,
                reason=SkipReason.BELOW_THRESHOLD,
                split=split,
                target_floor=floors.amount_a_min,
            )

        swapped_in = swapped_out = 0
        if other_held > 0:
            quote = self.swap_quote(pool, other_held)
            if quote.amount_out > 0:
                amounts = self.router.swap_exact_tokens_for_tokens(
                    handler,
                    quote.amount_in,
                    quote.amount_out_min,
                    [other, target],
                    handler,
                    self._deadline(),
                )
                swapped_in, swapped_out = amounts[0], amounts[-1]
                target_held += swapped_out
                other_held -= swapped_in
                logger.info(
                    "pool_swapped",
                    pool=address[-8:],
                    amount_in=swapped_in,
                    amount_out=swapped_out,
                    amount_out_min=quote.amount_out_min,
                )

        # Unswappable dust stays with the pool for a later cycle
        self._carry(address, 0, other_held)

        if target_held == 0:
            logger.info("pool_skipped", pool=address[-8:], reason=SkipReason.NOTHING_TO_BURN.value)
            return Skipped(pool=address, reason=SkipReason.NOTHING_TO_BURN, split=split)

        self.ledger.transfer(target, handler, self.parties.burn_address, target_held)
        logger.info("pool_burned", pool=address[-8:], amount=target_held)

        return Burned(
            pool=address,
            amount=target_held,
            split=split,
            withdrawn=withdrawn,
            swapped_in=swapped_in,
            swapped_out=swapped_out,
        )

    def _carry(self, pool: str, target_amount: int, other_amount: int) -> None:
        if target_amount or other_amount:
            self.carried[pool] = (target_amount, other_amount)
