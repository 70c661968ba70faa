"""Fee engine: administration, previews and atomic processing cycles.

FeeEngine is the entry point a scheduler, bot or operator talks to. It owns
the pool registry and the split configuration, checks the administrator
identity on every mutating admin operation, and runs processing cycles as
all-or-nothing transactions against its Host.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

import structlog

from fee_engine.batch import BatchProcessor, CycleParties, pool_assets
from fee_engine.chain.base import AssetLedger, Host, LiquidityPool, Router
from fee_engine.errors import ReentrantCall, Unauthorized
from fee_engine.fees.config import DEFAULT_SPLIT_CONFIG, SplitConfig
from fee_engine.fees.result import CycleReport, ShortfallMode
from fee_engine.fees.splitter import ShareSplit
from fee_engine.fees.withdrawal import withdrawal_calculator
from fee_engine.models.types import checked_address, normalize_address
from fee_engine.pools.registry import PoolRegistry

logger = structlog.get_logger()


class FeeEngine:
    """Custodian of collected pool shares and driver of fee processing.

    Args:
        address: The engine's own holder address (where fees accumulate)
        admin: Administrator address allowed to mutate configuration
        target_token: Asset that is burned
        router: Router collaborator used for withdrawals and swaps
        ledger: Token balances collaborator
        host: Execution environment (clock, snapshot/restore)
        team_wallet: Recipient of the team share of pool shares
        fee_handler: Recipient of the handler share; holds assets between
            withdrawal and burn
        burn_address: Sink for the target asset
        config: Initial split configuration
        registry: Pre-populated registry (defaults to empty)
    """

    def __init__(
        self,
        *,
        address: str,
        admin: str,
        target_token: str,
        router: Router,
        ledger: AssetLedger,
        host: Host,
        team_wallet: str,
        fee_handler: str,
        burn_address: str,
        config: SplitConfig = DEFAULT_SPLIT_CONFIG,
        registry: PoolRegistry | None = None,
    ) -> None:
        self.address = checked_address("engine", address)
        self._admin = checked_address("admin", admin)
        self.target_token = checked_address("target token", target_token)
        self.router = router
        self.ledger = ledger
        self.host = host
        self._team_wallet = checked_address("team wallet", team_wallet)
        self.fee_handler = checked_address("fee handler", fee_handler)
        self.burn_address = checked_address("burn", burn_address)
        self._config = config
        self.registry = registry if registry is not None else PoolRegistry()
        self._in_transaction = False
        # Assets withdrawn for skipped pools, awaiting their next burn
        self._carried: dict[str, tuple[int, int]] = {}

    # --- Read-only state ---

    @property
    def admin(self) -> str:
        return self._admin

    @property
    def team_wallet(self) -> str:
        return self._team_wallet

    @property
    def config(self) -> SplitConfig:
        return self._config

    def pool_count(self) -> int:
        return self.registry.count()

    def pool_at(self, index: int) -> LiquidityPool:
        return self.registry.at(index)

    def carried_assets(self, pool_address: str) -> tuple[int, int]:
        """(target, other) withdrawn for a skipped pool and not yet burned."""
        return self._carried.get(normalize_address(pool_address), (0, 0))

    # --- Administration ---

    def _require_admin(self, caller: str) -> None:
        if normalize_address(caller) != self._admin:
            raise Unauthorized(f"{caller} is not the administrator")

    def register_pool(self, pool: LiquidityPool, *, caller: str) -> int:
        """Add a pool to the processing order.

        Returns:
            The pool's position in processing order

        Raises:
            Unauthorized: If caller is not the administrator
            InvalidPool: If the pool does not hold the target asset
            DuplicatePool: If the pool is already registered
        """
        self._require_admin(caller)
        pool_assets(pool, self.target_token)
        position = self.registry.register(pool)
        logger.info("pool_registered", pool=normalize_address(pool.address), position=position)
        return position

    def _update_config(self, caller: str, **changes: int) -> None:
        self._require_admin(caller)
        self._config = replace(self._config, **changes)
        logger.info("split_config_updated", **changes)

    def set_split_ratio(self, team_bps: int, *, caller: str) -> None:
        """Set the team's share in basis points (the handler gets the rest)."""
        self._update_config(caller, team_bps=team_bps)

    def set_slippage_tolerance(self, bps: int, *, caller: str) -> None:
        self._update_config(caller, slippage_bps=bps)

    def set_minimum_target_threshold(self, amount: int, *, caller: str) -> None:
        self._update_config(caller, min_target_amount=amount)

    def set_team_wallet(self, wallet: str, *, caller: str) -> None:
        self._require_admin(caller)
        self._team_wallet = checked_address("team wallet", wallet)
        logger.info("team_wallet_updated", team_wallet=self._team_wallet)

    def transfer_admin(self, new_admin: str, *, caller: str) -> None:
        self._require_admin(caller)
        self._admin = checked_address("admin", new_admin)
        logger.info("admin_transferred", admin=self._admin)

    # --- Previews ---

    def preview_withdrawal_minimums(
        self,
        reserve_a: int,
        reserve_b: int,
        share_amount: int,
        total_supply: int,
    ) -> tuple[int, int]:
        """(amount_a_min, amount_b_min) at the configured slippage tolerance."""
        return withdrawal_calculator.min_amounts(
            reserve_a, reserve_b, share_amount, total_supply, self._config.slippage_bps
        ).as_tuple()

    def get_liquidity_min_amounts(self, pool_address: str, share_amount: int) -> tuple[int, int]:
        """Floors for withdrawing `share_amount` from a registered pool.

        Uses the pool's live reserves and supply; ordered as (token0, token1).

        Raises:
            UnknownPool: If the pool is not registered
        """
        pool = self.registry.get(pool_address)
        reserve0, reserve1 = pool.get_reserves()
        return self.preview_withdrawal_minimums(
            reserve0, reserve1, share_amount, pool.total_supply()
        )

    def get_swap_info(self, pool_address: str) -> tuple[int, int]:
        """(amount_in, amount_out_min) for swapping the handler's non-target
        balance of a registered pool into the target asset at live reserves.

        Raises:
            UnknownPool: If the pool is not registered
        """
        pool = self.registry.get(pool_address)
        _, other = pool_assets(pool, self.target_token)
        processor = self._processor(ShortfallMode.SKIP)
        amount_in = self.ledger.balance_of(other, self.fee_handler)
        return processor.swap_quote(pool, amount_in).as_tuple()

    # --- Processing ---

    def _processor(self, mode: ShortfallMode) -> BatchProcessor:
        parties = CycleParties(
            engine=self.address,
            team_wallet=self._team_wallet,
            fee_handler=self.fee_handler,
            burn_address=self.burn_address,
            target_token=self.target_token,
        )
        return BatchProcessor(
            parties=parties,
            router=self.router,
            ledger=self.ledger,
            host=self.host,
            config=self._config,
            mode=mode,
            carried=self._carried,
        )

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Run a block atomically: any exception restores the host snapshot
        and the carried assets of skipped pools."""
        if self._in_transaction:
            raise ReentrantCall(f"{operation} called while another operation is in flight")
        self._in_transaction = True
        snapshot = self.host.snapshot()
        carried = dict(self._carried)
        try:
            yield
        except Exception as err:
            self.host.restore(snapshot)
            self._carried.clear()
            self._carried.update(carried)
            logger.warning(
                "cycle_aborted",
                operation=operation,
                error=type(err).__name__,
                detail=str(err),
            )
            raise
        finally:
            self._in_transaction = False

    def send_shares(self, pool_address: str) -> ShareSplit:
        """Split one registered pool's shares without running a full cycle.

        Raises:
            UnknownPool: If the pool is not registered
        """
        pool = self.registry.get(pool_address)
        with self._transaction("send_shares"):
            return self._processor(ShortfallMode.SKIP).split_shares(pool)

    def process_all_fees(self, mode: ShortfallMode = ShortfallMode.SKIP) -> CycleReport:
        """Run one processing cycle over every registered pool.

        Args:
            mode: SKIP leaves pools below the target threshold for a later
                cycle; STRICT aborts the cycle on the first such pool.

        Returns:
            CycleReport with one outcome per pool, in registry order

        Raises:
            InvalidAmount: If no pool burned a non-zero amount (cycle void)
            ThresholdShortfall: In STRICT mode, if any pool falls short
            FeeEngineError: Any hard failure; the cycle is rolled back
        """
        mode = ShortfallMode(mode)
        with self._transaction("process_all_fees"):
            processor = self._processor(mode)
            report = processor.run(self.registry)
            logger.info(
                "cycle_completed",
                mode=mode.value,
                pools=len(report.outcomes),
                burned_pools=len(report.burned),
                total_burned=report.total_burned,
            )
            return report
