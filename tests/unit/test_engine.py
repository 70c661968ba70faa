"""Unit tests for FeeEngine administration and previews."""

import pytest

from fee_engine.engine import FeeEngine
from fee_engine.errors import (
    DuplicatePool,
    InvalidAmount,
    InvalidInput,
    InvalidPool,
    ReentrantCall,
    Unauthorized,
    UnknownPool,
)
from fee_engine.fees.config import SplitConfig
from fee_engine.fees.splitter import ShareSplit
from tests.helpers import (
    ADMIN,
    BURN_ADDRESS,
    E18,
    ENGINE,
    FEE_HANDLER,
    STRANGER,
    TARGET,
    TEAM_WALLET,
    TOKEN1,
    UNRELATED,
    add_liquidity,
)


class TestConstruction:
    def test_addresses_normalized(self, chain):
        engine = FeeEngine(
            address=ENGINE.upper().replace("0X", "0x"),
            admin=ADMIN,
            target_token=TARGET,
            router=chain.router,
            ledger=chain.ledger,
            host=chain,
            team_wallet=TEAM_WALLET,
            fee_handler=FEE_HANDLER,
            burn_address=BURN_ADDRESS,
        )
        assert engine.address == ENGINE
        assert engine.pool_count() == 0
        assert engine.config == SplitConfig()

    def test_invalid_address_rejected(self, chain):
        with pytest.raises(ValueError, match="Invalid admin address"):
            FeeEngine(
                address=ENGINE,
                admin="0x1234",
                target_token=TARGET,
                router=chain.router,
                ledger=chain.ledger,
                host=chain,
                team_wallet=TEAM_WALLET,
                fee_handler=FEE_HANDLER,
                burn_address=BURN_ADDRESS,
            )


class TestAdministration:
    """Every mutating admin operation checks the caller."""

    @pytest.mark.parametrize(
        "operation",
        [
            lambda s: s.engine.register_pool(s.pair2, caller=STRANGER),
            lambda s: s.engine.set_split_ratio(5000, caller=STRANGER),
            lambda s: s.engine.set_slippage_tolerance(100, caller=STRANGER),
            lambda s: s.engine.set_minimum_target_threshold(1, caller=STRANGER),
            lambda s: s.engine.set_team_wallet(STRANGER, caller=STRANGER),
            lambda s: s.engine.transfer_admin(STRANGER, caller=STRANGER),
        ],
    )
    def test_non_admin_rejected(self, fee_setup, operation):
        config_before = fee_setup.engine.config
        with pytest.raises(Unauthorized):
            operation(fee_setup)
        assert fee_setup.engine.config == config_before
        assert fee_setup.engine.pool_count() == 1
        assert fee_setup.engine.admin == ADMIN
        assert fee_setup.engine.team_wallet == TEAM_WALLET

    def test_register_pool(self, fee_setup):
        position = fee_setup.engine.register_pool(fee_setup.pair2, caller=ADMIN)
        assert position == 1
        assert fee_setup.engine.pool_count() == 2
        assert fee_setup.engine.pool_at(1) is fee_setup.pair2

    def test_register_duplicate(self, fee_setup):
        with pytest.raises(DuplicatePool):
            fee_setup.engine.register_pool(fee_setup.pair, caller=ADMIN)
        assert fee_setup.engine.pool_count() == 1

    def test_register_pool_without_target(self, fee_setup):
        other = add_liquidity(fee_setup.chain, TOKEN1, UNRELATED, E18, E18)
        with pytest.raises(InvalidPool):
            fee_setup.engine.register_pool(other, caller=ADMIN)
        assert fee_setup.engine.pool_count() == 1

    def test_admin_checks_ignore_case(self, fee_setup):
        fee_setup.engine.set_split_ratio(2500, caller=ADMIN.upper().replace("0X", "0x"))
        assert fee_setup.engine.config.team_bps == 2500

    def test_setters_replace_config(self, fee_setup):
        engine = fee_setup.engine
        engine.set_split_ratio(5000, caller=ADMIN)
        engine.set_slippage_tolerance(100, caller=ADMIN)
        engine.set_minimum_target_threshold(7 * E18, caller=ADMIN)
        assert engine.config == SplitConfig(team_bps=5000, slippage_bps=100, min_target_amount=7 * E18)

    @pytest.mark.parametrize(
        "operation",
        [
            lambda e: e.set_split_ratio(10_001, caller=ADMIN),
            lambda e: e.set_slippage_tolerance(10_000, caller=ADMIN),
            lambda e: e.set_minimum_target_threshold(-1, caller=ADMIN),
        ],
    )
    def test_setters_validate(self, fee_setup, operation):
        config_before = fee_setup.engine.config
        with pytest.raises(InvalidInput):
            operation(fee_setup.engine)
        assert fee_setup.engine.config == config_before

    def test_set_team_wallet(self, fee_setup):
        fee_setup.engine.set_team_wallet(STRANGER, caller=ADMIN)
        assert fee_setup.engine.team_wallet == STRANGER

    def test_transfer_admin(self, fee_setup):
        fee_setup.engine.transfer_admin(STRANGER, caller=ADMIN)
        assert fee_setup.engine.admin == STRANGER
        with pytest.raises(Unauthorized):
            fee_setup.engine.set_split_ratio(1000, caller=ADMIN)
        fee_setup.engine.set_split_ratio(1000, caller=STRANGER)


class TestSendShares:
    def test_splits_engine_shares(self, fee_setup):
        """10 shares at 40% team: team 4, handler 6, engine keeps none."""
        split = fee_setup.engine.send_shares(fee_setup.pair.address)

        assert split == ShareSplit(team=4 * E18, handler=6 * E18)
        assert fee_setup.pair.balance_of(TEAM_WALLET) == 4 * E18
        assert fee_setup.pair.balance_of(FEE_HANDLER) == 6 * E18
        assert fee_setup.pair.balance_of(ENGINE) == 0

    def test_unknown_pool(self, fee_setup):
        with pytest.raises(UnknownPool):
            fee_setup.engine.send_shares(fee_setup.pair2.address)

    def test_nothing_to_send(self, fee_setup):
        fee_setup.engine.send_shares(fee_setup.pair.address)
        assert fee_setup.engine.send_shares(fee_setup.pair.address) == ShareSplit(0, 0)


class TestPreviews:
    def test_preview_withdrawal_minimums(self, fee_setup):
        minimums = fee_setup.engine.preview_withdrawal_minimums(
            10_000 * E18, 10_000 * E18, 6 * E18, 10_000 * E18
        )
        assert minimums == (5_970_000_000_000_000_000, 5_970_000_000_000_000_000)

    def test_preview_rejects_zero_supply(self, fee_setup):
        with pytest.raises(InvalidInput):
            fee_setup.engine.preview_withdrawal_minimums(1, 1, 1, 0)

    def test_get_liquidity_min_amounts(self, fee_setup):
        minimums = fee_setup.engine.get_liquidity_min_amounts(fee_setup.pair.address, 6 * E18)
        assert minimums == (5_970_000_000_000_000_000, 5_970_000_000_000_000_000)

    def test_get_liquidity_min_amounts_unknown_pool(self, fee_setup):
        with pytest.raises(UnknownPool):
            fee_setup.engine.get_liquidity_min_amounts(fee_setup.pair2.address, E18)

    def test_get_swap_info(self, fee_setup):
        """Handler's non-target balance quoted against live reserves."""
        fee_setup.chain.ledger.mint(TOKEN1, FEE_HANDLER, 5_970_000_000_000_000_000)

        info = fee_setup.engine.get_swap_info(fee_setup.pair.address)

        assert info == (5_970_000_000_000_000_000, 5_924_739_704_535_599_462)

    def test_get_swap_info_empty_handler(self, fee_setup):
        assert fee_setup.engine.get_swap_info(fee_setup.pair.address) == (0, 0)


class ReentrantRouter:
    """Router that calls back into the engine during a withdrawal."""

    def __init__(self, inner, engine_ref):
        self._inner = inner
        self._engine_ref = engine_ref
        self.address = inner.address

    @property
    def fee_multiplier(self):
        return self._inner.fee_multiplier

    def remove_liquidity(self, *args):
        self._engine_ref[0].process_all_fees()
        return self._inner.remove_liquidity(*args)

    def swap_exact_tokens_for_tokens(self, *args):
        return self._inner.swap_exact_tokens_for_tokens(*args)


class TestReentrancy:
    def test_nested_cycle_rejected_and_rolled_back(self, fee_setup):
        chain = fee_setup.chain
        engine_ref: list[FeeEngine] = []
        engine = FeeEngine(
            address=ENGINE,
            admin=ADMIN,
            target_token=TARGET,
            router=ReentrantRouter(chain.router, engine_ref),
            ledger=chain.ledger,
            host=chain,
            team_wallet=TEAM_WALLET,
            fee_handler=FEE_HANDLER,
            burn_address=BURN_ADDRESS,
        )
        engine_ref.append(engine)
        engine.register_pool(fee_setup.pair, caller=ADMIN)

        with pytest.raises(ReentrantCall):
            engine.process_all_fees()

        assert fee_setup.pair.balance_of(ENGINE) == 10 * E18
        assert fee_setup.pair.balance_of(TEAM_WALLET) == 0
        assert fee_setup.pair.balance_of(FEE_HANDLER) == 0

    def test_engine_usable_after_rejection(self, fee_setup):
        """The in-flight flag is cleared when a cycle aborts."""
        fee_setup.engine.set_minimum_target_threshold(100 * E18, caller=ADMIN)
        with pytest.raises(InvalidAmount):
            fee_setup.engine.process_all_fees()
        fee_setup.engine.set_minimum_target_threshold(0, caller=ADMIN)
        assert fee_setup.engine.process_all_fees().succeeded
