"""Slippage floors for liquidity withdrawal.

The router's removeLiquidity call reverts when it would pay out less than
the floors it is given. This module computes those floors from a pool's
reserves and share supply.
"""

from __future__ import annotations

from dataclasses import dataclass

from fee_engine.amm.constant_product import constant_product
from fee_engine.constants import BPS_DENOMINATOR
from fee_engine.errors import InvalidInput
from fee_engine.safe_int import S


@dataclass(frozen=True)
class WithdrawalMinimums:
    """Expected and minimum payout for burning a share amount.

    Attributes:
        amount_a: Proportional amount of asset A (before tolerance)
        amount_b: Proportional amount of asset B (before tolerance)
        amount_a_min: Floor for asset A passed to the router
        amount_b_min: Floor for asset B passed to the router
    """

    amount_a: int
    amount_b: int
    amount_a_min: int
    amount_b_min: int

    def as_tuple(self) -> tuple[int, int]:
        """(amount_a_min, amount_b_min)."""
        return self.amount_a_min, self.amount_b_min


def apply_tolerance(amount: int, tolerance_bps: int) -> int:
    """floor(amount * (10000 - tolerance_bps) / 10000)."""
    return S(amount).mul_div(S(BPS_DENOMINATOR) - S(tolerance_bps), BPS_DENOMINATOR).value


def check_tolerance(tolerance_bps: int) -> None:
    if not 0 <= tolerance_bps < BPS_DENOMINATOR:
        raise InvalidInput(f"tolerance_bps must be in [0, {BPS_DENOMINATOR}): {tolerance_bps}")


class WithdrawalCalculator:
    """Pure withdrawal-floor computation."""

    def min_amounts(
        self,
        reserve_a: int,
        reserve_b: int,
        share_amount: int,
        total_supply: int,
        tolerance_bps: int,
    ) -> WithdrawalMinimums:
        """Compute minimum acceptable outputs for burning `share_amount`.

        amount_x = floor(share_amount * reserve_x / total_supply)
        amount_x_min = floor(amount_x * (10000 - tolerance_bps) / 10000)

        Args:
            reserve_a: Pool reserve of asset A
            reserve_b: Pool reserve of asset B
            share_amount: Shares to burn (caller checks it is actually held)
            total_supply: Total share supply of the pool
            tolerance_bps: Slippage tolerance in basis points, in [0, 10000)

        Returns:
            WithdrawalMinimums with proportional amounts and floors

        Raises:
            InvalidInput: If total_supply is zero or any argument is out of range
            ArithmeticOverflow: If share_amount * reserve exceeds uint256
        """
        if total_supply <= 0:
            raise InvalidInput(f"total_supply must be positive: {total_supply}")
        check_tolerance(tolerance_bps)
        for name, value in (
            ("reserve_a", reserve_a),
            ("reserve_b", reserve_b),
            ("share_amount", share_amount),
        ):
            if value < 0:
                raise InvalidInput(f"{name} cannot be negative: {value}")

        amount_a = constant_product.liquidity_value(share_amount, reserve_a, total_supply)
        amount_b = constant_product.liquidity_value(share_amount, reserve_b, total_supply)

        return WithdrawalMinimums(
            amount_a=amount_a,
            amount_b=amount_b,
            amount_a_min=apply_tolerance(amount_a, tolerance_bps),
            amount_b_min=apply_tolerance(amount_b, tolerance_bps),
        )


# Singleton instance
withdrawal_calculator = WithdrawalCalculator()
