"""Constant product AMM math.

Pools follow the invariant x * y = k. Swaps pay a proportional fee on the
input amount; the router used by the fee engine charges 0.2%, so only
9980/10000 of each input counts toward the swap.
"""

from __future__ import annotations

from fee_engine.constants import BPS_DENOMINATOR, DEFAULT_ROUTER_FEE_BPS
from fee_engine.safe_int import S

DEFAULT_FEE_MULTIPLIER = BPS_DENOMINATOR - DEFAULT_ROUTER_FEE_BPS


class ConstantProductAMM:
    """Constant product swap and liquidity math.

    Formula: amount_out = (amount_in * fee * reserve_out) / (reserve_in * 10000 + amount_in * fee)

    All arithmetic goes through SafeInt, so intermediates that would not fit
    in uint256 raise ArithmeticOverflow instead of producing wrong amounts.
    """

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
    ) -> int:
        """Calculate output amount using constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: Fee-retained multiplier (default 9980 for 0.2% fee)

        Returns:
            Output token amount, or 0 for empty input or an empty pool
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * S(fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).value

    def get_amounts_out(
        self,
        amount_in: int,
        reserves: list[tuple[int, int]],
        fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
    ) -> list[int]:
        """Chain get_amount_out over consecutive hops.

        Args:
            amount_in: Input amount for the first hop
            reserves: (reserve_in, reserve_out) for each hop, in path order
            fee_multiplier: Fee-retained multiplier applied on every hop

        Returns:
            Amounts along the path, starting with amount_in
        """
        amounts = [amount_in]
        for reserve_in, reserve_out in reserves:
            amounts.append(self.get_amount_out(amounts[-1], reserve_in, reserve_out, fee_multiplier))
        return amounts

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B equivalent to amount_a at the current price (no fee).

        Used to size the second side of a liquidity deposit.
        """
        return S(amount_a).mul_div(S(reserve_b), S(reserve_a)).value

    def liquidity_value(self, shares: int, reserve: int, total_supply: int) -> int:
        """Underlying amount redeemable for `shares` of a pool.

        floor(shares * reserve / total_supply); multiply-then-divide.
        """
        return S(shares).mul_div(S(reserve), S(total_supply)).value


# Singleton instance
constant_product = ConstantProductAMM()


__all__ = [
    "ConstantProductAMM",
    "DEFAULT_FEE_MULTIPLIER",
    "constant_product",
]
