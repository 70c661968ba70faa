"""Slippage-protected swap quotes."""

from __future__ import annotations

from dataclasses import dataclass

from fee_engine.amm.constant_product import DEFAULT_FEE_MULTIPLIER, constant_product
from fee_engine.constants import BPS_DENOMINATOR
from fee_engine.errors import InvalidInput
from fee_engine.fees.withdrawal import apply_tolerance, check_tolerance


@dataclass(frozen=True)
class SwapQuote:
    """Exact-input swap quote.

    Attributes:
        amount_in: Input amount
        amount_out: Theoretical output from the constant product formula
        amount_out_min: Floor passed to the router
    """

    amount_in: int
    amount_out: int
    amount_out_min: int

    def as_tuple(self) -> tuple[int, int]:
        """(amount_in, amount_out_min), the router call arguments."""
        return self.amount_in, self.amount_out_min


class SwapAdvisor:
    """Quotes swaps and derives their minimum acceptable output."""

    def quote(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
        tolerance_bps: int = 0,
    ) -> SwapQuote:
        """Quote swapping `amount_in` through a constant product pool.

        amount_out = floor(in * fee * r_out / (r_in * 10000 + in * fee))
        amount_out_min = floor(amount_out * (10000 - tolerance_bps) / 10000)

        The deployed fee manager contract computes the floor as
        amount_out - floor(amount_out * tolerance_bps / 10000), which can be
        one wei higher (…599463 vs …599462 for 5.97e18 into a 10000/10000
        pool at 50 bps). Tooling comparing against the contract should allow
        for that difference.

        Args:
            amount_in: Input amount
            reserve_in: Pool reserve of the input asset
            reserve_out: Pool reserve of the output asset
            fee_multiplier: Fee-retained multiplier of the router (9980 for 0.2%)
            tolerance_bps: Slippage tolerance in basis points, in [0, 10000)

        Raises:
            InvalidInput: If an amount is negative or a parameter is out of range
            ArithmeticOverflow: If an intermediate product exceeds uint256
        """
        check_tolerance(tolerance_bps)
        if not 0 < fee_multiplier <= BPS_DENOMINATOR:
            raise InvalidInput(f"fee_multiplier must be in (0, {BPS_DENOMINATOR}]: {fee_multiplier}")
        for name, value in (
            ("amount_in", amount_in),
            ("reserve_in", reserve_in),
            ("reserve_out", reserve_out),
        ):
            if value < 0:
                raise InvalidInput(f"{name} cannot be negative: {value}")

        amount_out = constant_product.get_amount_out(
            amount_in, reserve_in, reserve_out, fee_multiplier
        )
        return SwapQuote(
            amount_in=amount_in,
            amount_out=amount_out,
            amount_out_min=apply_tolerance(amount_out, tolerance_bps),
        )


# Singleton instance
swap_advisor = SwapAdvisor()
