"""Tests for slippage-protected swap quotes."""

import pytest

from fee_engine.errors import InvalidInput
from fee_engine.fees.swap_advisor import SwapAdvisor, SwapQuote, swap_advisor

E18 = 10**18


class TestQuote:
    def test_reference_quote(self):
        """5.97 into a 10000/10000 pool at 0.2% fee and 0.5% tolerance."""
        quote = swap_advisor.quote(5_970_000_000_000_000_000, 10_000 * E18, 10_000 * E18, 9980, 50)
        assert quote == SwapQuote(
            amount_in=5_970_000_000_000_000_000,
            amount_out=5_954_512_265_864_924_083,
            amount_out_min=5_924_739_704_535_599_462,
        )
        assert quote.as_tuple() == (5_970_000_000_000_000_000, 5_924_739_704_535_599_462)

    def test_floor_one_wei_below_subtractive_form(self):
        """out - floor(out * tol / 10000) rounds the other way for this quote."""
        quote = swap_advisor.quote(5_970_000_000_000_000_000, 10_000 * E18, 10_000 * E18, 9980, 50)
        subtractive = quote.amount_out - quote.amount_out * 50 // 10_000
        assert subtractive == 5_924_739_704_535_599_463
        assert quote.amount_out_min == subtractive - 1

    def test_min_strictly_below_out(self):
        for amount_in in (1, 10, 12_345, 10**18):
            quote = SwapAdvisor().quote(amount_in, 10**20, 10**20, 9980, 1)
            if quote.amount_out > 0:
                assert quote.amount_out_min < quote.amount_out

    def test_zero_tolerance(self):
        quote = swap_advisor.quote(10**18, 10**20, 10**20, 9980, 0)
        assert quote.amount_out_min == quote.amount_out

    def test_zero_input(self):
        assert swap_advisor.quote(0, 10**20, 10**20, 9980, 50) == SwapQuote(0, 0, 0)

    def test_default_fee_multiplier(self):
        explicit = swap_advisor.quote(10**18, 10**20, 10**20, 9980, 50)
        assert swap_advisor.quote(10**18, 10**20, 10**20, tolerance_bps=50) == explicit


class TestQuoteValidation:
    def test_tolerance_out_of_range(self):
        with pytest.raises(InvalidInput):
            swap_advisor.quote(1, 1, 1, 9980, 10_000)

    @pytest.mark.parametrize("fee_multiplier", [0, 10_001])
    def test_fee_multiplier_out_of_range(self, fee_multiplier):
        with pytest.raises(InvalidInput, match="fee_multiplier"):
            swap_advisor.quote(1, 1, 1, fee_multiplier, 0)

    def test_negative_amount(self):
        with pytest.raises(InvalidInput, match="amount_in"):
            swap_advisor.quote(-5, 1, 1, 9980, 0)
