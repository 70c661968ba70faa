"""Fee math: split, withdrawal floors and swap quotes.

Usage:
    from fee_engine.fees import fee_splitter, withdrawal_calculator, swap_advisor

    split = fee_splitter.split(10 * 10**18, team_bps=4000)
    floors = withdrawal_calculator.min_amounts(r0, r1, split.handler, supply, 50)
    quote = swap_advisor.quote(amount_in, r_in, r_out, tolerance_bps=50)
"""

from fee_engine.fees.config import DEFAULT_SPLIT_CONFIG, SplitConfig
from fee_engine.fees.result import (
    Burned,
    CycleReport,
    PoolOutcome,
    ShortfallMode,
    SkipReason,
    Skipped,
)
from fee_engine.fees.splitter import FeeSplitter, ShareSplit, fee_splitter
from fee_engine.fees.swap_advisor import SwapAdvisor, SwapQuote, swap_advisor
from fee_engine.fees.withdrawal import (
    WithdrawalCalculator,
    WithdrawalMinimums,
    withdrawal_calculator,
)

__all__ = [
    # Config
    "SplitConfig",
    "DEFAULT_SPLIT_CONFIG",
    # Calculators
    "FeeSplitter",
    "ShareSplit",
    "fee_splitter",
    "WithdrawalCalculator",
    "WithdrawalMinimums",
    "withdrawal_calculator",
    "SwapAdvisor",
    "SwapQuote",
    "swap_advisor",
    # Results
    "Burned",
    "Skipped",
    "SkipReason",
    "PoolOutcome",
    "CycleReport",
    "ShortfallMode",
]
