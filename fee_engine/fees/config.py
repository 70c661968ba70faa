"""Split configuration for the fee engine."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from fee_engine.constants import BPS_DENOMINATOR
from fee_engine.errors import InvalidInput


@dataclass(frozen=True)
class SplitConfig:
    """Process-wide settings read by every processing cycle.

    Only the engine administrator replaces it (see FeeEngine setters); a
    cycle reads the instance current at its start.

    Attributes:
        team_bps: Share of each pool's fee shares sent to the team wallet,
            in basis points. The handler receives the rest, including any
            rounding remainder.
        slippage_bps: Tolerance subtracted from expected withdrawal and swap
            outputs to form their minimums. Must be below 10000.
        min_target_amount: A pool whose guaranteed target-asset withdrawal
            is below this amount is not swapped or burned this cycle.
    """

    team_bps: int = 4000
    slippage_bps: int = 50
    min_target_amount: int = 0

    def __post_init__(self) -> None:
        for name in ("team_bps", "slippage_bps", "min_target_amount"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(f"{name} must be an int, got {type(value).__name__}")
        if not 0 <= self.team_bps <= BPS_DENOMINATOR:
            raise InvalidInput(f"team_bps must be in [0, {BPS_DENOMINATOR}]: {self.team_bps}")
        if not 0 <= self.slippage_bps < BPS_DENOMINATOR:
            raise InvalidInput(
                f"slippage_bps must be in [0, {BPS_DENOMINATOR}): {self.slippage_bps}"
            )
        if self.min_target_amount < 0:
            raise InvalidInput(f"min_target_amount cannot be negative: {self.min_target_amount}")

    @property
    def handler_bps(self) -> int:
        """Implicit handler ratio (10000 - team_bps)."""
        return BPS_DENOMINATOR - self.team_bps

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SplitConfig:
        """Build a config from environment variables.

        - FEE_ENGINE_TEAM_BPS (default: 4000)
        - FEE_ENGINE_SLIPPAGE_BPS (default: 50)
        - FEE_ENGINE_MIN_TARGET_AMOUNT (default: 0)

        Raises:
            InvalidInput: If a variable is not an integer or out of range
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        values = {}
        for field, var in (
            ("team_bps", "FEE_ENGINE_TEAM_BPS"),
            ("slippage_bps", "FEE_ENGINE_SLIPPAGE_BPS"),
            ("min_target_amount", "FEE_ENGINE_MIN_TARGET_AMOUNT"),
        ):
            raw = env.get(var)
            if raw is None:
                values[field] = getattr(defaults, field)
                continue
            try:
                values[field] = int(raw)
            except ValueError as err:
                raise InvalidInput(f"{var} must be an integer: '{raw}'") from err
        return cls(**values)


# Default configuration instance
DEFAULT_SPLIT_CONFIG = SplitConfig()
