"""Team/handler split of collected pool shares."""

from __future__ import annotations

from dataclasses import dataclass

from fee_engine.constants import BPS_DENOMINATOR
from fee_engine.errors import InvalidInput
from fee_engine.safe_int import S


@dataclass(frozen=True)
class ShareSplit:
    """Allocation of one pool's shares.

    Attributes:
        team: Shares for the team wallet
        handler: Shares for the fee handler (absorbs the rounding remainder)
    """

    team: int
    handler: int

    @property
    def total(self) -> int:
        return self.team + self.handler


class FeeSplitter:
    """Deterministic two-way split in basis points."""

    def split(self, total_shares: int, team_bps: int) -> ShareSplit:
        """Split `total_shares` between team and handler.

        team = floor(total_shares * team_bps / 10000), handler = the rest,
        so no dust is left behind in the engine.

        Raises:
            InvalidInput: If team_bps is outside [0, 10000] or total_shares is negative
        """
        if not 0 <= team_bps <= BPS_DENOMINATOR:
            raise InvalidInput(f"team_bps must be in [0, {BPS_DENOMINATOR}]: {team_bps}")
        if total_shares < 0:
            raise InvalidInput(f"total_shares cannot be negative: {total_shares}")

        total = S(total_shares)
        team = total.mul_div(team_bps, BPS_DENOMINATOR)
        return ShareSplit(team=team.value, handler=(total - team).value)


# Singleton instance
fee_splitter = FeeSplitter()
