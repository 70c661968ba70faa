"""Processing cycle result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fee_engine.fees.splitter import ShareSplit


class ShortfallMode(str, Enum):
    """How a cycle treats a pool whose target floor is below the threshold.

    SKIP: the pool is recorded as skipped and keeps its withdrawn assets at
        the handler; the cycle continues with the next pool.
    STRICT: the first shortfall raises ThresholdShortfall and the whole
        cycle is rolled back.
    """

    SKIP = "skip"
    STRICT = "strict"


class SkipReason(str, Enum):
    """Why a pool contributed nothing to a cycle."""

    NO_SHARES = "no_shares"
    BELOW_THRESHOLD = "below_threshold"
    NOTHING_TO_BURN = "nothing_to_burn"


@dataclass(frozen=True)
class Burned:
    """Pool processed through to the burn address.

    Attributes:
        pool: Pool address
        amount: Target asset sent to the burn address (always > 0)
        split: Team/handler allocation of the pool's shares
        withdrawn: Amounts paid out by the router, ordered (target, other)
        swapped_in: Non-target amount converted (0 when no swap ran)
        swapped_out: Target amount received from the swap
    """

    pool: str
    amount: int
    split: ShareSplit
    withdrawn: tuple[int, int]
    swapped_in: int = 0
    swapped_out: int = 0


@dataclass(frozen=True)
class Skipped:
    """Pool that did not burn this cycle.

    Attributes:
        pool: Pool address
        reason: Why nothing was burned
        split: Allocation, if the pool's shares were split
        target_floor: Guaranteed target withdrawal compared with the threshold
    """

    pool: str
    reason: SkipReason
    split: ShareSplit | None = None
    target_floor: int | None = None


PoolOutcome = Burned | Skipped


@dataclass
class CycleReport:
    """Outcomes of one processing cycle, in pool processing order."""

    mode: ShortfallMode
    outcomes: list[PoolOutcome] = field(default_factory=list)

    @property
    def burned(self) -> list[Burned]:
        return [o for o in self.outcomes if isinstance(o, Burned)]

    @property
    def skipped(self) -> list[Skipped]:
        return [o for o in self.outcomes if isinstance(o, Skipped)]

    @property
    def total_burned(self) -> int:
        return sum(o.amount for o in self.burned)

    @property
    def succeeded(self) -> bool:
        """True if at least one pool burned a non-zero amount."""
        return self.total_burned > 0

    def outcome_for(self, pool: str) -> PoolOutcome | None:
        pool_norm = pool.lower()
        for outcome in self.outcomes:
            if outcome.pool == pool_norm:
                return outcome
        return None
