"""Collaborator interfaces consumed by the fee engine.

The engine never owns reserves, token balances or execution; it reads and
moves them through these protocols. Implementations signal a reverted call
by raising ExternalCallFailure (or a subclass); any such failure aborts the
processing cycle, which the engine then rolls back through Host.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LiquidityPool(Protocol):
    """A two-asset pool whose shares are themselves a transferable token."""

    address: str
    token0: str
    token1: str

    def get_reserves(self) -> tuple[int, int]:
        """(reserve0, reserve1), ordered like (token0, token1)."""
        ...

    def total_supply(self) -> int:
        """Total outstanding pool shares."""
        ...

    def balance_of(self, holder: str) -> int:
        """Pool shares held by `holder`."""
        ...

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """Move pool shares from `sender` to `to`."""
        ...


@runtime_checkable
class Router(Protocol):
    """Executes liquidity removal and swaps against pools."""

    address: str

    @property
    def fee_multiplier(self) -> int:
        """Fee-retained multiplier out of 10000 applied to swap inputs."""
        ...

    def remove_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> tuple[int, int]:
        """Burn `liquidity` shares owned by `sender`, paying `to`.

        Returns (amount_a, amount_b) ordered like (token_a, token_b).
        Reverts if either amount is below its minimum.
        """
        ...

    def swap_exact_tokens_for_tokens(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        to: str,
        deadline: int,
    ) -> list[int]:
        """Swap exactly `amount_in` of path[0] into path[-1].

        Returns amounts along the path. Reverts if the final amount is below
        `amount_out_min`.
        """
        ...


@runtime_checkable
class AssetLedger(Protocol):
    """Token balances of arbitrary holders."""

    def balance_of(self, token: str, holder: str) -> int: ...

    def transfer(self, token: str, sender: str, to: str, amount: int) -> None: ...


@runtime_checkable
class Host(Protocol):
    """Execution environment giving a processing cycle all-or-nothing semantics."""

    def timestamp(self) -> int:
        """Current time in seconds, used for router deadlines."""
        ...

    def snapshot(self) -> Any:
        """Capture all collaborator state."""
        ...

    def restore(self, snapshot: Any) -> None:
        """Revert all collaborator state to a previous snapshot."""
        ...
