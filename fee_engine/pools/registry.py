"""Registry of pools eligible for fee extraction.

Pools are kept in a dense list in insertion order, which is the order every
processing cycle visits them, plus an address index for duplicate
detection and lookup. The registry is append-only.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from fee_engine.chain.base import LiquidityPool
from fee_engine.errors import DuplicatePool, IndexOutOfRange, UnknownPool
from fee_engine.models.types import normalize_address

logger = structlog.get_logger()


class PoolRegistry:
    """Ordered, duplicate-free collection of pools."""

    def __init__(self, pools: list[LiquidityPool] | None = None) -> None:
        """Initialize the registry with optional pools.

        Raises:
            DuplicatePool: If `pools` contains the same address twice
        """
        self._pools: list[LiquidityPool] = []
        # Normalized address -> position in _pools
        self._index: dict[str, int] = {}

        if pools:
            for pool in pools:
                self.register(pool)

    def register(self, pool: LiquidityPool) -> int:
        """Append a pool.

        Returns:
            The pool's position in processing order

        Raises:
            DuplicatePool: If a pool with the same address is registered
        """
        address = normalize_address(pool.address)
        if address in self._index:
            raise DuplicatePool(f"Pool {pool.address} is already registered")
        self._index[address] = len(self._pools)
        self._pools.append(pool)
        logger.debug("registry_pool_added", pool=address[-8:], position=self._index[address])
        return self._index[address]

    def count(self) -> int:
        return len(self._pools)

    def __len__(self) -> int:
        return len(self._pools)

    def at(self, index: int) -> LiquidityPool:
        """Pool at a processing position.

        Raises:
            IndexOutOfRange: If index is negative or >= count()
        """
        if not 0 <= index < len(self._pools):
            raise IndexOutOfRange(f"Index {index} out of range for {len(self._pools)} pools")
        return self._pools[index]

    def get(self, address: str) -> LiquidityPool:
        """Pool by address (any case).

        Raises:
            UnknownPool: If no pool with that address is registered
        """
        position = self._index.get(normalize_address(address))
        if position is None:
            raise UnknownPool(f"Pool {address} is not registered")
        return self._pools[position]

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, str):
            return False
        return normalize_address(address) in self._index

    def __iter__(self) -> Iterator[LiquidityPool]:
        return iter(list(self._pools))

    @property
    def addresses(self) -> list[str]:
        """Normalized pool addresses in processing order."""
        return [normalize_address(p.address) for p in self._pools]
