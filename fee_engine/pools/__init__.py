"""Pool management package.

Provides PoolRegistry, the ordered set of pools a processing cycle visits.
"""

from .registry import PoolRegistry

__all__ = ["PoolRegistry"]
