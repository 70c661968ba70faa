"""Collaborator protocols and the in-memory reference chain."""

from fee_engine.chain.base import AssetLedger, Host, LiquidityPool, Router
from fee_engine.chain.memory import (
    ConstantProductPair,
    InMemoryChain,
    Revert,
    RouterCall,
    SimulatedRouter,
    TokenLedger,
)

__all__ = [
    # Protocols
    "AssetLedger",
    "Host",
    "LiquidityPool",
    "Router",
    # In-memory backend
    "ConstantProductPair",
    "InMemoryChain",
    "Revert",
    "RouterCall",
    "SimulatedRouter",
    "TokenLedger",
]
