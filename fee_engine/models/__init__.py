"""Pydantic models and shared types for the fee engine."""

from fee_engine.models.api import (
    ConfigResponse,
    PoolsResponse,
    SwapPreviewRequest,
    SwapPreviewResponse,
    WithdrawalPreviewRequest,
    WithdrawalPreviewResponse,
)
from fee_engine.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "is_valid_address",
    "normalize_address",
    # API models
    "ConfigResponse",
    "PoolsResponse",
    "SwapPreviewRequest",
    "SwapPreviewResponse",
    "WithdrawalPreviewRequest",
    "WithdrawalPreviewResponse",
]
