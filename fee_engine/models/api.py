"""Pydantic models for the fee engine HTTP API.

Amounts travel as uint256 decimal strings; field names are camelCase on
the wire and snake_case in Python.
"""

from pydantic import BaseModel, Field

from fee_engine.models.types import Address, Uint256


class WithdrawalPreviewRequest(BaseModel):
    """Inputs of a withdrawal-floor preview."""

    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    share_amount: Uint256 = Field(alias="shareAmount")
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = {"populate_by_name": True}


class WithdrawalPreviewResponse(BaseModel):
    amount_a_min: Uint256 = Field(alias="amountAMin")
    amount_b_min: Uint256 = Field(alias="amountBMin")

    model_config = {"populate_by_name": True}


class SwapPreviewRequest(BaseModel):
    """Inputs of a swap quote; the router fee comes from the engine."""

    amount_in: Uint256 = Field(alias="amountIn")
    reserve_in: Uint256 = Field(alias="reserveIn")
    reserve_out: Uint256 = Field(alias="reserveOut")

    model_config = {"populate_by_name": True}


class SwapPreviewResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")
    amount_out_min: Uint256 = Field(alias="amountOutMin")

    model_config = {"populate_by_name": True}


class PoolsResponse(BaseModel):
    """Registered pools in processing order."""

    count: int
    pools: list[Address]


class ConfigResponse(BaseModel):
    team_bps: int = Field(alias="teamBps")
    handler_bps: int = Field(alias="handlerBps")
    slippage_bps: int = Field(alias="slippageBps")
    min_target_amount: Uint256 = Field(alias="minTargetAmount")

    model_config = {"populate_by_name": True}
