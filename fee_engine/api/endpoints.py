"""API endpoints for the fee engine.

All endpoints are read-only: they expose the registry, the configuration
and the pure preview calculations external tooling runs before committing
a processing cycle.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from fee_engine.engine import FeeEngine
from fee_engine.errors import FeeEngineError
from fee_engine.fees.swap_advisor import swap_advisor
from fee_engine.models.api import (
    ConfigResponse,
    PoolsResponse,
    SwapPreviewRequest,
    SwapPreviewResponse,
    WithdrawalPreviewRequest,
    WithdrawalPreviewResponse,
)

logger = structlog.get_logger()

router = APIRouter()

_engine: FeeEngine | None = None


def set_engine(engine: FeeEngine | None) -> None:
    """Install the engine served by the API (None uninstalls it)."""
    global _engine
    _engine = engine


def get_engine() -> FeeEngine:
    """Dependency provider for the engine instance.

    Override this in tests to inject an engine:
        app.dependency_overrides[get_engine] = lambda: engine

    Raises:
        HTTPException: 503 if no engine has been installed
    """
    if _engine is None:
        raise HTTPException(status_code=503, detail="Fee engine not configured")
    return _engine


@router.get("/pools", response_model=PoolsResponse)
async def pools(engine: FeeEngine = Depends(get_engine)) -> PoolsResponse:
    """Registered pools in processing order."""
    return PoolsResponse(count=engine.pool_count(), pools=engine.registry.addresses)


@router.get("/config", response_model=ConfigResponse, response_model_by_alias=True)
async def config(engine: FeeEngine = Depends(get_engine)) -> ConfigResponse:
    """Current split configuration."""
    cfg = engine.config
    return ConfigResponse(
        team_bps=cfg.team_bps,
        handler_bps=cfg.handler_bps,
        slippage_bps=cfg.slippage_bps,
        min_target_amount=str(cfg.min_target_amount),
    )


@router.post(
    "/preview/withdrawal",
    response_model=WithdrawalPreviewResponse,
    response_model_by_alias=True,
)
async def preview_withdrawal(
    request: WithdrawalPreviewRequest,
    engine: FeeEngine = Depends(get_engine),
) -> WithdrawalPreviewResponse:
    """Withdrawal floors at the engine's slippage tolerance.

    Error Handling:
        - Invalid request schema: 422 (Pydantic)
        - Rejected inputs (e.g. zero total supply): 400
    """
    try:
        amount_a_min, amount_b_min = engine.preview_withdrawal_minimums(
            int(request.reserve_a),
            int(request.reserve_b),
            int(request.share_amount),
            int(request.total_supply),
        )
    except FeeEngineError as err:
        logger.info("preview_rejected", endpoint="withdrawal", error=type(err).__name__)
        raise HTTPException(status_code=400, detail=str(err)) from err

    return WithdrawalPreviewResponse(
        amount_a_min=str(amount_a_min),
        amount_b_min=str(amount_b_min),
    )


@router.post("/preview/swap", response_model=SwapPreviewResponse, response_model_by_alias=True)
async def preview_swap(
    request: SwapPreviewRequest,
    engine: FeeEngine = Depends(get_engine),
) -> SwapPreviewResponse:
    """Swap quote at the router's fee and the engine's slippage tolerance."""
    try:
        quote = swap_advisor.quote(
            int(request.amount_in),
            int(request.reserve_in),
            int(request.reserve_out),
            engine.router.fee_multiplier,
            engine.config.slippage_bps,
        )
    except FeeEngineError as err:
        logger.info("preview_rejected", endpoint="swap", error=type(err).__name__)
        raise HTTPException(status_code=400, detail=str(err)) from err

    return SwapPreviewResponse(
        amount_in=str(quote.amount_in),
        amount_out=str(quote.amount_out),
        amount_out_min=str(quote.amount_out_min),
    )
