"""Trade endpoints.

POST /orders/simulate   — guarded preview, no state change
POST /orders/execute    — simulate, then apply to the submitted market/position
"""

from dataclasses import asdict

from fastapi import APIRouter, Request

from src.pm_common.datetime_utils import utc_now_ts
from src.pm_common.response import ApiResponse, success_response
from src.pm_market.application.schemas import MarketStateOut, PositionIn
from src.pm_order.application.schemas import (
    ExecuteTradeRequest,
    ExecuteTradeResponse,
    FillOut,
    SimulateTradeRequest,
    SimulationResponse,
)
from src.pm_order.domain.execution import execute_trade
from src.pm_order.domain.simulator import simulate_trade

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/simulate")
async def simulate(req: SimulateTradeRequest, request: Request) -> ApiResponse:
    result = simulate_trade(
        side=req.side,
        action=req.action,
        amount=req.amount_e6,
        guards=req.guards.to_domain(),
        market=req.market.to_domain(),
        now=req.now if req.now is not None else utc_now_ts(),
    )
    return success_response(SimulationResponse.from_domain(result).model_dump(), request)


@router.post("/execute")
async def execute(req: ExecuteTradeRequest, request: Request) -> ApiResponse:
    execution = execute_trade(
        market=req.market.to_domain(),
        position=req.position.to_domain(),
        side=req.side,
        action=req.action,
        amount=req.amount_e6,
        guards=req.guards.to_domain(),
        now=req.now if req.now is not None else utc_now_ts(),
    )
    data = ExecuteTradeResponse(
        executed=execution.executed,
        simulation=SimulationResponse.from_domain(execution.result),
        market=MarketStateOut.from_domain(execution.market) if execution.market else None,
        position=PositionIn(**asdict(execution.position)) if execution.position else None,
        fill=FillOut.from_domain(execution.fill) if execution.fill else None,
    )
    return success_response(data.model_dump(), request)
