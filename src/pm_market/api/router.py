"""pm_market REST endpoints.

POST /markets/new     — fresh market from settings defaults
POST /markets/quote   — spot prices and LMSR cost of a buy
"""

from fastapi import APIRouter, Request

from config.settings import settings
from src.pm_common.response import ApiResponse, success_response
from src.pm_market.application.schemas import (
    MarketStateOut,
    NewMarketRequest,
    QuoteRequest,
    QuoteResponse,
)
from src.pm_market.domain.lifecycle import init_market
from src.pm_pricing.domain.lmsr import spot_prices, trade_cost

router = APIRouter(prefix="/markets", tags=["markets"])


@router.post("/new")
async def new_market(body: NewMarketRequest, request: Request) -> ApiResponse:
    market = init_market(
        b=body.b if body.b is not None else settings.DEFAULT_LIQUIDITY_B,
        fee_bps=body.fee_bps if body.fee_bps is not None else settings.DEFAULT_FEE_BPS,
        market_end_time=body.market_end_time,
    )
    return success_response(MarketStateOut.from_domain(market).model_dump(), request)


@router.post("/quote")
async def quote(body: QuoteRequest, request: Request) -> ApiResponse:
    m = body.market.to_domain()
    prices = spot_prices(m.b, m.q_yes, m.q_no)
    cost = trade_cost(m.b, m.q_yes, m.q_no, body.side, body.amount)
    return success_response(QuoteResponse.from_prices(prices, cost).model_dump(), request)
