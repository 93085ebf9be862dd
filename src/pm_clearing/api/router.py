"""POST /settlement/preview — payouts for a submitted market and its positions."""

from fastapi import APIRouter, Request

from src.pm_clearing.application.schemas import (
    SettlementPreviewRequest,
    SettlementPreviewResponse,
)
from src.pm_clearing.domain.settlement import settle
from src.pm_common.response import ApiResponse, success_response

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post("/preview")
async def preview(body: SettlementPreviewRequest, request: Request) -> ApiResponse:
    result = settle(
        body.market.to_domain(),
        body.winner,
        [p.to_domain() for p in body.positions],
    )
    data = SettlementPreviewResponse.from_domain(result)
    return success_response(data.model_dump(), request)
