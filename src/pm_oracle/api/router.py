"""POST /oracle/aggregate — median, age and staleness of a submitted sample."""

from fastapi import APIRouter, Request

from config.settings import settings
from src.pm_common.datetime_utils import utc_now_ts
from src.pm_common.response import ApiResponse, success_response
from src.pm_oracle.application.schemas import AggregateRequest, AggregateResponse
from src.pm_oracle.domain.aggregator import aggregate

router = APIRouter(prefix="/oracle", tags=["oracle"])


@router.post("/aggregate")
async def aggregate_sample(body: AggregateRequest, request: Request) -> ApiResponse:
    reading = aggregate(
        body.to_sample(),
        now=body.now if body.now is not None else utc_now_ts(),
        max_age_seconds=settings.ORACLE_MAX_AGE_SECONDS,
    )
    return success_response(AggregateResponse.from_domain(reading).model_dump(), request)
