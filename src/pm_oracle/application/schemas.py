from typing import Annotated

from pydantic import BaseModel, Field

from src.pm_common.enums import OracleStatus
from src.pm_oracle.domain.aggregator import to_e6
from src.pm_oracle.domain.models import FeedReading, OracleReading, OracleSample


class FeedReadingIn(BaseModel):
    value: int
    timestamp: int = Field(ge=0, description="Unix seconds")


class AggregateRequest(BaseModel):
    readings: Annotated[list[FeedReadingIn], Field(min_length=3, max_length=3)] | None = Field(
        default=None, description="Exactly three feeds; null = sample unavailable"
    )
    decimals: int = Field(default=6, ge=0, le=18)
    now: int | None = None

    def to_sample(self) -> OracleSample | None:
        if self.readings is None:
            return None
        return OracleSample(
            readings=tuple(FeedReading(r.value, r.timestamp) for r in self.readings),
            decimals=self.decimals,
        )


class AggregateResponse(BaseModel):
    status: OracleStatus
    price: int | None = None
    price_e6: int | None = None
    age: int | None = None

    @classmethod
    def from_domain(cls, reading: OracleReading) -> "AggregateResponse":
        price_e6 = None
        if reading.price is not None:
            price_e6 = to_e6(reading.price, reading.decimals)
        return cls(status=reading.status, price=reading.price, price_e6=price_e6, age=reading.age)
