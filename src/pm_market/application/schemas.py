"""Pydantic schemas shared by the HTTP adapters.

The service is stateless: callers submit the market state they hold and get
results back. Integer fields are e6 fixed point; `*_display` / `*_float`
fields are preview-only.
"""

from pydantic import BaseModel, Field

from src.pm_common.enums import MarketStatus, Side, Winner
from src.pm_common.fixed_point import e6_to_display, e6_to_float
from src.pm_market.domain.models import MarketState, Position
from src.pm_pricing.domain.lmsr import LmsrPrices


class MarketStateIn(BaseModel):
    b: int = Field(description="Liquidity parameter (e6)")
    q_yes: int = 0
    q_no: int = 0
    fee_bps: int = Field(default=0, ge=0, le=10_000)
    status: MarketStatus = MarketStatus.OPEN
    winner: Winner = Winner.NONE
    vault_balance: int = 0
    start_price: int = 0
    fees_collected: int = 0
    winning_total: int = 0
    price_per_share: int = 0
    market_end_time: int | None = None

    def to_domain(self) -> MarketState:
        return MarketState(**self.model_dump())


class MarketStateOut(MarketStateIn):
    @classmethod
    def from_domain(cls, m: MarketState) -> "MarketStateOut":
        return cls(
            b=m.b,
            q_yes=m.q_yes,
            q_no=m.q_no,
            fee_bps=m.fee_bps,
            status=m.status,
            winner=m.winner,
            vault_balance=m.vault_balance,
            start_price=m.start_price,
            fees_collected=m.fees_collected,
            winning_total=m.winning_total,
            price_per_share=m.price_per_share,
            market_end_time=m.market_end_time,
        )


class PositionIn(BaseModel):
    owner: str = Field(min_length=1)
    yes_shares: int = Field(default=0, ge=0)
    no_shares: int = Field(default=0, ge=0)
    held_balance: int = Field(default=0, ge=0)

    def to_domain(self) -> Position:
        return Position(**self.model_dump())


class NewMarketRequest(BaseModel):
    b: int | None = Field(default=None, description="Defaults to DEFAULT_LIQUIDITY_B")
    fee_bps: int | None = Field(default=None, ge=0, le=10_000)
    market_end_time: int | None = None


class QuoteRequest(BaseModel):
    market: MarketStateIn
    side: Side = Side.YES
    amount: int = Field(default=0, ge=0, description="Shares to price (e6); 0 = spot only")


class QuoteResponse(BaseModel):
    yes_price: int
    no_price: int
    yes_probability: float
    no_probability: float
    cost: int
    cost_display: str

    @classmethod
    def from_prices(cls, prices: LmsrPrices, cost: int) -> "QuoteResponse":
        return cls(
            yes_price=prices.yes,
            no_price=prices.no,
            yes_probability=e6_to_float(prices.yes),
            no_probability=e6_to_float(prices.no),
            cost=cost,
            cost_display=e6_to_display(cost),
        )
