from pydantic import BaseModel, Field

from src.pm_clearing.domain.settlement import SettlementResult
from src.pm_common.enums import Winner
from src.pm_common.fixed_point import e6_to_display
from src.pm_market.application.schemas import MarketStateIn, PositionIn


class SettlementPreviewRequest(BaseModel):
    market: MarketStateIn
    winner: Winner
    positions: list[PositionIn] = Field(default_factory=list)


class PayoutOut(BaseModel):
    owner: str
    winning_shares: int
    amount: int


class SettlementPreviewResponse(BaseModel):
    winner: Winner
    price_per_share: int
    payouts: list[PayoutOut]
    total_paid: int
    surplus: int
    total_paid_display: str

    @classmethod
    def from_domain(cls, r: SettlementResult) -> "SettlementPreviewResponse":
        return cls(
            winner=r.winner,
            price_per_share=r.price_per_share,
            payouts=[
                PayoutOut(owner=p.owner, winning_shares=p.winning_shares, amount=p.amount)
                for p in r.payouts
            ],
            total_paid=r.total_paid,
            surplus=r.surplus,
            total_paid_display=e6_to_display(r.total_paid),
        )
