"""Trade domain models — pure dataclasses."""
from dataclasses import dataclass

from src.pm_common.enums import GuardFailure, Side, TradeAction
from src.pm_market.domain.models import MarketState, Position
from src.pm_risk.guards.models import GuardStatus


@dataclass(frozen=True)
class SimulationResult:
    success: bool
    shares_to_execute: int   # e6
    execution_price: int     # e6 avg price at shares_to_execute
    total_cost: int          # e6 incl. fee at shares_to_execute
    is_partial_fill: bool
    guard_status: GuardStatus  # evaluated at the full requested size
    error: GuardFailure | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class Fill:
    """Cash movement of one applied trade."""

    side: Side
    action: TradeAction
    shares: int
    cash: int    # LMSR leg through the vault
    fee: int


@dataclass(frozen=True)
class TradeExecution:
    result: SimulationResult
    market: MarketState | None = None    # None = rejected, state unchanged
    position: Position | None = None
    fill: Fill | None = None

    @property
    def executed(self) -> bool:
        return self.market is not None
