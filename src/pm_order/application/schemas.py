# src/pm_order/application/schemas.py
from pydantic import BaseModel, Field

from src.pm_common.enums import GuardFailure, Side, TradeAction
from src.pm_common.fixed_point import e6_to_display, e6_to_float
from src.pm_market.application.schemas import MarketStateIn, MarketStateOut, PositionIn
from src.pm_order.domain.models import Fill, SimulationResult
from src.pm_risk.guards.models import GuardCheck, GuardConfig, GuardStatus


class GuardConfigIn(BaseModel):
    """Guard limits in wire form: 0 disables a limit."""

    price_limit_e6: int = Field(default=0, ge=0)
    max_slippage_bps: int = Field(default=0, ge=0)
    quote_price_e6: int = Field(default=0, ge=0)
    quote_timestamp: int = Field(default=0, ge=0)
    max_total_cost_e6: int = Field(default=0, ge=0)
    allow_partial: bool = False
    min_fill_shares_e6: int | None = Field(default=None, ge=0)

    def to_domain(self) -> GuardConfig:
        return GuardConfig.from_wire(**self.model_dump())


class SimulateTradeRequest(BaseModel):
    market: MarketStateIn
    side: Side
    action: TradeAction
    amount_e6: int = Field(gt=0)
    guards: GuardConfigIn = Field(default_factory=GuardConfigIn)
    now: int | None = Field(default=None, description="Unix seconds; defaults to server time")


class ExecuteTradeRequest(SimulateTradeRequest):
    position: PositionIn


class GuardCheckOut(BaseModel):
    passed: bool
    failure: GuardFailure | None = None
    reason: str | None = None

    @classmethod
    def from_domain(cls, check: GuardCheck | None) -> "GuardCheckOut | None":
        if check is None:
            return None
        return cls(passed=check.passed, failure=check.failure, reason=check.reason)


class GuardStatusOut(BaseModel):
    price_limit: GuardCheckOut | None = None
    slippage: GuardCheckOut | None = None
    cost_limit: GuardCheckOut | None = None
    all_passed: bool

    @classmethod
    def from_domain(cls, status: GuardStatus) -> "GuardStatusOut":
        return cls(
            price_limit=GuardCheckOut.from_domain(status.price_limit),
            slippage=GuardCheckOut.from_domain(status.slippage),
            cost_limit=GuardCheckOut.from_domain(status.cost_limit),
            all_passed=status.all_passed,
        )


class SimulationResponse(BaseModel):
    success: bool
    shares_to_execute: int
    execution_price: int
    total_cost: int
    is_partial_fill: bool
    guard_status: GuardStatusOut
    error: GuardFailure | None = None
    error_message: str | None = None
    # display only
    shares_float: float
    execution_price_float: float
    total_cost_display: str

    @classmethod
    def from_domain(cls, r: SimulationResult) -> "SimulationResponse":
        return cls(
            success=r.success,
            shares_to_execute=r.shares_to_execute,
            execution_price=r.execution_price,
            total_cost=r.total_cost,
            is_partial_fill=r.is_partial_fill,
            guard_status=GuardStatusOut.from_domain(r.guard_status),
            error=r.error,
            error_message=r.error_message,
            shares_float=e6_to_float(r.shares_to_execute),
            execution_price_float=e6_to_float(r.execution_price),
            total_cost_display=e6_to_display(r.total_cost),
        )


class FillOut(BaseModel):
    side: Side
    action: TradeAction
    shares: int
    cash: int
    fee: int

    @classmethod
    def from_domain(cls, fill: Fill) -> "FillOut":
        return cls(
            side=fill.side, action=fill.action, shares=fill.shares, cash=fill.cash, fee=fill.fee
        )


class ExecuteTradeResponse(BaseModel):
    executed: bool
    simulation: SimulationResponse
    market: MarketStateOut | None = None
    position: PositionIn | None = None
    fill: FillOut | None = None
