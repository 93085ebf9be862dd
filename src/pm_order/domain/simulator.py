"""simulate_trade — the shared preview/execution entry point.

Used identically by the settlement pipeline, bots, and the preview API:
  1. reject malformed configuration (raises, nothing is priced)
  2. evaluate every enabled guard at the full requested size
  3. if anything failed and allow_partial is set, search for the largest
     passing size
"""

import logging

from src.pm_common.enums import GuardFailure, Side, TradeAction
from src.pm_common.errors import InvalidTradeRequestError, MarketNotOpenError
from src.pm_market.domain.models import MarketState
from src.pm_order.domain.models import SimulationResult
from src.pm_pricing.domain.lmsr import validate_liquidity
from src.pm_risk.guards.models import GuardConfig
from src.pm_risk.guards.partial_fill import find_max_executable
from src.pm_risk.guards.validator import evaluate_guards, validate_guard_config

logger = logging.getLogger(__name__)

MAX_TRADE_SHARES = 50_000_000_000  # 50k shares


def validate_trade_request(amount: int) -> None:
    if not (1 <= amount <= MAX_TRADE_SHARES):
        raise InvalidTradeRequestError(f"amount {amount} must be in [1, {MAX_TRADE_SHARES}]")


def simulate_trade(
    side: Side,
    action: TradeAction,
    amount: int,
    guards: GuardConfig,
    market: MarketState,
    now: int,
) -> SimulationResult:
    validate_liquidity(market.b)
    if not market.is_open:
        raise MarketNotOpenError(market.status.value)
    validate_trade_request(amount)
    validate_guard_config(guards, amount)

    full = evaluate_guards(side, action, amount, guards, market, now)
    if full.passed:
        return SimulationResult(
            success=True,
            shares_to_execute=amount,
            execution_price=full.execution_price,
            total_cost=full.total_cost,
            is_partial_fill=False,
            guard_status=full.status,
        )

    failed = full.status.first_failure
    if not guards.allow_partial:
        return SimulationResult(
            success=False,
            shares_to_execute=0,
            execution_price=full.execution_price,
            total_cost=full.total_cost,
            is_partial_fill=False,
            guard_status=full.status,
            error=failed.failure if failed else None,
            error_message=failed.reason if failed else None,
        )

    partial = find_max_executable(side, action, amount, guards, market, now)
    if partial.evaluation is None:
        logger.info("Trade rejected: %s %s %d, minimum fill not met",
                    action.value, side.value, amount)
        return SimulationResult(
            success=False,
            shares_to_execute=0,
            execution_price=full.execution_price,
            total_cost=full.total_cost,
            is_partial_fill=False,
            guard_status=full.status,
            error=GuardFailure.MIN_FILL_NOT_MET,
            error_message=(
                f"no size >= {guards.min_fill_shares} passes guards"
                + (f" ({failed.reason})" if failed and failed.reason else "")
            ),
        )

    return SimulationResult(
        success=True,
        shares_to_execute=partial.shares,
        execution_price=partial.evaluation.execution_price,
        total_cost=partial.evaluation.total_cost,
        is_partial_fill=True,
        guard_status=full.status,
    )
