"""Guard validation for a single trade size.

Checks run in order (price limit, slippage, cost limit) and every enabled
check is reported even after a failure, so previews can show the full
picture. Failures are returned, never raised; only malformed configuration
raises.
"""

import logging

from src.pm_common.enums import GuardFailure, Side, TradeAction
from src.pm_common.errors import InvalidGuardConfigError
from src.pm_common.fixed_point import BPS_DENOMINATOR, calc_fee
from src.pm_market.domain.models import MarketState
from src.pm_pricing.domain.lmsr import quote_trade
from src.pm_risk.guards.models import (
    GuardCheck,
    GuardConfig,
    GuardEvaluation,
    GuardStatus,
    SlippageGuard,
)

logger = logging.getLogger(__name__)

QUOTE_MAX_AGE_SECONDS = 30


def validate_guard_config(config: GuardConfig, requested_amount: int) -> None:
    """Raise InvalidGuardConfigError for malformed guard combinations."""
    if config.price_limit is not None and config.price_limit <= 0:
        raise InvalidGuardConfigError(f"price_limit must be positive, got {config.price_limit}")
    if config.slippage is not None:
        if config.slippage.quote_price <= 0:
            raise InvalidGuardConfigError("quote_price must be positive")
        if not (0 <= config.slippage.max_slippage_bps <= BPS_DENOMINATOR):
            raise InvalidGuardConfigError(
                f"max_slippage_bps must be in [0, {BPS_DENOMINATOR}]"
            )
    if config.max_total_cost is not None and config.max_total_cost < 0:
        raise InvalidGuardConfigError("max_total_cost must not be negative")
    if not config.allow_partial:
        return
    if config.min_fill_shares is None:
        raise InvalidGuardConfigError(
            "allow_partial requires an explicit min_fill_shares (0 = any fill)"
        )
    if config.min_fill_shares < 0:
        raise InvalidGuardConfigError("min_fill_shares must not be negative")
    if config.min_fill_shares > requested_amount:
        raise InvalidGuardConfigError(
            f"min_fill_shares {config.min_fill_shares} exceeds requested {requested_amount}"
        )


def check_price_limit(action: TradeAction, execution_price: int, price_limit: int) -> GuardCheck:
    if action == TradeAction.BUY and execution_price > price_limit:
        return GuardCheck(
            passed=False,
            failure=GuardFailure.PRICE_LIMIT_EXCEEDED,
            reason=f"execution price {execution_price} above limit {price_limit}",
        )
    if action == TradeAction.SELL and execution_price < price_limit:
        return GuardCheck(
            passed=False,
            failure=GuardFailure.PRICE_LIMIT_NOT_MET,
            reason=f"execution price {execution_price} below limit {price_limit}",
        )
    return GuardCheck(passed=True)


def check_slippage(execution_price: int, guard: SlippageGuard, now: int) -> GuardCheck:
    quote_age = now - guard.quote_timestamp
    if quote_age > QUOTE_MAX_AGE_SECONDS:
        return GuardCheck(
            passed=False,
            failure=GuardFailure.STALE_QUOTE,
            reason=f"quote is {quote_age}s old (max {QUOTE_MAX_AGE_SECONDS}s)",
        )
    # |exec - quote| / quote > bps / 10000, cross-multiplied to stay exact
    deviation = abs(execution_price - guard.quote_price)
    if deviation * BPS_DENOMINATOR > guard.max_slippage_bps * guard.quote_price:
        return GuardCheck(
            passed=False,
            failure=GuardFailure.SLIPPAGE_EXCEEDED,
            reason=(
                f"execution price {execution_price} deviates from quote "
                f"{guard.quote_price} by more than {guard.max_slippage_bps} bps"
            ),
        )
    return GuardCheck(passed=True)


def check_cost_limit(total_cost: int, max_total_cost: int) -> GuardCheck:
    if total_cost > max_total_cost:
        return GuardCheck(
            passed=False,
            failure=GuardFailure.COST_EXCEEDS_LIMIT,
            reason=f"total cost {total_cost} exceeds limit {max_total_cost}",
        )
    return GuardCheck(passed=True)


def evaluate_guards(
    side: Side,
    action: TradeAction,
    shares: int,
    config: GuardConfig,
    market: MarketState,
    now: int,
) -> GuardEvaluation:
    """Price `shares` against the market and run every enabled check."""
    quote = quote_trade(market.b, market.q_yes, market.q_no, side, action, shares)
    fee = calc_fee(quote.cash, market.fee_bps)
    total_cost = quote.cash + fee if action == TradeAction.BUY else quote.cash - fee

    status = GuardStatus(
        price_limit=(
            check_price_limit(action, quote.avg_price, config.price_limit)
            if config.price_limit is not None else None
        ),
        slippage=(
            check_slippage(quote.avg_price, config.slippage, now)
            if config.slippage is not None else None
        ),
        cost_limit=(
            check_cost_limit(total_cost, config.max_total_cost)
            if config.max_total_cost is not None else None
        ),
    )
    logger.debug(
        "Guards %s %s shares=%d price=%d cost=%d passed=%s",
        action.value, side.value, shares, quote.avg_price, total_cost, status.all_passed,
    )
    return GuardEvaluation(
        shares=shares,
        execution_price=quote.avg_price,
        total_cost=total_cost,
        fee=fee,
        status=status,
    )
