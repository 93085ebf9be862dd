"""Trade application: move shares and cash between a market and one position."""

import logging
from dataclasses import replace

from src.pm_common.enums import Side, TradeAction
from src.pm_common.errors import (
    InsufficientBalanceError,
    InsufficientLiquidityError,
    InsufficientPositionError,
    MarketNotOpenError,
)
from src.pm_common.fixed_point import calc_fee
from src.pm_market.domain.models import MarketState, Position
from src.pm_order.domain.models import Fill, TradeExecution
from src.pm_order.domain.simulator import simulate_trade, validate_trade_request
from src.pm_pricing.domain.lmsr import trade_cost
from src.pm_risk.guards.models import GuardConfig

logger = logging.getLogger(__name__)


def _with_shares(position: Position, side: Side, shares: int) -> Position:
    if side == Side.YES:
        return replace(position, yes_shares=shares)
    return replace(position, no_shares=shares)


def _with_outstanding(market: MarketState, side: Side, q: int) -> MarketState:
    if side == Side.YES:
        return replace(market, q_yes=q)
    return replace(market, q_no=q)


def apply_trade(
    market: MarketState,
    position: Position,
    side: Side,
    action: TradeAction,
    shares: int,
) -> tuple[MarketState, Position, Fill]:
    """Apply an already-validated trade size. Returns new (market, position, fill).

    Buy:  position pays cost + fee from its held balance; cost enters the vault.
    Sell: vault pays proceeds; position receives proceeds - fee.
    """
    if not market.is_open:
        raise MarketNotOpenError(market.status.value)
    validate_trade_request(shares)

    outstanding = market.outstanding(side)
    held = position.shares(side)

    if action == TradeAction.BUY:
        cost = trade_cost(market.b, market.q_yes, market.q_no, side, shares)
        fee = calc_fee(cost, market.fee_bps)
        debit = cost + fee
        if position.held_balance < debit:
            raise InsufficientBalanceError(debit, position.held_balance)
        new_market = replace(
            _with_outstanding(market, side, outstanding + shares),
            vault_balance=market.vault_balance + cost,
            fees_collected=market.fees_collected + fee,
        )
        new_position = replace(
            _with_shares(position, side, held + shares),
            held_balance=position.held_balance - debit,
        )
        fill = Fill(side=side, action=action, shares=shares, cash=cost, fee=fee)
    else:
        if held < shares:
            raise InsufficientPositionError(f"{side.value} shares: need {shares}, hold {held}")
        proceeds = -trade_cost(market.b, market.q_yes, market.q_no, side, -shares)
        if proceeds > market.vault_balance:
            raise InsufficientLiquidityError(proceeds, market.vault_balance)
        fee = calc_fee(proceeds, market.fee_bps)
        new_market = replace(
            _with_outstanding(market, side, outstanding - shares),
            vault_balance=market.vault_balance - proceeds,
            fees_collected=market.fees_collected + fee,
        )
        new_position = replace(
            _with_shares(position, side, held - shares),
            held_balance=position.held_balance + proceeds - fee,
        )
        fill = Fill(side=side, action=action, shares=shares, cash=proceeds, fee=fee)

    logger.info(
        "Trade %s %s %s: shares=%d cash=%d fee=%d vault=%d",
        position.owner, action.value, side.value, shares, fill.cash, fee,
        new_market.vault_balance,
    )
    return new_market, new_position, fill


def execute_trade(
    market: MarketState,
    position: Position,
    side: Side,
    action: TradeAction,
    amount: int,
    guards: GuardConfig,
    now: int,
) -> TradeExecution:
    """Simulate, then apply the executable size if the guards allow it."""
    result = simulate_trade(side, action, amount, guards, market, now)
    if not result.success:
        return TradeExecution(result=result)
    new_market, new_position, fill = apply_trade(
        market, position, side, action, result.shares_to_execute
    )
    return TradeExecution(result=result, market=new_market, position=new_position, fill=fill)
