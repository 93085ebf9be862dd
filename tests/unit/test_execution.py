"""Tests for pm_order.domain.execution — applying trades to market and position."""

import pytest

from src.pm_common.enums import MarketStatus, Side, TradeAction
from src.pm_common.errors import (
    InsufficientBalanceError,
    InsufficientLiquidityError,
    InsufficientPositionError,
    MarketNotOpenError,
)
from src.pm_common.fixed_point import calc_fee
from src.pm_market.domain.models import MarketState, Position
from src.pm_order.domain.execution import apply_trade, execute_trade
from src.pm_pricing.domain.lmsr import trade_cost
from src.pm_risk.guards.models import GuardConfig

NOW = 1_760_000_000
SHARE = 1_000_000
MARKET = MarketState(b=500_000_000, fee_bps=25)
ALICE = Position(owner="alice", held_balance=100 * SHARE)


class TestApplyBuy:
    def test_moves_cost_into_vault_and_fee_aside(self) -> None:
        cost = trade_cost(MARKET.b, 0, 0, Side.YES, 10 * SHARE)
        fee = calc_fee(cost, 25)
        market, position, fill = apply_trade(MARKET, ALICE, Side.YES, TradeAction.BUY, 10 * SHARE)

        assert market.q_yes == 10 * SHARE
        assert market.q_no == 0
        assert market.vault_balance == cost
        assert market.fees_collected == fee
        assert position.yes_shares == 10 * SHARE
        assert position.held_balance == 100 * SHARE - cost - fee
        assert fill.cash == cost
        assert fill.fee == fee

    def test_inputs_not_mutated(self) -> None:
        apply_trade(MARKET, ALICE, Side.NO, TradeAction.BUY, SHARE)
        assert MARKET.q_no == 0
        assert ALICE.no_shares == 0

    def test_insufficient_balance(self) -> None:
        poor = Position(owner="bob", held_balance=SHARE)
        with pytest.raises(InsufficientBalanceError):
            apply_trade(MARKET, poor, Side.YES, TradeAction.BUY, 10 * SHARE)

    def test_market_not_open(self) -> None:
        stopped = MarketState(b=500_000_000, status=MarketStatus.STOPPED)
        with pytest.raises(MarketNotOpenError):
            apply_trade(stopped, ALICE, Side.YES, TradeAction.BUY, SHARE)


class TestApplySell:
    def test_round_trip_leaves_vault_non_negative(self) -> None:
        market, position, buy = apply_trade(MARKET, ALICE, Side.YES, TradeAction.BUY, 10 * SHARE)
        market, position, sell = apply_trade(
            market, position, Side.YES, TradeAction.SELL, 10 * SHARE
        )

        assert market.q_yes == 0
        assert position.yes_shares == 0
        assert sell.cash <= buy.cash
        assert market.vault_balance == buy.cash - sell.cash
        assert market.vault_balance >= 0
        assert market.fees_collected == buy.fee + sell.fee
        assert position.held_balance == 100 * SHARE - buy.cash - buy.fee + sell.cash - sell.fee

    def test_cannot_sell_more_than_held(self) -> None:
        market, position, _ = apply_trade(MARKET, ALICE, Side.NO, TradeAction.BUY, 5 * SHARE)
        with pytest.raises(InsufficientPositionError):
            apply_trade(market, position, Side.NO, TradeAction.SELL, 6 * SHARE)

    def test_vault_must_cover_proceeds(self) -> None:
        market = MarketState(b=500_000_000, q_yes=10 * SHARE, vault_balance=0)
        holder = Position(owner="carol", yes_shares=10 * SHARE)
        with pytest.raises(InsufficientLiquidityError):
            apply_trade(market, holder, Side.YES, TradeAction.SELL, 10 * SHARE)


class TestExecuteTrade:
    def test_rejected_leaves_state_untouched(self) -> None:
        guards = GuardConfig(max_total_cost=SHARE)
        execution = execute_trade(MARKET, ALICE, Side.YES, TradeAction.BUY, 10 * SHARE, guards, NOW)
        assert not execution.executed
        assert execution.market is None
        assert execution.fill is None

    def test_full_fill(self) -> None:
        execution = execute_trade(
            MARKET, ALICE, Side.YES, TradeAction.BUY, 10 * SHARE, GuardConfig(), NOW
        )
        assert execution.executed
        assert execution.market.q_yes == 10 * SHARE
        assert execution.fill.cash + execution.fill.fee == execution.result.total_cost

    def test_partial_fill_applies_reduced_size(self) -> None:
        guards = GuardConfig(max_total_cost=20 * SHARE, allow_partial=True, min_fill_shares=0)
        execution = execute_trade(
            MARKET, ALICE, Side.NO, TradeAction.BUY, 100 * SHARE, guards, NOW
        )
        assert execution.result.is_partial_fill
        assert execution.position.no_shares == execution.result.shares_to_execute
        assert execution.fill.cash + execution.fill.fee <= 20 * SHARE
