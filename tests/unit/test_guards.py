"""Tests for pm_risk.guards — config parsing, individual checks, evaluation."""

import pytest

from src.pm_common.enums import GuardFailure, Side, TradeAction
from src.pm_common.errors import InvalidGuardConfigError
from src.pm_market.domain.models import MarketState
from src.pm_risk.guards.models import GuardConfig, SlippageGuard
from src.pm_risk.guards.validator import (
    QUOTE_MAX_AGE_SECONDS,
    check_cost_limit,
    check_price_limit,
    check_slippage,
    evaluate_guards,
    validate_guard_config,
)

NOW = 1_760_000_000
SHARE = 1_000_000


class TestFromWire:
    def test_zero_means_disabled(self) -> None:
        config = GuardConfig.from_wire()
        assert config.price_limit is None
        assert config.slippage is None
        assert config.max_total_cost is None
        assert config.min_fill_shares is None

    def test_full_slippage_guard(self) -> None:
        config = GuardConfig.from_wire(
            max_slippage_bps=200, quote_price_e6=650_000, quote_timestamp=NOW
        )
        assert config.slippage == SlippageGuard(200, 650_000, NOW)

    def test_half_specified_slippage_rejected(self) -> None:
        with pytest.raises(InvalidGuardConfigError, match="together"):
            GuardConfig.from_wire(max_slippage_bps=200, quote_price_e6=650_000)
        with pytest.raises(InvalidGuardConfigError):
            GuardConfig.from_wire(quote_timestamp=NOW)

    def test_partial_without_min_fill_stays_unset(self) -> None:
        config = GuardConfig.from_wire(max_total_cost_e6=50 * SHARE, allow_partial=True)
        assert config.min_fill_shares is None
        with pytest.raises(InvalidGuardConfigError, match="min_fill_shares"):
            validate_guard_config(config, 100 * SHARE)

    def test_min_fill_only_with_partial(self) -> None:
        assert GuardConfig.from_wire(min_fill_shares_e6=5 * SHARE).min_fill_shares is None
        config = GuardConfig.from_wire(allow_partial=True, min_fill_shares_e6=0)
        assert config.min_fill_shares == 0

    def test_limits_carried(self) -> None:
        config = GuardConfig.from_wire(price_limit_e6=600_000, max_total_cost_e6=50 * SHARE)
        assert config.price_limit == 600_000
        assert config.max_total_cost == 50 * SHARE


class TestValidateGuardConfig:
    def test_empty_config_ok(self) -> None:
        validate_guard_config(GuardConfig(), 10 * SHARE)

    def test_non_positive_price_limit(self) -> None:
        with pytest.raises(InvalidGuardConfigError):
            validate_guard_config(GuardConfig(price_limit=0), SHARE)

    def test_slippage_bps_range(self) -> None:
        guard = SlippageGuard(max_slippage_bps=10_001, quote_price=500_000, quote_timestamp=NOW)
        with pytest.raises(InvalidGuardConfigError):
            validate_guard_config(GuardConfig(slippage=guard), SHARE)

    def test_partial_requires_min_fill(self) -> None:
        with pytest.raises(InvalidGuardConfigError, match="min_fill_shares"):
            validate_guard_config(GuardConfig(allow_partial=True), SHARE)

    def test_min_fill_above_request(self) -> None:
        config = GuardConfig(allow_partial=True, min_fill_shares=2 * SHARE)
        with pytest.raises(InvalidGuardConfigError, match="exceeds requested"):
            validate_guard_config(config, SHARE)

    def test_negative_cost_limit(self) -> None:
        with pytest.raises(InvalidGuardConfigError):
            validate_guard_config(GuardConfig(max_total_cost=-1), SHARE)


class TestCheckPriceLimit:
    def test_buy_above_limit_fails(self) -> None:
        check = check_price_limit(TradeAction.BUY, 610_000, 600_000)
        assert not check.passed
        assert check.failure == GuardFailure.PRICE_LIMIT_EXCEEDED

    def test_buy_at_limit_passes(self) -> None:
        assert check_price_limit(TradeAction.BUY, 600_000, 600_000).passed

    def test_sell_below_limit_fails(self) -> None:
        check = check_price_limit(TradeAction.SELL, 590_000, 600_000)
        assert check.failure == GuardFailure.PRICE_LIMIT_NOT_MET

    def test_sell_above_limit_passes(self) -> None:
        assert check_price_limit(TradeAction.SELL, 610_000, 600_000).passed


class TestCheckSlippage:
    GUARD = SlippageGuard(max_slippage_bps=200, quote_price=650_000, quote_timestamp=NOW)

    def test_within_tolerance(self) -> None:
        # |660_000 - 650_000| / 650_000 = 1.54%
        assert check_slippage(660_000, self.GUARD, NOW).passed

    def test_beyond_tolerance(self) -> None:
        # |665_000 - 650_000| / 650_000 = 2.31%
        check = check_slippage(665_000, self.GUARD, NOW)
        assert check.failure == GuardFailure.SLIPPAGE_EXCEEDED

    def test_exactly_at_tolerance_passes(self) -> None:
        assert check_slippage(663_000, self.GUARD, NOW).passed
        assert check_slippage(637_000, self.GUARD, NOW).passed

    def test_favourable_deviation_also_counts(self) -> None:
        assert not check_slippage(630_000, self.GUARD, NOW).passed

    def test_stale_quote(self) -> None:
        now = NOW + QUOTE_MAX_AGE_SECONDS + 1
        check = check_slippage(650_000, self.GUARD, now)
        assert check.failure == GuardFailure.STALE_QUOTE

    def test_quote_at_max_age_is_fresh(self) -> None:
        assert check_slippage(650_000, self.GUARD, NOW + QUOTE_MAX_AGE_SECONDS).passed


class TestCheckCostLimit:
    def test_at_limit_passes(self) -> None:
        assert check_cost_limit(50 * SHARE, 50 * SHARE).passed

    def test_above_limit_fails(self) -> None:
        check = check_cost_limit(50 * SHARE + 1, 50 * SHARE)
        assert check.failure == GuardFailure.COST_EXCEEDS_LIMIT


class TestEvaluateGuards:
    MARKET = MarketState(b=500_000_000, fee_bps=25)

    def test_disabled_checks_not_reported(self) -> None:
        evaluation = evaluate_guards(
            Side.YES, TradeAction.BUY, 10 * SHARE, GuardConfig(), self.MARKET, NOW
        )
        assert evaluation.passed
        assert evaluation.status.checks() == []

    def test_every_enabled_check_reported(self) -> None:
        config = GuardConfig(price_limit=510_000, max_total_cost=10 * SHARE)
        evaluation = evaluate_guards(
            Side.YES, TradeAction.BUY, 100 * SHARE, config, self.MARKET, NOW
        )
        assert not evaluation.passed
        assert [name for name, _ in evaluation.status.checks()] == ["price_limit", "cost_limit"]
        assert evaluation.status.price_limit.failure == GuardFailure.PRICE_LIMIT_EXCEEDED
        assert evaluation.status.cost_limit.failure == GuardFailure.COST_EXCEEDS_LIMIT
        assert evaluation.status.first_failure == evaluation.status.price_limit

    def test_buy_total_includes_fee(self) -> None:
        evaluation = evaluate_guards(
            Side.YES, TradeAction.BUY, 100 * SHARE, GuardConfig(), self.MARKET, NOW
        )
        assert evaluation.fee > 0
        assert evaluation.total_cost > evaluation.shares * evaluation.execution_price // SHARE

    def test_sell_total_net_of_fee(self) -> None:
        market = MarketState(b=500_000_000, q_yes=100 * SHARE, fee_bps=25)
        evaluation = evaluate_guards(
            Side.YES, TradeAction.SELL, 50 * SHARE, GuardConfig(), market, NOW
        )
        gross = evaluation.total_cost + evaluation.fee
        assert evaluation.fee > 0
        assert gross * SHARE // (50 * SHARE) == evaluation.execution_price

    def test_sell_price_limit(self) -> None:
        market = MarketState(b=500_000_000, q_yes=100 * SHARE)
        config = GuardConfig(price_limit=600_000)
        evaluation = evaluate_guards(Side.YES, TradeAction.SELL, 50 * SHARE, config, market, NOW)
        assert evaluation.status.price_limit.failure == GuardFailure.PRICE_LIMIT_NOT_MET
