"""Tests for pm_clearing.domain.invariants."""

import pytest

from src.pm_clearing.domain.invariants import (
    verify_market_invariants,
    verify_payout_conservation,
    verify_position_invariant,
)
from src.pm_common.enums import MarketStatus, Winner
from src.pm_common.errors import InvariantViolationError
from src.pm_market.domain.models import MarketState, Position


class TestMarketInvariants:
    def test_passes_when_all_ok(self) -> None:
        verify_market_invariants(MarketState(b=1, vault_balance=10, fees_collected=1))

    def test_inv1_negative_vault(self) -> None:
        with pytest.raises(InvariantViolationError, match=r"INV-1"):
            verify_market_invariants(MarketState(b=1, vault_balance=-1))

    def test_inv1_negative_fees(self) -> None:
        with pytest.raises(InvariantViolationError, match=r"INV-1"):
            verify_market_invariants(MarketState(b=1, fees_collected=-1))

    def test_inv2_settled_without_winner(self) -> None:
        with pytest.raises(InvariantViolationError, match=r"INV-2"):
            verify_market_invariants(MarketState(b=1, status=MarketStatus.SETTLED))

    def test_inv2_winner_before_settlement(self) -> None:
        with pytest.raises(InvariantViolationError, match=r"INV-2"):
            verify_market_invariants(MarketState(b=1, winner=Winner.NO))

    def test_inv3_pps_above_face(self) -> None:
        market = MarketState(
            b=1, status=MarketStatus.SETTLED, winner=Winner.YES, price_per_share=1_000_001
        )
        with pytest.raises(InvariantViolationError, match=r"INV-3"):
            verify_market_invariants(market)


class TestPositionInvariant:
    def test_within_outstanding(self) -> None:
        market = MarketState(b=1, q_yes=10, q_no=5)
        verify_position_invariant(market, [Position("a", 6, 5), Position("b", 4, 0)])

    def test_yes_overflow(self) -> None:
        market = MarketState(b=1, q_yes=10)
        with pytest.raises(InvariantViolationError, match=r"yes shares"):
            verify_position_invariant(market, [Position("a", 6), Position("b", 5)])

    def test_negative_shares(self) -> None:
        with pytest.raises(InvariantViolationError, match=r"negative"):
            verify_position_invariant(MarketState(b=1, q_no=5), [Position("a", 0, -1)])


class TestPayoutConservation:
    def test_ok(self) -> None:
        assert verify_payout_conservation(100, [40, 60]) == []

    def test_violation(self) -> None:
        violations = verify_payout_conservation(100, [40, 61])
        assert len(violations) == 1
        assert "INV-G" in violations[0]
