"""Market invariant verification."""

import logging

from src.pm_common.enums import MarketStatus, Winner
from src.pm_common.errors import InvariantViolationError
from src.pm_common.fixed_point import SCALE
from src.pm_market.domain.models import MarketState, Position

logger = logging.getLogger(__name__)


def verify_market_invariants(market: MarketState) -> None:
    """Raise InvariantViolationError if the market state is inconsistent.

    INV-1: vault_balance >= 0 and fees_collected >= 0
    INV-2: Settled <=> winner != NONE
    INV-3: 0 <= price_per_share <= SCALE
    """
    if market.vault_balance < 0:
        raise InvariantViolationError(f"INV-1 vault_balance={market.vault_balance} < 0")
    if market.fees_collected < 0:
        raise InvariantViolationError(f"INV-1 fees_collected={market.fees_collected} < 0")
    settled = market.status == MarketStatus.SETTLED
    if settled != (market.winner != Winner.NONE):
        raise InvariantViolationError(
            f"INV-2 status={market.status.value} winner={market.winner.value}"
        )
    if not (0 <= market.price_per_share <= SCALE):
        raise InvariantViolationError(f"INV-3 price_per_share={market.price_per_share}")
    logger.debug("Invariants OK: vault=%d q_yes=%d q_no=%d",
                 market.vault_balance, market.q_yes, market.q_no)


def verify_position_invariant(market: MarketState, positions: list[Position]) -> None:
    """INV-4: aggregate shares per side never exceed the market's outstanding q."""
    total_yes = sum(p.yes_shares for p in positions)
    total_no = sum(p.no_shares for p in positions)
    if any(p.yes_shares < 0 or p.no_shares < 0 for p in positions):
        raise InvariantViolationError("INV-4 negative position shares")
    if total_yes > market.q_yes:
        raise InvariantViolationError(f"INV-4 yes shares {total_yes} > q_yes {market.q_yes}")
    if total_no > market.q_no:
        raise InvariantViolationError(f"INV-4 no shares {total_no} > q_no {market.q_no}")


def verify_payout_conservation(vault_balance: int, payouts: list[int]) -> list[str]:
    """Check sum(payouts) <= vault. Returns list of violation strings."""
    violations: list[str] = []
    total = sum(payouts)
    if total > vault_balance:
        msg = f"INV-G payouts({total}) > vault({vault_balance})"
        violations.append(msg)
        logger.error(msg)
    return violations
