"""Market settlement — payout-per-share, winner payouts, redemption.

pps    = min(SCALE, floor(vault * SCALE / winning_total)),  0 if winning_total <= 0
payout = floor(winning_shares * pps / SCALE)

Flooring both steps and capping pps at face value guarantees
sum(payouts) <= vault. The residual stays in the vault; payouts that are
never redeemed stay there too until open_next_market() sweeps it.
"""

import logging
from dataclasses import dataclass, replace

from src.pm_clearing.domain.invariants import (
    verify_market_invariants,
    verify_payout_conservation,
    verify_position_invariant,
)
from src.pm_common.enums import MarketStatus, Winner
from src.pm_common.errors import (
    InsufficientLiquidityError,
    InvalidMarketTransitionError,
    MarketNotSettledError,
    SettlementOverflowError,
)
from src.pm_common.fixed_point import I128_MAX, SCALE, fits_i64
from src.pm_market.domain.models import MarketState, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Payout:
    owner: str
    winning_shares: int
    amount: int


@dataclass(frozen=True)
class SettlementResult:
    winner: Winner
    price_per_share: int
    payouts: list[Payout]
    total_paid: int
    surplus: int


def _widened_mul(a: int, b: int, what: str) -> int:
    """i64 x i64 product in the i128 range, or a fatal overflow."""
    if not fits_i64(a) or not fits_i64(b):
        raise SettlementOverflowError(f"{what}: operand outside i64 range")
    product = a * b
    if abs(product) > I128_MAX:
        raise SettlementOverflowError(f"{what}: product outside i128 range")
    return product


def payout_per_share(vault_balance: int, winning_total: int) -> int:
    if winning_total <= 0:
        return 0
    if vault_balance < 0:
        raise InsufficientLiquidityError(0, vault_balance)
    product = _widened_mul(vault_balance, SCALE, "payout_per_share")
    return min(SCALE, product // winning_total)


def position_payout(winning_shares: int, pps: int) -> int:
    if winning_shares <= 0 or pps <= 0:
        return 0
    return _widened_mul(winning_shares, pps, "position_payout") // SCALE


def settle(
    market: MarketState,
    winner: Winner,
    positions: list[Position],
) -> SettlementResult:
    """Compute every position's payout for `winner` without mutating anything."""
    if winner == Winner.NONE:
        raise InvalidMarketTransitionError(market.status.value, MarketStatus.SETTLED.value,
                                           "winner must be YES or NO")
    if market.status == MarketStatus.SETTLED and market.winner != winner:
        raise InvalidMarketTransitionError(
            market.status.value, MarketStatus.SETTLED.value,
            f"market already settled for {market.winner.value}",
        )
    verify_position_invariant(market, positions)

    if market.status == MarketStatus.SETTLED:
        # redemptions have already drawn the vault down; pay at the recorded rate
        pps = market.price_per_share
    else:
        winning_total = market.q_yes if winner == Winner.YES else market.q_no
        pps = payout_per_share(market.vault_balance, winning_total)

    payouts: list[Payout] = []
    total_paid = 0
    for position in positions:
        shares = position.winning_shares(winner)
        amount = position_payout(shares, pps)
        payouts.append(Payout(owner=position.owner, winning_shares=shares, amount=amount))
        total_paid += amount

    if verify_payout_conservation(market.vault_balance, [p.amount for p in payouts]):
        raise InsufficientLiquidityError(total_paid, market.vault_balance)

    surplus = market.vault_balance - total_paid
    logger.debug(
        "Settlement: winner=%s pps=%d positions=%d paid=%d surplus=%d",
        winner.value, pps, len(positions), total_paid, surplus,
    )
    return SettlementResult(
        winner=winner,
        price_per_share=pps,
        payouts=payouts,
        total_paid=total_paid,
        surplus=surplus,
    )


def redeem(market: MarketState, position: Position) -> tuple[MarketState, Position, int]:
    """Pay one position from the vault and zero its shares.

    Returns (market, position, payout). Losing or empty positions are zeroed
    with a payout of 0.
    """
    if market.status != MarketStatus.SETTLED:
        raise MarketNotSettledError(market.status.value)

    amount = position_payout(position.winning_shares(market.winner), market.price_per_share)
    if amount > market.vault_balance:
        raise InsufficientLiquidityError(amount, market.vault_balance)

    new_market = replace(market, vault_balance=market.vault_balance - amount)
    new_position = replace(
        position,
        yes_shares=0,
        no_shares=0,
        held_balance=position.held_balance + amount,
    )
    verify_market_invariants(new_market)
    logger.info("Redeemed %s: payout=%d", position.owner, amount)
    return new_market, new_position, amount


def redeem_all(
    market: MarketState, positions: list[Position]
) -> tuple[MarketState, list[Position], int]:
    """Operator bulk redemption of every position after settlement."""
    redeemed: list[Position] = []
    total = 0
    for position in positions:
        market, position, amount = redeem(market, position)
        redeemed.append(position)
        total += amount
    logger.info("Bulk redeem complete: positions=%d paid=%d vault_left=%d",
                len(positions), total, market.vault_balance)
    return market, redeemed, total
