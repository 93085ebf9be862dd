"""Market state machine.

  Open --stop--> Stopped --resolve(oracle start vs end)--> Settled (terminal)

Nothing returns a market to Open; the next round is a new MarketState from
open_next_market(), which is also the only place a settled market's unclaimed
vault balance is recovered.
"""

import logging
from dataclasses import replace

from src.pm_clearing.domain.invariants import verify_market_invariants
from src.pm_clearing.domain.settlement import payout_per_share
from src.pm_common.enums import MarketStatus, Side, Winner
from src.pm_common.errors import (
    InvalidMarketConfigError,
    InvalidMarketTransitionError,
)
from src.pm_common.fixed_point import BPS_DENOMINATOR
from src.pm_market.domain.models import MarketState
from src.pm_oracle.domain.aggregator import DEFAULT_MAX_AGE_SECONDS, require_price, to_e6
from src.pm_oracle.domain.models import OracleReading
from src.pm_pricing.domain.lmsr import validate_liquidity

logger = logging.getLogger(__name__)


def init_market(b: int, fee_bps: int, market_end_time: int | None = None) -> MarketState:
    validate_liquidity(b)
    if not (0 <= fee_bps <= BPS_DENOMINATOR):
        raise InvalidMarketConfigError(f"fee_bps must be in [0, {BPS_DENOMINATOR}], got {fee_bps}")
    logger.info("Market initialised: b=%d fee_bps=%d", b, fee_bps)
    return MarketState(b=b, fee_bps=fee_bps, market_end_time=market_end_time)


def open_next_market(
    previous: MarketState | None,
    b: int,
    fee_bps: int,
    market_end_time: int | None = None,
) -> tuple[MarketState, int]:
    """Start a new round, sweeping the previous settled market's residual vault.

    Returns (new_market, swept). Unredeemed payouts of the previous round are
    part of the sweep; there is no other recovery path for them.
    """
    swept = 0
    if previous is not None:
        if previous.status != MarketStatus.SETTLED:
            raise InvalidMarketTransitionError(
                previous.status.value, MarketStatus.OPEN.value, "previous market must be settled"
            )
        swept = previous.vault_balance
        logger.info("Swept %d e6 from previous market vault", swept)
    return init_market(b, fee_bps, market_end_time), swept


def snapshot_start(
    market: MarketState,
    reading: OracleReading,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
) -> MarketState:
    """Record the oracle start price the market resolves against."""
    if market.status != MarketStatus.OPEN:
        raise InvalidMarketTransitionError(market.status.value, "SNAPSHOT")
    price = require_price(reading, max_age_seconds)
    start_price = to_e6(price, reading.decimals)
    logger.info("Start price snapshot: %d e6", start_price)
    return replace(market, start_price=start_price)


def stop_market(market: MarketState) -> MarketState:
    if market.status != MarketStatus.OPEN:
        raise InvalidMarketTransitionError(market.status.value, MarketStatus.STOPPED.value)
    logger.info("Market stopped: q_yes=%d q_no=%d vault=%d",
                market.q_yes, market.q_no, market.vault_balance)
    return replace(market, status=MarketStatus.STOPPED)


def decide_winner(start_price: int, end_price: int, ge_wins_yes: bool = True) -> Winner:
    """YES wins when the price went up (ties go to YES iff ge_wins_yes)."""
    if end_price > start_price or (end_price == start_price and ge_wins_yes):
        return Winner.YES
    return Winner.NO


def resolve_market(
    market: MarketState,
    reading: OracleReading,
    ge_wins_yes: bool = True,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
    accept_stale: bool = False,
) -> MarketState:
    """Stopped -> Settled: compare oracle end price to the start snapshot."""
    if market.status != MarketStatus.STOPPED:
        raise InvalidMarketTransitionError(market.status.value, MarketStatus.SETTLED.value)
    if market.start_price <= 0:
        raise InvalidMarketTransitionError(
            market.status.value, MarketStatus.SETTLED.value, "no start price snapshot"
        )
    end_price = to_e6(require_price(reading, max_age_seconds, accept_stale), reading.decimals)
    winner = decide_winner(market.start_price, end_price, ge_wins_yes)
    winning_total = market.outstanding(Side.YES if winner == Winner.YES else Side.NO)
    pps = payout_per_share(market.vault_balance, winning_total)

    logger.info(
        "Market settled: winner=%s start=%d end=%d winning_total=%d pps=%d",
        winner.value, market.start_price, end_price, winning_total, pps,
    )
    settled = replace(
        market,
        status=MarketStatus.SETTLED,
        winner=winner,
        winning_total=winning_total,
        price_per_share=pps,
    )
    verify_market_invariants(settled)
    return settled
