"""Global enums.

Wire codes (single byte in account records and instruction data) are kept
next to each enum so every host decodes them identically.
"""

from enum import Enum


class MarketStatus(str, Enum):
    OPEN = "OPEN"
    STOPPED = "STOPPED"
    SETTLED = "SETTLED"


class Winner(str, Enum):
    NONE = "NONE"
    YES = "YES"
    NO = "NO"


class Side(str, Enum):
    YES = "YES"
    NO = "NO"


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class OracleStatus(str, Enum):
    FRESH = "FRESH"
    STALE = "STALE"
    UNAVAILABLE = "UNAVAILABLE"


class GuardFailure(str, Enum):
    """Structured guard outcome codes, reported in results (never raised)."""
    PRICE_LIMIT_EXCEEDED = "PRICE_LIMIT_EXCEEDED"
    PRICE_LIMIT_NOT_MET = "PRICE_LIMIT_NOT_MET"
    SLIPPAGE_EXCEEDED = "SLIPPAGE_EXCEEDED"
    STALE_QUOTE = "STALE_QUOTE"
    COST_EXCEEDS_LIMIT = "COST_EXCEEDS_LIMIT"
    MIN_FILL_NOT_MET = "MIN_FILL_NOT_MET"


# --- Wire codes ---

MARKET_STATUS_CODES: dict[MarketStatus, int] = {
    MarketStatus.OPEN: 0,
    MarketStatus.STOPPED: 1,
    MarketStatus.SETTLED: 2,
}

WINNER_CODES: dict[Winner, int] = {
    Winner.NONE: 0,
    Winner.YES: 1,
    Winner.NO: 2,
}

# Instruction encoding: 1 = YES / BUY, 2 = NO / SELL
SIDE_CODES: dict[Side, int] = {Side.YES: 1, Side.NO: 2}
ACTION_CODES: dict[TradeAction, int] = {TradeAction.BUY: 1, TradeAction.SELL: 2}


def winner_for_side(side: Side) -> Winner:
    return Winner.YES if side == Side.YES else Winner.NO
