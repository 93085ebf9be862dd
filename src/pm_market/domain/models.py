"""Domain models for pm_market — frozen dataclasses, no I/O.

Every operation takes a state value and returns a new one
(dataclasses.replace), so independent markets never share state.
"""

from dataclasses import dataclass

from src.pm_common.enums import MarketStatus, Side, Winner


@dataclass(frozen=True)
class MarketState:
    b: int                        # liquidity parameter, e6
    q_yes: int = 0                # cumulative LMSR quantity, e6
    q_no: int = 0
    fee_bps: int = 0
    status: MarketStatus = MarketStatus.OPEN
    winner: Winner = Winner.NONE
    vault_balance: int = 0        # e6
    start_price: int = 0          # oracle snapshot, e6 (0 = not taken)
    fees_collected: int = 0       # e6
    winning_total: int = 0        # set at resolution
    price_per_share: int = 0      # set at resolution, e6
    market_end_time: int | None = None

    def outstanding(self, side: Side) -> int:
        return self.q_yes if side == Side.YES else self.q_no

    @property
    def is_open(self) -> bool:
        return self.status == MarketStatus.OPEN


@dataclass(frozen=True)
class Position:
    owner: str
    yes_shares: int = 0      # e6
    no_shares: int = 0       # e6
    held_balance: int = 0    # owner-scoped reserve, e6

    def shares(self, side: Side) -> int:
        return self.yes_shares if side == Side.YES else self.no_shares

    def winning_shares(self, winner: Winner) -> int:
        if winner == Winner.YES:
            return self.yes_shares
        if winner == Winner.NO:
            return self.no_shares
        return 0
