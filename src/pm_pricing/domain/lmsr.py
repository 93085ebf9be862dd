"""LMSR cost and price functions over e6 fixed point.

C(qYes, qNo) = b * ln(exp(qYes/b) + exp(qNo/b))
P(s)         = exp(q_s/b) / (exp(qYes/b) + exp(qNo/b))

Both exponents are shifted by max(qYes, qNo)/b before exp (log-sum-exp) and
the offset is added back after ln, so no exponent is ever positive.
"""

from dataclasses import dataclass

from src.pm_common.enums import Side, TradeAction
from src.pm_common.errors import InvalidMarketConfigError
from src.pm_common.fixed_point import SCALE, ceil_div
from src.pm_pricing.domain.fixed_math import WAD, exp_wad, ln_wad


@dataclass(frozen=True)
class LmsrPrices:
    yes: int  # e6
    no: int   # e6


@dataclass(frozen=True)
class TradeQuote:
    """Cash leg of a trade before fees."""

    side: Side
    action: TradeAction
    amount: int      # shares e6
    cash: int        # e6, paid by buyer / received by seller
    avg_price: int   # e6 per share


def validate_liquidity(b: int) -> None:
    if b <= 0:
        raise InvalidMarketConfigError(f"liquidity parameter b must be positive, got {b}")


def _shifted_exponents(b: int, q_yes: int, q_no: int) -> tuple[int, int, int]:
    """Return (offset, e^(x_yes - offset), e^(x_no - offset)), all WAD scaled."""
    x_yes = q_yes * WAD // b
    x_no = q_no * WAD // b
    offset = max(x_yes, x_no)
    return offset, exp_wad(x_yes - offset), exp_wad(x_no - offset)


def _cost_wad(b: int, q_yes: int, q_no: int) -> int:
    """C(q) in e6 * WAD units."""
    offset, e_yes, e_no = _shifted_exponents(b, q_yes, q_no)
    return b * (offset + ln_wad(e_yes + e_no))


def cost_function(b: int, q_yes: int, q_no: int) -> int:
    validate_liquidity(b)
    return _cost_wad(b, q_yes, q_no) // WAD


def spot_prices(b: int, q_yes: int, q_no: int) -> LmsrPrices:
    validate_liquidity(b)
    _, e_yes, e_no = _shifted_exponents(b, q_yes, q_no)
    total = e_yes + e_no
    return LmsrPrices(yes=e_yes * SCALE // total, no=e_no * SCALE // total)


def spot_price(b: int, q_yes: int, q_no: int, side: Side) -> int:
    prices = spot_prices(b, q_yes, q_no)
    return prices.yes if side == Side.YES else prices.no


def _delta_cost_wad(b: int, q_yes: int, q_no: int, side: Side, delta: int) -> int:
    """C(q + delta) - C(q) in e6 * WAD units."""
    before = _cost_wad(b, q_yes, q_no)
    if side == Side.YES:
        return _cost_wad(b, q_yes + delta, q_no) - before
    return _cost_wad(b, q_yes, q_no + delta) - before


def trade_cost(b: int, q_yes: int, q_no: int, side: Side, delta: int) -> int:
    """Signed cost of adding delta shares to side (negative delta = sell).

    Rounded up: a buyer never pays less, a seller never receives more than the
    exact LMSR amount.
    """
    validate_liquidity(b)
    if delta == 0:
        return 0
    return ceil_div(_delta_cost_wad(b, q_yes, q_no, side, delta), WAD)


def quote_trade(
    b: int, q_yes: int, q_no: int, side: Side, action: TradeAction, amount: int
) -> TradeQuote:
    """Price a buy or sell of `amount` shares (amount >= 0).

    The average price comes from the unrounded cost difference, so sizes
    below one e6 unit of cash still price near spot. Buy rounds up, sell down.
    """
    validate_liquidity(b)
    if amount == 0:
        return TradeQuote(side, action, 0, 0, spot_price(b, q_yes, q_no, side))
    if action == TradeAction.BUY:
        exact = _delta_cost_wad(b, q_yes, q_no, side, amount)
        cash = ceil_div(exact, WAD)
        avg_price = ceil_div(exact * SCALE, amount * WAD)
    else:
        exact = -_delta_cost_wad(b, q_yes, q_no, side, -amount)
        cash = exact // WAD
        avg_price = exact * SCALE // (amount * WAD)
    return TradeQuote(side=side, action=action, amount=amount, cash=cash, avg_price=avg_price)
