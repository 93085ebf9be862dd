"""Integer fixed-point utilities for the e6-scaled market.

All prices, share quantities, and balances are int at SCALE = 1_000_000.
No float, no Decimal for anything that moves money; floats only appear in
the display helpers at the bottom of this module.
"""

SCALE = 1_000_000
BPS_DENOMINATOR = 10_000

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1
I128_MAX = (1 << 127) - 1


def fits_i64(value: int) -> bool:
    return I64_MIN <= value <= I64_MAX


def ceil_div(numerator: int, denominator: int) -> int:
    """Ceiling division for a positive denominator (works for negative numerators)."""
    return -((-numerator) // denominator)


def calc_fee(amount: int, fee_bps: int) -> int:
    """Fee with ceiling division (market never loses).

    fee = ceil(amount * fee_bps / 10000)
    """
    if amount <= 0 or fee_bps == 0:
        return 0
    return (amount * fee_bps + BPS_DENOMINATOR - 1) // BPS_DENOMINATOR


def e6_to_float(value: int) -> float:
    """Preview/display only."""
    return value / SCALE


def e6_to_display(value: int, decimals: int = 2) -> str:
    """Convert e6 amount to display string: 1_500_000 -> '$1.50', -250_000 -> '-$0.25'."""
    sign = "-" if value < 0 else ""
    abs_value = -value if value < 0 else value
    quantum = 10 ** (6 - decimals)
    rounded = abs_value // quantum
    whole, frac = divmod(rounded, 10 ** decimals)
    if decimals == 0:
        return f"{sign}${whole:,}"
    return f"{sign}${whole:,}.{frac:0{decimals}d}"
