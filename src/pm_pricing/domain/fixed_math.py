"""Deterministic integer exp/ln at WAD (1e18) precision.

Every host (market program, simulator, bot) must get bit-identical prices,
so the transcendental functions are computed with integer arithmetic only:

  exp: x = k*ln2 + r, 0 <= r < ln2  ->  e^x = 2^k * e^r, e^r by Taylor series
  ln:  y = 2^k * m, 1 <= m < 2      ->  ln y = k*ln2 + 2*atanh((m-1)/(m+1))

All intermediate divisions floor, so results are reproducible to the last unit.
"""

WAD = 10**18
LN2_WAD = 693_147_180_559_945_309

# e^-42 < 1e-18: below this exp_wad is 0 at WAD precision.
EXP_MIN_WAD = -42 * WAD
# Above this 2^k would grow without bound; LMSR only ever needs x <= 0.
EXP_MAX_WAD = 130 * WAD


def exp_wad(x: int) -> int:
    """e^(x/WAD) * WAD, floored."""
    if x > EXP_MAX_WAD:
        raise ValueError(f"exp_wad exponent out of range: {x}")
    if x < EXP_MIN_WAD:
        return 0

    k = x // LN2_WAD
    r = x - k * LN2_WAD

    total = WAD
    term = WAD
    n = 1
    while term:
        term = term * r // (n * WAD)
        total += term
        n += 1

    if k >= 0:
        return total << k
    return total >> -k


def ln_wad(y: int) -> int:
    """ln(y/WAD) * WAD, floored per series term. Requires y > 0."""
    if y <= 0:
        raise ValueError(f"ln_wad requires a positive argument, got {y}")

    # Normalise y into [WAD, 2*WAD) by powers of two.
    k = y.bit_length() - WAD.bit_length()
    m = y >> k if k >= 0 else y << -k
    if m < WAD:
        m <<= 1
        k -= 1

    z = (m - WAD) * WAD // (m + WAD)
    z_squared = z * z // WAD

    series = 0
    power = z
    n = 1
    while power:
        series += power // n
        power = power * z_squared // WAD
        n += 2

    return k * LN2_WAD + 2 * series
