"""Oracle aggregation: median of three feeds, age from the freshest feed.

The median tolerates exactly one faulty feed. Freshness uses the
most recent timestamp, so one live feed keeps the sample fresh even if the
other two have stopped updating.
"""

import logging

from src.pm_common.enums import OracleStatus
from src.pm_common.errors import OracleUnavailableError, StaleOracleError
from src.pm_common.fixed_point import SCALE
from src.pm_oracle.domain.models import OracleReading, OracleSample

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 90


def aggregate(
    sample: OracleSample | None,
    now: int,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
) -> OracleReading:
    if sample is None:
        logger.warning("Oracle sample unavailable")
        return OracleReading(status=OracleStatus.UNAVAILABLE)

    # Future-dated feeds (clock skew) count as age 0.
    age = max(0, now - sample.latest_timestamp)
    status = OracleStatus.STALE if age > max_age_seconds else OracleStatus.FRESH
    if status == OracleStatus.STALE:
        logger.warning("Oracle stale: age=%ds max=%ds", age, max_age_seconds)
    return OracleReading(status=status, price=sample.median, age=age, decimals=sample.decimals)


def require_price(
    reading: OracleReading,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
    accept_stale: bool = False,
) -> int:
    """Return the median price, raising unless it is usable."""
    if reading.status == OracleStatus.UNAVAILABLE or reading.price is None:
        raise OracleUnavailableError()
    if reading.status == OracleStatus.STALE and not accept_stale:
        raise StaleOracleError(reading.age or 0, max_age_seconds)
    return reading.price


def to_e6(value: int, decimals: int) -> int:
    """Rescale a feed value from `decimals` places to e6 (floor)."""
    if decimals >= 6:
        return value // 10 ** (decimals - 6)
    return value * (SCALE // 10**decimals)
