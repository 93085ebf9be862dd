"""Domain models for pm_oracle — pure dataclasses, no I/O."""

from dataclasses import dataclass

from src.pm_common.enums import OracleStatus


@dataclass(frozen=True)
class FeedReading:
    value: int       # raw feed value at the sample's decimal scale
    timestamp: int   # unix seconds


@dataclass(frozen=True)
class OracleSample:
    """Three independent feed readings for one asset."""

    readings: tuple[FeedReading, FeedReading, FeedReading]
    decimals: int

    @property
    def median(self) -> int:
        return sorted(r.value for r in self.readings)[1]

    @property
    def latest_timestamp(self) -> int:
        return max(r.timestamp for r in self.readings)


@dataclass(frozen=True)
class OracleReading:
    """Aggregated view handed to the market: robust price plus freshness."""

    status: OracleStatus
    price: int | None = None     # median, at `decimals` scale
    age: int | None = None       # seconds since the freshest feed
    decimals: int = 0

    @property
    def is_fresh(self) -> bool:
        return self.status == OracleStatus.FRESH
