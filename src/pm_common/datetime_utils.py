"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def utc_now_ts() -> int:
    """Return UTC now as integer unix seconds."""
    return int(utc_now().timestamp())
