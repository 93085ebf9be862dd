"""Byte layout of the oracle state account.

  discriminator   8 bytes
  update_authority 32 bytes
  BTC triplet     v1 v2 v3 ts1 ts2 ts3   (6 x i64 LE)
  ETH triplet     (6 x i64 LE)
  SOL triplet     (6 x i64 LE)
  decimals        u8

Minimum size: 8 + 32 + 48*3 + 1 = 185 bytes.
"""

import struct
from enum import Enum

from src.pm_common.errors import RecordLayoutError
from src.pm_oracle.domain.models import FeedReading, OracleSample

_HEADER = struct.Struct("<8s32s")
_TRIPLET = struct.Struct("<6q")
_DECIMALS = struct.Struct("<B")

ORACLE_RECORD_SIZE = _HEADER.size + 3 * _TRIPLET.size + _DECIMALS.size


class OracleAsset(int, Enum):
    BTC = 0
    ETH = 1
    SOL = 2


def decode_oracle_sample(
    data: bytes,
    asset: OracleAsset = OracleAsset.BTC,
    timestamps_in_ms: bool = False,
) -> OracleSample:
    if len(data) < ORACLE_RECORD_SIZE:
        raise RecordLayoutError(
            f"oracle record needs {ORACLE_RECORD_SIZE} bytes, got {len(data)}"
        )
    offset = _HEADER.size + asset.value * _TRIPLET.size
    v1, v2, v3, ts1, ts2, ts3 = _TRIPLET.unpack_from(data, offset)
    (decimals,) = _DECIMALS.unpack_from(data, _HEADER.size + 3 * _TRIPLET.size)

    if timestamps_in_ms:
        ts1, ts2, ts3 = ts1 // 1000, ts2 // 1000, ts3 // 1000

    return OracleSample(
        readings=(FeedReading(v1, ts1), FeedReading(v2, ts2), FeedReading(v3, ts3)),
        decimals=decimals,
    )


def encode_oracle_record(
    triplets: dict[OracleAsset, OracleSample],
    decimals: int,
    discriminator: bytes = bytes(8),
    authority: bytes = bytes(32),
) -> bytes:
    """Build an oracle record; assets missing from `triplets` are zero-filled."""
    if len(discriminator) != 8 or len(authority) != 32:
        raise RecordLayoutError("discriminator must be 8 bytes and authority 32 bytes")
    parts = [_HEADER.pack(discriminator, authority)]
    for asset in OracleAsset:
        sample = triplets.get(asset)
        if sample is None:
            parts.append(bytes(_TRIPLET.size))
            continue
        values = [r.value for r in sample.readings]
        stamps = [r.timestamp for r in sample.readings]
        try:
            parts.append(_TRIPLET.pack(*values, *stamps))
        except struct.error as exc:
            raise RecordLayoutError(f"{asset.name} triplet out of i64 range") from exc
    try:
        parts.append(_DECIMALS.pack(decimals))
    except struct.error as exc:
        raise RecordLayoutError(f"decimals out of u8 range: {decimals}") from exc
    return b"".join(parts)
