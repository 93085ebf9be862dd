"""Flat account records for hosts that persist state as raw bytes.

Market (little-endian, unpadded):
  discriminator 8 | bump u8 | decimals u8 | b i64 | fee_bps u16
  q_yes i64 | q_no i64 | fees_collected i64 | vault i64
  status u8 | winner u8 | winning_total i64 | price_per_share i64
  fee_dest 32 | vault_bump u8 | start_price i64 | [market_end_time i64]

Position:
  discriminator 8 | owner 32 | yes_shares i64 | no_shares i64

The position's held balance lives in a separate owner-scoped reserve account
and is not part of the position record.
"""

import struct
from dataclasses import dataclass

from src.pm_common.enums import MARKET_STATUS_CODES, WINNER_CODES, MarketStatus, Winner
from src.pm_common.errors import RecordLayoutError
from src.pm_market.domain.models import MarketState, Position

_MARKET = struct.Struct("<8sBBqHqqqqBBqq32sBq")
_END_TIME = struct.Struct("<q")
_POSITION = struct.Struct("<8s32sqq")

MARKET_RECORD_SIZE = _MARKET.size
MARKET_RECORD_SIZE_WITH_END_TIME = _MARKET.size + _END_TIME.size
POSITION_RECORD_SIZE = _POSITION.size

_STATUS_BY_CODE = {code: status for status, code in MARKET_STATUS_CODES.items()}
_WINNER_BY_CODE = {code: winner for winner, code in WINNER_CODES.items()}


@dataclass(frozen=True)
class MarketAccount:
    """MarketState plus the host-specific account metadata stored beside it."""

    state: MarketState
    bump: int = 0
    decimals: int = 6
    fee_dest: bytes = bytes(32)
    vault_bump: int = 0
    discriminator: bytes = bytes(8)


def decode_market(data: bytes) -> MarketAccount:
    if len(data) < MARKET_RECORD_SIZE:
        raise RecordLayoutError(
            f"market record needs at least {MARKET_RECORD_SIZE} bytes, got {len(data)}"
        )
    (
        discriminator, bump, decimals, b, fee_bps,
        q_yes, q_no, fees, vault,
        status_code, winner_code, winning_total, pps,
        fee_dest, vault_bump, start_price,
    ) = _MARKET.unpack_from(data, 0)

    status = _STATUS_BY_CODE.get(status_code)
    winner = _WINNER_BY_CODE.get(winner_code)
    if status is None:
        raise RecordLayoutError(f"unknown market status code {status_code}")
    if winner is None:
        raise RecordLayoutError(f"unknown winner code {winner_code}")

    end_time = None
    if len(data) >= MARKET_RECORD_SIZE_WITH_END_TIME:
        (end_time,) = _END_TIME.unpack_from(data, MARKET_RECORD_SIZE)

    state = MarketState(
        b=b,
        q_yes=q_yes,
        q_no=q_no,
        fee_bps=fee_bps,
        status=status,
        winner=winner,
        vault_balance=vault,
        start_price=start_price,
        fees_collected=fees,
        winning_total=winning_total,
        price_per_share=pps,
        market_end_time=end_time,
    )
    return MarketAccount(
        state=state,
        bump=bump,
        decimals=decimals,
        fee_dest=fee_dest,
        vault_bump=vault_bump,
        discriminator=discriminator,
    )


def encode_market(account: MarketAccount) -> bytes:
    if len(account.fee_dest) != 32 or len(account.discriminator) != 8:
        raise RecordLayoutError("fee_dest must be 32 bytes and discriminator 8 bytes")
    s = account.state
    try:
        data = _MARKET.pack(
            account.discriminator, account.bump, account.decimals, s.b, s.fee_bps,
            s.q_yes, s.q_no, s.fees_collected, s.vault_balance,
            MARKET_STATUS_CODES[MarketStatus(s.status)], WINNER_CODES[Winner(s.winner)],
            s.winning_total, s.price_per_share,
            account.fee_dest, account.vault_bump, s.start_price,
        )
        if s.market_end_time is not None:
            data += _END_TIME.pack(s.market_end_time)
    except struct.error as exc:
        raise RecordLayoutError(f"market field out of range: {exc}") from exc
    return data


def decode_position(data: bytes, held_balance: int = 0) -> Position:
    """Decode a position record; owner is returned as lowercase hex."""
    if len(data) < POSITION_RECORD_SIZE:
        raise RecordLayoutError(
            f"position record needs {POSITION_RECORD_SIZE} bytes, got {len(data)}"
        )
    _, owner, yes_shares, no_shares = _POSITION.unpack_from(data, 0)
    return Position(
        owner=owner.hex(),
        yes_shares=yes_shares,
        no_shares=no_shares,
        held_balance=held_balance,
    )


def encode_position(position: Position, discriminator: bytes = bytes(8)) -> bytes:
    try:
        owner = bytes.fromhex(position.owner)
    except ValueError as exc:
        raise RecordLayoutError(f"owner is not hex: {position.owner!r}") from exc
    if len(owner) != 32 or len(discriminator) != 8:
        raise RecordLayoutError("owner must be 32 bytes and discriminator 8 bytes")
    try:
        return _POSITION.pack(discriminator, owner, position.yes_shares, position.no_shares)
    except struct.error as exc:
        raise RecordLayoutError(f"position shares out of i64 range: {exc}") from exc
