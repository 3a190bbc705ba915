# src/zstake/wire/accounts.py
from __future__ import annotations

"""Byte layouts of program accounts.

Each record is the plain concatenation of its fields, little-endian, with no
padding and no length prefixes. The order below must match the program's own
struct order exactly.

Decoders ignore trailing bytes: accounts may be allocated larger than the
record they hold.
"""

from zstake.ledger.accounts import (
    Authority,
    AuthorityType,
    Beneficiary,
    Community,
    Endpoint,
    Settings,
    Stake,
)
from zstake.ledger.constants import ZERO_KEY
from zstake.wire.primitives import (
    PUBKEY_LEN,
    TIMESTAMP_LEN,
    U8_LEN,
    U64_LEN,
    U128_LEN,
    Reader,
    WireDecodeError,
    WireEncodeError,
    Writer,
)

SETTINGS_SIZE = PUBKEY_LEN + U64_LEN + PUBKEY_LEN + TIMESTAMP_LEN + U64_LEN + U64_LEN + U128_LEN + TIMESTAMP_LEN
BENEFICIARY_SIZE = PUBKEY_LEN + 3 * U64_LEN
COMMUNITY_SIZE = TIMESTAMP_LEN + 3 * PUBKEY_LEN
AUTHORITY_SIZE = U8_LEN + PUBKEY_LEN
ENDPOINT_SIZE = TIMESTAMP_LEN + U64_LEN + AUTHORITY_SIZE + 2 * PUBKEY_LEN
STAKE_SIZE = TIMESTAMP_LEN + U64_LEN + PUBKEY_LEN + TIMESTAMP_LEN + U64_LEN


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def encode_settings(s: Settings) -> bytes:
    return (
        Writer()
        .pubkey(s.token, "token")
        .u64(s.unbonding_duration, "unbonding_duration")
        .pubkey(s.fee_recipient, "fee_recipient")
        .timestamp(s.next_emission_change, "next_emission_change")
        .u64(s.emission, "emission")
        .u64(s.total_stake, "total_stake")
        .u128(s.reward_per_share, "reward_per_share")
        .timestamp(s.last_reward, "last_reward")
        .to_bytes()
    )


def decode_settings(data: bytes) -> Settings:
    r = Reader(data, record="Settings")
    return Settings(
        token=r.pubkey("token"),
        unbonding_duration=r.u64("unbonding_duration"),
        fee_recipient=r.pubkey("fee_recipient"),
        next_emission_change=r.timestamp("next_emission_change"),
        emission=r.u64("emission"),
        total_stake=r.u64("total_stake"),
        reward_per_share=r.u128("reward_per_share"),
        last_reward=r.timestamp("last_reward"),
    )


# ---------------------------------------------------------------------------
# Beneficiary
# ---------------------------------------------------------------------------


def encode_beneficiary(b: Beneficiary) -> bytes:
    return (
        Writer()
        .pubkey(b.authority, "authority")
        .u64(b.staked, "staked")
        .u64(b.reward_debt, "reward_debt")
        .u64(b.holding, "holding")
        .to_bytes()
    )


def decode_beneficiary(data: bytes) -> Beneficiary:
    r = Reader(data, record="Beneficiary")
    return Beneficiary(
        authority=r.pubkey("authority"),
        staked=r.u64("staked"),
        reward_debt=r.u64("reward_debt"),
        holding=r.u64("holding"),
    )


# ---------------------------------------------------------------------------
# Community
# ---------------------------------------------------------------------------


def encode_community(c: Community) -> bytes:
    return (
        Writer()
        .timestamp(c.creation_date, "creation_date")
        .pubkey(c.authority, "authority")
        .pubkey(c.primary, "primary")
        .pubkey(c.secondary, "secondary")
        .to_bytes()
    )


def decode_community(data: bytes) -> Community:
    r = Reader(data, record="Community")
    return Community(
        creation_date=r.timestamp("creation_date"),
        authority=r.pubkey("authority"),
        primary=r.pubkey("primary"),
        secondary=r.pubkey("secondary"),
    )


# ---------------------------------------------------------------------------
# Endpoint (+ Authority)
# ---------------------------------------------------------------------------


def _write_authority(w: Writer, a: Authority, field: str) -> None:
    try:
        kind = AuthorityType(a.authority_type)
    except ValueError as e:
        raise WireEncodeError("invalid_enum", f"{field}: unknown authority type {a.authority_type!r}") from e
    if kind is AuthorityType.NONE and a.address != ZERO_KEY:
        raise WireEncodeError("invalid_authority", f"{field}: NONE authority must carry the zero address")
    w.u8(int(kind), f"{field}.authority_type")
    w.pubkey(a.address, f"{field}.address")


def _read_authority(r: Reader, field: str) -> Authority:
    kind = r.enum(AuthorityType, f"{field}.authority_type")
    address = r.pubkey(f"{field}.address")
    if kind is AuthorityType.NONE and address != ZERO_KEY:
        raise WireDecodeError(f"{field}: NONE authority with non-zero address", code="invalid_authority")
    return Authority(kind, address)


def encode_endpoint(e: Endpoint) -> bytes:
    w = Writer().timestamp(e.creation_date, "creation_date").u64(e.total_stake, "total_stake")
    _write_authority(w, e.owner, "owner")
    return w.pubkey(e.primary, "primary").pubkey(e.secondary, "secondary").to_bytes()


def decode_endpoint(data: bytes) -> Endpoint:
    r = Reader(data, record="Endpoint")
    creation_date = r.timestamp("creation_date")
    total_stake = r.u64("total_stake")
    owner = _read_authority(r, "owner")
    return Endpoint(
        creation_date=creation_date,
        total_stake=total_stake,
        owner=owner,
        primary=r.pubkey("primary"),
        secondary=r.pubkey("secondary"),
    )


# ---------------------------------------------------------------------------
# Stake
# ---------------------------------------------------------------------------


def encode_stake(s: Stake) -> bytes:
    return (
        Writer()
        .timestamp(s.creation_date, "creation_date")
        .u64(s.total_stake, "total_stake")
        .pubkey(s.staker, "staker")
        .timestamp(s.unbonding_end, "unbonding_end")
        .u64(s.unbonding_amount, "unbonding_amount")
        .to_bytes()
    )


def decode_stake(data: bytes) -> Stake:
    r = Reader(data, record="Stake")
    return Stake(
        creation_date=r.timestamp("creation_date"),
        total_stake=r.u64("total_stake"),
        staker=r.pubkey("staker"),
        unbonding_end=r.timestamp("unbonding_end"),
        unbonding_amount=r.u64("unbonding_amount"),
    )
