# src/zstake/ledger/accounts.py
from __future__ import annotations

"""Program account records.

Plain value types mirroring the program's account layouts. Field order in each
dataclass is the wire order; see zstake.wire.accounts for the byte encoding.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

from solders.pubkey import Pubkey

from zstake.ledger.constants import ZERO_KEY
from zstake.wire.primitives import Timestamp, unix_seconds


@dataclass(frozen=True)
class Settings:
    """Global program state (one account, derived from the "settings" seed)."""

    token: Pubkey
    unbonding_duration: int  # seconds
    fee_recipient: Pubkey
    next_emission_change: datetime
    emission: int  # per year
    total_stake: int
    reward_per_share: int  # u128, scaled by PRECISION
    last_reward: datetime

    def to_bytes(self) -> bytes:
        from zstake.wire.accounts import encode_settings

        return encode_settings(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Settings":
        from zstake.wire.accounts import decode_settings

        return decode_settings(data)


@dataclass(frozen=True)
class Beneficiary:
    authority: Pubkey
    staked: int
    reward_debt: int
    holding: int

    @property
    def is_empty(self) -> bool:
        return self.authority == ZERO_KEY

    def to_bytes(self) -> bytes:
        from zstake.wire.accounts import encode_beneficiary

        return encode_beneficiary(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Beneficiary":
        from zstake.wire.accounts import decode_beneficiary

        return decode_beneficiary(data)


@dataclass(frozen=True)
class Community:
    creation_date: datetime
    authority: Pubkey
    primary: Pubkey
    secondary: Pubkey  # ZERO_KEY when there is no secondary beneficiary

    @property
    def has_secondary(self) -> bool:
        return self.secondary != ZERO_KEY

    def to_bytes(self) -> bytes:
        from zstake.wire.accounts import encode_community

        return encode_community(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Community":
        from zstake.wire.accounts import decode_community

        return decode_community(data)


class AuthorityType(IntEnum):
    NONE = 0
    NFT = 1
    BASIC = 2


@dataclass(frozen=True)
class Authority:
    authority_type: AuthorityType
    address: Pubkey

    @classmethod
    def none(cls) -> "Authority":
        return cls(AuthorityType.NONE, ZERO_KEY)

    @classmethod
    def nft(cls, mint: Pubkey) -> "Authority":
        return cls(AuthorityType.NFT, mint)

    @classmethod
    def basic(cls, owner: Pubkey) -> "Authority":
        return cls(AuthorityType.BASIC, owner)


@dataclass(frozen=True)
class Endpoint:
    """Community variant whose owner may be a wallet or an NFT mint."""

    creation_date: datetime
    total_stake: int
    owner: Authority
    primary: Pubkey
    secondary: Pubkey

    @property
    def has_secondary(self) -> bool:
        return self.secondary != ZERO_KEY

    def to_bytes(self) -> bytes:
        from zstake.wire.accounts import encode_endpoint

        return encode_endpoint(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Endpoint":
        from zstake.wire.accounts import decode_endpoint

        return decode_endpoint(data)


@dataclass(frozen=True)
class Stake:
    """One staker's position in one community."""

    creation_date: datetime
    total_stake: int
    staker: Pubkey
    unbonding_end: datetime
    unbonding_amount: int

    def is_unbonded(self, now: Timestamp) -> bool:
        """True when there is a cooled-down amount ready for WithdrawUnbond."""
        return self.unbonding_amount > 0 and unix_seconds(self.unbonding_end) <= unix_seconds(now)

    def to_bytes(self) -> bytes:
        from zstake.wire.accounts import encode_stake

        return encode_stake(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Stake":
        from zstake.wire.accounts import decode_stake

        return decode_stake(data)
