# src/zstake/ledger/constants.py
from __future__ import annotations

"""Staking program constants.

Values here are part of the contract with the on-chain program; changing any
of them makes local previews disagree with settlement.

- Reward-per-share is fixed point, scaled by PRECISION (1e12)
- Emission is an annual rate, cut to 3/4 at each yearly boundary
- A year is always 365 days (no leap handling on chain)
"""

from typing import Final, Tuple

from solders.pubkey import Pubkey

# Fixed-point scale of the reward-per-share accumulator
PRECISION: Final[int] = 1_000_000_000_000

SECONDS_PER_YEAR: Final[int] = 365 * 24 * 3600  # 31_536_000

# Emission is multiplied by NUM / DEN (floor) at every annual boundary
EMISSION_DECAY: Final[Tuple[int, int]] = (3, 4)

MINIMUM_STAKE: Final[int] = 1_000

# Integer ranges of the wire types
U64_MAX: Final[int] = (1 << 64) - 1
U128_MAX: Final[int] = (1 << 128) - 1
I64_MIN: Final[int] = -(1 << 63)
I64_MAX: Final[int] = (1 << 63) - 1

# Seed literals for program-derived addresses
SETTINGS_SEED: Final[bytes] = b"settings"
POOL_AUTHORITY_SEED: Final[bytes] = b"poolauthority"
REWARD_POOL_SEED: Final[bytes] = b"rewardpool"
STAKE_POOL_SEED: Final[bytes] = b"stakepool"
STAKE_SEED: Final[bytes] = b"stake"
BENEFICIARY_SEED: Final[bytes] = b"beneficiary"

ZERO_KEY: Final[Pubkey] = Pubkey.default()

# Sysvars and native programs referenced by instructions
SYSVAR_RENT_ID: Final[Pubkey] = Pubkey.from_string("SysvarRent111111111111111111111111111111111")
SYSVAR_CLOCK_ID: Final[Pubkey] = Pubkey.from_string("SysvarC1ock11111111111111111111111111111111")
TOKEN_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
SYSTEM_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string("11111111111111111111111111111111")
