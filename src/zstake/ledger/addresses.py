# src/zstake/ledger/addresses.py
from __future__ import annotations

from typing import Tuple

from solders.pubkey import Pubkey

from zstake.crypto.pda import find_program_address
from zstake.ledger.constants import (
    BENEFICIARY_SEED,
    POOL_AUTHORITY_SEED,
    REWARD_POOL_SEED,
    SETTINGS_SEED,
    STAKE_POOL_SEED,
    STAKE_SEED,
)


def settings_address(program_id: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([SETTINGS_SEED], program_id)


def pool_authority_address(program_id: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([POOL_AUTHORITY_SEED], program_id)


def reward_pool_address(program_id: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([REWARD_POOL_SEED], program_id)


def stake_pool_address(program_id: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([STAKE_POOL_SEED], program_id)


def stake_address(program_id: Pubkey, community: Pubkey, owner: Pubkey) -> Tuple[Pubkey, int]:
    """Stake account of `owner` in `community`."""
    return find_program_address([STAKE_SEED, bytes(community), bytes(owner)], program_id)


def beneficiary_address(program_id: Pubkey, authority: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([BENEFICIARY_SEED, bytes(authority)], program_id)
