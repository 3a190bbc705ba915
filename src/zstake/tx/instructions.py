# src/zstake/tx/instructions.py
from __future__ import annotations

"""Instruction builders for the staking program.

Account lists are positional: the program reads accounts by index, so the
order and signer/writable flags below must match it exactly. A wrong order
does not fail here; it fails (or misbehaves) on chain.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from zstake.ledger.addresses import (
    pool_authority_address,
    reward_pool_address,
    settings_address,
    stake_address,
    stake_pool_address,
)
from zstake.ledger.constants import (
    SYSTEM_PROGRAM_ID,
    SYSVAR_CLOCK_ID,
    SYSVAR_RENT_ID,
    TOKEN_PROGRAM_ID,
    ZERO_KEY,
)
from zstake.util.structured_logging import log_event
from zstake.wire.instruction_data import (
    AmountPayload,
    InitializePayload,
    InstructionPayload,
    Instructions,
    SimplePayload,
    encode_instruction_data,
)

_log = logging.getLogger("zstake.tx")


class BeneficiaryRole(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


_CLAIM_INSTRUCTION = {
    BeneficiaryRole.PRIMARY: Instructions.CLAIM_PRIMARY,
    BeneficiaryRole.SECONDARY: Instructions.CLAIM_SECONDARY,
}


def _am(pubkey: Pubkey, is_signer: bool, is_writable: bool) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=is_signer, is_writable=is_writable)


def _build(program_id: Pubkey, accounts: List[AccountMeta], payload: InstructionPayload) -> Instruction:
    data = encode_instruction_data(payload)
    log_event(
        _log,
        "build_instruction",
        level=logging.DEBUG,
        instruction=payload.instruction.name,
        program_id=str(program_id),
        accounts=len(accounts),
        data_len=len(data),
    )
    return Instruction(program_id, data, accounts)


def initialize(
    program_id: Pubkey,
    funder: Pubkey,
    authority: Pubkey,
    mint: Pubkey,
    start_time: datetime,
    unbonding_duration: int,
) -> Instruction:
    """Initialize the program after deploying it for the first time.

    authority: program authority, must sign
    start_time: when yield starts to pay out
    unbonding_duration: seconds that unstaked funds stay locked
    """
    accounts = [
        _am(funder, True, False),
        _am(authority, True, False),
        _am(settings_address(program_id)[0], False, True),
        _am(pool_authority_address(program_id)[0], False, False),
        _am(stake_pool_address(program_id)[0], False, True),
        _am(reward_pool_address(program_id)[0], False, True),
        _am(mint, False, False),
        _am(SYSVAR_RENT_ID, False, False),
        _am(SYSVAR_CLOCK_ID, False, False),
        _am(TOKEN_PROGRAM_ID, False, False),
        _am(SYSTEM_PROGRAM_ID, False, False),
    ]
    payload = InitializePayload(start_time=start_time, unbonding_duration=unbonding_duration)
    return _build(program_id, accounts, payload)


def register_community(
    program_id: Pubkey,
    funder: Pubkey,
    owner: Pubkey,
    community: Pubkey,
    primary: Pubkey,
    secondary: Optional[Pubkey] = None,
) -> Instruction:
    """Register a new community. The community account must sign (fresh keypair)."""
    accounts = [
        _am(funder, True, False),
        _am(owner, True, False),
        _am(community, True, True),
        _am(primary, False, False),
        _am(secondary if secondary is not None else ZERO_KEY, False, False),
        _am(SYSVAR_RENT_ID, False, False),
        _am(SYSVAR_CLOCK_ID, False, False),
        _am(SYSTEM_PROGRAM_ID, False, False),
    ]
    return _build(program_id, accounts, SimplePayload(Instructions.REGISTER_COMMUNITY))


def initialize_stake(program_id: Pubkey, funder: Pubkey, staker: Pubkey, community: Pubkey) -> Instruction:
    accounts = [
        _am(funder, True, False),
        _am(staker, True, False),
        _am(community, False, False),
        _am(stake_address(program_id, community, staker)[0], False, True),
        _am(SYSVAR_RENT_ID, False, False),
        _am(SYSVAR_CLOCK_ID, False, False),
        _am(SYSTEM_PROGRAM_ID, False, False),
    ]
    return _build(program_id, accounts, SimplePayload(Instructions.INITIALIZE_STAKE))


def stake(
    program_id: Pubkey,
    funder: Pubkey,
    staker: Pubkey,
    staker_associated: Pubkey,
    community: Pubkey,
    mint: Pubkey,
    amount: int,
) -> Instruction:
    """Stake `amount` tokens; a negative amount starts unbonding, zero just harvests."""
    accounts = [
        _am(funder, True, False),
        _am(staker, True, False),
        _am(staker_associated, False, True),
        _am(community, False, True),
        _am(pool_authority_address(program_id)[0], False, False),
        _am(stake_pool_address(program_id)[0], False, True),
        _am(reward_pool_address(program_id)[0], False, True),
        _am(settings_address(program_id)[0], False, True),
        _am(stake_address(program_id, community, staker)[0], False, True),
        _am(mint, False, True),
        _am(SYSVAR_CLOCK_ID, False, False),
        _am(TOKEN_PROGRAM_ID, False, False),
    ]
    return _build(program_id, accounts, AmountPayload(Instructions.STAKE, int(amount)))


def withdraw_unbond(
    program_id: Pubkey,
    funder: Pubkey,
    staker: Pubkey,
    staker_associated: Pubkey,
    community: Pubkey,
) -> Instruction:
    accounts = [
        _am(funder, True, False),
        _am(staker, True, False),
        _am(staker_associated, False, True),
        _am(community, False, True),
        _am(settings_address(program_id)[0], False, True),
        _am(pool_authority_address(program_id)[0], False, False),
        _am(stake_pool_address(program_id)[0], False, True),
        _am(stake_address(program_id, community, staker)[0], False, True),
        _am(SYSVAR_CLOCK_ID, False, False),
        _am(TOKEN_PROGRAM_ID, False, False),
    ]
    return _build(program_id, accounts, SimplePayload(Instructions.WITHDRAW_UNBOND))


def claim(
    role: BeneficiaryRole,
    program_id: Pubkey,
    funder: Pubkey,
    authority: Pubkey,
    authority_associated: Pubkey,
    community: Pubkey,
    mint: Pubkey,
) -> Instruction:
    """Claim a community beneficiary's harvest; `authority` is that beneficiary."""
    accounts = [
        _am(funder, True, False),
        _am(authority, True, False),
        _am(authority_associated, False, True),
        _am(community, False, True),
        _am(settings_address(program_id)[0], False, True),
        _am(pool_authority_address(program_id)[0], False, False),
        _am(reward_pool_address(program_id)[0], False, True),
        _am(mint, False, True),
        _am(SYSVAR_CLOCK_ID, False, False),
        _am(TOKEN_PROGRAM_ID, False, False),
    ]
    return _build(program_id, accounts, SimplePayload(_CLAIM_INSTRUCTION[BeneficiaryRole(role)]))


def claim_primary(
    program_id: Pubkey,
    funder: Pubkey,
    authority: Pubkey,
    authority_associated: Pubkey,
    community: Pubkey,
    mint: Pubkey,
) -> Instruction:
    return claim(BeneficiaryRole.PRIMARY, program_id, funder, authority, authority_associated, community, mint)


def claim_secondary(
    program_id: Pubkey,
    funder: Pubkey,
    authority: Pubkey,
    authority_associated: Pubkey,
    community: Pubkey,
    mint: Pubkey,
) -> Instruction:
    return claim(BeneficiaryRole.SECONDARY, program_id, funder, authority, authority_associated, community, mint)
