# src/zstake/errors.py
from __future__ import annotations

"""Staking program error codes.

The program rejects transactions with `custom program error: 0x<hex>`. This
table maps those codes to names for logs and display only; callers must not
branch on it.
"""

import re
from enum import IntEnum
from typing import Optional


class StakingErrors(IntEnum):
    MissingAuthoritySignature = 0
    ProgramAlreadyInitialized = 1
    ProgramNotInitialized = 2
    InvalidSettingsAccount = 3
    InvalidRewardPoolAccount = 4
    InvalidPoolAuthorityAccount = 5
    InvalidStakePoolAccount = 6
    TokenNotSPLToken = 7
    CommunityAccountAlreadyExists = 8
    AuthorizedSignatureMissing = 9
    PrimaryAssociatedInvalidAccount = 10
    PrimaryAssociatedInvalidOwner = 11
    PrimaryAssociatedInvalidToken = 12
    SecondarySignatureMissing = 13
    SecondaryAssociatedInvalidOwner = 14
    SecondaryAssociatedInvalidToken = 15
    SecondaryAssociatedInvalidAccount = 16
    CommunityCreatorSignatureMissing = 17
    InvalidStakeAccount = 18
    InvalidCommunityAccount = 19
    MissingStakeSignature = 20
    AssociatedInvalidOwner = 21
    AssociatedInvalidToken = 22
    AssociatedInvalidAccount = 23
    StakerInvalidStakeAccount = 24
    StakerBalanceTooLow = 25
    StakerMinimumBalanceNotMet = 26
    StakerWithdrawingTooMuch = 27
    WithdrawNothingtowithdraw = 28
    WithdrawUnbondingTimeNotOverYet = 29
    NothingtoWithdraw = 30


_CUSTOM = re.compile(r"custom program error: 0x([0-9a-fA-F]+)")


def error_name(code: int) -> Optional[str]:
    try:
        return StakingErrors(int(code)).name
    except ValueError:
        return None


def extract_error_id(message: str) -> Optional[int]:
    """Return the numeric program error code in `message`, if any."""
    m = _CUSTOM.search(str(message or ""))
    if m is None:
        return None
    return int(m.group(1), 16)


def parse_error(message: str) -> str:
    """Rewrite the custom error fragment to `STAKING-ERROR 0x..: <Name>`.

    Unknown codes are labelled `Unknown`; messages without a code come back
    unchanged.
    """
    msg = str(message or "")
    m = _CUSTOM.search(msg)
    if m is None:
        return msg
    name = error_name(int(m.group(1), 16)) or "Unknown"
    return msg.replace(m.group(0), f"STAKING-ERROR 0x{m.group(1)}: {name}", 1)
