from __future__ import annotations

from zstake.errors import StakingErrors, error_name, extract_error_id, parse_error

SIM_FAILURE = (
    "failed to send transaction: Transaction simulation failed: "
    "Error processing Instruction 1: custom program error: 0x1a"
)


def test_table_is_dense() -> None:
    assert [e.value for e in StakingErrors] == list(range(31))
    assert StakingErrors(0).name == "MissingAuthoritySignature"
    assert StakingErrors(0x11).name == "CommunityCreatorSignatureMissing"
    assert StakingErrors(0x1A).name == "StakerMinimumBalanceNotMet"
    assert StakingErrors(30).name == "NothingtoWithdraw"


def test_error_name() -> None:
    assert error_name(29) == "WithdrawUnbondingTimeNotOverYet"
    assert error_name(31) is None


def test_extract_error_id() -> None:
    assert extract_error_id("something without a code") is None
    assert extract_error_id("custom program error: 0x0") == 0
    assert extract_error_id(SIM_FAILURE) == 26


def test_parse_error_rewrites_code() -> None:
    assert parse_error(SIM_FAILURE) == (
        "failed to send transaction: Transaction simulation failed: "
        "Error processing Instruction 1: STAKING-ERROR 0x1a: StakerMinimumBalanceNotMet"
    )
    assert parse_error("custom program error: 0x0") == "STAKING-ERROR 0x0: MissingAuthoritySignature"


def test_parse_error_unknown_and_absent() -> None:
    assert parse_error("custom program error: 0xff") == "STAKING-ERROR 0xff: Unknown"
    assert parse_error("timeout") == "timeout"
