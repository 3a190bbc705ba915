# src/zstake/wire/instruction_data.py
from __future__ import annotations

"""Instruction payload encoding.

Every payload starts with one discriminant byte (the Instructions value)
followed by that instruction's fixed-size arguments:

  Initialize             u8 | start_time u64 | unbonding_duration u64
  Stake                  u8 | amount i64 (signed stake delta)
  everything else        u8
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Union

from zstake.wire.primitives import Reader, WireEncodeError, Writer


class Instructions(IntEnum):
    INITIALIZE = 0
    REGISTER_COMMUNITY = 1
    INITIALIZE_STAKE = 2
    STAKE = 3
    WITHDRAW_UNBOND = 4
    CLAIM_PRIMARY = 5
    CLAIM_SECONDARY = 6


@dataclass(frozen=True)
class SimplePayload:
    instruction: Instructions


@dataclass(frozen=True)
class AmountPayload:
    instruction: Instructions
    amount: int  # i64


@dataclass(frozen=True)
class InitializePayload:
    start_time: datetime
    unbonding_duration: int

    @property
    def instruction(self) -> Instructions:
        return Instructions.INITIALIZE


InstructionPayload = Union[SimplePayload, AmountPayload, InitializePayload]

_AMOUNT_INSTRUCTIONS = frozenset({Instructions.STAKE})


def encode_instruction_data(payload: InstructionPayload) -> bytes:
    if isinstance(payload, InitializePayload):
        return (
            Writer()
            .u8(Instructions.INITIALIZE, "instruction")
            .timestamp(payload.start_time, "start_time")
            .u64(payload.unbonding_duration, "unbonding_duration")
            .to_bytes()
        )

    if isinstance(payload, AmountPayload):
        if payload.instruction not in _AMOUNT_INSTRUCTIONS:
            raise WireEncodeError("payload_mismatch", f"{payload.instruction!r} takes no amount")
        return Writer().u8(payload.instruction, "instruction").i64(payload.amount, "amount").to_bytes()

    if isinstance(payload, SimplePayload):
        if payload.instruction is Instructions.INITIALIZE or payload.instruction in _AMOUNT_INSTRUCTIONS:
            raise WireEncodeError("payload_mismatch", f"{payload.instruction!r} requires arguments")
        return Writer().u8(payload.instruction, "instruction").to_bytes()

    raise WireEncodeError("invalid_payload", f"unsupported payload type: {type(payload).__name__}")


def decode_instruction_data(data: bytes) -> InstructionPayload:
    """Decode a payload of unknown kind, picking its shape from the discriminant."""
    r = Reader(data, record="InstructionData")
    kind = r.enum(Instructions, "instruction")

    out: InstructionPayload
    if kind is Instructions.INITIALIZE:
        out = InitializePayload(
            start_time=r.timestamp("start_time"),
            unbonding_duration=r.u64("unbonding_duration"),
        )
    elif kind in _AMOUNT_INSTRUCTIONS:
        out = AmountPayload(kind, r.i64("amount"))
    else:
        out = SimplePayload(kind)

    r.finish()
    return out
