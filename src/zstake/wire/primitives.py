# src/zstake/wire/primitives.py
from __future__ import annotations

import struct
from datetime import datetime, timezone
from enum import IntEnum
from typing import Type, TypeVar, Union

from solders.pubkey import Pubkey

from zstake.ledger.constants import I64_MAX, I64_MIN, U64_MAX, U128_MAX

E = TypeVar("E", bound=IntEnum)

Timestamp = Union[datetime, int]

PUBKEY_LEN = 32
U8_LEN = 1
U64_LEN = 8
I64_LEN = 8
U128_LEN = 16
TIMESTAMP_LEN = U64_LEN

_U64 = struct.Struct("<Q")
_I64 = struct.Struct("<q")


class WireDecodeError(ValueError):
    """Raised when bytes cannot be read back into a record."""

    code = "decode_failed"

    def __init__(self, msg: str, *, code: str | None = None) -> None:
        super().__init__(msg)
        if code is not None:
            self.code = code


class TruncatedError(WireDecodeError):
    code = "truncated"


class InvalidEnumError(WireDecodeError):
    code = "invalid_enum"


class WireEncodeError(ValueError):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code


def unix_seconds(ts: Timestamp) -> int:
    """Return whole seconds since the epoch.

    Sub-second parts are discarded, never rounded. Naive datetimes are read as
    UTC. Pre-epoch values are not representable on chain.
    """
    if isinstance(ts, bool):
        raise WireEncodeError("invalid_timestamp", "bool is not a timestamp")
    if isinstance(ts, int):
        secs = ts
    elif isinstance(ts, datetime):
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        secs = int(ts.replace(microsecond=0).timestamp())
    else:
        raise WireEncodeError("invalid_timestamp", f"expected datetime or int, got {type(ts).__name__}")
    if secs < 0:
        raise WireEncodeError("negative_timestamp", f"timestamp before epoch: {secs}")
    return secs


def from_unix_seconds(secs: int) -> datetime:
    try:
        return datetime.fromtimestamp(secs, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise WireDecodeError(f"timestamp out of range: {secs}", code="timestamp_out_of_range") from e


class Writer:
    """Append-only little-endian buffer."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def pubkey(self, key: Pubkey, field: str) -> "Writer":
        if not isinstance(key, Pubkey):
            raise WireEncodeError("invalid_address", f"{field}: expected Pubkey, got {type(key).__name__}")
        self._buf += bytes(key)
        return self

    def u8(self, v: int, field: str) -> "Writer":
        if not 0 <= int(v) <= 0xFF:
            raise WireEncodeError("u8_out_of_range", f"{field}: {v} does not fit u8")
        self._buf.append(int(v))
        return self

    def u64(self, v: int, field: str) -> "Writer":
        if isinstance(v, bool) or not 0 <= v <= U64_MAX:
            raise WireEncodeError("u64_out_of_range", f"{field}: {v} does not fit u64")
        self._buf += _U64.pack(v)
        return self

    def i64(self, v: int, field: str) -> "Writer":
        if isinstance(v, bool) or not I64_MIN <= v <= I64_MAX:
            raise WireEncodeError("i64_out_of_range", f"{field}: {v} does not fit i64")
        self._buf += _I64.pack(v)
        return self

    def u128(self, v: int, field: str) -> "Writer":
        if isinstance(v, bool) or not 0 <= v <= U128_MAX:
            raise WireEncodeError("u128_out_of_range", f"{field}: {v} does not fit u128")
        self._buf += v.to_bytes(U128_LEN, "little")
        return self

    def timestamp(self, ts: Timestamp, field: str) -> "Writer":
        secs = unix_seconds(ts)
        if secs > U64_MAX:
            raise WireEncodeError("u64_out_of_range", f"{field}: {secs} does not fit u64")
        self._buf += _U64.pack(secs)
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._buf)


class Reader:
    """Cursor over a fixed-layout record."""

    def __init__(self, data: bytes, *, record: str) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise WireDecodeError(f"{record}: expected bytes, got {type(data).__name__}", code="invalid_input")
        self._data = bytes(data)
        self._pos = 0
        self._record = record

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _take(self, n: int, field: str) -> bytes:
        if self.remaining < n:
            raise TruncatedError(
                f"{self._record}.{field}: need {n} bytes at offset {self._pos}, have {self.remaining}"
            )
        out = self._data[self._pos : self._pos + n]
        self._pos += n
        return out

    def pubkey(self, field: str) -> Pubkey:
        return Pubkey.from_bytes(self._take(PUBKEY_LEN, field))

    def u8(self, field: str) -> int:
        return self._take(U8_LEN, field)[0]

    def u64(self, field: str) -> int:
        return _U64.unpack(self._take(U64_LEN, field))[0]

    def i64(self, field: str) -> int:
        return _I64.unpack(self._take(I64_LEN, field))[0]

    def u128(self, field: str) -> int:
        return int.from_bytes(self._take(U128_LEN, field), "little")

    def timestamp(self, field: str) -> datetime:
        return from_unix_seconds(self.u64(field))

    def enum(self, cls: Type[E], field: str) -> E:
        raw = self.u8(field)
        try:
            return cls(raw)
        except ValueError as e:
            raise InvalidEnumError(f"{self._record}.{field}: unknown {cls.__name__} tag {raw}") from e

    def finish(self) -> None:
        if self.remaining:
            raise WireDecodeError(
                f"{self._record}: {self.remaining} unexpected trailing bytes", code="trailing_bytes"
            )
