# src/zstake/wire/__init__.py
"""
zstake: wire package

Byte-exact codecs shared with the on-chain program:
  - primitives: Reader/Writer, timestamp conversion, decode/encode errors
  - accounts: fixed-layout account records (Settings, Beneficiary, Community,
    Endpoint, Stake)
  - instruction_data: discriminant byte + argument payloads

Nothing here does I/O.
"""

from __future__ import annotations

__all__ = [
    "primitives",
    "accounts",
    "instruction_data",
]
