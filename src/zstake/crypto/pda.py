# src/zstake/crypto/pda.py
from __future__ import annotations

"""Program-derived addresses.

Thin layer over solders' derivation: adds the seed limit checks, typed
DerivationError codes, a 255..0 bump search and memoization.

An address is only valid when it is NOT an Ed25519 point: an off-curve
address has no private key, so only the owning program can sign for it.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Sequence, Tuple

from solders.pubkey import Pubkey

from zstake.util.structured_logging import log_event

MAX_SEEDS = 16
MAX_SEED_LEN = 32

_log = logging.getLogger("zstake.pda")


@dataclass
class DerivationError(Exception):
    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


def is_on_curve(data: bytes) -> bool:
    """Return True if the 32 bytes decompress to an Ed25519 point."""
    if len(data) != 32:
        raise ValueError(f"expected 32 bytes, got {len(data)}")
    return Pubkey.from_bytes(bytes(data)).is_on_curve()


def _check_seeds(seeds: Sequence[bytes]) -> None:
    if len(seeds) > MAX_SEEDS:
        raise DerivationError("max_seeds_exceeded", "too_many_seeds", {"count": len(seeds), "max": MAX_SEEDS})
    for i, s in enumerate(seeds):
        if len(s) > MAX_SEED_LEN:
            raise DerivationError(
                "max_seed_length_exceeded", "seed_too_long", {"index": i, "len": len(s), "max": MAX_SEED_LEN}
            )


def create_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Pubkey:
    """Derive the address for an exact seed list (bump included by the caller)."""
    seeds = [bytes(s) for s in seeds]
    _check_seeds(seeds)
    try:
        return Pubkey.create_program_address(seeds, program_id)
    except ValueError as e:
        # Limits are checked above; the only remaining failure is an on-curve result.
        raise DerivationError("invalid_seeds", "address_on_curve", {"program_id": str(program_id)}) from e


@lru_cache(maxsize=4096)
def _find_cached(seeds: Tuple[bytes, ...], program_id: Pubkey) -> Tuple[Pubkey, int]:
    _check_seeds(seeds + (b"\x00",))
    for bump in range(255, -1, -1):
        try:
            return create_program_address(seeds + (bytes([bump]),), program_id), bump
        except DerivationError as e:
            if e.code != "invalid_seeds":
                raise
    raise DerivationError("no_canonical_address", "all_bumps_on_curve", {"program_id": str(program_id)})


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Return (address, bump) for the highest bump that yields an off-curve address."""
    key = tuple(bytes(s) for s in seeds)
    try:
        return _find_cached(key, program_id)
    except DerivationError as e:
        log_event(_log, "pda_derivation_failed", code=e.code, program_id=str(program_id), seeds=len(key))
        raise


def clear_cache() -> None:
    _find_cached.cache_clear()
