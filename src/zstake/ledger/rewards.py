# src/zstake/ledger/rewards.py
from __future__ import annotations

"""Reward-per-share accounting with yearly emission decay.

Local projection of the program's settlement math, for display. All values
are integers and every division truncates, in exactly the program's order:

    delta = ((PRECISION * rate) // SECONDS_PER_YEAR // total_stake) * elapsed

Emission is cut to floor(rate * 3 / 4) at each yearly boundary
(next_emission_change, +1y, +2y, ...).
"""

from dataclasses import dataclass, replace
from typing import Any, Iterator, Tuple

from zstake.ledger.accounts import Beneficiary, Settings
from zstake.ledger.constants import EMISSION_DECAY, PRECISION, SECONDS_PER_YEAR
from zstake.wire.primitives import Timestamp, from_unix_seconds, unix_seconds


@dataclass
class RewardError(RuntimeError):
    code: str
    reason: str
    details: Any | None = None

    def __str__(self) -> str:
        return f"{self.code}:{self.reason}:{self.details}"


def decay_emission(rate: int) -> int:
    num, den = EMISSION_DECAY
    return int(rate) * num // den


def _per_second_share(rate: int, total_stake: int) -> int:
    # Order matters: multiply, divide by year, then by stake.
    return PRECISION * int(rate) // SECONDS_PER_YEAR // int(total_stake)


def _epochs(settings: Settings, now_s: int) -> Iterator[Tuple[int, int, int]]:
    """Yield (start, end, rate) spans covering (last_reward, now_s].

    Full epochs come first, then the partial span from the last boundary
    crossed up to now_s (possibly zero seconds long).
    """
    cursor = unix_seconds(settings.last_reward)
    boundary = unix_seconds(settings.next_emission_change)
    rate = int(settings.emission)

    if boundary < cursor:
        raise RewardError(
            "invalid_settings",
            "emission_boundary_before_last_reward",
            {"last_reward": cursor, "next_emission_change": boundary},
        )

    while now_s >= boundary:
        yield cursor, boundary, rate
        cursor = boundary
        boundary += SECONDS_PER_YEAR
        rate = decay_emission(rate)

    yield cursor, now_s, rate


def _should_accrue(settings: Settings, now_s: int) -> bool:
    if now_s <= unix_seconds(settings.last_reward):
        return False
    # Open question: with nothing staked, last_reward stays put, so the next
    # staker later receives the whole gap. This mirrors the program.
    if int(settings.total_stake) == 0:
        return False
    return True


def project_reward_per_share(settings: Settings, now: Timestamp) -> int:
    """Accumulator value the program would compute when settling at `now`."""
    now_s = unix_seconds(now)
    acc = int(settings.reward_per_share)
    if not _should_accrue(settings, now_s):
        return acc

    total = int(settings.total_stake)
    for start, end, rate in _epochs(settings, now_s):
        acc += _per_second_share(rate, total) * (end - start)
    return acc


def accrue(settings: Settings, now: Timestamp) -> Settings:
    """Return the settings snapshot as it would look after settling at `now`.

    Carries the decayed emission and advanced boundary forward, so that a
    later projection from the returned snapshot continues at the reduced rate.
    Returns `settings` unchanged when nothing accrues.
    """
    now_s = unix_seconds(now)
    if not _should_accrue(settings, now_s):
        return settings

    total = int(settings.total_stake)
    acc = int(settings.reward_per_share)
    rate = int(settings.emission)
    boundary = unix_seconds(settings.next_emission_change)
    for start, end, span_rate in _epochs(settings, now_s):
        acc += _per_second_share(span_rate, total) * (end - start)
        rate = span_rate
        if end == boundary:
            boundary += SECONDS_PER_YEAR
            rate = decay_emission(span_rate)

    return replace(
        settings,
        emission=rate,
        next_emission_change=from_unix_seconds(boundary),
        reward_per_share=acc,
        last_reward=from_unix_seconds(now_s),
    )


def emission_at(settings: Settings, now: Timestamp) -> int:
    """Annual emission rate in force at `now` (ignores total stake)."""
    now_s = unix_seconds(now)
    boundary = unix_seconds(settings.next_emission_change)
    rate = int(settings.emission)
    while now_s >= boundary:
        boundary += SECONDS_PER_YEAR
        rate = decay_emission(rate)
    return rate


def harvestable(beneficiary: Beneficiary, reward_per_share: int) -> int:
    """Reward accrued since the beneficiary's last settlement.

    Not clamped: a negative value means reward_debt is ahead of the
    accumulator passed in, which the program never produces for a fresh
    snapshot.
    """
    return int(beneficiary.staked) * int(reward_per_share) // PRECISION - int(beneficiary.reward_debt)


def claimable(beneficiary: Beneficiary, reward_per_share: int) -> int:
    """Settled holding plus newly harvestable reward."""
    return int(beneficiary.holding) + harvestable(beneficiary, reward_per_share)
