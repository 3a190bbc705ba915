from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st
from solders.pubkey import Pubkey

from zstake.ledger.accounts import Beneficiary, Settings
from zstake.ledger.constants import PRECISION, SECONDS_PER_YEAR, ZERO_KEY
from zstake.ledger.rewards import (
    RewardError,
    accrue,
    claimable,
    decay_emission,
    emission_at,
    harvestable,
    project_reward_per_share,
)

T0 = datetime(2021, 10, 27, 6, 11, 20, tzinfo=timezone.utc)
EMISSION = 550_000_000_000
STAKE = 1_283_747


def _settings(
    *,
    last: datetime = T0,
    nec: datetime | None = None,
    emission: int = EMISSION,
    total: int = STAKE,
    rps: int = 0,
) -> Settings:
    return Settings(
        token=ZERO_KEY,
        unbonding_duration=60,
        fee_recipient=ZERO_KEY,
        next_emission_change=nec if nec is not None else last + timedelta(seconds=SECONDS_PER_YEAR),
        emission=emission,
        total_stake=total,
        reward_per_share=rps,
        last_reward=last,
    )


def _share(rate: int, total: int) -> int:
    return PRECISION * rate // SECONDS_PER_YEAR // total


def test_decay_floors_three_quarters() -> None:
    assert decay_emission(100) == 75
    assert decay_emission(3) == 2
    assert decay_emission(1) == 0


def test_no_boundary_crossed() -> None:
    s = _settings(rps=17)
    now = T0 + timedelta(days=30)
    elapsed = 30 * 86400
    assert project_reward_per_share(s, now) == 17 + _share(EMISSION, STAKE) * elapsed


def test_exactly_one_year_uses_full_rate_then_zero_remainder() -> None:
    s = _settings()
    now = T0 + timedelta(seconds=SECONDS_PER_YEAR)
    assert project_reward_per_share(s, now) == _share(EMISSION, STAKE) * SECONDS_PER_YEAR

    after = accrue(s, now)
    assert after.emission == EMISSION * 3 // 4
    assert after.next_emission_change == now + timedelta(seconds=SECONDS_PER_YEAR)
    assert after.last_reward == now


def test_boundary_crossed_mid_window() -> None:
    boundary = T0 + timedelta(days=10)
    s = _settings(nec=boundary)
    now = boundary + timedelta(days=30)

    first = _share(EMISSION, STAKE) * 10 * 86400
    second = _share(decay_emission(EMISSION), STAKE) * 30 * 86400
    assert project_reward_per_share(s, now) == first + second


def test_year_and_a_month() -> None:
    s = _settings()
    month = 30 * 86400
    now = T0 + timedelta(seconds=SECONDS_PER_YEAR + month)

    expected = _share(EMISSION, STAKE) * SECONDS_PER_YEAR + _share(EMISSION * 3 // 4, STAKE) * month
    assert project_reward_per_share(s, now) == expected


def test_several_boundaries_compound() -> None:
    s = _settings()
    now = T0 + timedelta(seconds=3 * SECONDS_PER_YEAR + 5)
    r0 = EMISSION
    r1 = decay_emission(r0)
    r2 = decay_emission(r1)
    r3 = decay_emission(r2)
    expected = (
        _share(r0, STAKE) * SECONDS_PER_YEAR
        + _share(r1, STAKE) * SECONDS_PER_YEAR
        + _share(r2, STAKE) * SECONDS_PER_YEAR
        + _share(r3, STAKE) * 5
    )
    assert project_reward_per_share(s, now) == expected
    assert emission_at(s, now) == r3
    assert accrue(s, now).emission == r3


def test_zero_stake_does_not_accrue() -> None:
    s = _settings(total=0, rps=99)
    now = T0 + timedelta(days=400)
    assert project_reward_per_share(s, now) == 99
    assert accrue(s, now) is s


def test_now_not_after_last_reward_is_noop() -> None:
    s = _settings(rps=5)
    assert project_reward_per_share(s, T0) == 5
    assert project_reward_per_share(s, T0 - timedelta(seconds=1)) == 5
    assert accrue(s, T0) is s


def test_boundary_before_last_reward_is_rejected() -> None:
    s = _settings(nec=T0 - timedelta(seconds=1))
    with pytest.raises(RewardError) as ei:
        project_reward_per_share(s, T0 + timedelta(seconds=10))
    assert ei.value.code == "invalid_settings"


def test_accrue_then_project_matches_single_projection() -> None:
    s = _settings()
    mid = T0 + timedelta(seconds=SECONDS_PER_YEAR + 100)
    end = mid + timedelta(days=3)

    step = accrue(s, mid)
    assert step.reward_per_share == project_reward_per_share(s, mid)
    assert project_reward_per_share(step, end) == project_reward_per_share(s, end)


def test_emission_at_before_boundary_is_unchanged() -> None:
    s = _settings()
    assert emission_at(s, T0) == EMISSION
    assert emission_at(s, T0 + timedelta(seconds=SECONDS_PER_YEAR - 1)) == EMISSION
    assert emission_at(s, T0 + timedelta(seconds=SECONDS_PER_YEAR)) == EMISSION * 3 // 4


def test_accepts_unix_seconds() -> None:
    s = _settings()
    now = T0 + timedelta(hours=1)
    assert project_reward_per_share(s, int(now.timestamp())) == project_reward_per_share(s, now)


def test_harvestable_and_claimable() -> None:
    b = Beneficiary(authority=Pubkey.new_unique(), staked=1_799_775, reward_debt=81_569_425, holding=10)
    rps = 8_216_152_930_430
    h = 1_799_775 * rps // PRECISION - 81_569_425
    assert harvestable(b, rps) == h
    assert claimable(b, rps) == 10 + h


def test_harvestable_is_not_clamped() -> None:
    # Debt ahead of the accumulator yields a negative value; callers flag it.
    b = Beneficiary(authority=Pubkey.new_unique(), staked=1_000, reward_debt=50, holding=0)
    assert harvestable(b, 0) == -50
    assert claimable(b, 0) == -50


@given(
    a=st.integers(min_value=1, max_value=5 * SECONDS_PER_YEAR),
    b=st.integers(min_value=1, max_value=5 * SECONDS_PER_YEAR),
    total=st.integers(min_value=1, max_value=10**15),
    emission=st.integers(min_value=0, max_value=10**15),
)
def test_projection_is_monotonic(a: int, b: int, total: int, emission: int) -> None:
    s = _settings(total=total, emission=emission)
    lo, hi = sorted((a, b))
    r_lo = project_reward_per_share(s, T0 + timedelta(seconds=lo))
    r_hi = project_reward_per_share(s, T0 + timedelta(seconds=hi))
    assert 0 <= r_lo <= r_hi
