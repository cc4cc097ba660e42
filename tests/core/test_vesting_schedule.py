"""Tests for feeshare/core/vesting.py: linear day-based releases."""

from __future__ import annotations

import importlib.util
from dataclasses import replace

from feeshare.core import FeeShareToken, TokenConfig, release_target
from feeshare.core.calendar import SECONDS_PER_DAY
from feeshare.core.effects import LockReleased, PendingView, ReleaseDayAdvanced
from feeshare.state import LockAllocation

ENGINE = "0x" + "ee" * 20
PAIR = "0x" + "aa" * 20
QUOTE = "0x" + "bb" * 20
LP_POOL = "0x" + "c1" * 20
BURN_POOL = "0x" + "c2" * 20
FUND = "0x" + "f0" * 20
OWNER = "0x" + "11" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20
V1 = "0x" + "d1" * 20
V2 = "0x" + "d2" * 20

START = 1_700_000_000


def _make_token(**overrides) -> FeeShareToken:
    cfg = TokenConfig(
        engine_account=ENGINE,
        pair_address=PAIR,
        quote_token=QUOTE,
        lp_pool=LP_POOL,
        burn_pool=BURN_POOL,
        fund=FUND,
        initial_holder=OWNER,
        total_supply=10**9,
        fee_exempt=frozenset({OWNER, ENGINE}),
        vest_start_time=START,
        locks=(
            LockAllocation(V1, total=36_500, cycle_days=365),
            LockAllocation(V2, total=1_000, cycle_days=3),
        ),
    )
    token = FeeShareToken(replace(cfg, **overrides))
    token.transfer(OWNER, ALICE, 1_000_000, now=START)
    return token


def _poke(token: FeeShareToken, day: int, offset: int = 0) -> None:
    """A qualifying transfer at START + day days."""
    token.transfer(ALICE, BOB, 1, now=START + day * SECONDS_PER_DAY + offset)


def test_locked_supply_is_minted_to_engine() -> None:
    token = _make_token()
    assert token.balance_of(ENGINE) == 37_500
    assert token.balance_of(OWNER) == 10**9 - 37_500 - 1_000_000


def test_linear_release_by_elapsed_days() -> None:
    token = _make_token()
    _poke(token, 10)
    assert token.balance_of(V1) == 1_000
    assert token.balance_of(V2) == 1_000
    assert token.vesting.table.last_release_day == 10
    assert token.vesting.table.allocations[1].fully_released


def test_same_day_recheck_pays_nothing() -> None:
    token = _make_token()
    _poke(token, 1)
    assert token.balance_of(V2) == 333
    _poke(token, 1, offset=3_600)
    _poke(token, 1, offset=7_200)
    assert token.balance_of(V1) == 100
    assert token.balance_of(V2) == 333


def test_release_reaches_total_at_cycle_end() -> None:
    token = _make_token()
    for day in (1, 2, 3, 5):
        _poke(token, day)
    assert token.balance_of(V2) == 1_000
    _poke(token, 365)
    _poke(token, 800)
    assert token.balance_of(V1) == 36_500
    assert token.balance_of(ENGINE) == 0


def test_no_release_before_start() -> None:
    token = _make_token()
    token.transfer(ALICE, BOB, 1, now=START - 1)
    assert token.balance_of(V1) == 0
    assert token.vesting.table.last_release_day == 0


def test_exempt_transfers_do_not_trigger_vesting() -> None:
    token = _make_token()
    token.transfer(OWNER, BOB, 1, now=START + 10 * SECONDS_PER_DAY)
    assert token.balance_of(V1) == 0


def test_plan_emits_release_effects() -> None:
    token = _make_token()
    view = PendingView(token)
    released = token.vesting.plan(view, START + 2 * SECONDS_PER_DAY)
    assert released == 200 + 666
    assert LockReleased(0, 200, 200) in view.effects
    assert view.effects[-1] == ReleaseDayAdvanced(2)
    assert token.balance_of(V1) == 0


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given, settings

    @settings(max_examples=200, deadline=None)
    @given(
        total=st.integers(min_value=0, max_value=10**24),
        cycle=st.integers(min_value=1, max_value=3_650),
        day=st.integers(min_value=0, max_value=10_000),
    )
    def test_release_target_is_monotone_and_capped(total: int, cycle: int, day: int) -> None:
        row = LockAllocation(V1, total=total, cycle_days=cycle)
        assert release_target(row, day) <= release_target(row, day + 1)
        assert release_target(row, day) <= total
        assert release_target(row, cycle) == total
