from __future__ import annotations

import pytest

from feeshare.state import BurnLedger, HolderRegistry, LockAllocation, LockTable

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b2" * 20


class TestHolderRegistry:
    def test_add_is_idempotent(self):
        reg = HolderRegistry()
        assert reg.add(ALICE)
        assert not reg.add(ALICE)
        assert len(reg) == 1
        assert reg.index_of(ALICE) == 1

    def test_indices_are_one_based_and_ordered(self):
        reg = HolderRegistry()
        reg.add(ALICE)
        reg.add(BOB)
        assert reg.index_of(BOB) == 2
        assert reg.at(1) == BOB
        assert reg.index_of("0x" + "00" * 19 + "01") == 0

    def test_excluded_and_code_accounts_never_join(self):
        reg = HolderRegistry(excluded={ALICE})
        assert not reg.add(ALICE)
        assert not reg.add(BOB, has_code=True)
        assert len(reg) == 0
        assert ALICE not in reg


class TestBurnLedger:
    def test_first_contribution_appends(self):
        burns = BurnLedger()
        burns.record(ALICE, 100)
        burns.record(BOB, 50)
        burns.record(ALICE, 25)
        assert len(burns) == 2
        assert burns.index_of(ALICE) == 1
        assert burns.contribution_of(ALICE) == 125
        assert burns.total == 175

    def test_rejects_negative_amounts(self):
        with pytest.raises(ValueError):
            BurnLedger().record(ALICE, -1)


class TestLockAllocation:
    def test_validation(self):
        with pytest.raises(ValueError):
            LockAllocation(ALICE, total=10, cycle_days=0)
        with pytest.raises(ValueError):
            LockAllocation(ALICE, total=10, cycle_days=5, released=11)
        with pytest.raises(TypeError):
            LockAllocation(ALICE, total=True, cycle_days=5)

    def test_released_is_monotone(self):
        row = LockAllocation(ALICE, total=10, cycle_days=5, released=4)
        assert row.with_released(6).released == 6
        with pytest.raises(ValueError):
            row.with_released(3)

    def test_table_totals(self):
        table = LockTable.seeded([
            LockAllocation(ALICE, total=10, cycle_days=5, released=10),
            LockAllocation(BOB, total=20, cycle_days=5),
        ])
        assert table.total_locked() == 30
        assert table.total_released() == 10
        assert table.allocations[0].fully_released
