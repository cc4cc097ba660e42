"""
Time-locked allocations.

Rows are seeded once when the token is constructed and afterwards mutated
only by the vesting schedule.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Sequence

from .ledger import Account, Amount


@dataclass(frozen=True)
class LockAllocation:
    """One beneficiary's locked amount and how much of it has been released."""

    beneficiary: Account
    total: Amount
    cycle_days: int
    released: Amount = 0

    def __post_init__(self) -> None:
        for name, v in (
            ("total", self.total),
            ("cycle_days", self.cycle_days),
            ("released", self.released),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if self.cycle_days == 0:
            raise ValueError("cycle_days must be positive")
        if self.released > self.total:
            raise ValueError("released must be <= total")

    @property
    def fully_released(self) -> bool:
        return self.released >= self.total

    def with_released(self, released: Amount) -> "LockAllocation":
        if released < self.released:
            raise ValueError("released must be monotone non-decreasing")
        return replace(self, released=released)


@dataclass
class LockTable:
    """Allocation rows plus the last elapsed-day count that was evaluated."""

    allocations: List[LockAllocation] = field(default_factory=list)
    last_release_day: int = 0

    @classmethod
    def seeded(cls, rows: Sequence[LockAllocation]) -> "LockTable":
        return cls(allocations=list(rows))

    def total_locked(self) -> Amount:
        return sum(a.total for a in self.allocations)

    def total_released(self) -> Amount:
        return sum(a.released for a in self.allocations)
