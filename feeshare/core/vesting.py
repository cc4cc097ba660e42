"""
Linear day-based release of locked allocations.

released(d) = total * min(d, cycle) // cycle, evaluated only when the number
of whole days since `start_time` has grown since the last evaluation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..state.ledger import Account, Amount
from ..state.locks import LockAllocation, LockTable
from .calendar import diff_days
from .effects import LockReleased, PendingView, ReleaseDayAdvanced, TransferReason

log = logging.getLogger(__name__)


def release_target(allocation: LockAllocation, elapsed_days: int) -> Amount:
    """Cumulative amount that should be released after `elapsed_days`."""
    capped = min(elapsed_days, allocation.cycle_days)
    return allocation.total * capped // allocation.cycle_days


@dataclass
class VestingSchedule:
    table: LockTable
    start_time: int
    source: Account

    def elapsed_days(self, now: int) -> int | None:
        if now < self.start_time:
            return None
        return diff_days(self.start_time, now)

    def plan(self, view: PendingView, now: int) -> Amount:
        """
        Record releases due at `now` into `view`.

        Returns the total amount released by this evaluation.
        """
        elapsed = self.elapsed_days(now)
        if elapsed is None:
            log.debug("vesting: now=%d precedes start_time=%d", now, self.start_time)
            return 0
        if elapsed <= self.table.last_release_day:
            return 0

        released_total = 0
        for index, allocation in enumerate(self.table.allocations):
            if allocation.fully_released:
                continue
            target = release_target(allocation, elapsed)
            amount = target - allocation.released
            if amount <= 0:
                continue
            view.transfer(self.source, allocation.beneficiary, amount, TransferReason.LOCK_RELEASE)
            view.emit(LockReleased(index, amount, target))
            released_total += amount

        view.emit(ReleaseDayAdvanced(elapsed))
        if released_total:
            log.info("vesting: day %d released %d", elapsed, released_total)
        return released_total
