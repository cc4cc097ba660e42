"""
Resumable, budget-bounded round-robin reward distributors.

Each distributor pays out of one pool account to the accounts of one roster,
pro rata to a weight. A run visits accounts starting at a persisted cursor
and stops after a full pass or when the work budget is spent; the next run
picks up where this one stopped.

Work is counted in abstract units (`CostModel`) instead of host gas, so a
given budget always means the same number of visits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..state.ledger import Account, Amount
from .effects import CursorMoved, PendingView, TransferReason

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostModel:
    """Work units charged per visited account and per issued payout."""

    visit_cost: int = 1
    payout_cost: int = 0

    def __post_init__(self) -> None:
        if self.visit_cost <= 0:
            raise ValueError(f"visit_cost must be positive: {self.visit_cost}")
        if self.payout_cost < 0:
            raise ValueError(f"payout_cost must be non-negative: {self.payout_cost}")


@dataclass
class RewardDistributor:
    """
    Shared scan loop. Subclasses say what the roster is and how to weigh it.

    `threshold` is both the minimum pool balance for a run and the most a
    single run pays out; anything above it waits for later runs.
    """

    name: str
    pool: Account
    threshold: Amount
    min_weight: Amount = 0
    cursor: int = 0
    reason: TransferReason = TransferReason.LP_REWARD

    # -- roster hooks ----------------------------------------------------------

    def roster_size(self, view: PendingView) -> int:
        raise NotImplementedError

    def account_at(self, view: PendingView, position: int) -> Account:
        raise NotImplementedError

    def weight_of(self, view: PendingView, account: Account) -> Amount:
        raise NotImplementedError

    def total_weight(self, view: PendingView) -> Amount:
        raise NotImplementedError

    def is_excluded(self, view: PendingView, account: Account) -> bool:
        raise NotImplementedError

    # -- scan ------------------------------------------------------------------

    def plan(self, view: PendingView, budget: int, costs: CostModel = CostModel()) -> int:
        """
        Record one run's payouts and cursor move into `view`.

        Returns the number of accounts visited.
        """
        size = self.roster_size(view)
        if size == 0:
            log.debug("%s: roster empty", self.name)
            return 0

        balance = view.balance_of(self.pool)
        if balance < self.threshold:
            log.debug("%s: pool %d below threshold %d", self.name, balance, self.threshold)
            return 0
        payable = self.threshold

        total = self.total_weight(view)
        if total == 0:
            log.debug("%s: total weight is zero", self.name)
            return 0

        cursor = self.cursor if self.cursor < size else 0
        spent = 0
        visited = 0
        paid = 0
        while spent < budget and visited < size:
            if cursor >= size:
                cursor = 0
            account = self.account_at(view, cursor)
            weight = self.weight_of(view, account)
            if weight >= self.min_weight and not self.is_excluded(view, account):
                amount = payable * weight // total
                if amount > 0:
                    view.transfer(self.pool, account, amount, self.reason)
                    paid += amount
                    spent += costs.payout_cost
            spent += costs.visit_cost
            cursor += 1
            visited += 1

        cursor %= size
        view.emit(CursorMoved(self.name, cursor))
        log.debug("%s: visited=%d paid=%d cursor=%d", self.name, visited, paid, cursor)
        return visited


@dataclass
class LpRewardDistributor(RewardDistributor):
    """Pays receipt-token holders, weighted by their live pair balance."""

    def roster_size(self, view: PendingView) -> int:
        return view.holder_count()

    def account_at(self, view: PendingView, position: int) -> Account:
        return view.holder_at(position)

    def weight_of(self, view: PendingView, account: Account) -> Amount:
        return view.token.pair.balance_of(account)

    def total_weight(self, view: PendingView) -> Amount:
        return view.token.pair.total_supply()

    def is_excluded(self, view: PendingView, account: Account) -> bool:
        return account in view.token.holders.excluded


@dataclass
class BurnRewardDistributor(RewardDistributor):
    """Pays burn contributors, weighted by their recorded contribution."""

    reason: TransferReason = TransferReason.BURN_REWARD

    def roster_size(self, view: PendingView) -> int:
        return view.burner_count()

    def account_at(self, view: PendingView, position: int) -> Account:
        return view.burner_at(position)

    def weight_of(self, view: PendingView, account: Account) -> Amount:
        return view.contribution_of(account)

    def total_weight(self, view: PendingView) -> Amount:
        return view.burn_total()

    def is_excluded(self, view: PendingView, account: Account) -> bool:
        return account in view.token.burns.excluded
