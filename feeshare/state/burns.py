"""
Burn ledger: who sent tokens to the sink, and how much in total.

Weights for the burn reward distributor are the recorded contributions, so
(unlike the holder registry) this table owns its weights.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from .ledger import Account, Amount


@dataclass
class BurnLedger:
    """Append-only roster with monotone per-account contributions."""

    _roster: List[Account] = field(default_factory=list)
    _index: Dict[Account, int] = field(default_factory=dict)
    _contributed: Dict[Account, Amount] = field(default_factory=dict)
    total: Amount = 0
    excluded: Set[Account] = field(default_factory=set)

    def __len__(self) -> int:
        return len(self._roster)

    def __contains__(self, account: object) -> bool:
        return account in self._index

    def index_of(self, account: Account) -> int:
        return self._index.get(account, 0)

    def at(self, position: int) -> Account:
        return self._roster[position]

    def contribution_of(self, account: Account) -> Amount:
        return self._contributed.get(account, 0)

    def record(self, account: Account, amount: Amount) -> None:
        """
        Add `amount` to the account's contribution and to the running total.

        The first contribution appends the account to the roster.
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"burn amount must be a non-negative int, got {amount!r}")
        if account not in self._index:
            self._roster.append(account)
            self._index[account] = len(self._roster)
        self._contributed[account] = self._contributed.get(account, 0) + amount
        self.total += amount

    def roster(self) -> List[Account]:
        return list(self._roster)
