"""
Holder registry for the LP reward distributor.

An append-only roster of accounts that (at some point) held the pair's
receipt token. Weight is never stored here: the distributor reads the live
receipt balance at payout time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from .ledger import Account


@dataclass
class HolderRegistry:
    """
    Mutable roster: position -> account, plus account -> 1-based index.

    Index 0 means "absent". Entries are never removed; exclusion only hides an
    account from payouts and from future registration.
    """

    _holders: List[Account] = field(default_factory=list)
    _index: Dict[Account, int] = field(default_factory=dict)
    excluded: Set[Account] = field(default_factory=set)

    def __len__(self) -> int:
        return len(self._holders)

    def __contains__(self, account: object) -> bool:
        return account in self._index

    def index_of(self, account: Account) -> int:
        return self._index.get(account, 0)

    def at(self, position: int) -> Account:
        return self._holders[position]

    def is_eligible(self, account: Account, *, has_code: bool) -> bool:
        """True if `add` would append the account."""
        if account in self._index:
            return False
        if account in self.excluded:
            return False
        return not has_code

    def add(self, account: Account, *, has_code: bool = False) -> bool:
        """Append account if eligible. Returns True when the roster grew."""
        if not self.is_eligible(account, has_code=has_code):
            return False
        self._holders.append(account)
        self._index[account] = len(self._holders)
        return True

    def holders(self) -> List[Account]:
        # Return a shallow copy to avoid accidental mutation during iteration.
        return list(self._holders)
