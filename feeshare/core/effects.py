"""Pending effects for one token transfer.

A transfer is executed in two stages:

1. ``plan``: components read engine state through a ``PendingView`` and record
   every consequence (ledger moves, roster appends, cursor moves, lock
   releases) as an immutable effect. Nothing real is mutated.
2. ``apply_effects``: the effect list is committed in one pass. Ledger moves
   are validated as a batch before any of them is written.

A failure during planning therefore leaves no trace, which is what makes the
whole call atomic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple, Union

from ..errors import InsufficientAllowanceError, InsufficientBalanceError, InvalidAmountError, NullAccountError
from ..state.ledger import NULL_ACCOUNT, Account, Amount

if TYPE_CHECKING:  # pragma: no cover
    from .engine import FeeShareToken


@unique
class TransferReason(Enum):
    LP_FEE = "lp_fee"
    BURN_FEE = "burn_fee"
    BURN_LP_FEE = "burn_lp_fee"
    FUND_FEE = "fund_fee"
    NET = "net"
    LP_REWARD = "lp_reward"
    BURN_REWARD = "burn_reward"
    LOCK_RELEASE = "lock_release"


@dataclass(frozen=True)
class LedgerTransfer:
    sender: Account
    recipient: Account
    amount: Amount
    reason: TransferReason


@dataclass(frozen=True)
class AllowanceSpent:
    owner: Account
    spender: Account
    amount: Amount


@dataclass(frozen=True)
class HolderAdded:
    account: Account


@dataclass(frozen=True)
class BurnRecorded:
    account: Account
    amount: Amount


@dataclass(frozen=True)
class CandidateSet:
    account: Optional[Account]


@dataclass(frozen=True)
class CursorMoved:
    distributor: str
    cursor: int


@dataclass(frozen=True)
class FlagFlipped:
    value: bool


@dataclass(frozen=True)
class LockReleased:
    index: int
    amount: Amount
    released: Amount


@dataclass(frozen=True)
class ReleaseDayAdvanced:
    day: int


Effect = Union[
    LedgerTransfer,
    AllowanceSpent,
    HolderAdded,
    BurnRecorded,
    CandidateSet,
    CursorMoved,
    FlagFlipped,
    LockReleased,
    ReleaseDayAdvanced,
]


class PendingView:
    """
    Read-through overlay over a token's state.

    Reads see committed state plus every effect recorded so far in this call;
    writes only append to ``effects``.
    """

    def __init__(self, token: "FeeShareToken") -> None:
        self.token = token
        self.effects: List[Effect] = []
        self._deltas: Dict[Account, int] = {}
        self._allowance_spent: Dict[tuple[Account, Account], Amount] = {}
        self._new_holders: List[Account] = []
        self._new_burns: Dict[Account, Amount] = {}
        self._new_burners: List[Account] = []

    # -- ledger ----------------------------------------------------------------

    def balance_of(self, account: Account) -> Amount:
        return self.token.ledger.balance_of(account) + self._deltas.get(account, 0)

    def transfer(self, sender: Account, recipient: Account, amount: Amount, reason: TransferReason) -> None:
        """Record a base-primitive transfer, validating it against the overlay."""
        if not sender or sender == NULL_ACCOUNT:
            raise NullAccountError("sender is the null account")
        if not recipient or recipient == NULL_ACCOUNT:
            raise NullAccountError("recipient is the null account")
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise InvalidAmountError(f"amount must be a non-negative int, got {amount!r}")
        have = self.balance_of(sender)
        if have < amount:
            raise InsufficientBalanceError(
                f"Insufficient balance: {sender} holds {have} < {amount} ({reason.value})"
            )
        self._deltas[sender] = self._deltas.get(sender, 0) - amount
        self._deltas[recipient] = self._deltas.get(recipient, 0) + amount
        self.effects.append(LedgerTransfer(sender, recipient, amount, reason))

    def spend_allowance(self, owner: Account, spender: Account, amount: Amount) -> None:
        key = (owner, spender)
        left = self.token.ledger.allowance(owner, spender) - self._allowance_spent.get(key, 0)
        if left < amount:
            raise InsufficientAllowanceError(
                f"Insufficient allowance: {spender} may spend {left} of {owner} < {amount}"
            )
        self._allowance_spent[key] = self._allowance_spent.get(key, 0) + amount
        self.effects.append(AllowanceSpent(owner, spender, amount))

    # -- holder registry -------------------------------------------------------

    def holder_count(self) -> int:
        return len(self.token.holders) + len(self._new_holders)

    def holder_at(self, position: int) -> Account:
        base = len(self.token.holders)
        if position < base:
            return self.token.holders.at(position)
        return self._new_holders[position - base]

    def add_holder(self, account: Account) -> bool:
        if account in self._new_holders:
            return False
        if not self.token.holders.is_eligible(account, has_code=self.token.ledger.has_code(account)):
            return False
        self._new_holders.append(account)
        self.effects.append(HolderAdded(account))
        return True

    # -- burn ledger -----------------------------------------------------------

    def burner_count(self) -> int:
        return len(self.token.burns) + len(self._new_burners)

    def burner_at(self, position: int) -> Account:
        base = len(self.token.burns)
        if position < base:
            return self.token.burns.at(position)
        return self._new_burners[position - base]

    def contribution_of(self, account: Account) -> Amount:
        return self.token.burns.contribution_of(account) + self._new_burns.get(account, 0)

    def burn_total(self) -> Amount:
        return self.token.burns.total + sum(self._new_burns.values())

    def record_burn(self, account: Account, amount: Amount) -> None:
        if account not in self.token.burns and account not in self._new_burns:
            self._new_burners.append(account)
        self._new_burns[account] = self._new_burns.get(account, 0) + amount
        self.effects.append(BurnRecorded(account, amount))

    # -- everything else is write-only -----------------------------------------

    def emit(self, effect: Effect) -> None:
        self.effects.append(effect)


def ledger_moves(effects: Sequence[Effect]) -> List[Tuple[Account, Account, Amount]]:
    return [(e.sender, e.recipient, e.amount) for e in effects if isinstance(e, LedgerTransfer)]


def apply_effects(token: "FeeShareToken", effects: Sequence[Effect]) -> None:
    """
    Commit a planned effect list to the token.

    Ledger moves go first, as one validated batch; if that raises, nothing
    else is touched. The remaining effects cannot fail. Transfer listeners
    are not notified here; the caller does that once the commit is done.
    """
    moves = ledger_moves(effects)
    token.ledger.transfer_batch(moves, notify=False)

    for effect in effects:
        if isinstance(effect, AllowanceSpent):
            token.ledger.spend_allowance(effect.owner, effect.spender, effect.amount)
        elif isinstance(effect, HolderAdded):
            token.holders.add(effect.account, has_code=token.ledger.has_code(effect.account))
        elif isinstance(effect, BurnRecorded):
            token.burns.record(effect.account, effect.amount)
        elif isinstance(effect, CandidateSet):
            token.lp_candidate = effect.account
        elif isinstance(effect, CursorMoved):
            token.distributor(effect.distributor).cursor = effect.cursor
        elif isinstance(effect, FlagFlipped):
            token.alternation_flag = effect.value
        elif isinstance(effect, LockReleased):
            table = token.vesting.table
            table.allocations[effect.index] = table.allocations[effect.index].with_released(effect.released)
        elif isinstance(effect, ReleaseDayAdvanced):
            token.vesting.table.last_release_day = effect.day
