"""
Single-asset fungible ledger: balances, allowances and supply.

Implements Ledger[Account] -> Amount together with the base transfer
primitive the fee engine delegates to. Every failed precondition raises
before any balance is touched.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Set, Tuple

from ..errors import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidAmountError,
    NullAccountError,
)


# Type aliases
Account = str  # 20-byte hex string (0x...)
Amount = int  # Non-negative integer (arbitrary precision)

NULL_ACCOUNT: Account = "0x" + "00" * 20

TransferListener = Callable[[Account, Account, Amount], None]


def _require_amount(amount: Amount, *, name: str = "amount") -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise InvalidAmountError(f"{name} must be a non-negative int, got {amount!r}")


def _require_account(account: Account, *, role: str) -> None:
    if not account or account == NULL_ACCOUNT:
        raise NullAccountError(f"{role} is the null account")


class Ledger:
    """
    Balance and allowance table for one token.

    Note: iteration order of the underlying dicts carries no meaning; callers
    that need determinism (snapshots, reports) sort explicitly.
    """

    def __init__(self) -> None:
        self._balances: Dict[Account, Amount] = {}
        self._allowances: Dict[Tuple[Account, Account], Amount] = {}
        self._code_accounts: Set[Account] = set()
        self._listeners: List[TransferListener] = []
        self.total_supply: Amount = 0

    # -- reads -----------------------------------------------------------------

    def balance_of(self, account: Account) -> Amount:
        """Get balance for account. Returns 0 if not found."""
        return self._balances.get(account, 0)

    def allowance(self, owner: Account, spender: Account) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def has_code(self, account: Account) -> bool:
        """True when the host reports executable code at `account`."""
        return account in self._code_accounts

    def mark_code(self, account: Account, has_code: bool = True) -> None:
        if has_code:
            self._code_accounts.add(account)
        else:
            self._code_accounts.discard(account)

    # -- notifications ---------------------------------------------------------

    def subscribe(self, listener: TransferListener) -> None:
        """Register a callback invoked after every committed transfer/mint/burn."""
        self._listeners.append(listener)

    def _notify(self, sender: Account, recipient: Account, amount: Amount) -> None:
        for listener in list(self._listeners):
            listener(sender, recipient, amount)

    # -- primitives ------------------------------------------------------------

    def _set(self, account: Account, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def transfer(self, sender: Account, recipient: Account, amount: Amount) -> None:
        """
        Move `amount` from sender to recipient.

        Raises:
            NullAccountError: If either party is the null account
            InsufficientBalanceError: If sender holds less than amount
            InvalidAmountError: If amount is negative or not an int
        """
        _require_account(sender, role="sender")
        _require_account(recipient, role="recipient")
        _require_amount(amount)
        current = self.balance_of(sender)
        if current < amount:
            raise InsufficientBalanceError(
                f"Insufficient balance: {sender} holds {current} < {amount}"
            )
        self._set(sender, current - amount)
        self._set(recipient, self.balance_of(recipient) + amount)
        self._notify(sender, recipient, amount)

    def transfer_batch(
        self,
        moves: Iterable[Tuple[Account, Account, Amount]],
        *,
        notify: bool = True,
    ) -> None:
        """
        Apply a sequence of transfers all-or-nothing.

        The whole batch is validated against a scratch copy of the touched
        balances first, so a failing move leaves the ledger untouched. With
        `notify=False` the caller is expected to call `notify_batch` once its
        own bookkeeping is done.
        """
        moves = list(moves)
        scratch: Dict[Account, Amount] = {}
        for sender, recipient, amount in moves:
            _require_account(sender, role="sender")
            _require_account(recipient, role="recipient")
            _require_amount(amount)
            have = scratch.get(sender, self.balance_of(sender))
            if have < amount:
                raise InsufficientBalanceError(
                    f"Insufficient balance: {sender} holds {have} < {amount}"
                )
            scratch[sender] = have - amount
            scratch[recipient] = scratch.get(recipient, self.balance_of(recipient)) + amount
        for sender, recipient, amount in moves:
            self._set(sender, self.balance_of(sender) - amount)
            self._set(recipient, self.balance_of(recipient) + amount)
        if notify:
            self.notify_batch(moves)

    def notify_batch(self, moves: Iterable[Tuple[Account, Account, Amount]]) -> None:
        for sender, recipient, amount in moves:
            self._notify(sender, recipient, amount)

    def mint(self, account: Account, amount: Amount) -> None:
        """Create `amount` new units at account."""
        _require_account(account, role="mint target")
        _require_amount(amount)
        self._set(account, self.balance_of(account) + amount)
        self.total_supply += amount
        self._notify(NULL_ACCOUNT, account, amount)

    def burn(self, account: Account, amount: Amount) -> None:
        """Destroy `amount` units held by account."""
        _require_account(account, role="burn source")
        _require_amount(amount)
        current = self.balance_of(account)
        if current < amount:
            raise InsufficientBalanceError(
                f"Insufficient balance to burn: {account} holds {current} < {amount}"
            )
        self._set(account, current - amount)
        self.total_supply -= amount
        self._notify(account, NULL_ACCOUNT, amount)

    # -- allowances ------------------------------------------------------------

    def approve(self, owner: Account, spender: Account, amount: Amount) -> None:
        _require_account(owner, role="owner")
        _require_account(spender, role="spender")
        _require_amount(amount)
        self._allowances[(owner, spender)] = amount

    def spend_allowance(self, owner: Account, spender: Account, amount: Amount) -> None:
        """Consume `amount` of the owner->spender allowance."""
        _require_amount(amount)
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowanceError(
                f"Insufficient allowance: {spender} may spend {current} of {owner} < {amount}"
            )
        self._allowances[(owner, spender)] = current - amount

    # -- inspection ------------------------------------------------------------

    def get_all_balances(self) -> Dict[Account, Amount]:
        """Return a shallow copy of every non-zero balance."""
        return dict(self._balances)

    def verify_supply(self) -> bool:
        """True if the balances sum to total_supply."""
        return sum(self._balances.values()) == self.total_supply

    def __repr__(self) -> str:
        return f"Ledger({len(self._balances)} accounts, supply={self.total_supply})"
