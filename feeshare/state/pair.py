"""
AMM pair receipt-token view.

The pair issues a receipt (LP) token whose balances weight the LP reward
distributor. The engine only reads it; `mint`/`burn` exist so the shell (or a
test) can mirror liquidity adds and removals.
"""

from __future__ import annotations

from typing import Dict

from .ledger import Account, Amount


class PairToken:
    """
    Receipt-token table for one AMM pair: account -> lp_amount.

    Notes:
    - LP balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    """

    def __init__(self, address: Account, token0: Account, token1: Account) -> None:
        self.address = address
        self.token0 = token0
        self.token1 = token1
        self._balances: Dict[Account, Amount] = {}
        self._total_supply: Amount = 0

    def balance_of(self, account: Account) -> Amount:
        """Get receipt balance for account. Returns 0 if not found."""
        return self._balances.get(account, 0)

    def total_supply(self) -> Amount:
        return self._total_supply

    def involves(self, token: Account) -> bool:
        return token in (self.token0, self.token1)

    def mint(self, account: Account, amount: Amount) -> None:
        """Issue receipt tokens to account (liquidity added)."""
        if amount < 0:
            raise ValueError(f"LP amount cannot be negative: {amount}")
        if amount == 0:
            return
        self._balances[account] = self.balance_of(account) + amount
        self._total_supply += amount

    def burn(self, account: Account, amount: Amount) -> None:
        """Redeem receipt tokens from account (liquidity removed)."""
        if amount < 0:
            raise ValueError(f"LP amount cannot be negative: {amount}")
        current = self.balance_of(account)
        if current < amount:
            raise ValueError(
                f"Insufficient LP balance: {current} - {amount} < 0"
            )
        if current == amount:
            self._balances.pop(account, None)
        else:
            self._balances[account] = current - amount
        self._total_supply -= amount

    def get_all_balances(self) -> Dict[Account, Amount]:
        """Return all receipt balances."""
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"PairToken({self.address}, {len(self._balances)} holders)"
