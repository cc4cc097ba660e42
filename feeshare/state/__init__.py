"""
State tables for the fee-sharing token
"""

from .burns import BurnLedger
from .holders import HolderRegistry
from .ledger import NULL_ACCOUNT, Account, Amount, Ledger
from .locks import LockAllocation, LockTable
from .pair import PairToken

__all__ = [
    "Account",
    "Amount",
    "NULL_ACCOUNT",
    "Ledger",
    "PairToken",
    "HolderRegistry",
    "BurnLedger",
    "LockAllocation",
    "LockTable",
]
