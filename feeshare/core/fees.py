"""
Sell-fee splitting kernel (deterministic, integer-only).

Every component is floor-divided independently; whatever the floors leave
behind stays with the transfer's net amount rather than being carried.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from ..state.ledger import Account


PERMILLE_DENOM = 1_000


@unique
class TransferClass(Enum):
    PLAIN = "plain"
    BUY = "buy"
    SELL = "sell"


def classify(sender: Account, recipient: Account, pair: Account) -> TransferClass:
    """Classify a transfer by which side (if any) the AMM pair sits on."""
    if recipient == pair:
        return TransferClass.SELL
    if sender == pair:
        return TransferClass.BUY
    return TransferClass.PLAIN


@dataclass(frozen=True)
class FeeRates:
    """Per-mille rates charged on sells."""

    lp_rate: int = 0
    burn_rate: int = 0
    burn_lp_rate: int = 0
    fund_rate: int = 0

    def __post_init__(self) -> None:
        for name, v in (
            ("lp_rate", self.lp_rate),
            ("burn_rate", self.burn_rate),
            ("burn_lp_rate", self.burn_lp_rate),
            ("fund_rate", self.fund_rate),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        # Rejected rather than clamped: a sum above the denominator would make
        # the net amount negative.
        if self.total > PERMILLE_DENOM:
            raise ValueError(f"fee rates must sum to at most {PERMILLE_DENOM}, got {self.total}")

    @property
    def total(self) -> int:
        return self.lp_rate + self.burn_rate + self.burn_lp_rate + self.fund_rate


@dataclass(frozen=True)
class FeeBreakdown:
    lp_amount: int
    burn_amount: int
    burn_lp_amount: int
    fund_amount: int
    net_amount: int

    def __post_init__(self) -> None:
        for name, v in (
            ("lp_amount", self.lp_amount),
            ("burn_amount", self.burn_amount),
            ("burn_lp_amount", self.burn_lp_amount),
            ("fund_amount", self.fund_amount),
            ("net_amount", self.net_amount),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

    @property
    def total_fee(self) -> int:
        return self.lp_amount + self.burn_amount + self.burn_lp_amount + self.fund_amount


def no_fee(amount: int) -> FeeBreakdown:
    return FeeBreakdown(0, 0, 0, 0, amount)


def split_fee(
    amount: int,
    transfer_class: TransferClass,
    rates: FeeRates,
    *,
    exempt: bool = False,
) -> FeeBreakdown:
    """
    Split `amount` into (lp, burn, burn_lp, fund, net).

    Only sells by non-exempt parties pay; buys and plain transfers pass through.
    """
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise ValueError(f"amount must be a non-negative int, got {amount}")
    if exempt or transfer_class is not TransferClass.SELL:
        return no_fee(amount)

    lp = (amount * rates.lp_rate) // PERMILLE_DENOM
    burn = (amount * rates.burn_rate) // PERMILLE_DENOM
    burn_lp = (amount * rates.burn_lp_rate) // PERMILLE_DENOM
    fund = (amount * rates.fund_rate) // PERMILLE_DENOM
    fees = lp + burn + burn_lp + fund
    if fees > amount:
        raise AssertionError("fee split over-distributed")

    return FeeBreakdown(
        lp_amount=lp,
        burn_amount=burn,
        burn_lp_amount=burn_lp,
        fund_amount=fund,
        net_amount=amount - fees,
    )
