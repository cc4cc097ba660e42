"""
Fee-aware transfer engine.

``FeeShareToken`` wraps a base ``Ledger`` and intercepts every transfer.
Per call, in this order:

1. registry update: last call's pair-bound sender joins the holder roster if
   it now holds receipt tokens;
2. fee application: sells by non-exempt parties pay the four-way fee;
3. distributor alternation: one of the two reward distributors runs, chosen
   by a flag that flips every qualifying call, followed by the vesting check;
4. ledger commit: the fee-reduced amount moves to the recipient.

Steps 1-4 only *plan* effects (see ``effects.py``); nothing is written until
the whole plan succeeds, so a failing call leaves no trace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..errors import (
    ContractSellError,
    FeeShareError,
    InsufficientBalanceError,
    InvalidAmountError,
    NullAccountError,
    ReentrancyError,
    TradingClosedError,
)
from ..state.burns import BurnLedger
from ..state.holders import HolderRegistry
from ..state.ledger import NULL_ACCOUNT, Account, Amount, Ledger
from ..state.locks import LockTable
from ..state.pair import PairToken
from .admin import TokenAdmin
from .config import TokenConfig
from .distributor import BurnRewardDistributor, LpRewardDistributor, RewardDistributor
from .effects import CandidateSet, Effect, FlagFlipped, PendingView, TransferReason, apply_effects, ledger_moves
from .fees import FeeBreakdown, TransferClass, classify, split_fee
from .vesting import VestingSchedule

log = logging.getLogger(__name__)

LP_DISTRIBUTOR = "lp"
BURN_DISTRIBUTOR = "burn"


@dataclass(frozen=True)
class TransferRequest:
    sender: Account
    recipient: Account
    amount: Amount
    now: int
    # Set for transfer_from: the allowance of (sender -> spender) is consumed.
    spender: Optional[Account] = None


@dataclass(frozen=True)
class StepResult:
    """Result of a single intercepted transfer."""

    accepted: bool
    effects: Tuple[Effect, ...] = ()
    fees: Optional[FeeBreakdown] = None
    rejection: Optional[str] = None


class FeeShareToken:
    """The transfer interceptor and the state it owns."""

    def __init__(
        self,
        config: TokenConfig,
        *,
        ledger: Optional[Ledger] = None,
        pair: Optional[PairToken] = None,
        owner: Optional[Account] = None,
        now: int = 0,
    ) -> None:
        self.config = config
        self.ledger = ledger if ledger is not None else Ledger()
        self.pair = pair if pair is not None else PairToken(
            config.pair_address, config.engine_account, config.quote_token
        )

        never_paid = {NULL_ACCOUNT, config.sink, config.engine_account, config.pair_address}
        self.holders = HolderRegistry(excluded=set(never_paid))
        self.burns = BurnLedger(excluded=set(never_paid))

        self.lp_distributor = LpRewardDistributor(
            name=LP_DISTRIBUTOR,
            pool=config.lp_pool,
            threshold=config.lp_reward_threshold,
            min_weight=config.lp_min_weight,
        )
        self.burn_distributor = BurnRewardDistributor(
            name=BURN_DISTRIBUTOR,
            pool=config.burn_pool,
            threshold=config.burn_reward_threshold,
            min_weight=config.burn_min_weight,
        )
        start = config.vest_start_time if config.vest_start_time is not None else now
        self.vesting = VestingSchedule(
            table=LockTable.seeded(config.locks),
            start_time=start,
            source=config.engine_account,
        )

        self.alternation_flag = False
        self.lp_candidate: Optional[Account] = None
        self._entered = False

        self.admin = TokenAdmin(self, owner if owner is not None else config.initial_holder)

        locked = self.vesting.table.total_locked()
        if locked:
            self.ledger.mint(config.engine_account, locked)
        if config.total_supply > locked:
            self.ledger.mint(config.initial_holder, config.total_supply - locked)

    # -- reads -----------------------------------------------------------------

    def balance_of(self, account: Account) -> Amount:
        return self.ledger.balance_of(account)

    def allowance(self, owner: Account, spender: Account) -> Amount:
        return self.ledger.allowance(owner, spender)

    def distributor(self, name: str) -> RewardDistributor:
        if name == LP_DISTRIBUTOR:
            return self.lp_distributor
        if name == BURN_DISTRIBUTOR:
            return self.burn_distributor
        raise KeyError(f"unknown distributor: {name!r}")

    def sync_distributors(self) -> None:
        """Push pool/threshold/min-weight settings from `config` into the distributors."""
        cfg = self.config
        self.lp_distributor.pool = cfg.lp_pool
        self.lp_distributor.threshold = cfg.lp_reward_threshold
        self.lp_distributor.min_weight = cfg.lp_min_weight
        self.burn_distributor.pool = cfg.burn_pool
        self.burn_distributor.threshold = cfg.burn_reward_threshold
        self.burn_distributor.min_weight = cfg.burn_min_weight

    def summary(self) -> Dict[str, Any]:
        """Plain-dict view of the engine's own state (for reports and the demo tool)."""
        return {
            "holders": len(self.holders),
            "burners": len(self.burns),
            "burn_total": self.burns.total,
            "lp_cursor": self.lp_distributor.cursor,
            "burn_cursor": self.burn_distributor.cursor,
            "alternation_flag": self.alternation_flag,
            "lp_candidate": self.lp_candidate,
            "last_release_day": self.vesting.table.last_release_day,
            "released": self.vesting.table.total_released(),
            "lp_pool": self.ledger.balance_of(self.config.lp_pool),
            "burn_pool": self.ledger.balance_of(self.config.burn_pool),
        }

    # -- planning --------------------------------------------------------------

    def plan(self, request: TransferRequest) -> Tuple[Tuple[Effect, ...], FeeBreakdown]:
        """
        Compute every effect of `request` without mutating anything.

        Raises:
            PreconditionError: any failed precondition; nothing has been applied.
        """
        cfg = self.config
        sender, recipient, amount, now = request.sender, request.recipient, request.amount, request.now
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise InvalidAmountError(f"amount must be a non-negative int, got {amount!r}")
        if not sender or sender == NULL_ACCOUNT:
            raise NullAccountError("sender is the null account")
        if not recipient or recipient == NULL_ACCOUNT:
            raise NullAccountError("recipient is the null account")
        if self.ledger.balance_of(sender) < amount:
            raise InsufficientBalanceError(
                f"Insufficient balance: {sender} holds {self.ledger.balance_of(sender)} < {amount}"
            )

        view = PendingView(self)
        if request.spender is not None:
            view.spend_allowance(sender, request.spender, amount)

        # Registry update. Receipt tokens are minted after the tokens reach the
        # pair, so a sender to the pair is only checked on the following call.
        candidate = self.lp_candidate
        if candidate is not None and self.pair.balance_of(candidate) > 0:
            view.add_holder(candidate)
        next_candidate = sender if recipient == cfg.pair_address and sender != cfg.engine_account else None
        if next_candidate != candidate:
            view.emit(CandidateSet(next_candidate))

        # Fee application.
        exempt = cfg.is_exempt(sender) or cfg.is_exempt(recipient)
        transfer_class = classify(sender, recipient, cfg.pair_address)
        if not exempt and transfer_class is not TransferClass.PLAIN:
            if now < cfg.launch_time:
                raise TradingClosedError(f"trading opens at {cfg.launch_time}, now={now}")
            if transfer_class is TransferClass.SELL and self.ledger.has_code(sender):
                raise ContractSellError(f"{sender} has code and may not sell")
        fees = split_fee(amount, transfer_class, cfg.rates, exempt=exempt)
        for destination, part, reason in (
            (cfg.lp_pool, fees.lp_amount, TransferReason.LP_FEE),
            (cfg.sink, fees.burn_amount, TransferReason.BURN_FEE),
            (cfg.burn_pool, fees.burn_lp_amount, TransferReason.BURN_LP_FEE),
            (cfg.fund, fees.fund_amount, TransferReason.FUND_FEE),
        ):
            if part:
                view.transfer(sender, destination, part, reason)

        # Distributor alternation + vesting.
        if not exempt and sender != cfg.engine_account:
            flag = self.alternation_flag
            chosen = self.burn_distributor if flag else self.lp_distributor
            chosen.plan(view, cfg.distributor_budget, cfg.costs)
            view.emit(FlagFlipped(not flag))
            self.vesting.plan(view, now)

        # Direct sends to the sink count towards burn rewards.
        if (
            recipient == cfg.sink
            and not exempt
            and sender != cfg.engine_account
            and sender not in self.burns.excluded
            and not self.ledger.has_code(sender)
            and fees.net_amount > 0
        ):
            view.record_burn(sender, fees.net_amount)

        # Ledger commit.
        view.transfer(sender, recipient, fees.net_amount, TransferReason.NET)
        return tuple(view.effects), fees

    # -- execution -------------------------------------------------------------

    def _execute(self, request: TransferRequest, *, raise_rejection: bool) -> StepResult:
        if self._entered:
            raise ReentrancyError("transfer re-entered while another transfer is in flight")
        self._entered = True
        try:
            try:
                effects, fees = self.plan(request)
                apply_effects(self, effects)
            except FeeShareError as exc:
                if raise_rejection:
                    raise
                log.debug("transfer %s -> %s rejected: %s", request.sender, request.recipient, exc)
                return StepResult(accepted=False, rejection=exc.code)
            # The transfer is committed; a listener error propagates to the
            # caller and is never reported as a rejection.
            self.ledger.notify_batch(ledger_moves(effects))
        finally:
            self._entered = False
        return StepResult(accepted=True, effects=effects, fees=fees)

    def step(self, request: TransferRequest) -> StepResult:
        """
        Execute one transfer.

        Returns ``StepResult`` with ``accepted=True`` on success, or
        ``accepted=False`` with the error code as ``rejection``. Exceptions
        raised by ledger listeners after the commit are not caught.
        """
        if self._entered:
            return StepResult(accepted=False, rejection=ReentrancyError.code)
        return self._execute(request, raise_rejection=False)

    def transfer(self, sender: Account, recipient: Account, amount: Amount, *, now: int) -> StepResult:
        """Like ``step()`` but raises ``FeeShareError`` on rejection."""
        return self._execute(TransferRequest(sender, recipient, amount, now), raise_rejection=True)

    def transfer_from(
        self,
        spender: Account,
        sender: Account,
        recipient: Account,
        amount: Amount,
        *,
        now: int,
    ) -> StepResult:
        return self._execute(TransferRequest(sender, recipient, amount, now, spender=spender), raise_rejection=True)

    def approve(self, owner: Account, spender: Account, amount: Amount) -> None:
        self.ledger.approve(owner, spender, amount)

    def run_distributor(self, name: str, budget: Optional[int] = None) -> int:
        """
        Run one distributor outside the transfer path (keeper entry point).

        Returns the number of accounts visited.
        """
        if self._entered:
            raise ReentrancyError("distributor run re-entered a transfer in flight")
        self._entered = True
        try:
            view = PendingView(self)
            chosen = self.distributor(name)
            visited = chosen.plan(
                view,
                self.config.distributor_budget if budget is None else budget,
                self.config.costs,
            )
            apply_effects(self, view.effects)
            self.ledger.notify_batch(ledger_moves(view.effects))
        finally:
            self._entered = False
        return visited
