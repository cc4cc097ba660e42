"""
Owner-gated administrative surface.

Every setter checks the caller first and raises ``AccessError`` before any
state is touched. Configuration changes go through ``dataclasses.replace`` so
``TokenConfig.__post_init__`` re-validates the result.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Optional

from ..errors import AccessError, NullAccountError
from ..state.ledger import NULL_ACCOUNT, Account, Amount
from .fees import FeeRates

if TYPE_CHECKING:  # pragma: no cover
    from ..state.pair import PairToken
    from .engine import FeeShareToken

log = logging.getLogger(__name__)


class TokenAdmin:
    def __init__(self, token: "FeeShareToken", owner: Optional[Account]) -> None:
        self._token = token
        self.owner = owner

    def _only_owner(self, caller: Account) -> None:
        if self.owner is None or caller != self.owner:
            raise AccessError(f"{caller} is not the owner")

    def _update(self, **changes: Any) -> None:
        self._token.config = replace(self._token.config, **changes)
        self._token.sync_distributors()

    # -- ownership -------------------------------------------------------------

    def transfer_ownership(self, caller: Account, new_owner: Account) -> None:
        self._only_owner(caller)
        if not new_owner or new_owner == NULL_ACCOUNT:
            raise NullAccountError("new owner is the null account")
        log.info("admin: ownership %s -> %s", self.owner, new_owner)
        self.owner = new_owner

    def renounce_ownership(self, caller: Account) -> None:
        self._only_owner(caller)
        log.info("admin: ownership renounced by %s", caller)
        self.owner = None

    # -- fees ------------------------------------------------------------------

    def set_fee_rates(
        self,
        caller: Account,
        *,
        lp_rate: int,
        burn_rate: int,
        burn_lp_rate: int,
        fund_rate: int,
    ) -> None:
        self._only_owner(caller)
        rates = FeeRates(lp_rate=lp_rate, burn_rate=burn_rate, burn_lp_rate=burn_lp_rate, fund_rate=fund_rate)
        self._update(rates=rates)
        log.info("admin: fee rates set to %s", rates)

    def set_fee_exempt(self, caller: Account, account: Account, exempt: bool = True) -> None:
        self._only_owner(caller)
        current = set(self._token.config.fee_exempt)
        if exempt:
            current.add(account)
        else:
            current.discard(account)
        self._update(fee_exempt=frozenset(current))
        log.info("admin: fee exempt %s=%s", account, exempt)

    def set_fund_address(self, caller: Account, account: Account) -> None:
        self._only_owner(caller)
        self._update(fund=account)
        log.info("admin: fund address set to %s", account)

    def set_launch_time(self, caller: Account, launch_time: int) -> None:
        self._only_owner(caller)
        self._update(launch_time=launch_time)
        log.info("admin: launch time set to %d", launch_time)

    def set_pair(self, caller: Account, pair: "PairToken") -> None:
        self._only_owner(caller)
        self._update(pair_address=pair.address)
        self._token.pair = pair
        self._token.lp_candidate = None
        self._token.holders.excluded.add(pair.address)
        self._token.burns.excluded.add(pair.address)
        log.info("admin: pair set to %s", pair.address)

    # -- reward rosters --------------------------------------------------------

    def set_holder_excluded(self, caller: Account, account: Account, excluded: bool = True) -> None:
        self._only_owner(caller)
        if excluded:
            self._token.holders.excluded.add(account)
        else:
            self._token.holders.excluded.discard(account)
        log.info("admin: holder excluded %s=%s", account, excluded)

    def set_burn_excluded(self, caller: Account, account: Account, excluded: bool = True) -> None:
        self._only_owner(caller)
        if excluded:
            self._token.burns.excluded.add(account)
        else:
            self._token.burns.excluded.discard(account)
        log.info("admin: burn excluded %s=%s", account, excluded)

    def set_lp_reward_condition(self, caller: Account, threshold: Amount, min_weight: Amount) -> None:
        self._only_owner(caller)
        self._update(lp_reward_threshold=threshold, lp_min_weight=min_weight)
        log.info("admin: lp reward threshold=%d min_weight=%d", threshold, min_weight)

    def set_burn_reward_condition(self, caller: Account, threshold: Amount, min_weight: Amount) -> None:
        self._only_owner(caller)
        self._update(burn_reward_threshold=threshold, burn_min_weight=min_weight)
        log.info("admin: burn reward threshold=%d min_weight=%d", threshold, min_weight)

    def set_distributor_budget(self, caller: Account, budget: int) -> None:
        self._only_owner(caller)
        self._update(distributor_budget=budget)
        log.info("admin: distributor budget set to %d", budget)
