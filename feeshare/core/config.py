"""
Token configuration.

`TokenConfig` is immutable; administrative setters replace it wholesale.
Deployments describe it in YAML, e.g.::

    name: Fee Share
    symbol: FSH
    total_supply: 1000000000
    initial_holder: "0x11...11"
    engine_account: "0xee...ee"
    pair: {address: "0xaa...aa", quote_token: "0xbb...bb"}
    pools: {lp: "0xc1...", burn: "0xc2...", fund: "0xf0..."}
    fees: {lp_rate: 20, burn_rate: 5, burn_lp_rate: 20, fund_rate: 15}
    rewards:
      lp: {threshold: 1000, min_weight: 1}
      burn: {threshold: 1000, min_weight: 1}
      budget: 50
    launch_time: 1700000000
    locks:
      - {beneficiary: "0xd1...", total: 100000, cycle_days: 365}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, FrozenSet, Mapping, Optional, Tuple

import yaml

from ..state.ledger import NULL_ACCOUNT, Account, Amount
from ..state.locks import LockAllocation
from .distributor import CostModel
from .fees import FeeRates

SINK_ACCOUNT: Account = "0x000000000000000000000000000000000000dEaD"


@dataclass(frozen=True)
class TokenConfig:
    engine_account: Account
    pair_address: Account
    quote_token: Account
    lp_pool: Account
    burn_pool: Account
    fund: Account
    initial_holder: Account

    name: str = "Fee Share"
    symbol: str = "FSH"
    total_supply: Amount = 0
    sink: Account = SINK_ACCOUNT

    rates: FeeRates = FeeRates()
    fee_exempt: FrozenSet[Account] = frozenset()

    # Reward distribution: `*_threshold` gates and caps a run; `*_min_weight`
    # filters recipients.
    lp_reward_threshold: Amount = 0
    lp_min_weight: Amount = 0
    burn_reward_threshold: Amount = 0
    burn_min_weight: Amount = 0
    distributor_budget: int = 50
    costs: CostModel = CostModel()

    # Pair trades by non-exempt parties are rejected before this time.
    launch_time: int = 0

    # Vesting; `vest_start_time=None` means "when the token is constructed".
    vest_start_time: Optional[int] = None
    locks: Tuple[LockAllocation, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in (
            "engine_account",
            "pair_address",
            "quote_token",
            "lp_pool",
            "burn_pool",
            "fund",
            "initial_holder",
            "sink",
        ):
            v = getattr(self, name)
            if not isinstance(v, str) or not v or v == NULL_ACCOUNT:
                raise ValueError(f"{name} must be a non-null account")
        for name in (
            "total_supply",
            "lp_reward_threshold",
            "lp_min_weight",
            "burn_reward_threshold",
            "burn_min_weight",
            "distributor_budget",
            "launch_time",
        ):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                raise ValueError(f"{name} must be a non-negative int, got {v!r}")
        locked = sum(a.total for a in self.locks)
        if locked > self.total_supply:
            raise ValueError(f"locked amount {locked} exceeds total_supply {self.total_supply}")

    def is_exempt(self, account: Account) -> bool:
        return account in self.fee_exempt


def _int(obj: Mapping[str, Any], key: str, default: Optional[int] = None) -> int:
    v = obj.get(key, default)
    if not isinstance(v, int) or isinstance(v, bool):
        raise TypeError(f"{key} must be an int, got {type(v).__name__}")
    return v


def _account(obj: Mapping[str, Any], key: str, default: Optional[str] = None) -> Account:
    v = obj.get(key, default)
    # Unquoted 0x... scalars load as ints in YAML; insist on quoted strings.
    if not isinstance(v, str):
        raise TypeError(f"{key} must be a quoted account string, got {type(v).__name__}")
    return v


def _account_set(obj: Mapping[str, Any], key: str) -> FrozenSet[Account]:
    rows = obj.get(key) or []
    if not isinstance(rows, list):
        raise TypeError(f"{key} must be a list of accounts")
    for v in rows:
        if not isinstance(v, str):
            raise TypeError(f"{key} entries must be quoted account strings, got {type(v).__name__}")
    return frozenset(rows)


def _mapping(obj: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    v = obj.get(key) or {}
    if not isinstance(v, Mapping):
        raise TypeError(f"{key} must be a mapping")
    return v


def config_from_dict(d: Mapping[str, Any]) -> TokenConfig:
    """Build a TokenConfig from the YAML-shaped mapping shown in the module docstring."""
    pair = _mapping(d, "pair")
    pools = _mapping(d, "pools")
    fees = _mapping(d, "fees")
    rewards = _mapping(d, "rewards")
    lp_rewards = _mapping(rewards, "lp")
    burn_rewards = _mapping(rewards, "burn")
    costs = _mapping(rewards, "costs")

    locks = []
    for row in d.get("locks") or []:
        if not isinstance(row, Mapping):
            raise TypeError("each lock must be a mapping")
        locks.append(
            LockAllocation(
                beneficiary=_account(row, "beneficiary"),
                total=_int(row, "total"),
                cycle_days=_int(row, "cycle_days"),
            )
        )

    vest_start = d.get("vest_start_time")
    if vest_start is not None and (not isinstance(vest_start, int) or isinstance(vest_start, bool)):
        raise TypeError("vest_start_time must be an int")

    return TokenConfig(
        engine_account=_account(d, "engine_account"),
        pair_address=_account(pair, "address"),
        quote_token=_account(pair, "quote_token"),
        lp_pool=_account(pools, "lp"),
        burn_pool=_account(pools, "burn"),
        fund=_account(pools, "fund"),
        initial_holder=_account(d, "initial_holder"),
        name=str(d.get("name", "Fee Share")),
        symbol=str(d.get("symbol", "FSH")),
        total_supply=_int(d, "total_supply", 0),
        sink=_account(d, "sink", SINK_ACCOUNT),
        rates=FeeRates(
            lp_rate=_int(fees, "lp_rate", 0),
            burn_rate=_int(fees, "burn_rate", 0),
            burn_lp_rate=_int(fees, "burn_lp_rate", 0),
            fund_rate=_int(fees, "fund_rate", 0),
        ),
        fee_exempt=_account_set(d, "fee_exempt"),
        lp_reward_threshold=_int(lp_rewards, "threshold", 0),
        lp_min_weight=_int(lp_rewards, "min_weight", 0),
        burn_reward_threshold=_int(burn_rewards, "threshold", 0),
        burn_min_weight=_int(burn_rewards, "min_weight", 0),
        distributor_budget=_int(rewards, "budget", 50),
        costs=CostModel(
            visit_cost=_int(costs, "visit", 1),
            payout_cost=_int(costs, "payout", 0),
        ),
        launch_time=_int(d, "launch_time", 0),
        vest_start_time=vest_start,
        locks=tuple(locks),
    )


def load_config(path: Path | str) -> TokenConfig:
    """Read a YAML config file."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    return config_from_dict(obj)
