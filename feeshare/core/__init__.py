"""
Fee engine: fee splitting, reward distribution, vesting and the transfer interceptor
"""

from .calendar import diff_days
from .config import SINK_ACCOUNT, TokenConfig, config_from_dict, load_config
from .distributor import BurnRewardDistributor, CostModel, LpRewardDistributor, RewardDistributor
from .effects import Effect, LedgerTransfer, PendingView, TransferReason, apply_effects, ledger_moves
from .engine import BURN_DISTRIBUTOR, LP_DISTRIBUTOR, FeeShareToken, StepResult, TransferRequest
from .fees import FeeBreakdown, FeeRates, TransferClass, classify, split_fee
from .vesting import VestingSchedule, release_target

__all__ = [
    "diff_days",
    "SINK_ACCOUNT",
    "TokenConfig",
    "config_from_dict",
    "load_config",
    "CostModel",
    "RewardDistributor",
    "LpRewardDistributor",
    "BurnRewardDistributor",
    "Effect",
    "LedgerTransfer",
    "PendingView",
    "TransferReason",
    "apply_effects",
    "ledger_moves",
    "LP_DISTRIBUTOR",
    "BURN_DISTRIBUTOR",
    "FeeShareToken",
    "StepResult",
    "TransferRequest",
    "FeeBreakdown",
    "FeeRates",
    "TransferClass",
    "classify",
    "split_fee",
    "VestingSchedule",
    "release_target",
]
