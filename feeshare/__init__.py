"""
feeshare: fee-bearing token with LP and burn reward redistribution and vesting.

Public API:
- `FeeShareToken(config)` - the transfer interceptor
- `TokenConfig`, `load_config(path)` - configuration
- `Ledger`, `PairToken` - the collaborators it reads and writes
"""

from .core import FeeShareToken, StepResult, TokenConfig, TransferRequest, load_config
from .errors import FeeShareError
from .state import Ledger, PairToken

__all__ = [
    "FeeShareToken",
    "StepResult",
    "TokenConfig",
    "TransferRequest",
    "load_config",
    "FeeShareError",
    "Ledger",
    "PairToken",
]
