"""Exception types for the fee-sharing token engine.

Raised by the ledger primitives and by ``FeeShareToken.transfer()``; the
non-raising ``FeeShareToken.step()`` maps them onto ``StepResult.rejection``.
"""

from __future__ import annotations


class FeeShareError(Exception):
    """Base class for every error raised by this package."""

    code = "error"


class PreconditionError(FeeShareError):
    """A transfer precondition failed; the whole call is rejected."""

    code = "precondition"


class NullAccountError(PreconditionError):
    code = "null_account"


class InsufficientBalanceError(PreconditionError):
    code = "insufficient_balance"


class InsufficientAllowanceError(PreconditionError):
    code = "insufficient_allowance"


class InvalidAmountError(PreconditionError):
    code = "invalid_amount"


class TradingClosedError(PreconditionError):
    """Raised when a pair trade is attempted before the launch time."""

    code = "trading_closed"


class ContractSellError(PreconditionError):
    """Raised when a code-bearing account tries to sell into the pair."""

    code = "contract_sell"


class AccessError(FeeShareError):
    """Raised when a non-owner invokes an administrative operation."""

    code = "access"


class ReentrancyError(FeeShareError):
    """Raised when a transfer is started while another is still in flight."""

    code = "reentrancy"


class CalendarError(FeeShareError):
    """Raised for invalid calendar arithmetic (e.g. a negative interval)."""

    code = "calendar"
