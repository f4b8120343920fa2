"""
Ledger and payment-guard exceptions.

Raised while resolving the connected network, reading the MediToken
balance, debiting tokens, or running a payment-guarded effect.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Union

from medisave.errors.base import MediSaveError

ChainIdLike = Union[int, str]


class LedgerError(MediSaveError):
    """Base exception for on-chain reads and writes."""

    def __init__(
        self,
        message: str,
        *,
        chain_id: Optional[int] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if chain_id is not None:
            details["chain_id"] = chain_id

        super().__init__(
            message,
            code="LEDGER_ERROR",
            tx_hash=tx_hash,
            details=details,
        )
        self.chain_id = chain_id


class UnsupportedNetworkError(LedgerError):
    """
    Raised when the active chain id matches no configured environment.

    Example:
        >>> raise UnsupportedNetworkError("0x1")
    """

    def __init__(
        self,
        chain_id: ChainIdLike,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["requested_chain_id"] = str(chain_id)

        super().__init__(
            f"Unsupported network (chain id {chain_id})",
            details=details,
        )
        self.code = "UNSUPPORTED_NETWORK"
        self.requested_chain_id = chain_id

    def user_message(self) -> str:
        return "Unsupported network. Please switch your wallet to a supported network."


class LedgerReadError(LedgerError):
    """Raised when a balance read fails at the RPC layer."""

    def __init__(
        self,
        message: str = "Failed to read token balance",
        *,
        chain_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, chain_id=chain_id, details=details)
        self.code = "LEDGER_READ_ERROR"


# ============================================================================
# Payment Guard Errors
# ============================================================================


class GuardError(MediSaveError):
    """Base exception for payment-guarded operations."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message,
            code="GUARD_ERROR",
            tx_hash=tx_hash,
            details=details,
        )
        self.operation = operation


class BalanceUnknownError(GuardError):
    """
    Raised when the balance could not be read before a guarded operation.

    An unknown balance is never treated as zero; the operation is simply
    not attempted.
    """

    def __init__(
        self,
        operation: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            "Token balance could not be determined",
            operation=operation,
            details=details,
        )
        self.code = "BALANCE_UNKNOWN"

    def user_message(self) -> str:
        return "Could not read your MediToken balance. Please try again."


class InsufficientFundsError(GuardError):
    """
    Raised when the balance is below the cost of the operation.

    Example:
        >>> raise InsufficientFundsError(Decimal("1"), Decimal("3"), operation="SAVE_AS")
    """

    def __init__(
        self,
        balance: Decimal,
        required: Decimal,
        *,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["balance"] = str(balance)
        details["required"] = str(required)
        details["deficit"] = str(required - balance)

        super().__init__(
            f"Insufficient MediToken balance: {balance} < {required}",
            operation=operation,
            details=details,
        )
        self.code = "INSUFFICIENT_FUNDS"
        self.balance = balance
        self.required = required

    def user_message(self) -> str:
        action = {
            "SAVE": "save",
            "SAVE_AS": "save",
            "PRINT": "print",
        }.get(self.operation or "", "continue")
        return f"You need at least {self.required} MediToken to {action}"


class DebitFailedError(GuardError):
    """
    Raised when the token transfer did not confirm.

    Subclasses distinguish wallet rejection, on-chain revert, and
    confirmation timeout. Funds are never considered moved when this is
    raised.
    """

    def __init__(
        self,
        message: str = "Token debit failed",
        *,
        operation: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation,
            tx_hash=tx_hash,
            details=details,
        )
        self.code = "DEBIT_FAILED"

    def user_message(self) -> str:
        return "Failed to process token payment"


class TransactionRejectedError(DebitFailedError):
    """Raised when the signer declined the transfer."""

    def __init__(
        self,
        message: str = "Transaction rejected by signer",
        *,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, operation=operation, details=details)
        self.code = "TRANSACTION_REJECTED"

    def user_message(self) -> str:
        return "Token payment was rejected in your wallet"


class TransactionRevertedError(DebitFailedError):
    """
    Raised when the transfer reverted on-chain.

    Example:
        >>> raise TransactionRevertedError("ERC20: transfer amount exceeds balance")
    """

    def __init__(
        self,
        message: str = "Transaction reverted",
        *,
        reason: Optional[str] = None,
        operation: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if reason:
            details["reason"] = reason

        super().__init__(
            message,
            operation=operation,
            tx_hash=tx_hash,
            details=details,
        )
        self.code = "TRANSACTION_REVERTED"
        self.reason = reason


class TransactionTimeoutError(DebitFailedError):
    """Raised when no receipt arrived within the confirmation timeout."""

    def __init__(
        self,
        timeout_seconds: float,
        *,
        operation: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["timeout_seconds"] = timeout_seconds

        super().__init__(
            f"Transaction not confirmed after {timeout_seconds}s",
            operation=operation,
            tx_hash=tx_hash,
            details=details,
        )
        self.code = "TRANSACTION_TIMEOUT"
        self.timeout_seconds = timeout_seconds


class EffectFailedAfterDebitError(GuardError):
    """
    Raised when the guarded effect failed after the debit confirmed.

    The tokens are spent and are not refunded. Hosts must surface this
    differently from ordinary aborts.
    """

    def __init__(
        self,
        cause: BaseException,
        *,
        operation: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["cause"] = f"{type(cause).__name__}: {cause}"

        super().__init__(
            f"Effect failed after tokens were debited: {cause}",
            operation=operation,
            tx_hash=tx_hash,
            details=details,
        )
        self.code = "EFFECT_FAILED_AFTER_DEBIT"
        self.cause = cause

    def user_message(self) -> str:
        ref = f" (transaction {self.tx_hash})" if self.tx_hash else ""
        return (
            "Your MediToken payment went through"
            f"{ref}, but the operation could not be completed: {self.cause}"
        )
