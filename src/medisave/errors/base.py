"""
Base exception class for medisave.

All medisave exceptions inherit from MediSaveError, which provides
structured error information including error codes, transaction hashes,
and additional context details.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class MediSaveError(Exception):
    """
    Base exception for all medisave errors.

    Provides structured error information that can be serialized and logged.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "INSUFFICIENT_FUNDS").
        tx_hash: Optional transaction hash related to the error.
        details: Optional dictionary with additional error context.

    Example:
        >>> raise MediSaveError(
        ...     "Debit failed",
        ...     code="DEBIT_FAILED",
        ...     tx_hash="0x123...",
        ...     details={"gas_used": 21000}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "MEDISAVE_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize MediSaveError.

        Args:
            message: Human-readable error description.
            code: Machine-readable error code.
            tx_hash: Optional transaction hash related to the error.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = details or {}

    @property
    def workflow(self) -> Optional[str]:
        """Workflow the error surfaced in, if annotated."""
        return self.details.get("workflow")

    @property
    def step(self) -> Optional[str]:
        """Workflow step the error surfaced in, if annotated."""
        return self.details.get("step")

    def add_context(self, *, workflow: str, step: str) -> "MediSaveError":
        """
        Annotate the error with the workflow and step it aborted.

        The first annotation wins so that the innermost step is kept when
        an error crosses several layers.

        Returns:
            The same exception, for ``raise err.add_context(...)``.
        """
        self.details.setdefault("workflow", workflow)
        self.details.setdefault("step", step)
        return self

    def user_message(self) -> str:
        """Plain-language message suitable for an alert dialog."""
        return self.message

    def __str__(self) -> str:
        """Return formatted error message."""
        parts = [f"[{self.code}] {self.message}"]
        if self.tx_hash:
            parts.append(f"(tx: {self.tx_hash[:10]}...)")
        return " ".join(parts)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "tx_hash": self.tx_hash,
            "details": self.details,
        }
