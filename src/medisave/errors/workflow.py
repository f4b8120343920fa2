"""
Workflow exceptions raised by the save orchestrator and its prompts.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from medisave.errors.base import MediSaveError


class WorkflowError(MediSaveError):
    """Base exception for editor workflows (new, save, save-as, print)."""

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="WORKFLOW_ERROR", details=details)


class InvalidFilenameError(WorkflowError):
    """
    Raised when a proposed filename breaks the naming rule.

    Example:
        >>> raise InvalidFilenameError("bad/name", reason="only letters, digits, hyphen and space are allowed")
    """

    def __init__(
        self,
        filename: Optional[str],
        *,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["filename"] = filename
        details["reason"] = reason

        super().__init__(f"Invalid filename: {filename} ({reason})", details=details)
        self.code = "INVALID_FILENAME"
        self.filename = filename
        self.reason = reason

    def user_message(self) -> str:
        return f"Invalid filename: {self.filename} ({self.reason})"


class DocumentNotSavableError(WorkflowError):
    """Raised when saving in place is attempted on the default template."""

    def __init__(
        self,
        name: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"Cannot update {name} file!", details=details)
        self.code = "DOCUMENT_NOT_SAVABLE"
        self.name = name


# ============================================================================
# Interaction Errors
# ============================================================================


class InteractionError(WorkflowError):
    """Base exception for interactive prompts."""

    def __init__(
        self,
        message: str,
        *,
        kind: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if kind:
            details["kind"] = kind

        super().__init__(message, details=details)
        self.code = "INTERACTION_ERROR"
        self.kind = kind


class InteractionPendingError(InteractionError):
    """Raised when a prompt is requested while one of its kind is open."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"A {kind} prompt is already pending", kind=kind)
        self.code = "INTERACTION_PENDING"

    def user_message(self) -> str:
        return "Another save is already waiting for your input"


class NoPendingInteractionError(InteractionError):
    """Raised when a resolution arrives with no prompt of its kind open."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"No {kind} prompt is pending", kind=kind)
        self.code = "NO_PENDING_INTERACTION"


class InteractionCancelledError(InteractionError):
    """Raised into the waiting workflow when the user dismisses a prompt."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"The {kind} prompt was dismissed", kind=kind)
        self.code = "INTERACTION_CANCELLED"

    def user_message(self) -> str:
        return "Save cancelled"


class CollaboratorError(WorkflowError):
    """
    Raised when a host collaborator (file store, account setup, document
    engine, presenter) fails with a non-medisave exception.

    Example:
        >>> raise CollaboratorError("file store", OSError("disk full"))
    """

    def __init__(
        self,
        collaborator: str,
        cause: BaseException,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["collaborator"] = collaborator
        details["cause"] = f"{type(cause).__name__}: {cause}"

        super().__init__(f"{collaborator.capitalize()} failed: {cause}", details=details)
        self.code = "COLLABORATOR_ERROR"
        self.collaborator = collaborator
        self.cause = cause
