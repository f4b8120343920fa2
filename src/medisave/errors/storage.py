"""
Storage-related exceptions.

These exceptions are raised while uploading a document to one of the
decentralized storage backends (Storacha, Lighthouse) or while checking
that the chosen backend's account is set up.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from medisave.errors.base import MediSaveError


class StorageError(MediSaveError):
    """
    Base exception for storage operations.

    Example:
        >>> raise StorageError("Failed to reach upload endpoint")
    """

    def __init__(
        self,
        message: str,
        *,
        backend: Optional[str] = None,
        cid: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if backend:
            details["backend"] = backend
        if cid:
            details["cid"] = cid

        super().__init__(
            message,
            code="STORAGE_ERROR",
            details=details,
        )
        self.backend = backend
        self.cid = cid


class UploadError(StorageError):
    """
    Raised when an upload to a storage backend fails.

    Carries the backend identity and the underlying cause (transport
    failure, quota, invalid credentials, malformed response).

    Example:
        >>> raise UploadError("HTTP 401", backend="lighthouse")
    """

    def __init__(
        self,
        message: str = "Upload failed",
        *,
        backend: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"

        super().__init__(message, backend=backend, details=details)
        self.code = "UPLOAD_ERROR"
        self.status_code = status_code
        self.cause = cause

    def user_message(self) -> str:
        name = (self.backend or "storage").capitalize()
        return f"Error saving file: upload to {name} failed ({self.message})"


class StorachaUploadError(UploadError):
    """Raised when uploading to Storacha fails."""

    def __init__(
        self,
        message: str = "Storacha upload failed",
        *,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            backend="storacha",
            status_code=status_code,
            cause=cause,
            details=details,
        )
        self.code = "STORACHA_UPLOAD_ERROR"


class LighthouseUploadError(UploadError):
    """Raised when uploading to Lighthouse fails."""

    def __init__(
        self,
        message: str = "Lighthouse upload failed",
        *,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            backend="lighthouse",
            status_code=status_code,
            cause=cause,
            details=details,
        )
        self.code = "LIGHTHOUSE_UPLOAD_ERROR"


class FileSizeLimitError(UploadError):
    """
    Raised when a payload exceeds the backend's configured size limit.

    Checked before any request is sent, so nothing reaches the network.

    Example:
        >>> raise FileSizeLimitError(10485761, 10485760, backend="storacha")
    """

    def __init__(
        self,
        file_size: int,
        max_size: int,
        *,
        backend: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        details["excess_bytes"] = file_size - max_size

        super().__init__(
            f"File size ({file_size} bytes) exceeds limit ({max_size} bytes)",
            backend=backend,
            details=details,
        )
        self.code = "FILE_SIZE_LIMIT"
        self.file_size = file_size
        self.max_size = max_size


class AccountNotConfiguredError(StorageError):
    """
    Raised when the chosen backend has no account set up locally.

    The user must finish setup elsewhere and retry the save.
    """

    def __init__(
        self,
        backend: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            f"{backend.capitalize()} account not set up",
            backend=backend,
            details=details,
        )
        self.code = "ACCOUNT_NOT_CONFIGURED"

    def user_message(self) -> str:
        return (
            f"Error saving file: {self.message}. "
            "Set up your account in the List Files section and try again."
        )
