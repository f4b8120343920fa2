"""
Upload backend interface.

Every backend packages the document into a single ``{name}.json`` blob
and returns the content address the network assigned to it. Backends do
not retry; a failed upload aborts the save-as that asked for it.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Type

import httpx

from medisave.constants import UPLOAD_CONTENT_TYPE
from medisave.errors.storage import FileSizeLimitError, UploadError
from medisave.models import ContentAddress, FileData, UploadMethod, derive_gateway_url
from medisave.utils.validation import is_valid_cid


class UploadBackend(ABC):
    """
    Interchangeable storage backend.

    Subclasses set ``method`` and ``error_class`` and implement ``upload``.
    """

    method: UploadMethod
    error_class: Type[UploadError] = UploadError

    def __init__(self, timeout_ms: int, max_file_size: int) -> None:
        self._timeout_ms = timeout_ms
        self._max_file_size = max_file_size

    @abstractmethod
    async def upload(self, file_data: FileData) -> ContentAddress:
        """
        Upload ``file_data`` as one JSON blob.

        Returns:
            Content address of the blob

        Raises:
            UploadError: Transport failure, rejected request or bad response
            FileSizeLimitError: Payload above the configured limit
        """

    def gateway_url(self, cid: str) -> str:
        return derive_gateway_url(self.method, cid)

    # ------------------------------------------------------------------
    # Helpers shared by the HTTP backends
    # ------------------------------------------------------------------
    def _encode(self, file_data: FileData) -> bytes:
        payload = json.dumps(file_data.to_dict(), separators=(",", ":")).encode("utf-8")
        if len(payload) > self._max_file_size:
            raise FileSizeLimitError(
                len(payload),
                self._max_file_size,
                backend=self.method.value,
            )
        return payload

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self._timeout_ms / 1000))

    def _files(self, file_data: FileData, payload: bytes) -> dict:
        return {"file": (file_data.blob_name, payload, UPLOAD_CONTENT_TYPE)}

    def _check_response(self, response: Any) -> Any:
        """Raise for non-2xx responses, return the decoded JSON body otherwise."""
        if response.status_code in (401, 403):
            raise self.error_class(
                f"Invalid credentials: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if response.status_code == 429:
            raise self.error_class(
                "Upload quota or rate limit exceeded: HTTP 429",
                status_code=response.status_code,
            )
        if not 200 <= response.status_code < 300:
            raise self.error_class(
                f"Upload failed: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise self.error_class("Upload response is not valid JSON", cause=e) from e

    def _content_address(self, cid: Any) -> ContentAddress:
        if not isinstance(cid, str) or not is_valid_cid(cid):
            raise self.error_class(f"Upload response has no valid CID: {cid!r}")
        return ContentAddress(cid=cid, method=self.method)
