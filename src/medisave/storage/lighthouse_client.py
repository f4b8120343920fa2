"""
Lighthouse Client - IPFS/Filecoin uploads through the Lighthouse API
"""

from __future__ import annotations

import httpx

from medisave.errors.storage import LighthouseUploadError
from medisave.models import ContentAddress, FileData, UploadMethod
from medisave.storage.base import UploadBackend
from medisave.storage.types import LighthouseConfig
from medisave.utils.logging import get_logger

_logger = get_logger(__name__)


class LighthouseClient(UploadBackend):
    """
    Lighthouse upload backend.

    Lighthouse needs no per-user setup; the API key comes from configuration.

    Example:
        ```python
        client = LighthouseClient(LighthouseConfig(api_key=os.environ["MEDISAVE_LIGHTHOUSE_API_KEY"]))
        address = await client.upload(file_data)
        ```
    """

    method = UploadMethod.LIGHTHOUSE
    error_class = LighthouseUploadError

    def __init__(self, config: LighthouseConfig) -> None:
        super().__init__(config.timeout, config.max_file_size)
        self._config = config

    @property
    def config(self) -> LighthouseConfig:
        return self._config

    async def upload(self, file_data: FileData) -> ContentAddress:
        """
        Upload ``file_data`` to Lighthouse.

        Raises:
            LighthouseUploadError: Missing API key, transport failure,
                HTTP error or missing CID
            FileSizeLimitError: Payload above ``max_file_size``
        """
        if not self._config.api_key:
            raise LighthouseUploadError("Lighthouse API key not configured")

        payload = self._encode(file_data)
        _logger.debug(
            "Uploading to Lighthouse",
            extra={"document": file_data.blob_name, "backend": self.method.value},
        )
        try:
            async with self._http_client() as client:
                response = await client.post(
                    self._config.endpoint,
                    files=self._files(file_data, payload),
                    headers={"Authorization": f"Bearer {self._config.api_key}"},
                )
        except httpx.HTTPError as e:
            raise LighthouseUploadError(f"Request failed: {e}", cause=e) from e

        body = self._check_response(response)
        cid = body.get("Hash") if isinstance(body, dict) else None
        address = self._content_address(cid)
        _logger.info(
            "Uploaded to Lighthouse",
            extra={"cid": address.cid, "backend": self.method.value},
        )
        return address
