"""
Storacha Client - IPFS uploads through a custom upload relay

This client does not speak the w3up protocol. The Storacha HTTP bridge
takes JSON UCAN task invocations (store/add, upload/add over a CAR) and
cannot be called directly from here. ``StorachaConfig.endpoint`` must
point at a relay you run that holds the w3up agent and accepts:

    POST <endpoint>
    multipart field "file": {name}.json, application/json
    X-Storacha-Space: <space DID>     X-Storacha-Email: <account email>
    X-Auth-Secret / Authorization: bridge tokens, forwarded if configured

and answers ``{"cid": "bafy..."}`` (or ``{"root": {"/": "bafy..."}}``).
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from medisave.collaborators import AccountSetupProvider
from medisave.errors.storage import StorachaUploadError
from medisave.models import ContentAddress, FileData, UploadMethod
from medisave.storage.base import UploadBackend
from medisave.storage.types import StorachaConfig
from medisave.utils.logging import get_logger

_logger = get_logger(__name__)


class StorachaClient(UploadBackend):
    """
    Storacha upload backend, via a custom relay (see module docstring).

    Without a configured relay endpoint every upload fails.

    Example:
        ```python
        from medisave.storage import StorachaClient, StorachaConfig

        client = StorachaClient(
            StorachaConfig(endpoint=os.environ["MEDISAVE_STORACHA_ENDPOINT"]),
            setup_provider,
        )
        address = await client.upload(file_data)
        print(address.gateway_url)  # https://w3s.link/ipfs/bafy...
        ```
    """

    method = UploadMethod.STORACHA
    error_class = StorachaUploadError

    def __init__(
        self,
        config: StorachaConfig,
        setup_provider: AccountSetupProvider,
    ) -> None:
        super().__init__(config.timeout, config.max_file_size)
        self._config = config
        self._setup_provider = setup_provider

    @property
    def config(self) -> StorachaConfig:
        return self._config

    async def upload(self, file_data: FileData) -> ContentAddress:
        """
        Upload ``file_data`` into the user's Storacha space.

        Raises:
            StorachaUploadError: Relay not configured, account missing,
                transport failure, HTTP error or missing CID
            FileSizeLimitError: Payload above ``max_file_size``
        """
        if not self._config.endpoint:
            raise StorachaUploadError("Storacha upload endpoint not configured")

        account = self._setup_provider.get_storacha_account()
        if account is None:
            raise StorachaUploadError("Storacha account not set up")

        payload = self._encode(file_data)
        headers = {"X-Storacha-Space": account.space, "X-Storacha-Email": account.email}
        if self._config.auth_secret:
            headers["X-Auth-Secret"] = self._config.auth_secret
        if self._config.authorization:
            headers["Authorization"] = self._config.authorization

        _logger.debug(
            "Uploading to Storacha",
            extra={"document": file_data.blob_name, "backend": self.method.value},
        )
        try:
            async with self._http_client() as client:
                response = await client.post(
                    self._config.endpoint,
                    files=self._files(file_data, payload),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            raise StorachaUploadError(f"Request failed: {e}", cause=e) from e

        body = self._check_response(response)
        address = self._content_address(_extract_cid(body))
        _logger.info(
            "Uploaded to Storacha",
            extra={"cid": address.cid, "backend": self.method.value},
        )
        return address


def _extract_cid(body: Any) -> Optional[str]:
    """The relay answers with ``{"cid": ...}`` or a DAG-JSON link ``{"root": {"/": ...}}``."""
    if not isinstance(body, dict):
        return None
    cid = body.get("cid")
    if isinstance(cid, dict):
        cid = cid.get("/")
    if cid:
        return cid
    root = body.get("root")
    if isinstance(root, dict):
        return root.get("/")
    return root
