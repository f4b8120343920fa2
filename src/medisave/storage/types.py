"""
Storage Types

Configuration models for the decentralized storage backends a save-as
can upload to:
- Storacha (w3up) through an HTTP upload relay
- Lighthouse through its public HTTP API
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from medisave.constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_UPLOAD_TIMEOUT_MS


# ============================================================================
# Storacha Configuration
# ============================================================================

class StorachaConfig(BaseModel):
    """
    Configuration for the Storacha upload client.

    The per-user account (email and space) is not part of this config; it
    comes from the AccountSetupProvider at upload time.

    Example:
        ```python
        config = StorachaConfig(
            endpoint=os.environ["MEDISAVE_STORACHA_ENDPOINT"],
            auth_secret=os.environ["MEDISAVE_STORACHA_AUTH_SECRET"],
            authorization=os.environ["MEDISAVE_STORACHA_AUTHORIZATION"],
        )
        ```
    """

    model_config = ConfigDict(frozen=True)

    endpoint: Optional[str] = Field(
        default=None,
        description="Custom upload relay holding the w3up agent; the Storacha bridge cannot be called directly",
    )
    auth_secret: Optional[str] = Field(
        default=None,
        description="X-Auth-Secret header value. SECURITY: Store in environment variable",
    )
    authorization: Optional[str] = Field(
        default=None,
        description="Authorization header value (delegated UCAN). SECURITY: Store in environment variable",
    )
    timeout: int = Field(
        default=DEFAULT_UPLOAD_TIMEOUT_MS,
        ge=1000,
        description="Request timeout in milliseconds",
    )
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        ge=1,
        description="Maximum payload size in bytes",
    )


# ============================================================================
# Lighthouse Configuration
# ============================================================================

class LighthouseConfig(BaseModel):
    """
    Configuration for the Lighthouse upload client.

    Example:
        ```python
        config = LighthouseConfig(api_key=os.environ["MEDISAVE_LIGHTHOUSE_API_KEY"])
        ```
    """

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(
        default=None,
        description="Lighthouse API key. Get from: https://files.lighthouse.storage",
    )
    endpoint: str = Field(
        default="https://node.lighthouse.storage/api/v0/add",
        description="Lighthouse upload endpoint",
    )
    timeout: int = Field(
        default=DEFAULT_UPLOAD_TIMEOUT_MS,
        ge=1000,
        description="Request timeout in milliseconds",
    )
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        ge=1,
        description="Maximum payload size in bytes",
    )
