"""
Shared fixtures for storage module tests.
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from medisave.local import InMemoryAccountSetupProvider
from medisave.models import FileData, StorachaAccount
from medisave.storage.types import LighthouseConfig, StorachaConfig


# =============================================================================
# Test Constants
# =============================================================================

STORACHA_ENDPOINT = "https://relay.example.org/upload"
SPACE_DID = "did:key:z6MkjchhfUsD6mmvni8mCdXHw216Xrm9bQe2mBH1P5RDjVJG"
EMAIL = "doctor@example.com"


# =============================================================================
# Helper Functions for Mocking httpx
# =============================================================================


def create_mock_response(
    status_code: int = 200,
    body: Optional[Dict[str, Any]] = None,
    json_error: Optional[Exception] = None,
) -> MagicMock:
    """Create a mock httpx Response."""
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json = MagicMock(side_effect=json_error)
    else:
        response.json = MagicMock(return_value=body if body is not None else {})
    return response


def create_mock_client(response: Any = None, error: Optional[Exception] = None) -> AsyncMock:
    """Create an httpx.AsyncClient stand-in usable as an async context manager."""
    mock_client = AsyncMock()
    if error is not None:
        mock_client.post = AsyncMock(side_effect=error)
    else:
        mock_client.post = AsyncMock(return_value=response)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    return mock_client


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def file_data() -> FileData:
    return FileData(
        name="Blood Panel",
        content="cell%20A1%3DHemoglobin",
        created="2026-01-02T03:04:05+00:00",
        modified="2026-01-02T03:04:05+00:00",
    )


@pytest.fixture
def storacha_config() -> StorachaConfig:
    return StorachaConfig(
        endpoint=STORACHA_ENDPOINT,
        auth_secret="test-secret",
        authorization="test-ucan",
        timeout=30000,
    )


@pytest.fixture
def lighthouse_config() -> LighthouseConfig:
    return LighthouseConfig(api_key="test-lighthouse-key", timeout=30000)


@pytest.fixture
def storacha_account_provider() -> InMemoryAccountSetupProvider:
    return InMemoryAccountSetupProvider(StorachaAccount(email=EMAIL, space=SPACE_DID))
