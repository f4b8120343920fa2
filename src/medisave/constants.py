"""Constants for medisave.

This module defines the constant values used across the package,
including token units, gateway templates, filename rules, storage
defaults and the keys the editor persists for backend account setup.
"""

# Token Constants
TOKEN_SYMBOL = "MEDT"
TOKEN_DECIMALS = 18

# Ledger Constants
DEFAULT_CONFIRMATION_TIMEOUT_SECONDS = 120
RECEIPT_POLL_LATENCY_SECONDS = 0.5
USER_REJECTED_REQUEST_CODE = 4001  # EIP-1193 "User Rejected Request"
PROVIDER_TIMEOUT_SECONDS = 30

# Document Constants
DEFAULT_DOCUMENT_NAME = "default"
RESERVED_FILENAMES = frozenset({"default", "Untitled"})
MAX_FILENAME_LENGTH = 30
FILENAME_PATTERN = r"^[a-zA-Z0-9- ]*$"

# Gateway URL templates (fixed per backend)
STORACHA_GATEWAY_TEMPLATE = "https://w3s.link/ipfs/{cid}"
LIGHTHOUSE_GATEWAY_TEMPLATE = "https://gateway.lighthouse.storage/ipfs/{cid}"

# Storage Constants
DEFAULT_UPLOAD_TIMEOUT_MS = 60000
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB, spreadsheets are small
UPLOAD_CONTENT_TYPE = "application/json"

# Local persistence keys written by the editor's Files section
STORACHA_EMAIL_KEY = "ipfsUserEmail"
STORACHA_SPACE_KEY = "ipfsUserSpace"

__all__ = [
    "TOKEN_SYMBOL",
    "TOKEN_DECIMALS",
    "DEFAULT_CONFIRMATION_TIMEOUT_SECONDS",
    "RECEIPT_POLL_LATENCY_SECONDS",
    "USER_REJECTED_REQUEST_CODE",
    "PROVIDER_TIMEOUT_SECONDS",
    "DEFAULT_DOCUMENT_NAME",
    "RESERVED_FILENAMES",
    "MAX_FILENAME_LENGTH",
    "FILENAME_PATTERN",
    "STORACHA_GATEWAY_TEMPLATE",
    "LIGHTHOUSE_GATEWAY_TEMPLATE",
    "DEFAULT_UPLOAD_TIMEOUT_MS",
    "DEFAULT_MAX_FILE_SIZE",
    "UPLOAD_CONTENT_TYPE",
    "STORACHA_EMAIL_KEY",
    "STORACHA_SPACE_KEY",
]
