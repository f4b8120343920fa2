"""
Validation utilities for medisave.

Provides input validation functions for:
- Document filenames (save-as naming rule)
- IPFS content identifiers returned by storage backends
- Ethereum contract addresses from configuration

Validation functions raise on failure; ``is_*`` predicates return bool.
"""

from __future__ import annotations

import re
from typing import Optional

from medisave.constants import FILENAME_PATTERN, MAX_FILENAME_LENGTH, RESERVED_FILENAMES
from medisave.errors import InvalidFilenameError

_FILENAME_RE = re.compile(FILENAME_PATTERN)
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

# CIDv0: base58btc multihash, always "Qm" + 44 chars
_CID_V0_RE = re.compile(r"^Qm[1-9A-HJ-NP-Za-km-z]{44}$")
# CIDv1: multibase base32 lowercase ("b" prefix)
_CID_V1_RE = re.compile(r"^b[a-z2-7]{58,}$")


def validate_filename(filename: Optional[str]) -> str:
    """
    Validate a proposed document filename.

    Rules, applied to the trimmed name:
    - must not be empty
    - must not be a reserved name ("default", "Untitled")
    - at most 30 characters
    - only ASCII letters, digits, hyphen and space

    Args:
        filename: Name entered by the user

    Returns:
        The trimmed filename

    Raises:
        InvalidFilenameError: If any rule is violated
    """
    name = (filename or "").strip()

    if name in RESERVED_FILENAMES:
        raise InvalidFilenameError(filename, reason=f'"{name}" is a reserved name')
    if not name:
        raise InvalidFilenameError(filename, reason="filename cannot be empty")
    if len(name) > MAX_FILENAME_LENGTH:
        raise InvalidFilenameError(
            filename,
            reason=f"filename cannot be longer than {MAX_FILENAME_LENGTH} characters",
        )
    if not _FILENAME_RE.match(name):
        raise InvalidFilenameError(
            filename,
            reason="only letters, digits, hyphen and space are allowed",
        )

    return name


def is_valid_filename(filename: Optional[str]) -> bool:
    try:
        validate_filename(filename)
    except InvalidFilenameError:
        return False
    return True


def is_valid_cid(cid: str) -> bool:
    """
    Check CID format (CIDv0 or base32 CIDv1).

    Args:
        cid: Content identifier

    Returns:
        True if the format is recognized
    """
    if not cid or not isinstance(cid, str):
        return False
    return bool(_CID_V0_RE.match(cid) or _CID_V1_RE.match(cid))


def is_valid_address(address: str) -> bool:
    return isinstance(address, str) and bool(_ADDRESS_RE.match(address))


def validate_address(address: str, field_name: str = "address") -> str:
    """
    Validate Ethereum address format.

    Args:
        address: Address to validate
        field_name: Field name for error messages

    Returns:
        The address unchanged

    Raises:
        ValueError: If address is not 0x followed by 40 hex characters
    """
    if not is_valid_address(address):
        raise ValueError(f"{field_name} must be 0x followed by 40 hex characters")
    return address
