"""
medisave utilities.

This module provides utility functions for the package.
"""

from medisave.utils.encoding import decode_content, encode_content
from medisave.utils.logging import (
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from medisave.utils.validation import (
    is_valid_address,
    is_valid_cid,
    is_valid_filename,
    validate_address,
    validate_filename,
)

__all__ = [
    # Encoding
    "encode_content",
    "decode_content",
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    # Validation
    "validate_filename",
    "is_valid_filename",
    "is_valid_cid",
    "is_valid_address",
    "validate_address",
]
