"""
Document content encoding.

Serialized spreadsheet content is stored URI-component encoded, with the
same unreserved set as JavaScript's ``encodeURIComponent`` so records
stay readable by the browser editor.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_content(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def decode_content(encoded: str) -> str:
    return unquote(encoded)
