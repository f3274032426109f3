"""Content hashing and default key derivation."""

import hashlib
import json
from typing import Any, Callable

ContentHash = Callable[[str], str]
"""Content hash: (text) -> short identifier. Must be deterministic."""

ProvideKey = Callable[[Any], str]
"""Key derivation: (value) -> record key."""


def md5_hex(text: str) -> str:
    """MD5 hex digest of the UTF-8 encoding of text."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def provide_key(value: Any) -> str:
    """Default record key: the content hash of the JSON-encoded value.

    Keys are sorted before hashing so equal mappings get equal keys.
    Raises TypeError for values that are not JSON serializable.
    """
    return md5_hex(json.dumps(value, sort_keys=True))
