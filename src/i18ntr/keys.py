"""Content-derived catalog keys.

A key is ``h_`` followed by the first 12 hex characters of the MD5 digest
of the text's UTF-8 encoding. Lone surrogates have no UTF-8 form and are
encoded with ``surrogatepass``, so every ``str`` has a key. The derivation
is shared with generators written in other languages, so the algorithm
and the truncation length are part of the catalog format and must never change.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import hashlib
import re

from i18ntr.constants import KEY_HEX_LENGTH, KEY_PREFIX

__all__ = ["is_hash_key", "to_hash_key"]

_KEY_PATTERN = re.compile(rf"{re.escape(KEY_PREFIX)}[0-9a-f]{{{KEY_HEX_LENGTH}}}")


def to_hash_key(text: str) -> str:
    """Derive the catalog key of a text.

    Args:
        text: Source text exactly as extracted

    Returns:
        Key such as ``'h_5d41402abc4b'``

    Example:
        >>> to_hash_key("hello")
        'h_5d41402abc4b'
    """
    digest = hashlib.md5(text.encode("utf-8", "surrogatepass"), usedforsecurity=False).hexdigest()
    return f"{KEY_PREFIX}{digest[:KEY_HEX_LENGTH]}"


def is_hash_key(value: str) -> bool:
    """Check whether a string has the shape of a derived key."""
    return _KEY_PATTERN.fullmatch(value) is not None
