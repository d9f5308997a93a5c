"""String literal escaping shared by catalog writing and pattern extraction.

Generated catalogs hold single-quoted Python string literals. The pattern
extraction strategy un-escapes its captures with the same rules, so running
extraction over a previously generated literal reproduces the exact text
that was written.

Escaping (``escape``):
    backslash -> ``\\\\``, ``'`` -> ``\\'``, newline -> ``\\n``,
    carriage return -> ``\\r``, tab -> ``\\t``, other C0 controls and DEL
    -> ``\\xNN``, lone surrogates -> ``\\uNNNN``. Everything else, including ``{name}`` placeholders and
    non-ASCII text, is written as is.

Un-escaping (``unescape``) is the inverse and additionally accepts ``\\"``,
``\\uNNNN`` and ``\\UNNNNNNNN``. Unknown escapes keep their backslash.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

__all__ = ["escape", "quote", "unescape"]

_SIMPLE_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_SIMPLE_UNESCAPES: dict[str, str] = {
    "\\": "\\",
    "'": "'",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Escape letter -> number of hex digits that follow it.
_HEX_ESCAPES: dict[str, int] = {"x": 2, "u": 4, "U": 8}

_HEXDIGITS = frozenset("0123456789abcdefABCDEF")


def escape(value: str) -> str:
    """Escape text for use inside a single-quoted literal.

    Args:
        value: Raw text

    Returns:
        Literal body without the surrounding quotes
    """
    out: list[str] = []
    for char in value:
        simple = _SIMPLE_ESCAPES.get(char)
        if simple is not None:
            out.append(simple)
        elif char < " " or char == "\x7f":
            out.append(f"\\x{ord(char):02x}")
        elif "\ud800" <= char <= "\udfff":
            # Lone surrogates cannot be encoded as UTF-8 on disk.
            out.append(f"\\u{ord(char):04x}")
        else:
            out.append(char)
    return "".join(out)


def quote(value: str) -> str:
    """Render text as a complete single-quoted literal."""
    return f"'{escape(value)}'"


def unescape(value: str) -> str:
    """Reverse ``escape`` on a captured literal body.

    Args:
        value: Literal body as it appears between the quotes

    Returns:
        Decoded text
    """
    if "\\" not in value:
        return value

    out: list[str] = []
    i = 0
    length = len(value)
    while i < length:
        char = value[i]
        if char != "\\" or i == length - 1:
            out.append(char)
            i += 1
            continue

        nxt = value[i + 1]
        simple = _SIMPLE_UNESCAPES.get(nxt)
        if simple is not None:
            out.append(simple)
            i += 2
            continue

        width = _HEX_ESCAPES.get(nxt)
        if width is not None:
            digits = value[i + 2 : i + 2 + width]
            if len(digits) == width and all(d in _HEXDIGITS for d in digits):
                code_point = int(digits, 16)
                if code_point <= 0x10FFFF:
                    out.append(chr(code_point))
                    i += 2 + width
                    continue

        # Unknown escape: keep the backslash and let the next char be read as is.
        out.append("\\")
        i += 1
    return "".join(out)
