"""Candidate text filtering and normalization.

Both extraction tiers pass every captured literal through the same
functions, so a file yields the same texts whichever tier handled it.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import re

from i18ntr.constants import MIN_TEXT_CODE_POINTS

__all__ = ["normalize_multiline_text", "should_treat_as_text"]

_DIGITS_ONLY = re.compile(r"\d+")
_URL_PREFIX = re.compile(r"(?:https?:)?//")


def should_treat_as_text(text: str) -> bool:
    """Decide whether a literal is natural-language text worth cataloging.

    Any language qualifies. Rejected: empty or whitespace-only strings,
    strings shorter than two code points, digit-only strings, URLs, and
    strings with lone surrogates (not encodable as UTF-8).

    Example:
        >>> should_treat_as_text("点击")
        True
        >>> should_treat_as_text("1234")
        False
        >>> should_treat_as_text("see www.example.com")
        False
    """
    stripped = text.strip()
    if not stripped:
        return False
    try:
        stripped.encode("utf-8")
    except UnicodeEncodeError:
        return False
    if len(stripped) < MIN_TEXT_CODE_POINTS:
        return False
    if _DIGITS_ONLY.fullmatch(stripped):
        return False
    if _URL_PREFIX.match(stripped):
        return False
    return "www." not in stripped


def normalize_multiline_text(value: str) -> str:
    """Normalize whitespace of a literal taken from a syntax tree.

    Multi-line values have every line trimmed and leading/trailing blank
    lines dropped, so indentation inside triple-quoted literals does not
    leak into the catalog. Single-line values are trimmed.

    Example:
        >>> normalize_multiline_text('''
        ...     First line
        ...     Second line
        ... ''')
        'First line\\nSecond line'
    """
    if "\n" not in value:
        return value.strip()
    lines = [line.strip() for line in value.split("\n")]
    start = 0
    end = len(lines)
    while start < end and not lines[start]:
        start += 1
    while end > start and not lines[end - 1]:
        end -= 1
    return "\n".join(lines[start:end])
