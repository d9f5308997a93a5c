"""Locale utilities backed by Babel.

Centralizes locale identifier handling: BCP-47 to POSIX normalization,
cached Babel lookups for display labels, and host-locale detection used
by the runtime context.

Python 3.12+.
"""

from __future__ import annotations

import functools
import logging
import os
from typing import TYPE_CHECKING

from babel import Locale, UnknownLocaleError

if TYPE_CHECKING:
    from i18ntr.types import LocaleCode

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "locale_display_name",
    "normalize_locale",
    "split_locale",
]

logger = logging.getLogger(__name__)


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to the POSIX form Babel expects.

    Only separators change; case is preserved because catalog tables are
    keyed by the identifier exactly as configured (``zh_CN``).

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("zh_CN")
        'zh_CN'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    return Locale.parse(normalize_locale(locale_code))


def split_locale(locale_code: LocaleCode) -> tuple[str, str | None]:
    """Split a locale identifier into (language, territory).

    Babel is consulted first so that scripts and variants are skipped
    correctly (``zh_Hans_CN`` -> ``('zh', 'CN')``); identifiers Babel does
    not know are split on the separator.
    """
    try:
        parsed = get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError, TypeError):
        parts = normalize_locale(locale_code).split("_")
        territory = parts[-1] if len(parts) > 1 else None
        return parts[0].lower(), territory
    return parsed.language, parsed.territory


def locale_display_name(locale_code: LocaleCode) -> str | None:
    """Native display name of a locale, e.g. ``'English (United States)'``.

    Returns:
        Name in the locale's own language, or None if Babel does not know it
    """
    try:
        parsed = get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError, TypeError):
        logger.debug("No Babel display name for locale %r", locale_code)
        return None
    return parsed.get_display_name(parsed)


def get_system_locale() -> str:
    """Detect the host locale from the OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL, LC_MESSAGES, LANG environment variables

    Filters out "C" and "POSIX" pseudo-locales and strips encoding suffixes.

    Returns:
        Locale code in POSIX format, or "en_US" if nothing is set
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
    except ValueError:
        system_locale = None
    if system_locale and system_locale not in ("C", "POSIX"):
        return normalize_locale(system_locale.split(".")[0])

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in ("C", "POSIX"):
            return normalize_locale(value.split(".")[0])

    return "en_US"
