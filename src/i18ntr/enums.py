"""Enumerations for i18ntr type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.12+.
"""

from enum import IntEnum, StrEnum


class ExtractionTier(StrEnum):
    """Strategy that produced the texts of a scanned file.

    StrEnum provides automatic string conversion: str(ExtractionTier.SYNTAX) == "syntax"
    """

    SYNTAX = "syntax"
    """Structural parse of the file with the ast module."""

    PATTERN = "pattern"
    """Regular-expression fallback over the raw file contents."""


class CatalogFormat(StrEnum):
    """On-disk serialization of a catalog artifact."""

    PYTHON = "python"
    """Generated module: ``table: dict[str, str] = {...}``"""

    JSON = "json"
    """Flat JSON object of key -> text."""


class MigrationOutcome(StrEnum):
    """What happened to a single migration rule."""

    APPLIED = "applied"
    """Entry moved from the old key to the new key."""

    STALE = "stale"
    """Old key holds different text than the rule expects; rule skipped."""

    NO_OP = "no_op"
    """Neither key is known to the source catalog; rule skipped."""


class ExitStatus(IntEnum):
    """Process exit statuses of the command line."""

    OK = 0
    CONFIGURATION_ERROR = 1
    INTEGRITY_CONFLICT = 2


__all__ = [
    "CatalogFormat",
    "ExitStatus",
    "ExtractionTier",
    "MigrationOutcome",
]
