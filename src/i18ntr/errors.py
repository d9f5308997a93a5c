"""Exception hierarchy for configuration and input problems.

These errors mean the run could not start or could not read its inputs.
They are reported before any catalog is written and map to exit status 1.
Data-integrity conflicts live in ``i18ntr.integrity`` and are a separate
error domain.

Hierarchy:
    I18nTrError
    └─ ConfigurationError
       ├─ CatalogFormatError
       └─ ExtractionError

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

__all__ = [
    "CatalogFormatError",
    "ConfigurationError",
    "ExtractionError",
    "I18nTrError",
]


class I18nTrError(Exception):
    """Base exception for all i18ntr input errors."""


class ConfigurationError(I18nTrError):
    """Invalid or missing configuration.

    Examples:
    - Missing required field
    - Empty ``langs`` list
    - Duplicate locale identifiers, catalog files or table names

    Attributes:
        source: Where the configuration was read from (file path or section)
    """

    def __init__(self, message: str, *, source: str | None = None) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description
            source: Origin of the offending configuration (optional)
        """
        if source:
            message = f"[{source}] {message}"
        super().__init__(message)
        self.source = source


class CatalogFormatError(ConfigurationError):
    """An existing catalog artifact cannot be read back.

    A missing catalog is not an error (first run); a present but malformed
    one is, because treating it as empty would drop every translation in it.

    Attributes:
        path: Catalog file that failed to load
    """

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message, source=path)
        self.path = path


class ExtractionError(ConfigurationError):
    """The project tree could not be scanned.

    Raised for a missing or unreadable project directory and for individual
    files that cannot be read or decoded.
    """
