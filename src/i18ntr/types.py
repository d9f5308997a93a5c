"""Type aliases for the catalog domain.

Provides semantic type aliases used throughout the package and by user
code when annotating calls into the reconciliation API.

Python 3.12+. Zero external dependencies.
"""

__all__ = [
    "Catalog",
    "CatalogKey",
    "LocaleCode",
    "SourceText",
    "TableName",
]

type CatalogKey = str
"""Content-derived catalog key (e.g., 'h_5d41402abc4b')."""

type SourceText = str
"""Literal text found at a marker call, after normalization."""

type LocaleCode = str
"""Locale identifier as written in the configuration (e.g., 'zh_CN', 'en-US')."""

type TableName = str
"""Identifier of a catalog table inside generated modules (e.g., 'enUS')."""

type Catalog = dict[CatalogKey, str]
"""Mutable key -> text mapping loaded from or written to a catalog artifact."""
