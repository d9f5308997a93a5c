"""Catalog storage package.

Submodules:
    literals       - single-quoted literal escaping shared with extraction
    store          - catalog codecs, load/render/write, staged atomic writes
    runtime_config - generated runtime configuration module

Python 3.12+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from i18ntr.catalog.literals import escape, quote, unescape
from i18ntr.catalog.runtime_config import relative_module, render_runtime_config
from i18ntr.catalog.store import (
    ArtifactWriter,
    CatalogCodec,
    JsonCodec,
    PythonModuleCodec,
    catalog_format_for,
    load_catalog,
    render_catalog,
    write_catalog,
    write_text_atomic,
)

__all__ = [
    # Loading and writing
    "load_catalog",
    "render_catalog",
    "write_catalog",
    "write_text_atomic",
    "ArtifactWriter",
    # Codecs
    "CatalogCodec",
    "JsonCodec",
    "PythonModuleCodec",
    "catalog_format_for",
    # Runtime configuration artifact
    "relative_module",
    "render_runtime_config",
    # Literal escaping
    "escape",
    "quote",
    "unescape",
]
