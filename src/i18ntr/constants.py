"""Shared constants for i18ntr.

Centralizes the values that more than one subsystem depends on so that
the extractor, the catalog store and the configuration loader agree on
them without importing each other.

Constants are grouped by domain:
- Keys: format of content-derived catalog keys
- Extraction: marker name, scanned suffixes, worker pool bound
- Catalogs: default locations and generated-table identifiers
- Configuration: defaults applied when a field is absent

Python 3.12+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Keys
    "KEY_PREFIX",
    "KEY_HEX_LENGTH",
    # Extraction
    "DEFAULT_MARKER",
    "DEFAULT_EXTENSIONS",
    "PYTHON_SOURCE_SUFFIXES",
    "DEFAULT_MAX_WORKERS",
    "MIN_TEXT_CODE_POINTS",
    # Catalogs
    "SOURCE_TABLE_NAME",
    "RUNTIME_CONFIG_NAME",
    "GENERATED_HEADER",
    # Configuration
    "DEFAULT_PROJECT_DIR",
    "DEFAULT_I18N_DIR",
    "DEFAULT_SOURCE_FILE_NAME",
    "DEFAULT_CONFIG_FILE_NAME",
    "DEFAULT_SOURCE_LOCALE",
    "DEFAULT_FALLBACK_LOCALE",
    "DEFAULT_SYSTEM_LABEL",
    "CONFIG_SECTION_NAMES",
    "DEFAULT_CONFIG_FILE",
]

# ============================================================================
# KEYS
# ============================================================================

# Keys look like "h_0123456789ab". The prefix keeps them valid identifiers in
# every host language that may consume the generated catalogs.
KEY_PREFIX: str = "h_"

# Number of leading hex characters of the MD5 digest kept in a key.
# Shared with other generators of the same catalogs; never change it.
KEY_HEX_LENGTH: int = 12

# ============================================================================
# EXTRACTION
# ============================================================================

DEFAULT_MARKER: str = "tr"

DEFAULT_EXTENSIONS: tuple[str, ...] = (".py",)

# Suffixes the structural (ast) strategy accepts. Everything else goes
# straight to the pattern strategy.
PYTHON_SOURCE_SUFFIXES: frozenset[str] = frozenset({".py", ".pyi", ".pyw"})

# Upper bound for the file-reading thread pool.
DEFAULT_MAX_WORKERS: int = 8

# Literals shorter than this (in code points, after trimming) are not text.
MIN_TEXT_CODE_POINTS: int = 2

# ============================================================================
# CATALOGS
# ============================================================================

# Table name of the canonical source catalog in generated Python modules.
SOURCE_TABLE_NAME: str = "i18n_source_text"

# Name exported by the generated runtime configuration module.
RUNTIME_CONFIG_NAME: str = "i18n_config"

GENERATED_HEADER: str = (
    "This file is automatically generated by i18ntr. "
    "DO NOT EDIT, all your changes would be lost."
)

# ============================================================================
# CONFIGURATION
# ============================================================================

DEFAULT_PROJECT_DIR: str = "src"
DEFAULT_I18N_DIR: str = "i18n"
DEFAULT_SOURCE_FILE_NAME: str = "_source_text.py"
DEFAULT_CONFIG_FILE_NAME: str = "i18n_config.py"
DEFAULT_SOURCE_LOCALE: str = "zh"
DEFAULT_FALLBACK_LOCALE: str = "en"
DEFAULT_SYSTEM_LABEL: str = "跟随系统"

# Top-level wrapper keys accepted in configuration files.
CONFIG_SECTION_NAMES: tuple[str, ...] = ("i18ntr", "i18n_tr")

# Looked up in the working directory when neither --config nor a
# [tool.i18ntr] table in pyproject.toml is present.
DEFAULT_CONFIG_FILE: str = "i18ntr.yaml"
