"""i18ntr - Content-addressed translation catalogs for ``tr()`` call sites.

Extracts the literal texts passed to ``tr(...)`` across a project, derives a
stable key for each from its content, and reconciles the per-locale catalogs:
new texts get source placeholders, declared migrations carry translations
across text edits, and unused entries can be pruned.

Public API:
    reconcile - Run a full extract/migrate/merge/prune/write cycle
    load_config - Locate and validate the configuration
    scan_project - Extract marker texts from a project tree
    apply_migrations - Re-address catalog entries after text edits
    to_hash_key - Derive the catalog key of a text
    I18n - Runtime translation context for generated configurations

Exceptions:
    ConfigurationError - Invalid configuration or unreadable input (exit 1)
    DataIntegrityError - Text changed under a key, migration conflict (exit 2)

Submodules:
    i18ntr.catalog - Catalog codecs, atomic writes, runtime configuration artifact
    i18ntr.extraction - Strategy chain and project scanner
    i18ntr.runtime - Runtime context, language modes, preference stores
"""

from .config import I18nTrConfig, LocaleSpec, MigrationRule, load_config, parse_config
from .errors import CatalogFormatError, ConfigurationError, ExtractionError, I18nTrError
from .extraction import ExtractionReport, scan_project
from .integrity import DataIntegrityError, MigrationConflictError, TextChangedError
from .keys import is_hash_key, to_hash_key
from .migration import MigrationResult, apply_migrations
from .reconcile import MissingReport, ReconcileResult, reconcile
from .runtime import I18n, I18nLangDef, I18nRuntimeConfig, LanguageMode

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("i18ntr")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CatalogFormatError",
    "ConfigurationError",
    "DataIntegrityError",
    "ExtractionError",
    "ExtractionReport",
    "I18n",
    "I18nLangDef",
    "I18nRuntimeConfig",
    "I18nTrConfig",
    "I18nTrError",
    "LanguageMode",
    "LocaleSpec",
    "MigrationConflictError",
    "MigrationResult",
    "MigrationRule",
    "MissingReport",
    "ReconcileResult",
    "TextChangedError",
    "__version__",
    "apply_migrations",
    "is_hash_key",
    "load_config",
    "parse_config",
    "reconcile",
    "scan_project",
    "to_hash_key",
]
