"""Typed configuration schema and loaders.

Configuration is read once, validated completely, and handed to the rest
of the package as frozen dataclasses. Nothing downstream looks fields up by
name in raw mappings.

Sources, in priority order:
    1. An explicit file (``--config``): YAML, JSON or TOML
    2. ``[tool.i18ntr]`` in ``pyproject.toml`` of the working directory
    3. ``i18ntr.yaml`` in the working directory

Relative paths are resolved against the directory holding the
configuration file.

Python 3.12+. Uses PyYAML for YAML files.
"""

from __future__ import annotations

import json
import keyword
import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from i18ntr.catalog.runtime_config import relative_module
from i18ntr.catalog.store import catalog_format_for
from i18ntr.constants import (
    CONFIG_SECTION_NAMES,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CONFIG_FILE_NAME,
    DEFAULT_EXTENSIONS,
    DEFAULT_FALLBACK_LOCALE,
    DEFAULT_I18N_DIR,
    DEFAULT_MARKER,
    DEFAULT_MAX_WORKERS,
    DEFAULT_PROJECT_DIR,
    DEFAULT_SOURCE_FILE_NAME,
    DEFAULT_SOURCE_LOCALE,
    DEFAULT_SYSTEM_LABEL,
    SOURCE_TABLE_NAME,
)
from i18ntr.enums import CatalogFormat
from i18ntr.errors import ConfigurationError
from i18ntr.locale_utils import locale_display_name
from i18ntr.types import LocaleCode, TableName

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Schema
    "I18nTrConfig",
    "LocaleSpec",
    "MigrationRule",
    # Loaders
    "load_config",
    "load_config_file",
    "parse_config",
    # Help text
    "EXAMPLE_CONFIG",
]

logger = logging.getLogger(__name__)

EXAMPLE_CONFIG = """\
Add a [tool.i18ntr] table to pyproject.toml:

    [tool.i18ntr]
    project_dir = "src"
    i18n_dir = "src/app/i18n"
    source_locale = "zh_CN"
    fallback_locale = "en_US"

    [[tool.i18ntr.langs]]
    locale = "zh_CN"
    file = "zh_cn.py"
    map = "zhCN"
    label = "简体中文"

    [[tool.i18ntr.langs]]
    locale = "en_US"
    file = "en_us.py"
    map = "enUS"

or create i18ntr.yaml with the same fields, or pass --config <file>."""

_TRUE_WORDS = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "n", "off"})

_MIGRATION_FROM_KEYS = ("from", "old", "source")
_MIGRATION_TO_KEYS = ("to", "new", "target")


# ============================================================================
# SCHEMA
# ============================================================================


@dataclass(frozen=True, slots=True)
class LocaleSpec:
    """One configured locale.

    Attributes:
        locale: Locale identifier (e.g., 'en_US')
        file: Catalog artifact path
        table: Table identifier inside generated modules (e.g., 'enUS')
        label: Human-readable label shown by language pickers
    """

    locale: LocaleCode
    file: Path
    table: TableName
    label: str


@dataclass(frozen=True, slots=True)
class MigrationRule:
    """Declared rename of source text.

    The catalog entry of ``from_text`` is re-addressed under the key of
    ``to_text`` and keeps its translations.
    """

    from_text: str
    to_text: str


@dataclass(frozen=True, slots=True)
class I18nTrConfig:
    """Validated configuration for one reconciliation run.

    Attributes:
        project_dir: Root of the tree scanned for marker calls
        i18n_dir: Catalog storage directory (never scanned)
        source_file: Canonical source catalog artifact
        config_file: Generated runtime configuration module
        source_locale: Locale the source text is written in
        fallback_locale: Locale used when the active one lacks a key
        system_label: Label of the "follow host locale" language mode
        langs: Configured locales, in display order
        prune_unused: Remove catalog entries no longer extracted
        migrations: Rename rules, applied in order
        marker: Name of the translation marker function
        extensions: File suffixes scanned for marker calls
        max_workers: Bound of the extraction thread pool
        origin: Where this configuration was read from
    """

    project_dir: Path
    i18n_dir: Path
    source_file: Path
    config_file: Path
    langs: tuple[LocaleSpec, ...]
    source_locale: LocaleCode = DEFAULT_SOURCE_LOCALE
    fallback_locale: LocaleCode = DEFAULT_FALLBACK_LOCALE
    system_label: str = DEFAULT_SYSTEM_LABEL
    prune_unused: bool = False
    migrations: tuple[MigrationRule, ...] = ()
    marker: str = DEFAULT_MARKER
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    max_workers: int = DEFAULT_MAX_WORKERS
    origin: str = field(default="<memory>", compare=False)

    @property
    def source_table(self) -> TableName:
        """Table identifier of the canonical source catalog."""
        return SOURCE_TABLE_NAME

    @property
    def target_langs(self) -> tuple[LocaleSpec, ...]:
        """Locales other than the source locale (translation targets)."""
        return tuple(lang for lang in self.langs if lang.locale != self.source_locale)


# ============================================================================
# FIELD COERCION
# ============================================================================


def _get_str(data: Mapping[str, Any], name: str, default: str, *, source: str) -> str:
    value = data.get(name)
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        msg = f"'{name}' must be a string, got {type(value).__name__}"
        raise ConfigurationError(msg, source=source)
    text = str(value).strip()
    return text or default


def _coerce_bool(value: object, *, name: str, default: bool, source: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    msg = f"'{name}' must be a boolean, got {value!r}"
    raise ConfigurationError(msg, source=source)


def _resolve(base_dir: Path | None, value: str) -> Path:
    path = Path(value)
    if base_dir is not None and not path.is_absolute():
        return base_dir / path
    return path


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _parse_extensions(value: object, *, source: str) -> tuple[str, ...]:
    if value is None:
        return DEFAULT_EXTENSIONS
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not value:
        msg = "'extensions' must be a non-empty list of file suffixes"
        raise ConfigurationError(msg, source=source)
    suffixes: list[str] = []
    for item in value:
        suffix = str(item).strip().lower()
        if not suffix:
            msg = "'extensions' entries must not be empty"
            raise ConfigurationError(msg, source=source)
        if not suffix.startswith("."):
            suffix = f".{suffix}"
        suffixes.append(suffix)
    return tuple(dict.fromkeys(suffixes))


def _parse_max_workers(value: object, *, source: str) -> int:
    if value is None:
        return DEFAULT_MAX_WORKERS
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"'max_workers' must be a positive integer, got {value!r}"
        raise ConfigurationError(msg, source=source)
    return value


def _parse_migrations(value: object, *, source: str) -> tuple[MigrationRule, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        msg = "'migrations' must be a list"
        raise ConfigurationError(msg, source=source)

    rules: list[MigrationRule] = []
    for item in value:
        if not isinstance(item, Mapping):
            msg = f"'migrations' items must be mappings with from/to: {item!r}"
            raise ConfigurationError(msg, source=source)
        from_text = next((str(item[k]) for k in _MIGRATION_FROM_KEYS if item.get(k) is not None), "")
        to_text = next((str(item[k]) for k in _MIGRATION_TO_KEYS if item.get(k) is not None), "")
        from_text = from_text.strip()
        to_text = to_text.strip()
        if not from_text or not to_text:
            msg = f"'migrations' items must contain from/to: {dict(item)!r}"
            raise ConfigurationError(msg, source=source)
        if from_text == to_text:
            msg = f"Migration from and to are identical: {from_text!r}"
            raise ConfigurationError(msg, source=source)
        rules.append(MigrationRule(from_text=from_text, to_text=to_text))
    return tuple(rules)


def _parse_lang(
    item: object, *, i18n_dir: Path, base_dir: Path | None, source: str
) -> LocaleSpec:
    if not isinstance(item, Mapping):
        msg = f"'langs' items must be mappings: {item!r}"
        raise ConfigurationError(msg, source=source)

    locale = str(item.get("locale") or "").strip()
    file = str(item.get("file") or "").strip()
    if not locale or not file:
        msg = f"'langs' items must contain locale and file: {dict(item)!r}"
        raise ConfigurationError(msg, source=source)

    table = str(item.get("map") or item.get("table") or "").strip() or locale.replace("-", "_")
    if not _is_identifier(table):
        msg = f"Table name {table!r} for locale {locale!r} is not a valid identifier; set 'map'"
        raise ConfigurationError(msg, source=source)
    if table == SOURCE_TABLE_NAME:
        msg = f"Table name {table!r} is reserved for the source catalog"
        raise ConfigurationError(msg, source=source)

    # Bare file names live in the catalog directory.
    if "/" in file or "\\" in file:
        file_path = _resolve(base_dir, file)
    else:
        file_path = i18n_dir / file
    catalog_format_for(file_path)

    label = str(item.get("label") or "").strip()
    if not label:
        label = locale_display_name(locale) or locale

    return LocaleSpec(locale=locale, file=file_path, table=table, label=label)


def _check_unique(langs: tuple[LocaleSpec, ...], *, reserved: tuple[Path, ...], source: str) -> None:
    seen_locales: set[str] = set()
    seen_tables: set[str] = set()
    seen_files: set[Path] = {path.absolute() for path in reserved}
    for lang in langs:
        if lang.locale in seen_locales:
            msg = f"Duplicate locale: {lang.locale}"
            raise ConfigurationError(msg, source=source)
        if lang.table in seen_tables:
            msg = f"Duplicate map: {lang.table}"
            raise ConfigurationError(msg, source=source)
        file = lang.file.absolute()
        if file in seen_files:
            msg = f"Duplicate or reserved catalog file: {lang.file}"
            raise ConfigurationError(msg, source=source)
        seen_locales.add(lang.locale)
        seen_tables.add(lang.table)
        seen_files.add(file)


# ============================================================================
# PARSING
# ============================================================================


def parse_config(
    data: Mapping[str, Any],
    *,
    source: str = "<memory>",
    base_dir: Path | None = None,
) -> I18nTrConfig:
    """Validate a raw configuration mapping.

    Args:
        data: Plain mapping (already unwrapped from any ``i18ntr`` section)
        source: Origin used in error messages
        base_dir: Directory relative paths are resolved against

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: On any missing, malformed or conflicting field
    """
    project_dir = _resolve(
        base_dir,
        _get_str(data, "project_dir", "", source=source)
        or _get_str(data, "project_lib", DEFAULT_PROJECT_DIR, source=source),
    )
    i18n_dir_raw = _get_str(data, "i18n_dir", DEFAULT_I18N_DIR, source=source)
    i18n_dir = _resolve(base_dir, i18n_dir_raw)
    source_file = _resolve(
        base_dir,
        _get_str(data, "source_file", f"{i18n_dir_raw}/{DEFAULT_SOURCE_FILE_NAME}", source=source),
    )
    config_file = _resolve(
        base_dir,
        _get_str(data, "config_file", f"{i18n_dir_raw}/{DEFAULT_CONFIG_FILE_NAME}", source=source),
    )
    catalog_format_for(source_file)
    if config_file.suffix != ".py":
        msg = f"'config_file' must be a Python module (.py), got {config_file}"
        raise ConfigurationError(msg, source=source)

    marker = _get_str(data, "marker", DEFAULT_MARKER, source=source)
    if not _is_identifier(marker):
        msg = f"'marker' must be a function name, got {marker!r}"
        raise ConfigurationError(msg, source=source)

    langs_raw = data.get("langs")
    if not isinstance(langs_raw, list) or not langs_raw:
        msg = "'langs' must be a non-empty list"
        raise ConfigurationError(msg, source=source)
    langs = tuple(
        _parse_lang(item, i18n_dir=i18n_dir, base_dir=base_dir, source=source) for item in langs_raw
    )
    _check_unique(langs, reserved=(source_file, config_file), source=source)
    for path in (source_file, *(lang.file for lang in langs)):
        if catalog_format_for(path) is CatalogFormat.PYTHON:
            try:
                relative_module(config_file.parent, path)
            except ConfigurationError as e:
                raise ConfigurationError(str(e), source=source) from e

    config = I18nTrConfig(
        project_dir=project_dir,
        i18n_dir=i18n_dir,
        source_file=source_file,
        config_file=config_file,
        langs=langs,
        source_locale=_get_str(data, "source_locale", DEFAULT_SOURCE_LOCALE, source=source),
        fallback_locale=_get_str(data, "fallback_locale", DEFAULT_FALLBACK_LOCALE, source=source),
        system_label=_get_str(data, "system_label", DEFAULT_SYSTEM_LABEL, source=source),
        prune_unused=_coerce_bool(
            data.get("prune_unused"), name="prune_unused", default=False, source=source
        ),
        migrations=_parse_migrations(data.get("migrations"), source=source),
        marker=marker,
        extensions=_parse_extensions(data.get("extensions"), source=source),
        max_workers=_parse_max_workers(data.get("max_workers"), source=source),
        origin=source,
    )
    logger.debug(
        "Loaded configuration from %s: %d locale(s), %d migration(s)",
        source,
        len(config.langs),
        len(config.migrations),
    )
    return config


def _unwrap_section(data: object, *, source: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        msg = "Top level of the configuration must be a mapping"
        raise ConfigurationError(msg, source=source)
    for name in CONFIG_SECTION_NAMES:
        section = data.get(name)
        if isinstance(section, Mapping):
            return section
    return data


def _read_structured(path: Path) -> object:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"Cannot read configuration file: {e}"
        raise ConfigurationError(msg, source=str(path)) from e

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix == ".toml":
            return tomllib.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        msg = f"Cannot parse configuration file: {e}"
        raise ConfigurationError(msg, source=str(path)) from e


def load_config_file(path: str | Path) -> I18nTrConfig:
    """Load configuration from a YAML, JSON or TOML file.

    A ``pyproject.toml`` is read from its ``[tool.i18ntr]`` table; any other
    file may hold the fields at top level or under an ``i18ntr`` key.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    file_path = Path(path)
    if not file_path.is_file():
        msg = f"Configuration file not found: {file_path}\n\n{EXAMPLE_CONFIG}"
        raise ConfigurationError(msg)

    data = _read_structured(file_path)
    if file_path.name == "pyproject.toml":
        source = f"{file_path} -> [tool.i18ntr]"
        tool = data.get("tool", {}) if isinstance(data, Mapping) else {}
        section = tool.get("i18ntr") if isinstance(tool, Mapping) else None
        if not isinstance(section, Mapping):
            msg = f"No [tool.i18ntr] table\n\n{EXAMPLE_CONFIG}"
            raise ConfigurationError(msg, source=str(file_path))
        return parse_config(section, source=source, base_dir=file_path.parent)

    source = str(file_path)
    return parse_config(_unwrap_section(data, source=source), source=source, base_dir=file_path.parent)


def load_config(config_path: str | Path | None = None, *, cwd: str | Path | None = None) -> I18nTrConfig:
    """Locate and load the configuration for a run.

    Args:
        config_path: Explicit configuration file (takes priority)
        cwd: Directory searched for pyproject.toml / i18ntr.yaml
            (defaults to the process working directory)

    Raises:
        ConfigurationError: If no configuration is found or it is invalid
    """
    if config_path is not None and str(config_path).strip():
        return load_config_file(config_path)

    base = Path(cwd) if cwd is not None else Path.cwd()
    pyproject = base / "pyproject.toml"
    if pyproject.is_file():
        data = _read_structured(pyproject)
        tool = data.get("tool", {}) if isinstance(data, Mapping) else {}
        if isinstance(tool, Mapping) and isinstance(tool.get("i18ntr"), Mapping):
            return load_config_file(pyproject)

    fallback = base / DEFAULT_CONFIG_FILE
    if fallback.is_file():
        return load_config_file(fallback)

    msg = f"No configuration found in {base} and no --config given\n\n{EXAMPLE_CONFIG}"
    raise ConfigurationError(msg)
