"""Runtime translation context.

Consumes the generated runtime configuration module and translates source
text at run time:

    from app.i18n.i18n_config import i18n_config
    from i18ntr.runtime import I18n

    i18n = I18n(i18n_config)
    i18n.init()
    i18n.tr("你好，{name}", {"name": "Ada"})

``tr`` looks the source text up in the canonical source table to find its
key, then tries the active locale, then the fallback locale, and finally
returns the input unchanged. There is no process-wide instance; callers
own their ``I18n`` object.

Python 3.12+. Uses Babel for host-locale matching.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

from i18ntr.catalog.store import JsonCodec
from i18ntr.constants import DEFAULT_SYSTEM_LABEL
from i18ntr.errors import CatalogFormatError
from i18ntr.locale_utils import get_system_locale, normalize_locale, split_locale
from i18ntr.types import CatalogKey, LocaleCode

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Generated configuration types
    "I18nLangDef",
    "I18nRuntimeConfig",
    "load_table",
    # Language modes
    "LanguageMode",
    "SYSTEM_MODE_NAME",
    # Preferences
    "PreferenceStore",
    "MemoryPreferenceStore",
    "JsonPreferenceStore",
    # Context
    "I18n",
]

logger = logging.getLogger(__name__)

SYSTEM_MODE_NAME = "system"
"""Persisted name of the "follow host locale" mode."""

PREFERENCE_KEY = "i18n_language_mode"

type Listener = Callable[[LanguageMode], None]


# ============================================================================
# GENERATED CONFIGURATION TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class I18nLangDef:
    """One locale of the generated runtime configuration."""

    locale: LocaleCode
    label: str
    table: Mapping[CatalogKey, str]


@dataclass(frozen=True, slots=True)
class I18nRuntimeConfig:
    """Generated runtime configuration.

    Attributes:
        system_label: Label of the "follow host locale" mode
        source_locale: Locale the source text is written in
        fallback_locale: Locale consulted when the active one lacks a key
        source_text: Canonical key -> source text table
        langs: Locale definitions in display order
    """

    system_label: str
    source_locale: LocaleCode | None
    fallback_locale: LocaleCode | None
    source_text: Mapping[CatalogKey, str]
    langs: tuple[I18nLangDef, ...]


def load_table(path: str | Path) -> dict[CatalogKey, str]:
    """Load a JSON catalog for the generated configuration module.

    Raises:
        CatalogFormatError: If the file is missing or not a flat JSON object
    """
    file_path = Path(path)
    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read catalog: {e}"
        raise CatalogFormatError(msg, path=str(file_path)) from e
    return JsonCodec().parse(source, str(file_path), "")


# ============================================================================
# LANGUAGE MODES
# ============================================================================


@dataclass(frozen=True, slots=True)
class LanguageMode:
    """A selectable language mode: follow the host, or one fixed locale.

    Attributes:
        name: Persisted name ('system' or the locale identifier)
        label: Label shown by language pickers
        locale_key: Fixed locale, or None for the system mode
    """

    name: str
    label: str
    locale_key: LocaleCode | None = None

    @property
    def is_system(self) -> bool:
        """Check if this mode follows the host locale."""
        return self.locale_key is None

    @classmethod
    def system(cls, label: str = DEFAULT_SYSTEM_LABEL) -> LanguageMode:
        return cls(name=SYSTEM_MODE_NAME, label=label)

    @classmethod
    def for_lang(cls, lang: I18nLangDef) -> LanguageMode:
        return cls(name=lang.locale, label=lang.label, locale_key=lang.locale)

    @classmethod
    def from_name(
        cls, name: str | None, langs: tuple[I18nLangDef, ...], *, system_label: str
    ) -> LanguageMode:
        """Restore a mode from its persisted name.

        Empty names and 'system' select the system mode; an unknown locale
        selects the first configured locale.
        """
        if not name or name == SYSTEM_MODE_NAME:
            return cls.system(system_label)
        match = next((lang for lang in langs if lang.locale == name), langs[0])
        return cls.for_lang(match)


# ============================================================================
# PREFERENCES
# ============================================================================


class PreferenceStore(Protocol):
    """Persistence for the selected language mode."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


@dataclass(slots=True)
class MemoryPreferenceStore:
    """In-process preference store."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


@dataclass(slots=True)
class JsonPreferenceStore:
    """Preferences kept in a small JSON file.

    A missing or unreadable file reads as empty; writes replace the file.
    """

    path: Path

    def _read(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable preferences %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


# ============================================================================
# CONTEXT
# ============================================================================


class I18n:
    """Translation context bound to one runtime configuration.

    Thread-safe: mode switches and lookups are guarded by an RLock, and
    listeners run outside the lock.

    Args:
        config: Generated runtime configuration
        preferences: Store for the selected mode (defaults to in-memory)
        host_locale: Host locale override; detected from the OS if None
    """

    __slots__ = (
        "_config",
        "_fallback_locale",
        "_host_locale",
        "_listeners",
        "_locale_key",
        "_lock",
        "_mode",
        "_modes",
        "_preferences",
        "_source_locale",
        "_tables",
        "_text_to_key",
    )

    def __init__(
        self,
        config: I18nRuntimeConfig,
        *,
        preferences: PreferenceStore | None = None,
        host_locale: LocaleCode | None = None,
    ) -> None:
        if not config.langs:
            msg = "Runtime configuration has no locales"
            raise ValueError(msg)
        self._config = config
        self._preferences: PreferenceStore = preferences or MemoryPreferenceStore()
        self._host_locale = host_locale
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self._tables: dict[LocaleCode, Mapping[CatalogKey, str]] = {
            lang.locale: MappingProxyType(dict(lang.table)) for lang in config.langs
        }
        self._source_locale = self._pick_locale(config.source_locale, config.langs[0].locale)
        self._fallback_locale = self._pick_locale(config.fallback_locale, self._source_locale)
        self._text_to_key = {text: key for key, text in config.source_text.items()}
        self._modes = (
            LanguageMode.system(config.system_label),
            *(LanguageMode.for_lang(lang) for lang in config.langs),
        )
        self._mode = self._modes[0]
        self._locale_key = self._fallback_locale

    def _pick_locale(self, requested: LocaleCode | None, default: LocaleCode) -> LocaleCode:
        if requested is not None and requested in self._tables:
            return requested
        return default

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def mode(self) -> LanguageMode:
        """Currently selected mode."""
        return self._mode

    @property
    def modes(self) -> tuple[LanguageMode, ...]:
        """System mode followed by one mode per configured locale."""
        return self._modes

    @property
    def locale_key(self) -> LocaleCode:
        """Locale currently used for lookups."""
        return self._locale_key

    @property
    def supported_locales(self) -> tuple[LocaleCode, ...]:
        """Configured locale identifiers in display order."""
        return tuple(self._tables)

    @property
    def fallback_locale(self) -> LocaleCode:
        return self._fallback_locale

    # ------------------------------------------------------------------
    # Mode selection
    # ------------------------------------------------------------------

    def init(self, mode_name: str | None = None) -> LanguageMode:
        """Select the initial mode.

        Args:
            mode_name: Mode to start with; the persisted preference is used
                when None

        Returns:
            The selected mode
        """
        name = mode_name if mode_name is not None else self._preferences.get(PREFERENCE_KEY)
        with self._lock:
            self._mode = LanguageMode.from_name(
                name, self._config.langs, system_label=self._config.system_label
            )
            self._locale_key = self._resolve_locale_key(self._mode)
        logger.debug("Initial language mode %s -> %s", self._mode.name, self._locale_key)
        return self._mode

    def change(self, mode: LanguageMode) -> None:
        """Switch mode, persist it and notify listeners."""
        with self._lock:
            self._mode = mode
            self._locale_key = self._resolve_locale_key(mode)
            listeners = tuple(self._listeners)
        self._preferences.set(PREFERENCE_KEY, mode.name)
        for listener in listeners:
            listener(mode)

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _resolve_locale_key(self, mode: LanguageMode) -> LocaleCode:
        if mode.locale_key is not None:
            return mode.locale_key
        return self._match_host_locale(self._host_locale or get_system_locale())

    def _match_host_locale(self, host: LocaleCode) -> LocaleCode:
        language, territory = split_locale(host)
        if territory:
            exact = f"{language}_{territory}"
            for locale in self._tables:
                if normalize_locale(locale) == exact:
                    return locale
        for locale in self._tables:
            if split_locale(locale)[0] == language:
                return locale
        return self._fallback_locale

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def tr(self, text: str, params: Mapping[str, object] | None = None) -> str:
        """Translate source text into the active locale.

        Args:
            text: Source text exactly as written at the marker call
            params: Values substituted for ``{name}`` placeholders

        Returns:
            Translation, or the input when no table has it
        """
        key = self._text_to_key.get(text, text)
        with self._lock:
            locale_key = self._locale_key
        fallback = self._tables[self._fallback_locale]
        table = self._tables.get(locale_key, fallback)

        result = table.get(key)
        if result is None:
            result = fallback.get(key, text)

        if params:
            for name, value in params.items():
                result = result.replace(f"{{{name}}}", str(value))
        return result
