"""Runtime translation context tests.

Covers lookup order, placeholders, language modes, host-locale matching,
preference persistence, listeners, and translation through a generated
runtime configuration module.
"""

from __future__ import annotations

import importlib
import json
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from i18ntr.catalog.store import load_catalog, write_catalog
from i18ntr.errors import CatalogFormatError
from i18ntr.keys import to_hash_key
from i18ntr.reconcile import reconcile
from i18ntr.runtime import (
    I18n,
    I18nLangDef,
    I18nRuntimeConfig,
    JsonPreferenceStore,
    LanguageMode,
    MemoryPreferenceStore,
    load_table,
)

if TYPE_CHECKING:
    from tests.conftest import SampleProject

HELLO = "你好，{name}"
BYE = "再见"
HELLO_KEY = to_hash_key(HELLO)
BYE_KEY = to_hash_key(BYE)


def _config(**overrides: object) -> I18nRuntimeConfig:
    fields: dict[str, object] = {
        "system_label": "Follow system",
        "source_locale": "zh_CN",
        "fallback_locale": "en_US",
        "source_text": {HELLO_KEY: HELLO, BYE_KEY: BYE},
        "langs": (
            I18nLangDef("zh_CN", "简体中文", {HELLO_KEY: HELLO, BYE_KEY: BYE}),
            I18nLangDef("en_US", "English", {HELLO_KEY: "Hello, {name}", BYE_KEY: "Bye"}),
            I18nLangDef("fr_FR", "Français", {HELLO_KEY: "Bonjour, {name}"}),
        ),
    }
    fields.update(overrides)
    return I18nRuntimeConfig(**fields)  # type: ignore[arg-type]


class TestTranslation:
    """Test lookup order and placeholder substitution."""

    def test_active_locale(self) -> None:
        """Source text resolves through its key in the active locale."""
        i18n = I18n(_config())
        i18n.init("fr_FR")
        assert i18n.tr(HELLO, {"name": "Ada"}) == "Bonjour, Ada"

    def test_fallback_locale(self) -> None:
        """Keys missing in the active locale come from the fallback locale."""
        i18n = I18n(_config())
        i18n.init("fr_FR")
        assert i18n.tr(BYE) == "Bye"

    def test_unknown_text_returned(self) -> None:
        """Unknown text is returned unchanged, with placeholders filled."""
        i18n = I18n(_config())
        i18n.init("en_US")
        assert i18n.tr("Not cataloged {n}", {"n": 3}) == "Not cataloged 3"

    def test_source_locale(self) -> None:
        """The source locale shows the source text."""
        i18n = I18n(_config())
        i18n.init("zh_CN")
        assert i18n.tr(BYE) == BYE

    def test_unknown_fallback_uses_source_locale(self) -> None:
        """A fallback locale not configured falls back to the source locale."""
        i18n = I18n(_config(fallback_locale="de_DE"))
        assert i18n.fallback_locale == "zh_CN"

    def test_empty_config_rejected(self) -> None:
        """At least one locale is required."""
        with pytest.raises(ValueError, match="no locales"):
            I18n(_config(langs=()))


class TestModes:
    """Test language modes and host-locale resolution."""

    def test_modes_listing(self) -> None:
        """System mode first, then one per locale."""
        i18n = I18n(_config())
        assert [m.name for m in i18n.modes] == ["system", "zh_CN", "en_US", "fr_FR"]
        assert i18n.modes[0].label == "Follow system"
        assert i18n.modes[0].is_system
        assert i18n.supported_locales == ("zh_CN", "en_US", "fr_FR")

    def test_from_name_unknown_uses_first(self) -> None:
        """Unknown persisted names select the first locale."""
        langs = _config().langs
        mode = LanguageMode.from_name("xx_XX", langs, system_label="S")
        assert mode.locale_key == "zh_CN"

    @pytest.mark.parametrize(
        ("host", "expected"),
        [
            ("fr_FR", "fr_FR"),
            ("en_GB", "en_US"),
            ("en", "en_US"),
            ("de_DE", "en_US"),
            ("zh-CN", "zh_CN"),
        ],
    )
    def test_host_locale_matching(self, host: str, expected: str) -> None:
        """Exact match, then same language, then the fallback locale."""
        i18n = I18n(_config(), host_locale=host)
        i18n.init()
        assert i18n.mode.is_system
        assert i18n.locale_key == expected


class TestPreferences:
    """Test persistence and listeners."""

    def test_change_persists_and_notifies(self) -> None:
        """change() stores the mode name and calls listeners."""
        prefs = MemoryPreferenceStore()
        i18n = I18n(_config(), preferences=prefs)
        seen: list[str] = []
        i18n.add_listener(lambda mode: seen.append(mode.name))

        i18n.change(i18n.modes[2])

        assert i18n.locale_key == "en_US"
        assert seen == ["en_US"]
        assert prefs.get("i18n_language_mode") == "en_US"

    def test_init_restores_preference(self) -> None:
        """init() without a name restores the stored mode."""
        prefs = MemoryPreferenceStore({"i18n_language_mode": "fr_FR"})
        i18n = I18n(_config(), preferences=prefs)
        assert i18n.init().name == "fr_FR"
        assert i18n.locale_key == "fr_FR"

    def test_removed_listener_not_called(self) -> None:
        """Removed listeners stop receiving notifications."""
        i18n = I18n(_config())
        seen: list[str] = []

        def listener(mode: LanguageMode) -> None:
            seen.append(mode.name)

        i18n.add_listener(listener)
        i18n.remove_listener(listener)
        i18n.change(i18n.modes[1])
        assert seen == []

    def test_json_store_round_trip(self, tmp_path: Path) -> None:
        """The JSON store persists across instances."""
        path = tmp_path / "prefs" / "i18n.json"
        JsonPreferenceStore(path).set("i18n_language_mode", "en_US")
        assert JsonPreferenceStore(path).get("i18n_language_mode") == "en_US"
        assert json.loads(path.read_text(encoding="utf-8")) == {"i18n_language_mode": "en_US"}

    def test_json_store_ignores_garbage(self, tmp_path: Path) -> None:
        """An unreadable preference file reads as empty."""
        path = tmp_path / "i18n.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonPreferenceStore(path).get("i18n_language_mode") is None


class TestLoadTable:
    """Test JSON catalog loading for generated configurations."""

    def test_loads_object(self, tmp_path: Path) -> None:
        """Flat objects load as tables."""
        path = tmp_path / "en.json"
        path.write_text('{"h_a": "A"}', encoding="utf-8")
        assert load_table(path) == {"h_a": "A"}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Generated configurations reference existing catalogs only."""
        with pytest.raises(CatalogFormatError):
            load_table(tmp_path / "missing.json")


@pytest.fixture
def importable_project(sample_project: SampleProject, monkeypatch: pytest.MonkeyPatch) -> Iterator[SampleProject]:
    """Sample project whose root is on sys.path, unloaded afterwards."""
    monkeypatch.syspath_prepend(str(sample_project.root))
    yield sample_project
    for name in [n for n in sys.modules if n == "app" or n.startswith("app.")]:
        del sys.modules[name]
    importlib.invalidate_caches()


class TestGeneratedConfiguration:
    """Translate through artifacts written by a reconciliation run."""

    @pytest.mark.parametrize("suffix", [".py", ".json"])
    def test_translate_via_generated_module(self, importable_project: SampleProject, suffix: str) -> None:
        """The generated module wires catalogs into a working context."""
        project = importable_project
        project.write_source("main.py", f'greeting = tr("{HELLO}")\n')
        config = project.config(
            langs=[
                {"locale": "zh_CN", "file": f"zh_cn{suffix}", "map": "zhCN", "label": "简体中文"},
                {"locale": "en_US", "file": f"en_us{suffix}", "map": "enUS", "label": "English"},
            ]
        )
        reconcile(config)
        en_path = project.catalog(f"en_us{suffix}")
        write_catalog(en_path, "enUS", {**load_catalog(en_path, "enUS"), HELLO_KEY: "Hello, {name}"})

        importlib.invalidate_caches()
        module = importlib.import_module("app.i18n.i18n_config")
        i18n = I18n(module.i18n_config)
        i18n.init("en_US")

        assert i18n.tr(HELLO, {"name": "Ada"}) == "Hello, Ada"
        assert [m.label for m in i18n.modes[1:]] == ["简体中文", "English"]
