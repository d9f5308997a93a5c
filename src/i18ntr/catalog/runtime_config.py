"""Rendering of the runtime configuration artifact.

The runtime configuration is a generated Python module exporting
``i18n_config``: an ``I18nRuntimeConfig`` literal naming the host-locale
label, the source and fallback locales, the canonical source table and the
ordered locale definitions. It is regenerated in full on every run.

Python-format catalogs are imported relative to the generated module, so
every catalog module must live in the same package tree. JSON catalogs are
read at import time through ``i18ntr.runtime.load_table``.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from i18ntr.catalog.literals import quote
from i18ntr.catalog.store import catalog_format_for
from i18ntr.constants import GENERATED_HEADER, RUNTIME_CONFIG_NAME
from i18ntr.enums import CatalogFormat
from i18ntr.errors import ConfigurationError

if TYPE_CHECKING:
    from i18ntr.config import I18nTrConfig

__all__ = ["relative_module", "render_runtime_config"]


def relative_module(from_dir: Path, target: Path) -> str:
    """Relative import path of a catalog module as seen from ``from_dir``.

    Example:
        >>> relative_module(Path("app/i18n"), Path("app/i18n/en_us.py"))
        '.en_us'
        >>> relative_module(Path("app/config"), Path("app/i18n/en_us.py"))
        '..i18n.en_us'

    Raises:
        ConfigurationError: If a path segment is not a valid module name
    """
    rel = os.path.relpath(target.absolute().with_suffix(""), from_dir.absolute())
    parts = Path(rel).parts
    ups = 0
    while ups < len(parts) and parts[ups] == "..":
        ups += 1
    names = parts[ups:]
    if not names or not all(name.isidentifier() for name in names):
        msg = f"Catalog {target} cannot be imported from {from_dir}: {'.'.join(names)!r} is not a module path"
        raise ConfigurationError(msg)
    return "." * (ups + 1) + ".".join(names)


def render_runtime_config(config: I18nTrConfig) -> str:
    """Render the runtime configuration module for ``config``.

    Returns:
        Module source; identical configurations render identical bytes
    """
    here = config.config_file.parent
    imports: list[str] = []
    uses_json = False

    def table_expr(path: Path, table: str) -> str:
        nonlocal uses_json
        if catalog_format_for(path) is CatalogFormat.JSON:
            uses_json = True
            rel = Path(os.path.relpath(path.absolute(), here.absolute())).as_posix()
            return f"load_table(_HERE / {quote(rel)})"
        line = f"from {relative_module(here, path)} import {table}"
        if line not in imports:
            imports.append(line)
        return table

    source_expr = table_expr(config.source_file, config.source_table)
    lang_exprs = [(lang, table_expr(lang.file, lang.table)) for lang in config.langs]

    runtime_names = ["I18nLangDef", "I18nRuntimeConfig"]
    if uses_json:
        runtime_names.append("load_table")

    out = [f'"""{GENERATED_HEADER}"""', ""]
    if uses_json:
        out += ["from pathlib import Path", ""]
    out.append(f"from i18ntr.runtime import {', '.join(runtime_names)}")
    if imports:
        out += ["", *imports]
    if uses_json:
        out += ["", "_HERE = Path(__file__).resolve().parent"]

    out += [
        "",
        f"{RUNTIME_CONFIG_NAME} = I18nRuntimeConfig(",
        f"    system_label={quote(config.system_label)},",
        f"    source_locale={quote(config.source_locale)},",
        f"    fallback_locale={quote(config.fallback_locale)},",
        f"    source_text={source_expr},",
        "    langs=(",
    ]
    for lang, expr in lang_exprs:
        out += [
            "        I18nLangDef(",
            f"            locale={quote(lang.locale)},",
            f"            label={quote(lang.label)},",
            f"            table={expr},",
            "        ),",
        ]
    out += ["    ),", ")"]
    return "\n".join(out) + "\n"
