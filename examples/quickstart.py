"""Quickstart example for i18ntr.

Builds a throwaway project, reconciles its catalogs, fills in one
translation, renames a source text through a migration, and translates
through the generated runtime configuration.

Note: Examples print the summary objects directly for brevity. In
production, run the ``i18ntr`` command and commit the generated catalogs.
"""

import importlib
import sys
import tempfile
from pathlib import Path

from i18ntr import I18n, parse_config, reconcile, to_hash_key
from i18ntr.catalog import load_catalog, write_catalog

with tempfile.TemporaryDirectory() as tmp:
    root = Path(tmp)
    app = root / "demo_app"
    app.mkdir()
    (app / "main.py").write_text(
        'from i18ntr.runtime import I18n\n\n'
        'def greet(i18n: I18n, name: str) -> str:\n'
        '    return i18n.tr("你好，{name}", {"name": name})\n\n'
        'TITLE = "国际化"  # plain literal, not a marker call\n'
        'HEADER = tr("国际化")\n',
        encoding="utf-8",
    )

    settings = {
        "project_dir": "demo_app",
        "i18n_dir": "demo_app/i18n",
        "source_locale": "zh_CN",
        "fallback_locale": "en_US",
        "langs": [
            {"locale": "zh_CN", "file": "zh_cn.py", "map": "zhCN"},
            {"locale": "en_US", "file": "en_us.py", "map": "enUS"},
        ],
    }

    # Example 1: First run bootstraps every catalog
    print("=" * 50)
    print("Example 1: First Run")
    print("=" * 50)

    result = reconcile(parse_config(settings, base_dir=root))
    print(f"extracted={result.extracted} added={result.added} missing={list(result.missing.texts)}")
    # Output: extracted=2 added=2 missing=['...', '...']

    # Example 2: Translate one entry, then reconcile again
    print("\n" + "=" * 50)
    print("Example 2: Placeholders Never Overwrite")
    print("=" * 50)

    en_path = app / "i18n" / "en_us.py"
    en = load_catalog(en_path, "enUS")
    en[to_hash_key("你好，{name}")] = "Hello, {name}"
    write_catalog(en_path, "enUS", en)

    result = reconcile(parse_config(settings, base_dir=root))
    print(f"added={result.added} written={len(result.written)} missing={list(result.missing.texts)}")
    # Output: added=0 written=0 missing=['国际化']

    # Example 3: Rename a source text without losing its translation
    print("\n" + "=" * 50)
    print("Example 3: Migration")
    print("=" * 50)

    main_py = app / "main.py"
    main_py.write_text(
        main_py.read_text(encoding="utf-8").replace("你好，{name}", "您好，{name}"),
        encoding="utf-8",
    )
    migrated = {**settings, "migrations": [{"from": "你好，{name}", "to": "您好，{name}"}]}
    result = reconcile(parse_config(migrated, base_dir=root))
    print(f"migrated={result.migrated}")
    print(load_catalog(en_path, "enUS")[to_hash_key("您好，{name}")])
    # Output: Hello, {name}

    # Example 4: Runtime translation through the generated configuration
    print("\n" + "=" * 50)
    print("Example 4: Runtime")
    print("=" * 50)

    sys.path.insert(0, str(root))
    config_module = importlib.import_module("demo_app.i18n.i18n_config")
    i18n = I18n(config_module.i18n_config)
    i18n.init("en_US")
    print(i18n.tr("您好，{name}", {"name": "Ada"}))
    # Output: Hello, Ada
    print([mode.label for mode in i18n.modes])
    sys.path.remove(str(root))
