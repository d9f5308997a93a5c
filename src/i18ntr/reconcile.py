"""Reconciliation of extracted text against the catalogs.

One run is strictly sequential:

    extract -> load -> migrate -> merge -> prune -> render -> write

All mutation happens on in-memory catalogs. Every artifact is rendered
before the first write, so a run that fails at any earlier step leaves the
on-disk catalogs exactly as they were.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path

from i18ntr.catalog.runtime_config import render_runtime_config
from i18ntr.catalog.store import ArtifactWriter, load_catalog
from i18ntr.config import I18nTrConfig
from i18ntr.extraction.scanner import ExtractionReport, scan_project
from i18ntr.integrity import TextChangedError
from i18ntr.keys import to_hash_key
from i18ntr.migration import MigrationResult, apply_migrations
from i18ntr.types import Catalog, CatalogKey, LocaleCode

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Driver
    "reconcile",
    "ReconcileResult",
    # Steps
    "merge_extracted",
    "prune_unused",
    "missing_report",
    "MissingReport",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MissingReport:
    """Source entries no non-source locale has translated yet.

    Attributes:
        texts: Source texts of untranslated keys, in key order
        checked_locales: Non-source locales consulted (empty if the check
            was skipped because there is nothing to compare)
    """

    texts: tuple[str, ...] = ()
    checked_locales: tuple[LocaleCode, ...] = ()

    @property
    def count(self) -> int:
        """Number of untranslated source entries."""
        return len(self.texts)


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Summary of one reconciliation run.

    Attributes:
        extracted: Number of distinct texts found by extraction
        added: Keys newly added to the source catalog
        migrated: Migration rules applied
        pruned: Distinct keys removed by pruning
        missing: Missing-translation report
        written: Artifacts whose contents changed on disk
        migration: Detailed migration outcomes
        extraction: Detailed extraction report
        dry_run: True if nothing was written
    """

    extracted: int
    added: int
    migrated: int
    pruned: int
    missing: MissingReport
    written: tuple[Path, ...] = ()
    migration: MigrationResult = field(default_factory=MigrationResult)
    extraction: ExtractionReport | None = None
    dry_run: bool = False


def merge_extracted(
    texts: Iterable[str],
    source_catalog: MutableMapping[CatalogKey, str],
    locale_catalogs: Iterable[MutableMapping[CatalogKey, str]],
) -> int:
    """Merge extracted texts into the catalogs.

    Locale catalogs receive the source text as a placeholder for keys they
    lack; existing translations are never overwritten.

    Returns:
        Number of keys newly added to the source catalog

    Raises:
        TextChangedError: If a key already stands for a different text
    """
    catalogs = list(locale_catalogs)
    added = 0
    for text in sorted(texts):
        key = to_hash_key(text)
        recorded = source_catalog.get(key)
        if recorded is not None and recorded != text:
            raise TextChangedError(key, recorded, text)
        if recorded is None:
            source_catalog[key] = text
            added += 1
        for catalog in catalogs:
            catalog.setdefault(key, text)
    return added


def prune_unused(
    used_keys: set[CatalogKey] | frozenset[CatalogKey],
    catalogs: Iterable[MutableMapping[CatalogKey, str]],
) -> int:
    """Remove every key outside ``used_keys`` from all catalogs.

    Returns:
        Number of distinct keys removed
    """
    removed: set[CatalogKey] = set()
    for catalog in catalogs:
        stale = [key for key in catalog if key not in used_keys]
        for key in stale:
            del catalog[key]
        removed.update(stale)
    return len(removed)


def missing_report(
    source_catalog: Mapping[CatalogKey, str],
    target_catalogs: Mapping[LocaleCode, Mapping[CatalogKey, str]],
) -> MissingReport:
    """List source entries that no target locale translates.

    An entry counts as translated if at least one target catalog holds a
    value for its key that differs from the source text.
    """
    if not source_catalog or not target_catalogs:
        return MissingReport()

    missing: list[str] = []
    for key in sorted(source_catalog):
        text = source_catalog[key]
        translated = any(
            catalog.get(key) is not None and catalog[key] != text for catalog in target_catalogs.values()
        )
        if not translated:
            missing.append(text)
    return MissingReport(texts=tuple(missing), checked_locales=tuple(target_catalogs))


def reconcile(
    config: I18nTrConfig,
    *,
    prune: bool | None = None,
    dry_run: bool = False,
) -> ReconcileResult:
    """Run one full reconciliation.

    Args:
        config: Validated configuration
        prune: Override ``config.prune_unused`` when not None
        dry_run: Compute everything but write nothing

    Returns:
        Run summary

    Raises:
        ConfigurationError: On unreadable input (including malformed
            catalogs and unreadable source files)
        DataIntegrityError: On a text change or migration conflict
    """
    do_prune = config.prune_unused if prune is None else prune

    report = scan_project(
        config.project_dir,
        config.i18n_dir,
        marker=config.marker,
        extensions=config.extensions,
        max_workers=config.max_workers,
    )
    logger.info("Extracted %d text(s) from %d file(s)", len(report.texts), report.files_scanned)

    source: Catalog = load_catalog(config.source_file, config.source_table)
    locales: dict[LocaleCode, Catalog] = {
        lang.locale: load_catalog(lang.file, lang.table) for lang in config.langs
    }

    migration = apply_migrations(config.migrations, source, locales)
    added = merge_extracted(report.texts, source, locales.values())

    pruned = 0
    if do_prune:
        used = {to_hash_key(text) for text in report.texts}
        pruned = prune_unused(used, [source, *locales.values()])
        logger.info("Pruned %d unused key(s)", pruned)

    writer = ArtifactWriter()
    for lang in config.langs:
        writer.stage_catalog(lang.file, lang.table, locales[lang.locale])
    writer.stage_catalog(config.source_file, config.source_table, source)
    writer.stage(config.config_file, render_runtime_config(config))

    if dry_run:
        logger.info("Dry run; %d artifact(s) not written", len(writer.staged_paths))
        written: tuple[Path, ...] = ()
    else:
        written = writer.commit()

    missing = missing_report(
        source, {lang.locale: locales[lang.locale] for lang in config.target_langs}
    )
    return ReconcileResult(
        extracted=len(report.texts),
        added=added,
        migrated=migration.migrated,
        pruned=pruned,
        missing=missing,
        written=written,
        migration=migration,
        extraction=report,
        dry_run=dry_run,
    )
