"""Migration of catalog entries after source text edits.

A migration rule renames source text: the catalog entry addressed by the
old text's key is re-addressed under the new text's key, carrying every
locale's translation along. Rules apply in declaration order, mutating the
catalogs in place.

Per rule:
    conflict - new key already holds unrelated text; the run aborts
    stale    - old key holds text other than ``from_text``; skipped
    no_op    - neither key present; skipped
    applied  - entries moved

When both keys hold distinct real translations in one locale, the new
key's translation is kept and the old one is discarded with a warning.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass

from i18ntr.config import MigrationRule
from i18ntr.enums import MigrationOutcome
from i18ntr.integrity import MigrationConflictError
from i18ntr.keys import to_hash_key
from i18ntr.types import CatalogKey, LocaleCode

__all__ = ["DiscardedTranslation", "MigrationResult", "RuleOutcome", "apply_migrations"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    """What happened to one migration rule."""

    rule: MigrationRule
    outcome: MigrationOutcome
    old_key: CatalogKey
    new_key: CatalogKey


@dataclass(frozen=True, slots=True)
class DiscardedTranslation:
    """A translation dropped because the target key already had its own.

    Attributes:
        locale: Locale of the catalog
        old_key: Key the discarded translation was stored under
        new_key: Key whose translation was kept
        discarded: The dropped translation
        kept: The translation retained under ``new_key``
    """

    locale: LocaleCode
    old_key: CatalogKey
    new_key: CatalogKey
    discarded: str
    kept: str


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Outcome of applying all migration rules of a run."""

    outcomes: tuple[RuleOutcome, ...] = ()
    discarded: tuple[DiscardedTranslation, ...] = ()

    @property
    def migrated(self) -> int:
        """Number of rules applied."""
        return sum(1 for o in self.outcomes if o.outcome is MigrationOutcome.APPLIED)

    @property
    def skipped(self) -> tuple[RuleOutcome, ...]:
        """Rules skipped as stale or no-op."""
        return tuple(o for o in self.outcomes if o.outcome is not MigrationOutcome.APPLIED)


def _migrate_locale(
    catalog: MutableMapping[CatalogKey, str],
    rule: MigrationRule,
    old_key: CatalogKey,
    new_key: CatalogKey,
) -> tuple[str, str] | None:
    """Move one locale's entry; returns (discarded, kept) if a translation was lost."""
    from_text, to_text = rule.from_text, rule.to_text
    has_new = new_key in catalog

    if old_key in catalog:
        old_value = catalog.pop(old_key)
        moved = to_text if old_value == from_text else old_value
        if not has_new or catalog[new_key] == from_text:
            catalog[new_key] = moved
            return None
        kept = catalog[new_key]
        if old_value not in (from_text, kept):
            return old_value, kept
        return None

    if has_new and catalog[new_key] == from_text:
        catalog[new_key] = to_text
    return None


def apply_migrations(
    rules: Sequence[MigrationRule],
    source_catalog: MutableMapping[CatalogKey, str],
    locale_catalogs: Mapping[LocaleCode, MutableMapping[CatalogKey, str]],
) -> MigrationResult:
    """Apply migration rules in order, mutating the catalogs in place.

    Args:
        rules: Rules in declaration order
        source_catalog: Canonical key -> source text catalog
        locale_catalogs: Locale -> catalog, for every configured locale

    Returns:
        Per-rule outcomes and any discarded translations

    Raises:
        MigrationConflictError: If a rule's new key already maps to other text
    """
    outcomes: list[RuleOutcome] = []
    discarded: list[DiscardedTranslation] = []

    for rule in rules:
        old_key = to_hash_key(rule.from_text)
        new_key = to_hash_key(rule.to_text)
        old_text = source_catalog.get(old_key)
        new_text = source_catalog.get(new_key)

        if new_text is not None and new_text != rule.to_text:
            raise MigrationConflictError(new_key, new_text, rule.to_text)

        if old_text is not None and old_text != rule.from_text:
            logger.warning(
                "Migration skipped, %s holds %r instead of %r", old_key, old_text, rule.from_text
            )
            outcomes.append(RuleOutcome(rule, MigrationOutcome.STALE, old_key, new_key))
            continue

        if old_text is None and new_text is None:
            logger.warning("Migration skipped, neither %r nor %r is cataloged", rule.from_text, rule.to_text)
            outcomes.append(RuleOutcome(rule, MigrationOutcome.NO_OP, old_key, new_key))
            continue

        for locale, catalog in locale_catalogs.items():
            lost = _migrate_locale(catalog, rule, old_key, new_key)
            if lost is not None:
                dropped, kept = lost
                logger.warning(
                    "[%s] %s already translated as %r; discarding %r from %s",
                    locale,
                    new_key,
                    kept,
                    dropped,
                    old_key,
                )
                discarded.append(DiscardedTranslation(locale, old_key, new_key, dropped, kept))

        source_catalog.pop(old_key, None)
        source_catalog[new_key] = rule.to_text
        logger.info("Migrated %r -> %r (%s -> %s)", rule.from_text, rule.to_text, old_key, new_key)
        outcomes.append(RuleOutcome(rule, MigrationOutcome.APPLIED, old_key, new_key))

    return MigrationResult(outcomes=tuple(outcomes), discarded=tuple(discarded))
