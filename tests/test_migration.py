"""Migration engine tests.

Covers rule outcomes (applied, stale, no-op, conflict), per-locale moves
including placeholder handling, and translations discarded when both keys
carry their own.
"""

from __future__ import annotations

import logging

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from i18ntr.config import MigrationRule
from i18ntr.enums import MigrationOutcome
from i18ntr.integrity import DataIntegrityError, MigrationConflictError
from i18ntr.keys import to_hash_key
from i18ntr.migration import apply_migrations
from tests.strategies import source_texts

OLD = "旧文案"
NEW = "新文案"
OLD_KEY = to_hash_key(OLD)
NEW_KEY = to_hash_key(NEW)
RULE = MigrationRule(from_text=OLD, to_text=NEW)


class TestAppliedMigration:
    """Test the normal rename path."""

    def test_translation_carried_to_new_key(self) -> None:
        """A real translation moves to the new key; placeholders become the new text."""
        source = {OLD_KEY: OLD}
        zh = {OLD_KEY: OLD}
        en = {OLD_KEY: "Old Text"}
        result = apply_migrations([RULE], source, {"zh_CN": zh, "en_US": en})

        assert result.migrated == 1
        assert source == {NEW_KEY: NEW}
        assert zh == {NEW_KEY: NEW}
        assert en == {NEW_KEY: "Old Text"}
        assert result.outcomes[0].outcome is MigrationOutcome.APPLIED

    def test_new_key_placeholder_replaced(self) -> None:
        """A from-text placeholder under the new key takes the moved value."""
        source = {OLD_KEY: OLD}
        en = {OLD_KEY: "Old Text", NEW_KEY: OLD}
        apply_migrations([RULE], source, {"en_US": en})
        assert en == {NEW_KEY: "Old Text"}

    def test_existing_new_translation_kept(self) -> None:
        """An existing translation under the new key is not overwritten by a placeholder."""
        source = {OLD_KEY: OLD, NEW_KEY: NEW}
        en = {OLD_KEY: OLD, NEW_KEY: "New Text"}
        result = apply_migrations([RULE], source, {"en_US": en})
        assert en == {NEW_KEY: "New Text"}
        assert result.discarded == ()

    def test_only_new_key_placeholder_upgraded(self) -> None:
        """With only the new key present, a from-text value becomes the to-text."""
        source = {NEW_KEY: NEW}
        en = {NEW_KEY: OLD}
        fr = {NEW_KEY: "Nouveau"}
        apply_migrations([RULE], source, {"en_US": en, "fr_FR": fr})
        assert en == {NEW_KEY: NEW}
        assert fr == {NEW_KEY: "Nouveau"}

    def test_locale_without_either_key_untouched(self) -> None:
        """Locales lacking both keys are left alone."""
        source = {OLD_KEY: OLD}
        de: dict[str, str] = {"h_other": "Andere"}
        apply_migrations([RULE], source, {"de_DE": de})
        assert de == {"h_other": "Andere"}

    def test_rules_apply_in_order(self) -> None:
        """Chained rules see the effect of earlier rules."""
        third = "第三版"
        source = {OLD_KEY: OLD}
        en = {OLD_KEY: "Old Text"}
        rules = [RULE, MigrationRule(from_text=NEW, to_text=third)]
        result = apply_migrations(rules, source, {"en_US": en})
        assert result.migrated == 2
        assert source == {to_hash_key(third): third}
        assert en == {to_hash_key(third): "Old Text"}


class TestDiscardedTranslations:
    """Test the policy when both keys hold distinct real translations."""

    def test_new_key_wins_and_old_recorded(self, caplog: pytest.LogCaptureFixture) -> None:
        """The new key's translation is kept; the old one is recorded and logged."""
        source = {OLD_KEY: OLD, NEW_KEY: NEW}
        en = {OLD_KEY: "Old Text", NEW_KEY: "New Text"}
        with caplog.at_level(logging.WARNING, logger="i18ntr.migration"):
            result = apply_migrations([RULE], source, {"en_US": en})

        assert en == {NEW_KEY: "New Text"}
        assert len(result.discarded) == 1
        lost = result.discarded[0]
        assert (lost.locale, lost.discarded, lost.kept) == ("en_US", "Old Text", "New Text")
        assert "discarding 'Old Text'" in caplog.text


class TestSkippedMigration:
    """Test stale and no-op rules."""

    def test_stale_rule_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Old key holding different text skips the rule with a warning."""
        source = {OLD_KEY: "something else"}
        en = {OLD_KEY: "Else"}
        with caplog.at_level(logging.WARNING, logger="i18ntr.migration"):
            result = apply_migrations([RULE], source, {"en_US": en})
        assert result.migrated == 0
        assert result.outcomes[0].outcome is MigrationOutcome.STALE
        assert source == {OLD_KEY: "something else"}
        assert en == {OLD_KEY: "Else"}
        assert "Migration skipped" in caplog.text

    def test_no_op_rule_skipped(self) -> None:
        """Neither key present skips the rule."""
        source: dict[str, str] = {}
        result = apply_migrations([RULE], source, {"en_US": {}})
        assert result.migrated == 0
        assert [o.outcome for o in result.skipped] == [MigrationOutcome.NO_OP]
        assert source == {}


class TestMigrationConflict:
    """Test conflicts on the new key."""

    def test_conflict_raises(self) -> None:
        """New key holding unrelated text aborts."""
        source = {OLD_KEY: OLD, NEW_KEY: "unrelated"}
        with pytest.raises(MigrationConflictError) as exc_info:
            apply_migrations([RULE], source, {})
        err = exc_info.value
        assert isinstance(err, DataIntegrityError)
        assert err.key == NEW_KEY
        assert err.recorded_text == "unrelated"
        assert err.to_text == NEW

    def test_conflict_checked_before_stale(self) -> None:
        """A conflict wins over a stale old key."""
        source = {OLD_KEY: "stale", NEW_KEY: "unrelated"}
        with pytest.raises(MigrationConflictError):
            apply_migrations([RULE], source, {})


class TestMigrationProperties:
    """Property-based migration invariants."""

    @given(
        from_text=source_texts(),
        to_text=source_texts(),
        translation=st.text(min_size=1, max_size=20),
    )
    def test_translation_survives_rename(self, from_text: str, to_text: str, translation: str) -> None:
        """After a rename the old key is gone and the translation is reachable by the new key."""
        assume(from_text != to_text)
        old_key, new_key = to_hash_key(from_text), to_hash_key(to_text)
        source = {old_key: from_text}
        locale = {old_key: translation}
        apply_migrations([MigrationRule(from_text, to_text)], source, {"xx": locale})
        assert old_key not in source
        assert source[new_key] == to_text
        expected = to_text if translation == from_text else translation
        assert locale == {new_key: expected}
