"""Command-line entry point tests.

Validates exit statuses and the printed summary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from i18ntr.catalog.store import write_catalog
from i18ntr.cli import main
from i18ntr.enums import ExitStatus
from i18ntr.keys import to_hash_key

if TYPE_CHECKING:
    from tests.conftest import SampleProject


class TestExitStatus:
    """Test exit status mapping."""

    def test_success(self, sample_project: SampleProject, capsys: pytest.CaptureFixture[str]) -> None:
        """A clean run exits 0 and prints counts plus the missing report."""
        sample_project.write_source("main.py", 'tr("点击")\ntr("ab")\n')
        config = sample_project.write_config()

        status = main(["--config", str(config), "-q"])

        assert status == ExitStatus.OK
        out = capsys.readouterr().out
        assert "[OK] Extracted 2 text(s)" in out
        assert "Added 2, migrated 0, pruned 0 key(s)" in out
        assert "[MISSING] 2 untranslated:" in out
        assert sample_project.source_catalog.is_file()

    def test_configuration_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Missing configuration exits 1."""
        status = main(["--config", "/nonexistent/i18ntr.yaml", "-q"])
        assert status == ExitStatus.CONFIGURATION_ERROR
        assert "[ERROR]" in capsys.readouterr().err

    def test_missing_project_dir(self, sample_project: SampleProject) -> None:
        """A missing project directory exits 1."""
        config = sample_project.write_config(project_dir="does_not_exist")
        assert main(["-c", str(config), "-q"]) == ExitStatus.CONFIGURATION_ERROR

    def test_integrity_conflict(
        self, sample_project: SampleProject, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A changed text under an existing key exits 2 and names both texts."""
        sample_project.write_source("main.py", 'tr("New text")\n')
        write_catalog(
            sample_project.source_catalog, "i18n_source_text", {to_hash_key("New text"): "Old text"}
        )
        config = sample_project.write_config()

        status = main(["-c", str(config), "-q"])

        assert status == ExitStatus.INTEGRITY_CONFLICT
        err = capsys.readouterr().err
        assert "'Old text'" in err
        assert "'New text'" in err
        assert "migration" in err


class TestOptions:
    """Test option handling."""

    def test_prune_flag(self, sample_project: SampleProject, capsys: pytest.CaptureFixture[str]) -> None:
        """--prune overrides the configuration."""
        sample_project.write_source("main.py", 'tr("Keep")\n')
        write_catalog(sample_project.source_catalog, "i18n_source_text", {to_hash_key("Gone"): "Gone"})
        config = sample_project.write_config(prune_unused=False)

        assert main(["-c", str(config), "--prune", "-q"]) == ExitStatus.OK
        assert "pruned 1 key(s)" in capsys.readouterr().out

    def test_dry_run(self, sample_project: SampleProject, capsys: pytest.CaptureFixture[str]) -> None:
        """--dry-run writes nothing."""
        sample_project.write_source("main.py", 'tr("Hello")\n')
        config = sample_project.write_config()

        assert main(["-c", str(config), "--dry-run", "-q"]) == ExitStatus.OK
        assert "[DRY-RUN]" in capsys.readouterr().out
        assert not sample_project.i18n.exists()

    def test_verbose_and_quiet_exclusive(self) -> None:
        """-v and -q cannot be combined."""
        with pytest.raises(SystemExit):
            main(["-v", "-q"])
