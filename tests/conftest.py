"""Pytest configuration for the i18ntr test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: GitHub Actions with 50 examples (fast CI feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile (GitHub Actions sets this)
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
These are intensive property tests designed for fuzzing, not unit testing.
Run them via: pytest -m fuzz
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml
from hypothesis import Phase, Verbosity, settings

from i18ntr.config import I18nTrConfig, parse_config

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback for GitHub Actions (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var (GitHub Actions auto-detection)
    3. Default to "dev" (local development)
    """
    import os

    # Explicit override via env var
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    # GitHub Actions sets CI=true automatically
    if os.environ.get("CI") == "true":
        return "ci"

    # Local development
    return "dev"


# Load appropriate profile automatically
settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested.

    Fuzz tests are intensive property tests designed for dedicated fuzzing runs,
    not for inclusion in the regular test suite. They typically have high
    max_examples values and can take minutes to complete.

    Behavior:
    - Normal test run (pytest tests/): Fuzz tests are SKIPPED
    - Explicit fuzz run (pytest -m fuzz): Fuzz tests run, others skipped
    - Specific file (pytest tests/test_extraction_fuzzing.py): Runs as specified

    This keeps the regular suite fast while `pytest -m fuzz` still exercises
    the full property test suite.
    """
    # Check if user explicitly requested fuzz tests via -m marker
    marker_expr = config.getoption("-m", default="")

    # If user explicitly requested fuzz tests, don't skip them
    if "fuzz" in str(marker_expr):
        return

    # Check if user is running a specific file (not the full test suite)
    # In this case, respect their explicit choice
    args = config.invocation_params.args
    for arg in args:
        if "test_extraction_fuzzing" in str(arg):
            return

    # Skip fuzz-marked tests in normal test runs
    skip_fuzz = pytest.mark.skip(
        reason="Fuzzing test - run with: pytest -m fuzz"
    )
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SAMPLE PROJECTS
# =============================================================================


class SampleProject:
    """On-disk project layout used by reconciliation tests.

    Layout:
        <root>/app/*.py          - scanned sources
        <root>/app/i18n/         - catalogs and the runtime configuration
        <root>/i18ntr.yaml       - configuration (written on demand)
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.app = root / "app"
        self.i18n = self.app / "i18n"
        self.app.mkdir(parents=True, exist_ok=True)

    def write_source(self, relative: str, content: str) -> Path:
        path = self.app / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def settings(self, **overrides: Any) -> dict[str, Any]:
        data: dict[str, Any] = {
            "project_dir": "app",
            "i18n_dir": "app/i18n",
            "source_locale": "zh_CN",
            "fallback_locale": "en_US",
            "langs": [
                {"locale": "zh_CN", "file": "zh_cn.py", "map": "zhCN", "label": "简体中文"},
                {"locale": "en_US", "file": "en_us.py", "map": "enUS", "label": "English"},
            ],
        }
        data.update(overrides)
        return data

    def config(self, **overrides: Any) -> I18nTrConfig:
        return parse_config(self.settings(**overrides), base_dir=self.root)

    def write_config(self, **overrides: Any) -> Path:
        path = self.root / "i18ntr.yaml"
        path.write_text(yaml.safe_dump(self.settings(**overrides), allow_unicode=True), encoding="utf-8")
        return path

    @property
    def source_catalog(self) -> Path:
        return self.i18n / "_source_text.py"

    @property
    def runtime_config(self) -> Path:
        return self.i18n / "i18n_config.py"

    def catalog(self, name: str) -> Path:
        return self.i18n / name


@pytest.fixture
def sample_project(tmp_path: Path) -> SampleProject:
    """Empty sample project under a temporary directory."""
    return SampleProject(tmp_path)
