"""Command-line entry point.

Usage:
    i18ntr [--config FILE] [--prune | --no-prune] [--dry-run] [-v | -q]

Exit status:
    0 - catalogs reconciled
    1 - configuration or input error
    2 - data-integrity conflict (text changed under a key, migration conflict)

Python 3.12+.
"""

from __future__ import annotations

import argparse
import logging
import sys

from i18ntr.config import load_config
from i18ntr.enums import ExitStatus
from i18ntr.errors import ConfigurationError
from i18ntr.integrity import DataIntegrityError
from i18ntr.reconcile import ReconcileResult, reconcile

__all__ = ["main"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="i18ntr",
        description="Extract tr() texts and reconcile translation catalogs.",
    )
    parser.add_argument(
        "--config", "-c",
        metavar="FILE",
        help="Configuration file (.yaml, .json or .toml). "
        "Defaults to [tool.i18ntr] in pyproject.toml, then i18ntr.yaml.",
    )
    parser.add_argument(
        "--prune",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Remove catalog entries no longer referenced (overrides prune_unused).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing any file.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Show debug logging.")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only show warnings and errors.")
    return parser.parse_args(argv)


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def _print_summary(result: ReconcileResult) -> None:
    prefix = "[DRY-RUN]" if result.dry_run else "[OK]"
    print(f"{prefix} Extracted {result.extracted} text(s)")
    print(f"{prefix} Added {result.added}, migrated {result.migrated}, pruned {result.pruned} key(s)")
    for path in result.written:
        print(f"  wrote {path}")
    if result.missing.checked_locales:
        texts = ", ".join(result.missing.texts)
        print(f"[MISSING] {result.missing.count} untranslated: [{texts}]")


def main(argv: list[str] | None = None) -> int:
    """Run one reconciliation and return the exit status."""
    args = _parse_args(argv)
    _configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        config = load_config(args.config)
        result = reconcile(config, prune=args.prune, dry_run=args.dry_run)
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return ExitStatus.CONFIGURATION_ERROR
    except DataIntegrityError as e:
        print(f"[CONFLICT] {e}", file=sys.stderr)
        return ExitStatus.INTEGRITY_CONFLICT

    _print_summary(result)
    return ExitStatus.OK


if __name__ == "__main__":
    sys.exit(main())
