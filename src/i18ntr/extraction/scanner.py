"""Project tree scanning.

Walks the project directory, decodes every file with a configured suffix
and runs it through the strategy chain on a bounded thread pool. The
catalog directory is never scanned, and symlinked directories are not
followed.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import io
import logging
import os
import tokenize
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from i18ntr.constants import DEFAULT_EXTENSIONS, DEFAULT_MARKER, DEFAULT_MAX_WORKERS
from i18ntr.enums import ExtractionTier
from i18ntr.errors import ExtractionError
from i18ntr.extraction.strategies import (
    ExtractionStrategy,
    FileExtraction,
    default_chain,
    extract_texts,
)

__all__ = ["ExtractionReport", "iter_source_files", "read_source", "scan_project"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionReport:
    """Outcome of scanning a project tree.

    Attributes:
        texts: Distinct source texts referenced by marker calls
        files: Per-file results, ordered by path
    """

    texts: frozenset[str]
    files: tuple[FileExtraction, ...]

    @property
    def files_scanned(self) -> int:
        """Number of files offered to the strategy chain."""
        return len(self.files)

    @property
    def fallback_files(self) -> tuple[FileExtraction, ...]:
        """Files the structural strategy declined."""
        return tuple(f for f in self.files if f.tier is not ExtractionTier.SYNTAX)


def _is_within(path: Path, parent: Path) -> bool:
    return path == parent or parent in path.parents


def iter_source_files(
    root: Path, exclude_dir: Path | None, extensions: Sequence[str]
) -> Iterator[Path]:
    """Yield files under ``root`` with a matching suffix, sorted per directory."""
    excluded = exclude_dir.resolve() if exclude_dir is not None else None
    suffixes = frozenset(ext.lower() for ext in extensions)

    def on_error(error: OSError) -> None:
        msg = f"Cannot list directory: {error}"
        raise ExtractionError(msg, source=str(root)) from error

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
        current = Path(dirpath)
        if excluded is not None:
            dirnames[:] = [d for d in dirnames if not _is_within((current / d).resolve(), excluded)]
        dirnames.sort()
        for name in sorted(filenames):
            if Path(name).suffix.lower() in suffixes:
                yield current / name


def read_source(path: Path) -> str:
    """Read and decode one source file.

    The encoding comes from a PEP 263 cookie or BOM, defaulting to UTF-8.

    Raises:
        ExtractionError: If the file cannot be read or decoded
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        msg = f"Cannot read source file: {e}"
        raise ExtractionError(msg, source=str(path)) from e
    try:
        encoding, _ = tokenize.detect_encoding(io.BytesIO(data).readline)
        return data.decode(encoding)
    except (SyntaxError, LookupError, UnicodeDecodeError) as e:
        msg = f"Cannot decode source file: {e}"
        raise ExtractionError(msg, source=str(path)) from e


def scan_project(
    root: str | Path,
    exclude_dir: str | Path | None = None,
    *,
    marker: str = DEFAULT_MARKER,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    max_workers: int = DEFAULT_MAX_WORKERS,
    strategies: Sequence[ExtractionStrategy] | None = None,
) -> ExtractionReport:
    """Extract every marker text under ``root``.

    Args:
        root: Project directory to scan
        exclude_dir: Directory skipped entirely (the catalog directory)
        marker: Name of the translation marker function
        extensions: File suffixes to scan
        max_workers: Bound of the thread pool
        strategies: Strategy chain; defaults to syntax then pattern

    Returns:
        Merged texts plus per-file results ordered by path

    Raises:
        ExtractionError: If the root is missing or any file is unreadable
    """
    root_path = Path(root)
    if not root_path.is_dir():
        msg = f"Project directory not found: {root_path}"
        raise ExtractionError(msg, source=str(root_path))

    chain = tuple(strategies) if strategies is not None else default_chain(marker)
    excluded = Path(exclude_dir) if exclude_dir is not None else None
    paths = sorted(iter_source_files(root_path, excluded, extensions))
    logger.info("Scanning %d file(s) under %s", len(paths), root_path)

    def run(path: Path) -> FileExtraction:
        result = extract_texts(read_source(path), str(path), chain)
        logger.debug("%s: %d text(s) via %s", path, len(result.texts), result.tier)
        return result

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        files = tuple(pool.map(run, paths))

    texts = frozenset().union(*(f.texts for f in files))
    report = ExtractionReport(texts=texts, files=files)
    if report.fallback_files:
        logger.warning(
            "%d file(s) used the pattern fallback: %s",
            len(report.fallback_files),
            ", ".join(f.path for f in report.fallback_files),
        )
    return report
