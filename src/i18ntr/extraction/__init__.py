"""Call-site extraction package.

Submodules:
    filters    - candidate text filter and whitespace normalization
    strategies - tagged strategy chain (syntax tree, then pattern)
    scanner    - project walk on a bounded thread pool

Python 3.12+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from i18ntr.extraction.filters import normalize_multiline_text, should_treat_as_text
from i18ntr.extraction.scanner import ExtractionReport, iter_source_files, read_source, scan_project
from i18ntr.extraction.strategies import (
    ExtractionStrategy,
    FileExtraction,
    PatternStrategy,
    StrategyOutcome,
    SyntaxStrategy,
    default_chain,
    extract_texts,
)

__all__ = [
    # Project scanning
    "scan_project",
    "ExtractionReport",
    "iter_source_files",
    "read_source",
    # Strategy chain
    "ExtractionStrategy",
    "StrategyOutcome",
    "FileExtraction",
    "SyntaxStrategy",
    "PatternStrategy",
    "default_chain",
    "extract_texts",
    # Filtering
    "should_treat_as_text",
    "normalize_multiline_text",
]
