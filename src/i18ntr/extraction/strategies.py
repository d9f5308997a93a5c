"""Extraction strategies for marker calls.

A file is offered to each strategy of a chain in turn; the first strategy
whose outcome is ``handled`` supplies the file's texts. Strategies report
"not handled" as a tagged outcome instead of raising, so the chain is plain
data flow:

    SyntaxStrategy   - walks the ``ast`` of Python sources
    PatternStrategy  - regular expression over raw text; handles any file

Both strategies feed captured literals through ``should_treat_as_text``.

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import ast
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Protocol

from i18ntr.catalog.literals import unescape
from i18ntr.constants import DEFAULT_MARKER, PYTHON_SOURCE_SUFFIXES
from i18ntr.enums import ExtractionTier
from i18ntr.extraction.filters import normalize_multiline_text, should_treat_as_text

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Outcome
    "StrategyOutcome",
    "FileExtraction",
    # Strategies
    "ExtractionStrategy",
    "SyntaxStrategy",
    "PatternStrategy",
    "default_chain",
    "extract_texts",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StrategyOutcome:
    """Result of offering one file to one strategy.

    Attributes:
        tier: Strategy that produced this outcome
        texts: Extracted texts, or None if the strategy did not handle the file
        reason: Why the file was not handled (None when handled)
    """

    tier: ExtractionTier
    texts: frozenset[str] | None
    reason: str | None = None

    @property
    def handled(self) -> bool:
        """Check if the strategy produced texts for the file."""
        return self.texts is not None

    @classmethod
    def declined(cls, tier: ExtractionTier, reason: str) -> StrategyOutcome:
        """Build a "not handled" outcome."""
        return cls(tier=tier, texts=None, reason=reason)


@dataclass(frozen=True, slots=True)
class FileExtraction:
    """Extraction result of a single file.

    Attributes:
        path: File path as scanned
        tier: Strategy that supplied the texts
        texts: Texts extracted from the file
        fallback_reasons: Reasons given by strategies that declined the file
    """

    path: str
    tier: ExtractionTier
    texts: frozenset[str]
    fallback_reasons: tuple[str, ...] = ()

    @property
    def used_fallback(self) -> bool:
        """Check if an earlier strategy declined this file."""
        return bool(self.fallback_reasons)


class ExtractionStrategy(Protocol):
    """Protocol for one extraction tier."""

    @property
    def tier(self) -> ExtractionTier:
        """Tier reported in outcomes."""
        ...

    def extract(self, source: str, path: str) -> StrategyOutcome:
        """Extract marker texts from ``source`` or decline the file."""
        ...


# ============================================================================
# SYNTAX STRATEGY
# ============================================================================


def _literal_value(node: ast.expr) -> str | None:
    """Return the value of a plain string literal argument."""
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return normalize_multiline_text(node.value)
    # f-strings (JoinedStr), concatenations (BinOp) and names are not literals.
    return None


def _first_argument(call: ast.Call) -> ast.expr | None:
    if call.args:
        first = call.args[0]
        return None if isinstance(first, ast.Starred) else first
    for kw in call.keywords:
        if kw.arg is not None:
            return kw.value
    return None


class _MarkerCallCollector(ast.NodeVisitor):
    """Collects literal first arguments of ``marker(...)`` / ``obj.marker(...)``."""

    def __init__(self, marker: str) -> None:
        self.marker = marker
        self.texts: set[str] = set()

    def _is_marker(self, func: ast.expr) -> bool:
        match func:
            case ast.Name(id=name):
                return name == self.marker
            case ast.Attribute(attr=attr):
                return attr == self.marker
        return False

    def visit_Call(self, node: ast.Call) -> None:  # noqa: N802 - ast.NodeVisitor API
        if self._is_marker(node.func):
            arg = _first_argument(node)
            if arg is not None:
                value = _literal_value(arg)
                if value is not None and should_treat_as_text(value):
                    self.texts.add(value)
        self.generic_visit(node)


@dataclass(frozen=True, slots=True)
class SyntaxStrategy:
    """Structural extraction for Python sources.

    Files whose suffix is not a Python source suffix, and sources ``ast``
    rejects, are declined so the next strategy can take them.
    """

    marker: str = DEFAULT_MARKER
    suffixes: frozenset[str] = PYTHON_SOURCE_SUFFIXES

    @property
    def tier(self) -> ExtractionTier:
        return ExtractionTier.SYNTAX

    def extract(self, source: str, path: str) -> StrategyOutcome:
        if PurePath(path).suffix.lower() not in self.suffixes:
            return StrategyOutcome.declined(self.tier, "not a Python source")
        try:
            tree = ast.parse(source, filename=path)
        except (SyntaxError, ValueError) as e:
            return StrategyOutcome.declined(self.tier, f"syntax error: {e}")
        except RecursionError:
            return StrategyOutcome.declined(self.tier, "nesting too deep for ast")

        collector = _MarkerCallCollector(self.marker)
        try:
            collector.visit(tree)
        except RecursionError:
            return StrategyOutcome.declined(self.tier, "nesting too deep for ast")
        return StrategyOutcome(tier=self.tier, texts=frozenset(collector.texts))


# ============================================================================
# PATTERN STRATEGY
# ============================================================================


def _marker_pattern(marker: str) -> re.Pattern[str]:
    # The lookbehind keeps ``str(`` or ``attr(`` from matching ``tr(``;
    # ``obj.tr(`` still matches.
    return re.compile(
        rf"""(?<![\w$]){re.escape(marker)}\(\s*(['"])((?:\\.|(?!\1).)*)\1""",
        re.DOTALL,
    )


@dataclass(frozen=True, slots=True)
class PatternStrategy:
    """Regular-expression extraction; handles any text file.

    Captured literal bodies are un-escaped with the catalog escaping rules.
    """

    marker: str = DEFAULT_MARKER
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_pattern", _marker_pattern(self.marker))

    @property
    def tier(self) -> ExtractionTier:
        return ExtractionTier.PATTERN

    def extract(self, source: str, path: str) -> StrategyOutcome:
        texts: set[str] = set()
        for match in self._pattern.finditer(source):
            text = unescape(match.group(2))
            if should_treat_as_text(text):
                texts.add(text)
        return StrategyOutcome(tier=self.tier, texts=frozenset(texts))


def default_chain(marker: str = DEFAULT_MARKER) -> tuple[ExtractionStrategy, ...]:
    """Structural parse first, pattern fallback second."""
    return (SyntaxStrategy(marker=marker), PatternStrategy(marker=marker))


def extract_texts(
    source: str,
    path: str,
    strategies: Sequence[ExtractionStrategy] | None = None,
) -> FileExtraction:
    """Run a file through a strategy chain.

    Args:
        source: Decoded file contents
        path: File path (used for suffix checks and diagnostics)
        strategies: Chain to use; defaults to ``default_chain()``

    Returns:
        Extraction of the first strategy that handled the file. If every
        strategy declines, the file contributes no texts.
    """
    chain = strategies if strategies is not None else default_chain()
    reasons: list[str] = []
    last_tier = ExtractionTier.PATTERN
    for strategy in chain:
        outcome = strategy.extract(source, path)
        if outcome.texts is not None:
            if reasons:
                logger.debug("%s: %s fallback (%s)", path, outcome.tier, "; ".join(reasons))
            return FileExtraction(
                path=path,
                tier=outcome.tier,
                texts=outcome.texts,
                fallback_reasons=tuple(reasons),
            )
        reasons.append(f"{outcome.tier}: {outcome.reason}")
        last_tier = outcome.tier
    logger.warning("%s: no strategy handled the file (%s)", path, "; ".join(reasons))
    return FileExtraction(path=path, tier=last_tier, texts=frozenset(), fallback_reasons=tuple(reasons))
