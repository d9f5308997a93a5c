"""Hypothesis strategies for i18ntr property-based testing.

Usage:
    from tests.strategies import source_texts, literal_texts, catalogs

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - source_texts, literal_texts
"""

from .catalog import catalogs, literal_texts, marker_sources, source_texts

__all__ = [
    "catalogs",
    "literal_texts",
    "marker_sources",
    "source_texts",
]
