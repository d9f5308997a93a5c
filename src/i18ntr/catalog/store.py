"""Catalog loading and writing.

Provides the codec protocol for catalog artifacts, the two concrete
serializations (generated Python module, JSON object), and atomic
staged writing of every artifact a run produces.

Components:
    CatalogCodec - Protocol for parsing/rendering one catalog format
    PythonModuleCodec - ``table: dict[str, str] = {...}`` modules
    JsonCodec - flat ``{"key": "text"}`` objects
    load_catalog / render_catalog / write_catalog - format dispatch by suffix
    ArtifactWriter - stage rendered artifacts, then commit them together

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

import ast
import json
import logging
import os
import stat
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from i18ntr.catalog.literals import quote
from i18ntr.constants import GENERATED_HEADER
from i18ntr.enums import CatalogFormat
from i18ntr.errors import CatalogFormatError, ConfigurationError
from i18ntr.keys import is_hash_key
from i18ntr.types import Catalog, TableName

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "CatalogCodec",
    # Codecs
    "JsonCodec",
    "PythonModuleCodec",
    "catalog_format_for",
    "codec_for",
    # Single-catalog operations
    "load_catalog",
    "render_catalog",
    "write_catalog",
    "write_text_atomic",
    # Staged writes
    "ArtifactWriter",
]

logger = logging.getLogger(__name__)

_SUFFIX_FORMATS: dict[str, CatalogFormat] = {
    ".py": CatalogFormat.PYTHON,
    ".json": CatalogFormat.JSON,
}


class CatalogCodec(Protocol):
    """Protocol for one on-disk catalog serialization.

    ``render`` output must be fully determined by its arguments (entries
    sorted by key) so regenerated artifacts diff cleanly, and ``parse``
    must invert it exactly.
    """

    def parse(self, source: str, path: str, table: TableName) -> Catalog:
        """Parse catalog source text.

        Raises:
            CatalogFormatError: If the source is not a valid catalog
        """
        ...

    def render(self, table: TableName, catalog: Mapping[str, str]) -> str:
        """Render a catalog with entries sorted by key."""
        ...


def _require_str_mapping(data: object, path: str) -> Catalog:
    if not isinstance(data, dict):
        msg = f"Catalog must be a mapping of key -> text, got {type(data).__name__}"
        raise CatalogFormatError(msg, path=path)
    catalog: Catalog = {}
    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str):
            msg = f"Catalog entries must be strings, got {key!r}: {value!r}"
            raise CatalogFormatError(msg, path=path)
        catalog[key] = value
    return catalog


@dataclass(frozen=True, slots=True)
class PythonModuleCodec:
    """Generated Python module holding one annotated dict assignment.

    Example output:
        # This file is automatically generated by i18ntr. ...

        enUS: dict[str, str] = {
            'h_5d41402abc4b': 'Hello',
        }
    """

    def parse(self, source: str, path: str, table: TableName) -> Catalog:
        try:
            module = ast.parse(source, filename=path)
        except (SyntaxError, ValueError) as e:
            msg = f"Catalog module does not parse: {e}"
            raise CatalogFormatError(msg, path=path) from e

        value_node: ast.expr | None = None
        for node in module.body:
            match node:
                case ast.Assign(targets=[ast.Name(id=name)], value=value) if name == table:
                    value_node = value
                case ast.AnnAssign(target=ast.Name(id=name), value=value) if (
                    name == table and value is not None
                ):
                    value_node = value

        if value_node is None:
            msg = f"Table '{table}' not found in catalog module"
            raise CatalogFormatError(msg, path=path)
        if not isinstance(value_node, ast.Dict):
            msg = f"Table '{table}' must be assigned a dict literal"
            raise CatalogFormatError(msg, path=path)

        try:
            data = ast.literal_eval(value_node)
        except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError) as e:
            msg = f"Table '{table}' is not a literal dict: {e}"
            raise CatalogFormatError(msg, path=path) from e
        return _require_str_mapping(data, path)

    def render(self, table: TableName, catalog: Mapping[str, str]) -> str:
        lines = [f"# {GENERATED_HEADER}", "", f"{table}: dict[str, str] = {{"]
        lines.extend(f"    {quote(key)}: {quote(catalog[key])}," for key in sorted(catalog))
        lines.append("}")
        return "\n".join(lines) + "\n"


@dataclass(frozen=True, slots=True)
class JsonCodec:
    """Flat JSON object; the table name is not stored."""

    def parse(self, source: str, path: str, table: TableName) -> Catalog:
        try:
            data = json.loads(source)
        except json.JSONDecodeError as e:
            msg = f"Catalog is not valid JSON: {e}"
            raise CatalogFormatError(msg, path=path) from e
        return _require_str_mapping(data, path)

    def render(self, table: TableName, catalog: Mapping[str, str]) -> str:
        ordered = {key: catalog[key] for key in sorted(catalog)}
        return json.dumps(ordered, ensure_ascii=False, indent=2) + "\n"


_CODECS: dict[CatalogFormat, CatalogCodec] = {
    CatalogFormat.PYTHON: PythonModuleCodec(),
    CatalogFormat.JSON: JsonCodec(),
}


def catalog_format_for(path: str | Path) -> CatalogFormat:
    """Select the catalog format from a file suffix.

    Raises:
        ConfigurationError: If the suffix is neither ``.py`` nor ``.json``
    """
    suffix = Path(path).suffix.lower()
    fmt = _SUFFIX_FORMATS.get(suffix)
    if fmt is None:
        supported = ", ".join(sorted(_SUFFIX_FORMATS))
        msg = f"Unsupported catalog file suffix {suffix!r} (supported: {supported})"
        raise ConfigurationError(msg, source=str(path))
    return fmt


def codec_for(path: str | Path) -> CatalogCodec:
    """Return the codec responsible for a catalog path."""
    return _CODECS[catalog_format_for(path)]


def load_catalog(path: str | Path, table: TableName) -> Catalog:
    """Load a catalog artifact.

    Args:
        path: Catalog file
        table: Table identifier inside generated modules

    Returns:
        Key -> text mapping; empty if the file does not exist yet

    Raises:
        CatalogFormatError: If the file exists but cannot be read or parsed
    """
    file_path = Path(path)
    codec = codec_for(file_path)
    try:
        source = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Catalog %s does not exist yet; starting empty", file_path)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read catalog: {e}"
        raise CatalogFormatError(msg, path=str(file_path)) from e

    catalog = codec.parse(source, str(file_path), table)
    foreign = [key for key in catalog if not is_hash_key(key)]
    if foreign:
        logger.warning(
            "%s: %d key(s) not derived from text, e.g. %r", file_path, len(foreign), foreign[0]
        )
    logger.debug("Loaded %d entries from %s", len(catalog), file_path)
    return catalog


def render_catalog(path: str | Path, table: TableName, catalog: Mapping[str, str]) -> str:
    """Render a catalog in the format selected by the path suffix."""
    return codec_for(path).render(table, catalog)


def _default_file_mode() -> int:
    """Mode a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_text_atomic(path: str | Path, content: str) -> bool:
    """Write UTF-8 text so readers never observe a partial file.

    The content goes to a temporary file in the target directory which then
    replaces the target. Unchanged files are left untouched.

    The target keeps its permission bits; new files get the umask default.

    Returns:
        True if the file was written, False if it already had this content
    """
    target = Path(path)
    data = content.encode("utf-8")
    try:
        if target.read_bytes() == data:
            return False
        mode = stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        mode = _default_file_mode()

    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return True


def write_catalog(path: str | Path, table: TableName, catalog: Mapping[str, str]) -> bool:
    """Render and atomically write a single catalog."""
    return write_text_atomic(path, render_catalog(path, table, catalog))


@dataclass(slots=True)
class ArtifactWriter:
    """Stage every artifact of a run, then write them in one pass.

    Rendering happens at staging time, so any rendering failure surfaces
    before the first file is touched.

    Example:
        >>> writer = ArtifactWriter()
        >>> writer.stage_catalog("i18n/en_us.py", "enUS", {"h_5d41402abc4b": "Hello"})
        >>> written = writer.commit()
    """

    _staged: dict[Path, str] = field(default_factory=dict)

    def stage(self, path: str | Path, content: str) -> None:
        """Stage pre-rendered content for ``path``."""
        self._staged[Path(path)] = content

    def stage_catalog(self, path: str | Path, table: TableName, catalog: Mapping[str, str]) -> None:
        """Render and stage a catalog."""
        self.stage(path, render_catalog(path, table, catalog))

    @property
    def staged_paths(self) -> tuple[Path, ...]:
        """Paths staged so far, in staging order."""
        return tuple(self._staged)

    def commit(self) -> tuple[Path, ...]:
        """Write all staged artifacts.

        Returns:
            Paths whose contents changed on disk
        """
        written: list[Path] = []
        for path, content in self._staged.items():
            if write_text_atomic(path, content):
                logger.info("Wrote %s", path)
                written.append(path)
            else:
                logger.debug("Unchanged %s", path)
        self._staged.clear()
        return tuple(written)
