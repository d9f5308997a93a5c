"""Data integrity exceptions for catalog reconciliation.

These exceptions mean a catalog key would silently change meaning. They
are not input errors: the configuration and the files are readable, but
applying the run would corrupt the key -> text contract. They propagate to
the top level, abort the run before any write, and map to exit status 2.

Design:
    - NOT subclasses of I18nTrError (different error domain)
    - Carry diagnostic context naming the key and both texts
    - Immutable after construction
    - @final decorator prevents subclassing

Hierarchy:
    DataIntegrityError (base)
    ├─ TextChangedError (extracted text hashes to a key holding other text)
    ├─ MigrationConflictError (migration target key holds other text)
    └─ ImmutabilityViolationError (mutation attempt on a raised error)

Python 3.12+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

__all__ = [
    "DataIntegrityError",
    "ImmutabilityViolationError",
    "IntegrityContext",
    "MigrationConflictError",
    "TextChangedError",
]


@dataclass(frozen=True, slots=True)
class IntegrityContext:
    """Context for integrity error diagnosis.

    Attributes:
        component: Subsystem where the conflict was detected (reconcile, migration)
        operation: Operation being performed (merge, migrate)
        key: Catalog key involved
        expected: Text currently recorded under the key
        actual: Text that would have replaced it
    """

    component: str
    operation: str
    key: str | None = None
    expected: str | None = None
    actual: str | None = None


class DataIntegrityError(Exception):
    """Base exception for all catalog integrity conflicts.

    This exception is immutable after construction so the evidence it
    carries cannot be altered while it propagates.

    Attributes:
        context: Structured diagnostic context
    """

    __slots__ = ("_context", "_frozen")

    _context: IntegrityContext | None
    _frozen: bool

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
    ) -> None:
        """Initialize DataIntegrityError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
        """
        super().__init__(message)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_frozen", True)

    # Python's exception machinery sets these while an exception propagates.
    _PYTHON_EXCEPTION_ATTRS: frozenset[str] = frozenset(
        ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
    )

    def __setattr__(self, name: str, value: object) -> None:
        """Reject attribute mutations after initialization.

        Raises:
            ImmutabilityViolationError: If attempting to modify after construction
        """
        if name in self._PYTHON_EXCEPTION_ATTRS:
            object.__setattr__(self, name, value)
            return
        if getattr(self, "_frozen", False):
            msg = f"Cannot modify integrity error attribute: {name}"
            raise ImmutabilityViolationError(msg)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        """Reject all attribute deletions.

        Raises:
            ImmutabilityViolationError: Always
        """
        msg = f"Cannot delete integrity error attribute: {name}"
        raise ImmutabilityViolationError(msg)

    @property
    def context(self) -> IntegrityContext | None:
        """Structured diagnostic context."""
        return self._context

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, context={self._context!r})"


@final
class ImmutabilityViolationError(DataIntegrityError):
    """Attempt to mutate a raised integrity error."""


@final
class TextChangedError(DataIntegrityError):
    """An extracted text hashes to a key already assigned to different text.

    Either the literal at a call site was edited in place (the usual case)
    or two texts collide on the truncated hash. Both are resolved the same
    way: declare a migration from the old text to the new one.

    Attributes:
        key: The contested catalog key
        recorded_text: Text the source catalog holds under ``key``
        new_text: Freshly extracted text hashing to ``key``
    """

    __slots__ = ("_key", "_new_text", "_recorded_text")

    _key: str
    _recorded_text: str
    _new_text: str

    def __init__(self, key: str, recorded_text: str, new_text: str) -> None:
        """Initialize TextChangedError.

        Args:
            key: The contested catalog key
            recorded_text: Text currently recorded under the key
            new_text: Extracted text that hashes to the same key
        """
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_recorded_text", recorded_text)
        object.__setattr__(self, "_new_text", new_text)
        message = (
            f"Hash collision or edited source text for key {key}\n"
            f"  recorded: {recorded_text!r}\n"
            f"  extracted: {new_text!r}\n"
            "Do not edit tr() text in place; declare a migration "
            "(from: old text, to: new text) instead."
        )
        context = IntegrityContext(
            component="reconcile",
            operation="merge",
            key=key,
            expected=recorded_text,
            actual=new_text,
        )
        super().__init__(message, context)

    @property
    def key(self) -> str:
        """The contested catalog key."""
        return self._key

    @property
    def recorded_text(self) -> str:
        """Text the source catalog holds under the key."""
        return self._recorded_text

    @property
    def new_text(self) -> str:
        """Extracted text hashing to the same key."""
        return self._new_text


@final
class MigrationConflictError(DataIntegrityError):
    """A migration's target key already holds unrelated text.

    Applying the rule would overwrite an assigned key, so the whole run is
    aborted instead.

    Attributes:
        key: Target key of the migration
        recorded_text: Text the source catalog holds under ``key``
        to_text: Text the migration wanted to place under ``key``
    """

    __slots__ = ("_key", "_recorded_text", "_to_text")

    _key: str
    _recorded_text: str
    _to_text: str

    def __init__(self, key: str, recorded_text: str, to_text: str) -> None:
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_recorded_text", recorded_text)
        object.__setattr__(self, "_to_text", to_text)
        message = (
            f"Migration conflict: key {key} already holds different text\n"
            f"  recorded: {recorded_text!r}\n"
            f"  migration target: {to_text!r}"
        )
        context = IntegrityContext(
            component="migration",
            operation="migrate",
            key=key,
            expected=recorded_text,
            actual=to_text,
        )
        super().__init__(message, context)

    @property
    def key(self) -> str:
        """Target key of the migration."""
        return self._key

    @property
    def recorded_text(self) -> str:
        """Text recorded under the target key."""
        return self._recorded_text

    @property
    def to_text(self) -> str:
        """Text the migration wanted to place under the key."""
        return self._to_text
