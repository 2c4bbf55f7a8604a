"""Error taxonomy for validation and document mutation.

Every error derives from :class:`QuickdocError` *and* the builtin exception
a caller would naturally catch (``TypeError`` for shape problems,
``ValueError`` for bad keys and operands). The ``code`` attribute is the
stable identifier surfaced in ``ServiceError.code``.

INVARIANT: Any QuickdocError raised inside a write aborts it — nothing
partially validated is ever persisted.
"""

from __future__ import annotations

from typing import Any, ClassVar


class QuickdocError(Exception):
    """Base class for all errors raised by the document layer."""

    code: ClassVar[str] = "QUICKDOC_ERROR"

    def __init__(self, message: str, *, location: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location

    def to_detail(self) -> dict[str, Any]:
        """Structured detail for ServiceError payloads."""
        detail: dict[str, Any] = {"type": type(self).__name__}
        if self.location is not None:
            detail["location"] = self.location
        return detail


class ShapeMismatchError(QuickdocError, TypeError):
    """A value failed a leaf, nullable, array, or object shape check."""

    code = "SHAPE_MISMATCH"


class UnknownFieldError(QuickdocError, ValueError):
    """An object value carries a key its ObjectField does not declare."""

    code = "UNKNOWN_FIELD"


class NonObjectTargetError(QuickdocError, TypeError):
    """A path-scoped write addressed a holder that is not a dict or list."""

    code = "NON_OBJECT_TARGET"


class NotAnArrayError(QuickdocError, TypeError):
    """push/pull found something other than a list at the target."""

    code = "NOT_AN_ARRAY"


class UndefinedOperandError(QuickdocError, ValueError):
    """push/pull was called without a value to push or pull."""

    code = "UNDEFINED_OPERAND"


class InvalidKeyError(QuickdocError, ValueError):
    """A document key has an empty root segment."""

    code = "INVALID_KEY"
