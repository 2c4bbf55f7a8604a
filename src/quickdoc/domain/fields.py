"""Field models — the closed set of validators a schema is built from.

Seven variants, each a frozen, ``@final`` dataclass tagged with a
:class:`FieldKind`. :data:`FieldModel` is their union and
:func:`validate_value` is the single exhaustive dispatcher over it, so a
new variant cannot slip in by subclassing.

Validation checks shape only; it never coerces. ``create()`` validates and
hands the value back unchanged.

INVARIANT: ObjectField is closed — every declared member must validate
and undeclared keys are rejected.
INVARIANT: Validation fails fast at the first violation, walking object
members in declared order and list elements in index order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, ClassVar, Final, TypeAlias, assert_never, final

from quickdoc.domain.errors import ShapeMismatchError, UnknownFieldError


class FieldKind(StrEnum):
    """Tag identifying each field variant."""

    ANY = "any"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULLABLE = "nullable"
    ARRAY = "array"
    OBJECT = "object"


@final
class _Missing:
    """Marker for an object member that is absent from the value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


class _FieldBase:
    """Shared validate/create capability. Not itself a field variant."""

    __slots__ = ()

    def validate(self, value: Any) -> Any:
        """Return *value* if it satisfies this field, otherwise raise."""
        return validate_value(self, value)  # type: ignore[arg-type]

    def create(self, value: Any) -> Any:
        """Validate *value* and return it unchanged."""
        self.validate(value)
        return value


def _require_model(model: Any, owner: str) -> None:
    if not isinstance(model, _FieldBase):
        msg = (
            f"{owner} expects a field model, got {type(model).__name__}; "
            "use resolve_field() for shorthand descriptors"
        )
        raise TypeError(msg)


# --- Leaf fields ---


@final
@dataclass(frozen=True, slots=True)
class AnyField(_FieldBase):
    """Accepts every value, including a missing object member."""

    kind: ClassVar[FieldKind] = FieldKind.ANY
    default: Any = field(default=None, kw_only=True)


@final
@dataclass(frozen=True, slots=True)
class StringField(_FieldBase):
    kind: ClassVar[FieldKind] = FieldKind.STRING
    default: str | None = field(default=None, kw_only=True)


@final
@dataclass(frozen=True, slots=True)
class NumberField(_FieldBase):
    """Accepts ``int`` and ``float`` (NaN and infinities included), never ``bool``."""

    kind: ClassVar[FieldKind] = FieldKind.NUMBER
    default: int | float | None = field(default=None, kw_only=True)


@final
@dataclass(frozen=True, slots=True)
class BooleanField(_FieldBase):
    kind: ClassVar[FieldKind] = FieldKind.BOOLEAN
    default: bool | None = field(default=None, kw_only=True)


# --- Composite fields ---


@final
@dataclass(frozen=True, slots=True)
class NullableField(_FieldBase):
    """Accepts ``None`` or a missing member; anything else must satisfy *inner*."""

    inner: FieldModel
    kind: ClassVar[FieldKind] = FieldKind.NULLABLE
    default: Any = field(default=None, kw_only=True)

    def __post_init__(self) -> None:
        _require_model(self.inner, "NullableField")


@final
@dataclass(frozen=True, slots=True)
class ArrayField(_FieldBase):
    """A list whose every element satisfies *inner*."""

    inner: FieldModel
    kind: ClassVar[FieldKind] = FieldKind.ARRAY
    default: list[Any] | None = field(default=None, kw_only=True)

    def __post_init__(self) -> None:
        _require_model(self.inner, "ArrayField")


@final
@dataclass(frozen=True, slots=True)
class ObjectField(_FieldBase):
    """A dict with exactly the declared members.

    *fields* is copied into a read-only mapping; declaration order is the
    validation order.
    """

    fields: Mapping[str, FieldModel]
    kind: ClassVar[FieldKind] = FieldKind.OBJECT
    default: dict[str, Any] | None = field(default=None, kw_only=True)

    def __post_init__(self) -> None:
        members = dict(self.fields)
        for name, member in members.items():
            _require_model(member, f"ObjectField member {name!r}")
        object.__setattr__(self, "fields", MappingProxyType(members))


FieldModel: TypeAlias = (
    AnyField | StringField | NumberField | BooleanField | NullableField | ArrayField | ObjectField
)


def is_field_model(obj: Any) -> bool:
    """Whether *obj* is one of the seven field variants."""
    return isinstance(obj, _FieldBase)


# --- Validation ---


def _type_name(value: Any) -> str:
    if value is MISSING:
        return "nothing"
    if value is None:
        return "None"
    return type(value).__name__


def _mismatch(expected: str, value: Any, location: str) -> ShapeMismatchError:
    if value is MISSING:
        return ShapeMismatchError(f"{location}: missing required member", location=location)
    msg = f"{location}: expected {expected}, got {_type_name(value)}"
    return ShapeMismatchError(msg, location=location)


def validate_value(model: FieldModel, value: Any, location: str = "value") -> Any:
    """Check *value* against *model*, returning it unchanged on success.

    Args:
        model: The field model to validate against.
        value: Candidate value (``MISSING`` for an absent object member).
        location: Dotted description of where *value* sits, used in errors.

    Raises:
        ShapeMismatchError: A type, nullability, or missing-member violation.
        UnknownFieldError: An object carries an undeclared key.
    """
    match model:
        case AnyField():
            pass
        case StringField():
            if not isinstance(value, str):
                raise _mismatch("a string", value, location)
        case NumberField():
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise _mismatch("a number", value, location)
        case BooleanField():
            if not isinstance(value, bool):
                raise _mismatch("a boolean", value, location)
        case NullableField(inner=inner):
            if value is not None and value is not MISSING:
                validate_value(inner, value, location)
        case ArrayField(inner=inner):
            if not isinstance(value, list):
                raise _mismatch("an array", value, location)
            for index, item in enumerate(value):
                validate_value(inner, item, f"{location}[{index}]")
        case ObjectField(fields=members):
            if not isinstance(value, dict):
                raise _mismatch("an object", value, location)
            for name, member in members.items():
                validate_value(member, value.get(name, MISSING), f"{location}.{name}")
            for name in value:
                if name not in members:
                    raise UnknownFieldError(
                        f"{location}: unknown field {name!r}",
                        location=f"{location}.{name}",
                    )
        case _:
            assert_never(model)
    return value
