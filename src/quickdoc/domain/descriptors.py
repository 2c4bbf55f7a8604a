"""Schema descriptors — shorthand that resolves into a field model tree.

Callers may describe a schema with Python types and literals instead of
building field models by hand::

    resolve_field({"name": str, "age": int, "friends": [str], "isJobless?": bool})

The same grammar works from JSON, where type names stand in for types::

    {"name": "string", "age": "number", "friends": ["string"], "isJobless?": "boolean"}

Resolution first classifies the descriptor into a :class:`DescriptorKind`
and then dispatches over that finite set. It runs once, at schema
definition time; the resulting tree is immutable.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any, assert_never

from quickdoc.domain.fields import (
    AnyField,
    ArrayField,
    BooleanField,
    FieldModel,
    NullableField,
    NumberField,
    ObjectField,
    StringField,
    is_field_model,
)

NULLABLE_SUFFIX = "?"

_TYPE_FIELDS: dict[type, Callable[[], FieldModel]] = {
    str: StringField,
    int: NumberField,
    float: NumberField,
    bool: BooleanField,
}

_NAME_FIELDS: dict[str, Callable[[], FieldModel]] = {
    "any": AnyField,
    "string": StringField,
    "number": NumberField,
    "boolean": BooleanField,
}


class DescriptorKind(StrEnum):
    """What a schema descriptor is, before it is resolved."""

    ABSENT = "absent"  # None, False, 0, ""
    MODEL = "model"  # an already-built field model
    TYPE = "type"  # str, int, float, bool
    NAME = "name"  # "string", "number?", ...
    LIST = "list"  # [] or [X]
    MAPPING = "mapping"  # {"member": X, "optional?": Y}
    OTHER = "other"


def _split_nullable(name: str) -> tuple[str, bool]:
    """Strip a trailing ``?`` and report whether it was there."""
    if name.endswith(NULLABLE_SUFFIX):
        return name[: -len(NULLABLE_SUFFIX)], True
    return name, False


def classify_descriptor(descriptor: Any) -> DescriptorKind:
    """Classify *descriptor* into one of the resolvable kinds.

    Lists and dicts are checked before truthiness, so ``[]`` is an array
    of anything and ``{}`` an object with no members.
    """
    if is_field_model(descriptor):
        return DescriptorKind.MODEL
    if isinstance(descriptor, list):
        return DescriptorKind.LIST if len(descriptor) <= 1 else DescriptorKind.OTHER
    if isinstance(descriptor, dict):
        return DescriptorKind.MAPPING
    if not descriptor:
        return DescriptorKind.ABSENT
    if isinstance(descriptor, type) and descriptor in _TYPE_FIELDS:
        return DescriptorKind.TYPE
    if isinstance(descriptor, str) and _split_nullable(descriptor)[0] in _NAME_FIELDS:
        return DescriptorKind.NAME
    return DescriptorKind.OTHER


def resolve_field(descriptor: Any = None) -> FieldModel:
    """Resolve a shorthand *descriptor* into a canonical field model.

    - absent (``None``, ``False``, ``0``, ``""``) → ``NullableField(AnyField())``
    - a field model → returned as-is
    - ``str`` / ``int`` / ``float`` / ``bool`` → the matching leaf field
    - ``"any"``, ``"string"``, ``"number"``, ``"boolean"`` (``?`` suffix for nullable)
    - ``[X]`` → ``ArrayField(resolve_field(X))``; ``[]`` → array of anything
    - ``{k: X}`` → ``ObjectField``; a ``k?`` key declares a nullable member
    - anything else → ``AnyField()``
    """
    kind = classify_descriptor(descriptor)
    match kind:
        case DescriptorKind.ABSENT:
            return NullableField(AnyField())
        case DescriptorKind.MODEL:
            return descriptor
        case DescriptorKind.TYPE:
            return _TYPE_FIELDS[descriptor]()
        case DescriptorKind.NAME:
            name, nullable = _split_nullable(descriptor)
            leaf = _NAME_FIELDS[name]()
            return NullableField(leaf) if nullable else leaf
        case DescriptorKind.LIST:
            return ArrayField(resolve_field(descriptor[0] if descriptor else None))
        case DescriptorKind.MAPPING:
            return ObjectField(dict(_resolve_member(k, v) for k, v in descriptor.items()))
        case DescriptorKind.OTHER:
            return AnyField()
        case _:
            assert_never(kind)


def _resolve_member(name: Any, descriptor: Any) -> tuple[str, FieldModel]:
    if not isinstance(name, str):
        msg = f"Object descriptor keys must be strings, got {type(name).__name__}"
        raise TypeError(msg)
    bare, nullable = _split_nullable(name)
    model = resolve_field(descriptor)
    if nullable and not isinstance(model, NullableField):
        model = NullableField(model)
    return bare, model


def describe_field(model: FieldModel) -> Any:
    """Render *model* back into the JSON descriptor grammar.

    The inverse of :func:`resolve_field` for JSON-representable trees.
    Defaults are not carried. A nullable array or object can only be
    expressed as an object member (``"name?"``); anywhere else it raises
    ``ValueError``.
    """
    match model:
        case AnyField() | StringField() | NumberField() | BooleanField():
            return str(model.kind)
        case NullableField(inner=AnyField()):
            return None
        case NullableField(inner=inner):
            described = describe_field(inner)
            if isinstance(described, str):
                return described if described.endswith(NULLABLE_SUFFIX) else described + "?"
            msg = f"A nullable {inner.kind} can only be described as an object member"
            raise ValueError(msg)
        case ArrayField(inner=inner):
            return [describe_field(inner)]
        case ObjectField(fields=members):
            described_members: dict[str, Any] = {}
            for name, member in members.items():
                if isinstance(member, NullableField) and not isinstance(member.inner, AnyField):
                    described_members[name + NULLABLE_SUFFIX] = describe_field(member.inner)
                else:
                    described_members[name] = describe_field(member)
            return described_members
        case _:
            assert_never(model)
