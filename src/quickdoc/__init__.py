"""quickdoc — typed JSON documents addressed by dotted keys."""

from quickdoc.domain.descriptors import describe_field, resolve_field
from quickdoc.domain.errors import (
    InvalidKeyError,
    NonObjectTargetError,
    NotAnArrayError,
    QuickdocError,
    ShapeMismatchError,
    UndefinedOperandError,
    UnknownFieldError,
)
from quickdoc.domain.fields import (
    AnyField,
    ArrayField,
    BooleanField,
    NullableField,
    NumberField,
    ObjectField,
    StringField,
)
from quickdoc.domain.types import AllOptions, Document, SortDirection, SortOptions
from quickdoc.infrastructure.store import DocumentStore, MemoryStore
from quickdoc.services.collection import Collection

__version__ = "0.1.0"

__all__ = [
    "AllOptions",
    "AnyField",
    "ArrayField",
    "BooleanField",
    "Collection",
    "Document",
    "DocumentStore",
    "InvalidKeyError",
    "MemoryStore",
    "NonObjectTargetError",
    "NotAnArrayError",
    "NullableField",
    "NumberField",
    "ObjectField",
    "QuickdocError",
    "ShapeMismatchError",
    "SortDirection",
    "SortOptions",
    "StringField",
    "UndefinedOperandError",
    "UnknownFieldError",
    "__version__",
    "describe_field",
    "resolve_field",
]
