"""Dotted key parsing and nested get/set/unset.

A key such as ``"user.address.city"`` names the root document (``user``)
and a location inside its value (``address.city``). Pure functions, no
infrastructure dependencies.

Segments walk dicts by key and lists by integer index. Writes replace
missing or non-container intermediates with fresh dicts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from quickdoc.domain.errors import InvalidKeyError, NonObjectTargetError

SEPARATOR = "."


def split_path(path: str | None) -> tuple[str, ...]:
    """Split a dotted *path* into segments; ``None`` or ``""`` is the empty path."""
    if not path:
        return ()
    return tuple(path.split(SEPARATOR))


@dataclass(frozen=True)
class KeyPath:
    """A parsed key: the document id plus the location inside its value."""

    root: str
    remainder: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        """True when the whole document value is the target."""
        return not self.remainder

    @property
    def target(self) -> str:
        """The remainder re-joined as a dotted string (``""`` when empty)."""
        return SEPARATOR.join(self.remainder)

    def __str__(self) -> str:
        return SEPARATOR.join((self.root, *self.remainder))


def parse_key(key: str, path: str | None = None) -> KeyPath:
    """Split *key* on its first dot into root and remainder.

    An explicit *path* is appended to whatever remainder *key* carries, so
    ``parse_key("user.items")`` and ``parse_key("user", "items")`` agree.

    Examples:
        >>> parse_key("user.items")
        KeyPath(root='user', remainder=('items',))
        >>> parse_key("user")
        KeyPath(root='user', remainder=())

    Raises:
        InvalidKeyError: If the root segment is empty.
    """
    root, _, rest = key.partition(SEPARATOR)
    if not root:
        raise InvalidKeyError(f"Invalid key {key!r}: root segment is empty")
    return KeyPath(root=root, remainder=split_path(rest) + split_path(path))


def _is_index(segment: str) -> bool:
    return segment.isascii() and segment.isdigit()


def _list_index(items: list[Any], segment: str) -> int | None:
    """Resolve *segment* to a valid index into *items*, or None."""
    if not _is_index(segment):
        return None
    index = int(segment)
    return index if index < len(items) else None


def _require_container(holder: Any) -> None:
    if not isinstance(holder, dict | list):
        msg = f"Cannot target path inside {type(holder).__name__}: target must be an object"
        raise NonObjectTargetError(msg)


def get_path(holder: Any, remainder: tuple[str, ...], default: Any = None) -> Any:
    """Return the value at *remainder* inside *holder*, or *default* if absent."""
    current = holder
    for segment in remainder:
        if isinstance(current, dict):
            if segment not in current:
                return default
            current = current[segment]
        elif isinstance(current, list):
            index = _list_index(current, segment)
            if index is None:
                return default
            current = current[index]
        else:
            return default
    return current


def set_path(holder: Any, remainder: tuple[str, ...], value: Any) -> Any:
    """Write *value* at *remainder* inside *holder* (mutated in place) and return it.

    An empty *remainder* replaces the holder outright: *value* is returned.

    Raises:
        NonObjectTargetError: *holder* is not a dict or list, or a list
            segment is not an index into the list.
    """
    if not remainder:
        return value
    _require_container(holder)

    current = holder
    *parents, last = remainder
    for segment in parents:
        child = _child(current, segment)
        if not isinstance(child, dict | list):
            child = {}
            _assign(current, segment, child)
        current = child
    _assign(current, last, value)
    return holder


def unset_path(holder: Any, remainder: tuple[str, ...]) -> Any:
    """Remove the member at *remainder* from *holder* (in place) and return it.

    Missing intermediates leave *holder* untouched. Removing the whole
    document (empty *remainder*) is the caller's job.

    Raises:
        NonObjectTargetError: *holder* is not a dict or list.
    """
    _require_container(holder)
    if not remainder:
        return holder

    *parents, last = remainder
    parent = get_path(holder, tuple(parents))
    if isinstance(parent, dict):
        parent.pop(last, None)
    elif isinstance(parent, list):
        index = _list_index(parent, last)
        if index is not None:
            del parent[index]
    return holder


def _child(container: dict[str, Any] | list[Any], segment: str) -> Any:
    if isinstance(container, dict):
        return container.get(segment)
    index = _list_index(container, segment)
    return container[index] if index is not None else None


def _assign(container: dict[str, Any] | list[Any], segment: str, value: Any) -> None:
    if isinstance(container, dict):
        container[segment] = value
        return
    if _is_index(segment) and int(segment) == len(container):
        container.append(value)
        return
    index = _list_index(container, segment)
    if index is None:
        msg = f"Cannot address {segment!r} inside an array of length {len(container)}"
        raise NonObjectTargetError(msg)
    container[index] = value
