"""Value types shared by the collection, the stores, and the CLI.

``Document`` is the logical persisted shape ``{id, value}``. The sort and
listing options mirror what ``Collection.all()`` accepts; ``SortSpec`` is
the normalized form handed to a store.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

_DIRECTION_ALIASES: dict[str, str] = {
    "asc": "ascending",
    "ascending": "ascending",
    "1": "ascending",
    "desc": "descending",
    "descending": "descending",
    "-1": "descending",
}


class SortDirection(StrEnum):
    """Direction for ``all()`` sorting."""

    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def parse(cls, value: str | int | SortDirection) -> SortDirection:
        """Accept ``asc``/``ascending``/``1`` and ``desc``/``descending``/``-1``."""
        if isinstance(value, SortDirection):
            return value
        canonical = _DIRECTION_ALIASES.get(str(value).strip().lower())
        if canonical is None:
            msg = f"Unknown sort direction: {value!r}. Expected ascending or descending"
            raise ValueError(msg)
        return cls(canonical)


class Document(BaseModel):
    """A stored document: unique id plus its schema-conformant value."""

    model_config = {"frozen": True}

    id: str
    value: Any = None


class SortOptions(BaseModel):
    """Sort by one or more dotted paths inside each document value."""

    model_config = {"frozen": True}

    target: str | list[str] = ""
    by: SortDirection = SortDirection.ASCENDING

    @field_validator("by", mode="before")
    @classmethod
    def _parse_direction(cls, value: Any) -> SortDirection:
        return SortDirection.parse(value)

    def to_spec(self) -> SortSpec:
        """Normalize into the store-facing :class:`SortSpec`.

        A leading dot is tolerated (``".stats.level"``), as in quick.db-style
        sort strings.
        """
        targets = [self.target] if isinstance(self.target, str) else list(self.target)
        return SortSpec(
            path_targets=tuple(t[1:] if t.startswith(".") else t for t in targets),
            direction=self.by,
        )


class AllOptions(BaseModel):
    """Options for ``Collection.all()``."""

    model_config = {"frozen": True}

    max: int | None = Field(default=None, ge=0)
    sort: SortOptions | None = None


@dataclass(frozen=True)
class SortSpec:
    """Store-facing sort: dotted value paths, compared in order, one direction."""

    path_targets: tuple[str, ...]
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESCENDING


class CollectionExport(BaseModel):
    """JSON export payload for one namespace."""

    model_config = {"frozen": True}

    namespace: str
    data: list[Document] = Field(default_factory=list)
