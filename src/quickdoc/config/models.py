"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, quickdoc.toml only contains
overrides. An empty project needs no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, field_validator

from quickdoc.infrastructure.store import DEFAULT_NAMESPACE


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    # Relative paths resolve against the project root.
    path: Path = Path(".quickdoc/quickdoc.db")


class CollectionConfig(BaseModel):
    """[collection] section."""

    model_config = {"frozen": True}

    name: str = DEFAULT_NAMESPACE
    schema_file: Path | None = None

    @field_validator("name")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("collection name must not be empty")
        return value
