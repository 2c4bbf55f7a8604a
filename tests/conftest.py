"""Shared pytest fixtures and test helpers for quickdoc tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from quickdoc.infrastructure.database import SqliteStore, init_database
from quickdoc.infrastructure.store import DocumentStore, MemoryStore
from quickdoc.services.collection import Collection

# The user schema used throughout the collection and service tests.
USER_SCHEMA: dict[str, Any] = {
    "name": str,
    "age": int,
    "isHuman": bool,
    "isJobless?": bool,
}


@pytest.fixture
def anyio_backend() -> str:
    """Run ``@pytest.mark.anyio`` tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with the documents table created."""
    engine = init_database(tmp_path / "quickdoc.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sqlite_store(db_engine: Engine) -> SqliteStore:
    return SqliteStore(db_engine)


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> Generator[DocumentStore]:
    """Each test using this fixture runs once per store implementation."""
    if request.param == "memory":
        yield MemoryStore()
        return
    engine = init_database(tmp_path / "param.db")
    try:
        yield SqliteStore(engine)
    finally:
        engine.dispose()


@pytest.fixture
def users(store: DocumentStore) -> Collection:
    """Collection with the user schema over each store implementation."""
    return Collection(store, USER_SCHEMA)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes. Clears any config override from the environment.
    """
    monkeypatch.delenv("QUICKDOC_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
