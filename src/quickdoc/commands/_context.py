"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy store/collection initialization,
a bridge from sync Click callbacks into the async service layer, and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import anyio
import click

from quickdoc.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from quickdoc.config.settings import QuickdocSettings
    from quickdoc.services.collection import Collection
    from quickdoc.services.document import DocumentService
    from quickdoc.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The database and schema
    are loaded on first use so ``--help`` and ``--version`` never touch
    the filesystem.
    """

    def __init__(self, settings: QuickdocSettings) -> None:
        self.settings = settings
        self._engine: Engine | None = None
        self._collection: Collection | None = None

        from quickdoc.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from quickdoc.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def engine(self) -> Engine:
        """SQLAlchemy engine for the configured database (created lazily)."""
        if self._engine is None:
            from quickdoc.infrastructure.database import init_database

            self._engine = init_database(self.settings.db_path)
            logger.debug("Opened database %s", self.settings.db_path)
        return self._engine

    @property
    def collection(self) -> Collection:
        """The configured collection, bound to the SQLite store."""
        if self._collection is None:
            from quickdoc.infrastructure.database import SqliteStore
            from quickdoc.services.collection import Collection

            store = SqliteStore(self.engine, namespace=self.settings.collection.name)
            self._collection = Collection(store, self._load_schema())
        return self._collection

    @property
    def service(self) -> DocumentService:
        from quickdoc.services.document import DocumentService

        return DocumentService(self.collection)

    def _load_schema(self) -> Any:
        """Read the JSON schema descriptor named in ``[collection] schema_file``."""
        path = self.settings.schema_path
        if path is None:
            return None
        if not path.is_file():
            raise click.ClickException(f"Schema file not found: {path}")

        from quickdoc.domain.descriptors import resolve_field
        from quickdoc.infrastructure.filesystem import read_json

        try:
            return resolve_field(read_json(path))
        except (TypeError, ValueError) as exc:
            raise click.ClickException(f"Invalid schema file {path}: {exc}") from exc

    def run(
        self,
        fn: Callable[..., Awaitable[ServiceResult]],
        *args: Any,
        **kwargs: Any,
    ) -> ServiceResult:
        """Run an async service method to completion from a Click callback."""
        return anyio.run(functools.partial(fn, *args, **kwargs))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        """Release the database engine and reset per-invocation telemetry."""
        if self.settings.verbose:
            from quickdoc.services.telemetry import disable_telemetry

            disable_telemetry()
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._collection = None
