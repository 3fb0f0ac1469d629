"""Database - the in-memory object collection and its backing file.

Usage:
    from sosdb import Database, IntegerValue, Object

    db = Database("game.sosdb")
    db.add_object(Object("player").with_value("hp", IntegerValue(100)))
    db.save()

    fresh = Database("game.sosdb")
    fresh.load()
    fresh.get_object("player").get("hp")   # IntegerValue(value=100)

Load semantics:
    ``load`` merges into whatever the database already holds: objects read
    from the file overwrite same-named objects and nothing is cleared.
    Parsing completes before anything is committed, so a file with a bad
    value leaves the in-memory collection exactly as it was.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from sosdb.adapters.outbound import FileTextStorage
from sosdb.domain.entities import Object
from sosdb.domain.errors import DatabaseIOError, DatabaseValueError, InvalidNameError
from sosdb.domain.services import parse_database, render_database
from sosdb.infrastructure.config import get_config
from sosdb.infrastructure.logging import get_logger
from sosdb.infrastructure.metrics import MetricsRegistry, get_metrics
from sosdb.infrastructure.tracing import trace_span
from sosdb.ports.outbound import TextStorage

logger = get_logger(__name__)


class Database:
    """A named-on-disk mapping from object name to :class:`Object`.

    The database exclusively owns its objects. It is not thread-safe and
    takes no lock on the backing file; one process is assumed to be the
    only reader and writer.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        storage: TextStorage | None = None,
        header: str | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize an empty database bound to a backing file.

        Args:
            path: Location of the backing file. Nothing is read until load().
            storage: Storage adapter (default: FileTextStorage on path).
            header: Magic line written by save() (default from config).
            metrics: Metrics registry (default: the global one).
        """
        self._path = Path(path)
        self._storage = storage or FileTextStorage(self._path)
        self._header = header or get_config().storage.header
        self._metrics = metrics or get_metrics()
        self._objects: dict[str, Object] = {}

    @property
    def path(self) -> Path:
        return self._path

    @property
    def objects(self) -> Mapping[str, Object]:
        """Read-only view of the objects, keyed by name."""
        return MappingProxyType(self._objects)

    # Collection operations

    def add_object(self, obj: Object) -> None:
        """Insert an object, replacing any object with the same name."""
        self._objects[obj.name] = obj

    def remove_object(self, name: str) -> Object | None:
        return self._objects.pop(name, None)

    def get_object(self, name: str) -> Object | None:
        return self._objects.get(name)

    def object_names(self) -> list[str]:
        return list(self._objects)

    def __contains__(self, name: object) -> bool:
        return name in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Object]:
        return iter(self._objects.values())

    # Persistence

    def save(self) -> None:
        """Render every object and overwrite the backing file in one write.

        Raises:
            InvalidNameError: If a name cannot be written. The file is not
                touched.
            DatabaseIOError: If the file cannot be written.
        """
        log = logger.bind(path=str(self._path))

        with trace_span("sosdb.save", {"sosdb.path": str(self._path)}):
            with self._metrics.save_latency_seconds.time():
                try:
                    text = render_database(self._objects.values(), self._header)
                except InvalidNameError as e:
                    e.path = self._path
                    self._metrics.saves_total.labels(status="invalid_name").inc()
                    log.error("database_save_failed", reason="invalid_name", error=str(e))
                    raise

                try:
                    self._storage.write_text(text)
                except OSError as e:
                    self._metrics.saves_total.labels(status="io_error").inc()
                    log.error("database_save_failed", reason="io_error", error=str(e))
                    raise DatabaseIOError(
                        f"Cannot write database file {self._path}: {e}", path=self._path
                    ) from e

        self._metrics.saves_total.labels(status="success").inc()
        self._metrics.bytes_written_total.inc(len(text))
        self._metrics.objects.set(len(self._objects))
        log.info("database_saved", objects=len(self._objects), size=len(text))

    def load(self) -> None:
        """Read the backing file and merge its objects into this database.

        Existing objects are kept unless the file holds an object with the
        same name, which then replaces them. Objects are committed only
        after the whole file has parsed.

        Raises:
            DatabaseIOError: If the file cannot be read.
            DatabaseValueError: If a field value fails to decode. The
                database is left unchanged.
        """
        log = logger.bind(path=str(self._path))

        with trace_span("sosdb.load", {"sosdb.path": str(self._path)}):
            with self._metrics.load_latency_seconds.time():
                try:
                    text = self._storage.read_text()
                except OSError as e:
                    self._metrics.loads_total.labels(status="io_error").inc()
                    log.error("database_load_failed", reason="io_error", error=str(e))
                    raise DatabaseIOError(
                        f"Cannot read database file {self._path}: {e}", path=self._path
                    ) from e

                try:
                    result = parse_database(text, source=self._path)
                except DatabaseValueError as e:
                    self._metrics.loads_total.labels(status="value_error").inc()
                    log.error(
                        "database_load_failed",
                        reason="value_error",
                        line_number=e.line_number,
                        error=str(e),
                    )
                    raise

        for line_number in result.skipped_lines:
            log.debug("line_skipped", line_number=line_number)
        if result.unterminated is not None:
            log.warning("unterminated_object_block", object=result.unterminated)

        for obj in result.objects:
            self.add_object(obj)

        self._metrics.loads_total.labels(status="success").inc()
        self._metrics.bytes_read_total.inc(len(text))
        self._metrics.objects.set(len(self._objects))
        log.info("database_loaded", loaded=len(result.objects), objects=len(self._objects))

    def to_text(self) -> str:
        """Render the database exactly as save() would write it."""
        return render_database(self._objects.values(), self._header)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Database({str(self._path)!r}, objects={len(self._objects)})"
