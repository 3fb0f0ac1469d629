"""Unit tests for the Database application service."""

from __future__ import annotations

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from sosdb.application import Database
from sosdb.domain.entities import Object
from sosdb.domain.errors import DatabaseIOError, DatabaseValueError, InvalidNameError
from sosdb.domain.value_objects import BooleanValue, IntegerValue, StringValue
from sosdb.infrastructure.metrics import MetricsRegistry


class InMemoryStorage:
    """TextStorage double that keeps the document in a string."""

    def __init__(self, text: str | None = None, path: Path = Path("memory.sosdb")) -> None:
        self.text = text
        self.writes = 0
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read_text(self) -> str:
        if self.text is None:
            raise FileNotFoundError(f"No document at {self._path}")
        return self.text

    def write_text(self, text: str) -> None:
        self.writes += 1
        self.text = text


def _sample(registry: MetricsRegistry, name: str, **labels: str) -> float | None:
    return registry.registry.get_sample_value(name, labels or None)


@pytest.fixture
def database(db_path: Path, metrics_registry: MetricsRegistry) -> Database:
    """Create an empty file-backed database."""
    return Database(db_path, metrics=metrics_registry)


@pytest.mark.unit
class TestCollectionOperations:
    """Tests for add/get/remove."""

    def test_new_database_is_empty(self, database: Database, db_path: Path) -> None:
        """Construction reads nothing and holds no objects."""
        assert len(database) == 0
        assert database.path == db_path
        assert not db_path.exists()

    def test_add_and_get(self, database: Database) -> None:
        """Objects are found by name."""
        player = Object("player").with_value("hp", IntegerValue(100))
        database.add_object(player)

        assert database.get_object("player") is player
        assert "player" in database
        assert database.get_object("ghost") is None

    def test_add_same_name_overwrites(self, database: Database) -> None:
        """A second object with the same name replaces the first entirely."""
        database.add_object(Object("player").with_value("hp", IntegerValue(100)))
        database.add_object(Object("player").with_value("mana", IntegerValue(5)))

        player = database.get_object("player")
        assert player is not None
        assert player.get("hp") is None
        assert player.get("mana") == IntegerValue(5)
        assert len(database) == 1

    def test_remove(self, database: Database) -> None:
        """remove_object returns the object and forgets it."""
        player = Object("player")
        database.add_object(player)

        assert database.remove_object("player") is player
        assert database.get_object("player") is None
        assert database.remove_object("player") is None

    def test_iteration_and_names(self, database: Database) -> None:
        """Objects iterate in insertion order."""
        database.add_object(Object("b"))
        database.add_object(Object("a"))

        assert database.object_names() == ["b", "a"]
        assert [obj.name for obj in database] == ["b", "a"]
        assert list(database.objects) == ["b", "a"]

    def test_objects_view_is_read_only(self, database: Database) -> None:
        """The objects mapping cannot be mutated directly."""
        with pytest.raises(TypeError):
            database.objects["x"] = Object("x")  # type: ignore[index]


@pytest.mark.unit
class TestSave:
    """Tests for Database.save."""

    def test_save_writes_text_format(self, database: Database, db_path: Path) -> None:
        """save writes the header and every block."""
        database.add_object(
            Object("player").with_value("hp", IntegerValue(100)).with_value("alive", BooleanValue(True))
        )
        database.save()

        assert db_path.read_text(encoding="utf-8") == (
            "sosdb\nobject=player\n  hp=i:100\n  alive=b:true\nend\n\n"
        )
        assert str(database) == db_path.read_text(encoding="utf-8")

    def test_save_custom_header(self, db_path: Path, metrics_registry: MetricsRegistry) -> None:
        """The header argument controls the first line."""
        db = Database(db_path, header="game-save", metrics=metrics_registry)
        db.save()

        assert db_path.read_text(encoding="utf-8") == "game-save\n"

    def test_save_to_missing_directory(self, temp_dir: Path, metrics_registry: MetricsRegistry) -> None:
        """Filesystem failures are wrapped in DatabaseIOError."""
        path = temp_dir / "missing" / "db.sosdb"
        db = Database(path, metrics=metrics_registry)

        with pytest.raises(DatabaseIOError) as exc_info:
            db.save()

        assert exc_info.value.path == path
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert _sample(metrics_registry, "sosdb_saves_total", status="io_error") == 1.0

    def test_save_invalid_name_leaves_file_alone(
        self, database: Database, db_path: Path, metrics_registry: MetricsRegistry
    ) -> None:
        """An unwritable name fails before the file is touched."""
        db_path.write_text("previous contents\n", encoding="utf-8")
        database.add_object(Object("o").with_value("a=b", IntegerValue(1)))

        with pytest.raises(InvalidNameError) as exc_info:
            database.save()

        assert exc_info.value.path == db_path
        assert db_path.read_text(encoding="utf-8") == "previous contents\n"
        assert _sample(metrics_registry, "sosdb_saves_total", status="invalid_name") == 1.0

    def test_save_records_metrics(self, database: Database, metrics_registry: MetricsRegistry) -> None:
        """A successful save is counted."""
        database.add_object(Object("a"))
        database.save()

        assert _sample(metrics_registry, "sosdb_saves_total", status="success") == 1.0
        assert _sample(metrics_registry, "sosdb_objects") == 1.0
        assert _sample(metrics_registry, "sosdb_bytes_written_total") == len("sosdb\nobject=a\nend\n\n")
        assert _sample(metrics_registry, "sosdb_save_latency_seconds_count") == 1.0

    def test_save_logs_event(self, database: Database) -> None:
        """A successful save emits database_saved."""
        with capture_logs() as logs:
            database.save()

        events = [entry for entry in logs if entry["event"] == "database_saved"]
        assert len(events) == 1
        assert events[0]["objects"] == 0


@pytest.mark.unit
class TestLoad:
    """Tests for Database.load."""

    def test_load_missing_file(self, database: Database, db_path: Path) -> None:
        """An unreadable file raises DatabaseIOError."""
        with pytest.raises(DatabaseIOError) as exc_info:
            database.load()

        assert exc_info.value.path == db_path
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_load_merges_into_existing(self, database: Database, db_path: Path) -> None:
        """load keeps objects that the file does not mention."""
        db_path.write_text("sosdb\nobject=a\n  x=i:1\nend\n", encoding="utf-8")
        database.add_object(Object("kept"))

        database.load()

        assert database.object_names() == ["kept", "a"]

    def test_load_overwrites_same_name(self, database: Database, db_path: Path) -> None:
        """An object in the file replaces the in-memory one of the same name."""
        db_path.write_text("sosdb\nobject=a\n  x=i:1\nend\n", encoding="utf-8")
        database.add_object(Object("a").with_value("y", StringValue("old")))

        database.load()

        assert database.get_object("a") == Object("a").with_value("x", IntegerValue(1))

    def test_later_duplicate_wins(self, database: Database, db_path: Path) -> None:
        """Duplicate blocks in one file resolve to the last one."""
        db_path.write_text(
            "sosdb\nobject=a\n  v=i:1\nend\nobject=a\n  v=i:2\nend\n", encoding="utf-8"
        )

        database.load()

        assert database.get_object("a") == Object("a").with_value("v", IntegerValue(2))

    def test_load_twice_is_idempotent(self, database: Database, db_path: Path) -> None:
        """Reloading an unchanged file changes nothing."""
        db_path.write_text("sosdb\nobject=a\n  x=i:1\nend\n", encoding="utf-8")

        database.load()
        first = dict(database.objects)
        database.load()

        assert dict(database.objects) == first

    def test_bad_value_commits_nothing(
        self, database: Database, db_path: Path, metrics_registry: MetricsRegistry
    ) -> None:
        """A decode failure leaves the database exactly as it was."""
        db_path.write_text(
            "sosdb\nobject=good\n  x=i:1\nend\nobject=bad\n  y=b:maybe\nend\n", encoding="utf-8"
        )
        kept = Object("kept").with_value("z", IntegerValue(3))
        database.add_object(kept)

        with pytest.raises(DatabaseValueError) as exc_info:
            database.load()

        assert exc_info.value.line_number == 6
        assert exc_info.value.path == db_path
        assert database.object_names() == ["kept"]
        assert database.get_object("kept") is kept
        assert _sample(metrics_registry, "sosdb_loads_total", status="value_error") == 1.0

    def test_load_records_metrics(
        self, database: Database, db_path: Path, metrics_registry: MetricsRegistry
    ) -> None:
        """A successful load is counted."""
        text = "sosdb\nobject=a\nend\n\nobject=b\nend\n\n"
        db_path.write_text(text, encoding="utf-8")

        database.load()

        assert _sample(metrics_registry, "sosdb_loads_total", status="success") == 1.0
        assert _sample(metrics_registry, "sosdb_objects") == 2.0
        assert _sample(metrics_registry, "sosdb_bytes_read_total") == len(text)

    def test_load_logs_skipped_and_unterminated(self, database: Database, db_path: Path) -> None:
        """Skipped lines and an open trailing block are reported."""
        db_path.write_text("sosdb\ngarbage\nobject=a\n  x=i:1\n", encoding="utf-8")

        with capture_logs() as logs:
            database.load()

        events = {entry["event"]: entry for entry in logs}
        assert events["line_skipped"]["line_number"] == 2
        assert events["unterminated_object_block"]["object"] == "a"
        assert events["unterminated_object_block"]["log_level"] == "warning"
        assert events["database_loaded"]["loaded"] == 1


@pytest.mark.unit
class TestCustomStorage:
    """Database works against any TextStorage."""

    def test_round_trip_through_storage(self, metrics_registry: MetricsRegistry) -> None:
        """save and load go through the injected storage."""
        storage = InMemoryStorage()
        db = Database(storage.path, storage=storage, metrics=metrics_registry)
        db.add_object(Object("a").with_value("s", StringValue("multi\nline")))
        db.save()

        assert storage.writes == 1
        assert storage.text == "sosdb\nobject=a\n  s=s:multi\\nline\nend\n\n"

        other = Database(storage.path, storage=storage, metrics=metrics_registry)
        other.load()
        assert other.get_object("a") == db.get_object("a")

    def test_storage_errors_are_wrapped(self, metrics_registry: MetricsRegistry) -> None:
        """OSErrors from the storage become DatabaseIOError."""
        storage = InMemoryStorage()
        db = Database(storage.path, storage=storage, metrics=metrics_registry)

        with pytest.raises(DatabaseIOError):
            db.load()
        assert _sample(metrics_registry, "sosdb_loads_total", status="io_error") == 1.0

    def test_repr(self, metrics_registry: MetricsRegistry) -> None:
        """repr shows the path and object count."""
        db = Database("x.sosdb", storage=InMemoryStorage(), metrics=metrics_registry)
        db.add_object(Object("a"))

        assert repr(db) == "Database('x.sosdb', objects=1)"
