import pytest

from sqlconsultor.engines import SQLEngine

PEOPLE = [
    (1, "A", "Lima"),
    (2, "B", None),
    (3, "C", "Quito"),
    (4, "D", None),
    (5, "E", "Bogota"),
]

ADDRESSES = [
    (1, "home", "Main St"),
    (3, "home", "Second St"),
    (3, "work", "Third St"),
]


def _seed(engine: SQLEngine) -> None:
    engine.execute("CREATE TABLE person (id INTEGER PRIMARY KEY, name TEXT, city TEXT)")
    engine.execute("CREATE TABLE address (person_id INTEGER, kind TEXT, street TEXT)")
    for row in PEOPLE:
        engine.execute("INSERT INTO person (id, name, city) VALUES (?, ?, ?)", row)
    for row in ADDRESSES:
        engine.execute("INSERT INTO address (person_id, kind, street) VALUES (?, ?, ?)", row)


@pytest.fixture
def seed_tables():
    """Callable creating and filling the test tables on an engine."""
    return _seed


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine with ``person`` (A-E) and ``address`` tables."""
    engine = SQLEngine("sqlite", debug=True)
    assert engine.connect(), engine.last_error
    _seed(engine)
    yield engine
    engine.release()


@pytest.fixture
def sqlite_file_engine(tmp_path):
    """File-backed SQLite engine, for tests that reconnect."""
    engine = SQLEngine("sqlite", filename=str(tmp_path / "people.db"))
    assert engine.connect(), engine.last_error
    _seed(engine)
    yield engine
    engine.release()
