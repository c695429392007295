"""Unit tests for the SQLConsultor facade."""

import pytest
from unittest.mock import Mock

from sqlconsultor import SQLConsultor
from sqlconsultor.common.exceptions import ConsultorError
from sqlconsultor.dialects import DefaultDialect, MySQLDialect, SQLiteDialect
from sqlconsultor.query_builder import QueryBuilder
from sqlconsultor.settings import ConnectionSettings


@pytest.fixture
def people_db(tmp_path, seed_tables):
    """SQLite consultor on a seeded database file."""
    db = SQLConsultor("sqlite").db_filename(str(tmp_path / "people.db"))
    assert db.open(), db.engine.last_error
    seed_tables(db.engine)
    yield db
    db.engine.release()


class TestConstruction:

    def test_from_engine_name(self):
        db = SQLConsultor("sqlite")
        assert isinstance(db.dialect, SQLiteDialect)
        assert db.engine.engine_name == "sqlite"
        assert not db.connected

    def test_engine_name_with_driver(self):
        db = SQLConsultor("mysql+pymysql")
        assert isinstance(db.dialect, MySQLDialect)
        assert db.engine.url.drivername == "mysql+pymysql"

    def test_from_dialect_instance(self):
        dialect = DefaultDialect("sqlite")
        db = SQLConsultor(dialect)
        assert db.dialect is dialect

    def test_unsupported_engine_is_fatal(self):
        with pytest.raises(ConsultorError):
            SQLConsultor("nosuchdb")

    def test_setters_are_fluent_and_trimmed(self):
        db = (
            SQLConsultor("mysql")
            .host(" db.local ")
            .user(" app ")
            .password(" secret ")
            .charset(" utf8mb4 ")
            .default_database(" shop ")
        )
        assert db.engine.host == "db.local"
        assert db.engine.user == "app"
        assert db.engine.password == "secret"
        assert db.engine.charset == "utf8mb4"

    def test_from_settings(self, tmp_path):
        settings = ConnectionSettings(engine="sqlite", filename=str(tmp_path / "x.db"))
        db = SQLConsultor.from_settings(settings)
        assert isinstance(db.dialect, SQLiteDialect)
        assert db.open()
        db.engine.release()


class TestQueries:
    """Test the facade against a seeded SQLite file."""

    def test_select_returns_builder(self, people_db):
        builder = people_db.select(["id", "name"])
        assert isinstance(builder, QueryBuilder)
        assert builder.engine is people_db.engine
        assert builder.dialect is people_db.dialect

    def test_person_scenario(self, people_db):
        rows = people_db.select(["id", "name"]).from_("person").order_by("id").offset(1).limit(2).get()
        assert rows == [{"id": 2, "name": "B"}, {"id": 3, "name": "C"}]

    def test_builders_share_the_engine(self, people_db):
        first = people_db.select("*").from_("person")
        second = people_db.select("name").from_("person").where({"id": 5})
        assert first.count() == 5
        assert second.get() == [{"name": "E"}]

    def test_raw_query(self, people_db):
        assert people_db.query("SELECT name FROM person WHERE id = ?", [1]) == [{"name": "A"}]

    def test_tables_list(self, people_db):
        assert sorted(people_db.tables_list()) == ["address", "person"]

    def test_tables_list_unsupported(self):
        db = SQLConsultor(DefaultDialect("sqlite"))
        assert db.tables_list() is None


class TestOpen:

    def test_open_is_idempotent(self, people_db):
        engine_before = people_db.engine._engine
        assert people_db.open()
        assert people_db.engine._engine is engine_before

    def test_switch_without_statement_reconnects(self, people_db):
        engine_before = people_db.engine._engine
        assert people_db.open("other")
        assert people_db.engine._engine is not engine_before
        assert people_db.current_database == "other"

    def test_switch_with_statement(self):
        dialect = Mock(spec=MySQLDialect)
        dialect.engine_name = "sqlite"
        dialect.switch_database.return_value = "SELECT 1"
        db = SQLConsultor(dialect)
        assert db.open()
        engine_before = db.engine._engine

        assert db.open("shop")
        dialect.switch_database.assert_called_once_with("shop")
        assert db.engine._engine is engine_before
        assert db.current_database == "shop"
        assert db.engine.last_query == "SELECT 1"
        db.engine.release()

    def test_open_failure(self, tmp_path):
        db = SQLConsultor("sqlite").db_filename(str(tmp_path / "missing" / "x.db"))
        assert db.open() is False
        assert db.engine.last_error != ""
