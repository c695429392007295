"""Unit tests for the SQLAlchemy execution engine."""

import pandas as pd
import pytest
from unittest.mock import Mock

from sqlconsultor.common.exceptions import ConsultorError, ErrorCode
from sqlconsultor.engines import ErrorKind, QueryStats, SQLEngine
from sqlconsultor.settings import ConnectionSettings


class TestConstruction:

    def test_unknown_engine_is_fatal(self):
        with pytest.raises(ConsultorError) as exc_info:
            SQLEngine("nosuchdb")
        assert exc_info.value.error_code == ErrorCode.ENGINE_NOT_SUPPORTED

    def test_empty_engine_is_fatal(self):
        with pytest.raises(ConsultorError):
            SQLEngine("  ")

    def test_url_for_server_engine(self):
        engine = SQLEngine(
            "mysql",
            driver="pymysql",
            host="db.local",
            port=3306,
            user="app",
            password="secret",
            database="shop",
            charset="utf8mb4",
        )
        url = engine.url
        assert url.drivername == "mysql+pymysql"
        assert url.host == "db.local"
        assert url.database == "shop"
        assert url.query == {"charset": "utf8mb4"}
        assert not engine.connected

    def test_url_prefers_filename(self):
        engine = SQLEngine("sqlite", filename="people.db", database="ignored")
        assert engine.url.database == "people.db"

    def test_from_settings(self):
        settings = ConnectionSettings(engine="sqlite", filename="people.db", debug=True)
        engine = SQLEngine.from_settings(settings)
        assert engine.filename == "people.db"
        assert engine.debug is True

    def test_connection_info_hides_password(self):
        info = SQLEngine("sqlite", password="secret").get_connection_info()
        assert "password" not in info
        assert info["engine"] == "sqlite"


class TestQuery:
    """Test statement execution on an in-memory SQLite database."""

    def test_lazy_connect(self):
        engine = SQLEngine("sqlite")
        assert not engine.connected
        assert engine.query("SELECT 1 AS one") == [{"one": 1}]
        assert engine.connected
        engine.release()
        assert not engine.connected

    def test_positional_values(self, sqlite_engine):
        rows = sqlite_engine.query("SELECT name FROM person WHERE id > ? AND id < ?", [1, 4])
        assert [row["name"] for row in rows] == ["B", "C"]

    def test_mapping_keys_are_ignored(self, sqlite_engine):
        rows = sqlite_engine.query("SELECT name FROM person WHERE id = ?", {"anything": 5})
        assert rows == [{"name": "E"}]

    def test_text_without_placeholder_runs_directly(self, sqlite_engine):
        rows = sqlite_engine.query("SELECT count(*) AS total FROM person WHERE name LIKE '%'", [1])
        assert rows == [{"total": 5}]

    def test_offset_and_limit_window(self, sqlite_engine):
        rows = sqlite_engine.query("SELECT id FROM person ORDER BY id", offset=1, limit=2)
        assert rows == [{"id": 2}, {"id": 3}]

    def test_offset_past_end(self, sqlite_engine):
        assert sqlite_engine.query("SELECT id FROM person", offset=10) == []

    def test_statement_without_rows(self, sqlite_engine):
        assert sqlite_engine.query("UPDATE person SET city = ? WHERE id = ?", ["Cali", 2]) == []
        assert sqlite_engine.last_error == ""
        assert sqlite_engine.query("SELECT city FROM person WHERE id = 2") == [{"city": "Cali"}]

    def test_failure_is_recorded(self, sqlite_engine):
        assert sqlite_engine.query("SELECT * FROM missing_table") == []
        assert sqlite_engine.last_error.startswith("Could not run the SQL query")
        assert sqlite_engine.last_query == "SELECT * FROM missing_table"

    def test_next_query_clears_error(self, sqlite_engine):
        sqlite_engine.query("SELECT * FROM missing_table")
        sqlite_engine.query("SELECT 1")
        assert sqlite_engine.last_error == ""

    def test_raise_for_error(self, sqlite_engine):
        sqlite_engine.raise_for_error()
        sqlite_engine.query("SELECT * FROM missing_table")
        with pytest.raises(ConsultorError) as exc_info:
            sqlite_engine.raise_for_error()
        assert exc_info.value.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert exc_info.value.details["query"] == "SELECT * FROM missing_table"

    def test_connection_failure(self, tmp_path):
        engine = SQLEngine("sqlite", filename=str(tmp_path / "missing" / "people.db"))
        assert engine.connect() is False
        assert engine.last_error.startswith("Could not connect to the database")
        assert engine.query("SELECT 1") == []
        with pytest.raises(ConsultorError) as exc_info:
            engine.raise_for_error()
        assert exc_info.value.error_code == ErrorCode.CONNECTION_ERROR

    def test_execute_returns_cursor(self, sqlite_engine):
        result = sqlite_engine.execute("SELECT id FROM person WHERE id = ?", [3])
        assert result.scalar() == 3

    def test_empty_query(self, sqlite_engine):
        assert sqlite_engine.execute("") is None
        assert sqlite_engine.query("") == []

    def test_fetch_dataframe(self, sqlite_engine):
        df = sqlite_engine.fetch_dataframe("SELECT id, name FROM person WHERE id <= ?", [2])
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["id", "name"]
        assert df["name"].tolist() == ["A", "B"]

    def test_test_connection(self, sqlite_engine):
        assert sqlite_engine.test_connection() is True


class TestStats:

    def test_disabled_without_debug(self):
        engine = SQLEngine("sqlite")
        engine.query("SELECT 1")
        assert engine.stats() is None

    def test_collected_with_debug(self, sqlite_engine):
        sqlite_engine.query("SELECT * FROM person WHERE id > ?", [2])
        stats = sqlite_engine.stats()
        assert isinstance(stats, QueryStats)
        assert stats.rows_fetched == 3
        assert stats.file.endswith("test_engine.py")
        assert stats.line > 0
        assert stats.start > 0
        assert "start_date" in stats.to_dict()

    def test_snapshot_is_a_copy(self, sqlite_engine):
        sqlite_engine.query("SELECT * FROM person")
        stats = sqlite_engine.stats()
        sqlite_engine.query("SELECT * FROM person WHERE id = 1")
        assert stats.rows_fetched == 5


class TestParamstyle:
    """Test rewriting of ``?`` markers for non-qmark DBAPI drivers."""

    def _engine(self, paramstyle):
        engine = SQLEngine("sqlite")
        engine._connection = Mock()
        engine._connection.dialect.paramstyle = paramstyle
        return engine

    def test_qmark_unchanged(self):
        statement, params = self._engine("qmark")._to_driver_paramstyle("a = ? and b = ?", (1, 2))
        assert statement == "a = ? and b = ?"
        assert params == (1, 2)

    def test_format_escapes_percent(self):
        statement, params = self._engine("format")._to_driver_paramstyle("a like '%x' and b = ?", (1,))
        assert statement == "a like '%%x' and b = %s"
        assert params == (1,)

    def test_numeric(self):
        statement, _ = self._engine("numeric")._to_driver_paramstyle("a = ? and b = ?", (1, 2))
        assert statement == "a = :1 and b = :2"

    def test_named(self):
        statement, params = self._engine("named")._to_driver_paramstyle("a = ? and b = ?", (1, 2))
        assert statement == "a = :p1 and b = :p2"
        assert params == {"p1": 1, "p2": 2}

    def test_error_kinds(self):
        assert ErrorKind("connect") == ErrorKind.CONNECT
