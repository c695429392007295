import itertools
import os
import re
import sys
import time
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from sqlconsultor.common.exceptions import (
    connection_error,
    engine_not_supported_error,
    query_execution_error,
)
from sqlconsultor.constants.sql import PLACEHOLDER
from sqlconsultor.engines.types import ErrorKind, QueryStats
from sqlconsultor.logging import get_logger
from sqlconsultor.utils.decorators import traced

if TYPE_CHECKING:
    from sqlconsultor.settings import ConnectionSettings

logger = get_logger(__name__)

Values = Union[Sequence[Any], Mapping[str, Any]]
Row = Dict[str, Any]

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_PLACEHOLDER_RE = re.compile(re.escape(PLACEHOLDER))


class SQLEngine:
    """SQLAlchemy-based execution engine owning one lazy connection.

    The engine is created once per logical database and shared by every
    query builder working on it. The connection is opened on first use (or
    explicitly with ``connect()``) in autocommit mode.

    Failures never raise: they are recorded in ``last_error`` and the call
    returns an empty result. Callers that ignore ``last_error`` simply see
    empty row lists. ``raise_for_error()`` converts the recorded failure
    into a ``ConsultorError`` for callers that prefer exceptions.

    The single connection is not locked; concurrent callers must use one
    engine each or serialize access themselves.

    Example:
        >>> engine = SQLEngine("sqlite", filename="people.db", debug=True)
        >>> rows = engine.query("SELECT * FROM person WHERE id > ?", [2])
        >>> engine.last_error
        ''
        >>> engine.stats().rows_fetched
        3
    """

    def __init__(
        self,
        engine: str,
        *,
        driver: Optional[str] = None,
        host: str = "",
        port: Optional[int] = None,
        user: str = "",
        password: str = "",
        database: str = "",
        filename: str = "",
        charset: str = "",
        debug: bool = False,
        echo: bool = False,
    ):
        """Initialize the engine and validate the engine name.

        Args:
            engine: Engine name as known to SQLAlchemy (sqlite, mysql, ...)
            driver: Optional DBAPI driver (e.g. pymysql)
            host: Server host for server engines
            port: Server port
            user: Database user
            password: Database password
            database: Default database name
            filename: Database file for file-based engines
            charset: Connection character set
            debug: Collect execution statistics
            echo: Echo SQL through SQLAlchemy's logger

        Raises:
            ConsultorError: If no SQLAlchemy dialect exists for the engine name
        """
        self.engine_name = (engine or "").strip().lower()
        self.driver = (driver or "").strip().lower() or None
        self.host = host.strip()
        self.port = port
        self.user = user.strip()
        self.password = password
        self.database = database.strip()
        self.filename = filename.strip()
        self.charset = charset.strip()
        self.debug = debug
        self.echo = echo

        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None
        self._last_query = ""
        self._last_error = ""
        self._last_exception: Optional[Exception] = None
        self._last_error_kind: Optional[ErrorKind] = None
        self._stats = QueryStats()

        if not self.engine_name:
            raise engine_not_supported_error(engine)
        try:
            self.url.get_dialect()
        except SQLAlchemyError as exc:
            raise engine_not_supported_error(engine, cause=exc)

    @classmethod
    def from_settings(cls, settings: 'ConnectionSettings') -> 'SQLEngine':
        """Create an engine from ``ConnectionSettings``."""
        return cls(**settings.engine_kwargs())

    @property
    def url(self) -> URL:
        """SQLAlchemy URL built from the connection parameters."""
        drivername = f"{self.engine_name}+{self.driver}" if self.driver else self.engine_name
        query = {"charset": self.charset} if self.charset else {}
        return URL.create(
            drivername,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port,
            database=self.filename or self.database or None,
            query=query,
        )

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def last_error(self) -> str:
        """Last error message; cleared by the next ``connect()`` or ``query()``."""
        return self._last_error

    @property
    def last_query(self) -> str:
        return self._last_query

    def connect(self, database: str = "") -> bool:
        """Open the connection.

        Args:
            database: Database to connect to instead of the configured one

        Returns:
            True on success. On failure the message is stored in ``last_error``.
        """
        self._clear_errors()
        database = database.strip()
        if database:
            self.database = database

        self.release()
        try:
            self._engine = create_engine(self.url, echo=self.echo)
            self._connection = self._engine.connect().execution_options(
                isolation_level="AUTOCOMMIT"
            )
        except (SQLAlchemyError, ImportError) as exc:
            self._engine = None
            self._connection = None
            self._set_error(ErrorKind.CONNECT, f"Could not connect to the database: {exc}", exc)
            return False

        logger.info(
            "Database connection opened",
            extra={"db.system": self.engine_name, "db.name": self.filename or self.database},
        )
        return True

    def release(self) -> None:
        """Drop the current connection; the next query reconnects."""
        if self._connection is not None:
            try:
                self._connection.close()
            except SQLAlchemyError as exc:
                logger.warning("Closing connection failed: %s", exc)
            self._connection = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def execute(self, query: str, values: Values = ()) -> Optional[CursorResult]:
        """Execute a statement and return the cursor result for manual fetching.

        Positional binding is used when ``values`` is non-empty and the text
        contains ``?`` markers; mapping keys are ignored, only the order of
        the values matters. Otherwise the text is executed as-is.

        Returns:
            The SQLAlchemy cursor result, or None on failure
        """
        if not query or (not self.connected and not self.connect()):
            return None

        self._clear_errors()
        self._start_stats()
        self._last_query = query

        params = self._positional(values)
        try:
            if not params or PLACEHOLDER not in query:
                result = self._connection.exec_driver_sql(
                    query, execution_options={"no_parameters": True}
                )
            else:
                statement, bound = self._to_driver_paramstyle(query, params)
                result = self._connection.exec_driver_sql(statement, bound)
        except SQLAlchemyError as exc:
            self._set_error(ErrorKind.EXECUTE, f"Could not run the SQL query: {exc}", exc)
            return None

        if self.debug:
            self._stats.duration_exec = time.time() - self._stats.start
        return result

    @traced(
        span_name="sqlconsultor.engine.query",
        attribute_getter=lambda self, query, *args, **kwargs: self._span_attributes(query, "query"),
        result_getter=lambda rows: {"db.response.returned_rows": len(rows)},
    )
    def query(self, query: str, values: Values = (), offset: int = 0, limit: int = 0) -> List[Row]:
        """Execute a statement and collect its rows as dictionaries.

        Rows before ``offset`` are read and discarded so only the requested
        window is kept in memory; use this when the SQL itself could not be
        paginated.

        Args:
            query: SQL text with optional ``?`` placeholders
            values: Positional values for the placeholders
            offset: Rows to skip before collecting
            limit: Maximum rows to collect, 0 for all

        Returns:
            List of rows; empty on failure (see ``last_error``)
        """
        rows: List[Row] = []
        result = self.execute(query, values)
        if result is None:
            return rows

        try:
            started = time.time()
            if result.returns_rows:
                mappings = result.mappings()
                while offset > 0 and mappings.fetchone() is not None:
                    offset -= 1
                if limit <= 0:
                    rows = [dict(row) for row in mappings.all()]
                else:
                    rows = [dict(row) for row in mappings.fetchmany(limit)]
            result.close()
            if self.debug:
                self._stats.rows_fetched = len(rows)
                self._stats.duration_fetch = time.time() - started
        except SQLAlchemyError as exc:
            self._set_error(ErrorKind.FETCH, f"Could not fetch rows: {exc}", exc)
            return rows

        logger.debug(
            "SQL query executed",
            extra={
                "db.system": self.engine_name,
                "row_count": str(len(rows)),
                "duration.seconds": f"{self._stats.duration_exec:.6f}",
            },
        )
        return rows

    def fetch_dataframe(self, query: str, values: Values = ()) -> pd.DataFrame:
        """Execute a query and return its rows as a pandas DataFrame."""
        return pd.DataFrame.from_records(self.query(query, values))

    def test_connection(self) -> bool:
        """Check that the database answers a trivial query."""
        rows = self.query("SELECT 1 AS test")
        return bool(rows) and rows[0].get("test") == 1

    def stats(self) -> Optional[QueryStats]:
        """Diagnostics of the last statement, or None when debug is disabled."""
        if not self.debug:
            return None
        return self._stats.model_copy()

    def raise_for_error(self) -> None:
        """Raise the last recorded failure as a ``ConsultorError``, if any."""
        if self._last_exception is None:
            return
        if self._last_error_kind == ErrorKind.CONNECT:
            raise connection_error(
                self._last_error,
                engine=self.engine_name,
                host=self.host or self.filename or None,
                cause=self._last_exception,
            )
        raise query_execution_error(self._last_query, self._last_exception)

    def get_connection_info(self) -> Dict[str, Any]:
        """Get connection information for debugging/logging (no password)."""
        return {
            "engine": self.engine_name,
            "driver": self.driver,
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "filename": self.filename,
            "connected": self.connected,
        }

    def _positional(self, values: Values) -> Tuple[Any, ...]:
        if isinstance(values, Mapping):
            return tuple(values.values())
        return tuple(values or ())

    def _to_driver_paramstyle(
        self, query: str, params: Tuple[Any, ...]
    ) -> Tuple[str, Union[Tuple[Any, ...], Dict[str, Any]]]:
        """Rewrite ``?`` markers into the DBAPI driver's paramstyle."""
        style = self._connection.dialect.paramstyle
        if style == "qmark":
            return query, params
        if style in ("format", "pyformat"):
            return query.replace("%", "%%").replace(PLACEHOLDER, "%s"), params

        counter = itertools.count(1)
        if style == "numeric":
            return _PLACEHOLDER_RE.sub(lambda _: f":{next(counter)}", query), params
        # named
        statement = _PLACEHOLDER_RE.sub(lambda _: f":p{next(counter)}", query)
        return statement, {f"p{index}": value for index, value in enumerate(params, start=1)}

    def _clear_errors(self) -> None:
        self._last_error = ""
        self._last_exception = None
        self._last_error_kind = None

    def _set_error(self, kind: ErrorKind, message: str, exc: Exception) -> None:
        self._last_error = message
        self._last_exception = exc
        self._last_error_kind = kind
        logger.error(
            message,
            extra={"db.system": self.engine_name, "error.stage": kind.value},
            exc_info=self.debug,
        )

    def _start_stats(self) -> None:
        if not self.debug:
            return
        file, line = self._caller()
        self._stats = QueryStats(file=file, line=line, start=time.time())

    @staticmethod
    def _caller() -> Tuple[str, int]:
        """Locate the first stack frame outside this package."""
        frame = sys._getframe(1)
        while frame is not None:
            filename = os.path.abspath(frame.f_code.co_filename)
            if not filename.startswith(_PACKAGE_DIR + os.sep):
                return filename, frame.f_lineno
            frame = frame.f_back
        return "", 0

    def _span_attributes(self, query: str, operation: str) -> Dict[str, Any]:
        """Build OpenTelemetry span attributes for SQL operations."""
        statement = (query or "").strip()
        if len(statement) > 4096:
            statement = f"{statement[:4093]}..."
        return {
            "db.system": self.engine_name,
            "db.operation": operation,
            "db.name": self.filename or self.database or None,
            "db.statement": statement or None,
        }

    def __del__(self):
        """Clean up the connection on deletion."""
        if getattr(self, "_engine", None) is not None:
            self.release()
