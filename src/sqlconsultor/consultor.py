"""Entry point tying an engine and a dialect driver together.

``SQLConsultor`` owns the shared ``SQLEngine`` of one logical database and
hands out query builders bound to it.

Example:
    >>> from sqlconsultor import SQLConsultor
    >>>
    >>> db = SQLConsultor("sqlite").db_filename("people.db")
    >>> db.open()
    True
    >>> db.select("*").from_("person").where({"name": ["B", "C"]}).get()
    [{'id': 2, 'name': 'B'}, {'id': 3, 'name': 'C'}]
"""

from typing import TYPE_CHECKING, Any, List, Optional, Union

from sqlconsultor.dialects import BaseDialect, get_dialect
from sqlconsultor.engines import SQLEngine
from sqlconsultor.engines.base import Row, Values
from sqlconsultor.logging import get_logger
from sqlconsultor.query_builder import QueryBuilder
from sqlconsultor.query_builder.builder import ColumnSpec

if TYPE_CHECKING:
    from sqlconsultor.settings import ConnectionSettings

logger = get_logger(__name__)


class SQLConsultor:
    """Connection facade for one logical database.

    Args:
        engine_or_dialect: Engine name (``"sqlite"``, ``"mysql+pymysql"``, ...)
            or a dialect driver instance
        debug: Collect execution statistics on the engine

    Raises:
        ConsultorError: If the engine name is not supported
    """

    def __init__(self, engine_or_dialect: Union[str, BaseDialect], debug: bool = False):
        if isinstance(engine_or_dialect, BaseDialect):
            self.dialect = engine_or_dialect
            engine_name = self.dialect.engine_name
            driver = None
        else:
            engine_name, _, driver = str(engine_or_dialect).strip().partition("+")
            self.dialect = get_dialect(engine_name)

        self.engine = SQLEngine(engine_name, driver=driver or None, debug=debug)
        self._database = ""
        self._current_database = ""

    @classmethod
    def from_settings(cls, settings: 'ConnectionSettings') -> 'SQLConsultor':
        """Create a consultor from ``ConnectionSettings``."""
        consultor = cls(get_dialect(settings.engine), debug=settings.debug)
        consultor.engine = SQLEngine.from_settings(settings)
        consultor._database = consultor.engine.database
        return consultor

    # Connection parameters

    def host(self, host: str) -> 'SQLConsultor':
        self.engine.host = host.strip()
        return self

    def db_filename(self, filename: str) -> 'SQLConsultor':
        self.engine.filename = filename.strip()
        return self

    def user(self, user: str) -> 'SQLConsultor':
        self.engine.user = user.strip()
        return self

    def password(self, password: str) -> 'SQLConsultor':
        self.engine.password = password.strip()
        return self

    def charset(self, charset: str) -> 'SQLConsultor':
        self.engine.charset = charset.strip()
        return self

    def default_database(self, database: str) -> 'SQLConsultor':
        """Database used by ``open()`` when none is given."""
        self._database = database.strip()
        return self

    @property
    def connected(self) -> bool:
        return self.engine.connected

    @property
    def current_database(self) -> str:
        return self._current_database

    def open(self, database: str = "") -> bool:
        """Connect, or switch the open connection to another database.

        Switching uses the dialect's statement when it has one; otherwise
        the connection is released and reopened on the new database.

        Args:
            database: Database to use; defaults to ``default_database()``

        Returns:
            True when connected (see ``engine.last_error`` otherwise)
        """
        database = database.strip() or self._database

        if self.engine.connected and database and database != self._current_database:
            statement = self.dialect.switch_database(database)
            if statement:
                if self.engine.execute(statement) is not None:
                    self._current_database = database
                    logger.info("Active database switched", extra={"db.name": database})
            else:
                self.engine.release()
                self._current_database = ""

        if not self.engine.connected and self.engine.connect(database):
            self._current_database = database

        return self.engine.connected

    def select(self, columns: ColumnSpec = "*") -> QueryBuilder:
        """Start a new query builder on the shared engine."""
        return QueryBuilder(self.engine, self.dialect).select(columns)

    def query(self, query: str, values: Values = ()) -> List[Row]:
        """Run raw SQL with optional ``?`` values."""
        return self.engine.query(query, values)

    def tables_list(self) -> Optional[List[Any]]:
        """Names of the user tables, or None if the engine cannot list them."""
        statement = self.dialect.list_tables_query()
        if not statement:
            return None

        rows = self.engine.query(statement)
        if self.engine.last_error:
            return None
        # MySQL names the column "Tables_in_<db>", SQLite "name"; take the first.
        return [next(iter(row.values())) for row in rows if row]

    def __repr__(self) -> str:
        return f"SQLConsultor(dialect={self.dialect!r}, connected={self.connected})"
