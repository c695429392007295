import os
import random
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from sqlconsultor.common.exceptions import ErrorCode, QueryBuilderWarning
from sqlconsultor.constants.sql import (
    BIND_ORDER,
    CLAUSE_SEQUENCE,
    COUNT_ALIAS,
    COUNT_TABLE_ALIAS,
    RANDOM_INDEX_KEY,
    ClauseCategory,
    Connector,
    JoinType,
    OrderDirection,
)
from sqlconsultor.dialects import BaseDialect, get_dialect
from sqlconsultor.engines import SQLEngine
from sqlconsultor.logging import get_logger
from sqlconsultor.query_builder.conditions import evaluate_conditions

logger = get_logger(__name__)

Row = Dict[str, Any]
FetchResult = Union[List[Row], Row]
ColumnSpec = Union[str, Sequence[Any], Mapping[str, Any]]

_DIRECTIONS = ("", OrderDirection.ASC.value, OrderDirection.DESC.value)


@dataclass
class Fragment:
    """Condition text that grows with ``and``/``or`` connectors.

    The first time another condition is connected, the existing text is
    wrapped in parentheses; every connected condition is wrapped as well.
    """

    sql: str = ""
    wrapped: bool = False

    def replace(self, sql: str) -> None:
        self.sql = sql
        self.wrapped = False

    def connect(self, connector: Optional[Connector], sql: str) -> None:
        if connector is None or not self.sql:
            self.replace(sql)
            return
        if not sql:
            return
        if not self.wrapped:
            self.sql = f"({self.sql})"
            self.wrapped = True
        self.sql += f" {connector.value} ({sql})"


@dataclass
class TableEntry:
    table: str


@dataclass
class JoinEntry:
    join_type: str
    table: str
    on: Fragment = field(default_factory=Fragment)
    values: List[Any] = field(default_factory=list)

    @property
    def has_on(self) -> bool:
        return bool(self.on.sql)


class QueryBuilder:
    """Fluent builder for parameterized SELECT statements.

    Clause-mutating methods return the builder so calls can be chained.
    Terminal methods (``get``, ``all``, ``count``, ``first``, ``last``,
    ``rand``, ``fetch``) build the SQL and run it on the shared engine.

    Bound values are kept per clause category and flattened in the fixed
    order ``select, on, where, having`` when the statement runs.

    A builder holds the state of one logical query and is not safe for
    concurrent mutation.

    Example:
        >>> rows = (
        ...     QueryBuilder(engine)
        ...     .select(["id", "name"])
        ...     .from_("person")
        ...     .where({"name": "A%"})
        ...     .or_({"id": [4, 5]})
        ...     .order_by("id")
        ...     .limit(2)
        ...     .get()
        ... )
    """

    def __init__(self, engine: SQLEngine, dialect: Optional[BaseDialect] = None):
        """Initialize the builder.

        Args:
            engine: Engine that executes the built statements
            dialect: Dialect driver; resolved from the engine name when omitted
        """
        self.engine = engine
        self.dialect = dialect or get_dialect(engine.engine_name)

        self._select = ""
        self._from: List[Union[TableEntry, JoinEntry]] = []
        self._where = Fragment()
        self._having = Fragment()
        self._order_by = ""
        self._offset = 0
        self._limit = 0
        self._using_join = False
        self._last_bind: Optional[ClauseCategory] = None
        self._values: Dict[ClauseCategory, List[Any]] = {category: [] for category in BIND_ORDER}

    # Clause construction

    def select(self, columns: ColumnSpec) -> 'QueryBuilder':
        """Set the column list, replacing any previous one.

        Accepted forms::

            "id, name as n"
            ["id", "name as n", {"total": "count(id)"}]
            {"n": "name", "total": "count(id)"}

        Nested lists are flattened; string keys become ``as`` aliases.
        """
        if isinstance(columns, str):
            select = columns.strip()
        else:
            select = self._columns(columns)
        if select:
            self._select = select
        return self

    def _columns(self, columns: Union[Sequence[Any], Mapping[str, Any]]) -> str:
        items = columns.items() if isinstance(columns, Mapping) else enumerate(columns)
        parts: List[str] = []
        for key, name in items:
            if isinstance(name, (list, tuple, Mapping)):
                name = self._columns(name)
            name = str(name).strip()
            if not name:
                continue
            if isinstance(key, str):
                name += f" as {key}"
            parts.append(name)
        return ", ".join(parts)

    @staticmethod
    def _table_name(table: str, alias: str = "") -> str:
        table = table.strip()
        alias = alias.strip()
        if table and alias:
            table += f" as {alias}"
        return table

    def from_(self, table: str, alias: str = "") -> 'QueryBuilder':
        table = self._table_name(table, alias)
        if table:
            self._from.append(TableEntry(table))
        return self

    def join(self, join_type: Union[JoinType, str], table: str, alias: str = "") -> 'QueryBuilder':
        """Append a join; attach its condition with ``on()``."""
        table = self._table_name(table, alias)
        if table:
            kind = join_type.value if isinstance(join_type, JoinType) else str(join_type).strip()
            self._from.append(JoinEntry(join_type=kind, table=table))
            self._using_join = True
        return self

    def left_join(self, table: str, alias: str = "") -> 'QueryBuilder':
        return self.join(JoinType.LEFT, table, alias)

    def right_join(self, table: str, alias: str = "") -> 'QueryBuilder':
        return self.join(JoinType.RIGHT, table, alias)

    def inner_join(self, table: str, alias: str = "") -> 'QueryBuilder':
        return self.join(JoinType.INNER, table, alias)

    def full_join(self, table: str, alias: str = "") -> 'QueryBuilder':
        return self.join(JoinType.FULL, table, alias)

    def on(self, *descriptors: Any) -> 'QueryBuilder':
        """Attach a condition to the most recent join."""
        return self._update_on(descriptors)

    def where(self, *descriptors: Any) -> 'QueryBuilder':
        """Set the WHERE condition, replacing any previous one.

        Descriptors are literal tokens (``"or"``, ``"id >"``), single-key
        mappings (``{"id": 5}``, ``{"id": [1, 2]}``, ``{"name": "A%"}``,
        ``{"deleted_at": None}``) or value lists completing a literal
        (``[5]``). See ``evaluate_conditions``.
        """
        return self._update_where(descriptors)

    def having(self, *descriptors: Any) -> 'QueryBuilder':
        """Set the HAVING condition, replacing any previous one."""
        return self._update_having(descriptors)

    def and_(self, *descriptors: Any) -> 'QueryBuilder':
        """Extend the last condition clause (on, where or having) with AND."""
        return self._update_and_or(descriptors, Connector.AND)

    def or_(self, *descriptors: Any) -> 'QueryBuilder':
        """Extend the last condition clause (on, where or having) with OR."""
        return self._update_and_or(descriptors, Connector.OR)

    def _update_on(self, descriptors: Iterable[Any], connector: Optional[Connector] = None) -> 'QueryBuilder':
        if not self._using_join:
            self._warn(
                "on() requires a previous join",
                ErrorCode.MISSING_JOIN,
            )
            return self

        result = evaluate_conditions(descriptors, Connector.AND)
        entry = self._from[-1]
        if isinstance(entry, JoinEntry):
            entry.on.connect(connector, result.sql)
            if connector is None:
                entry.values = list(result.values)
            else:
                entry.values.extend(result.values)
        else:
            self._warn(
                f"on() ignored: the last table '{entry.table}' is not a join",
                ErrorCode.MISSING_JOIN,
            )

        self._values[ClauseCategory.ON] = [
            value for item in self._from if isinstance(item, JoinEntry) for value in item.values
        ]
        self._last_bind = ClauseCategory.ON
        return self

    def _update_where(self, descriptors: Iterable[Any], connector: Optional[Connector] = None) -> 'QueryBuilder':
        result = evaluate_conditions(descriptors, Connector.AND)
        self._where.connect(connector, result.sql)
        self._bind(ClauseCategory.WHERE, result.values, replace=connector is None)
        return self

    def _update_having(self, descriptors: Iterable[Any], connector: Optional[Connector] = None) -> 'QueryBuilder':
        result = evaluate_conditions(descriptors, Connector.AND)
        self._having.connect(connector, result.sql)
        self._bind(ClauseCategory.HAVING, result.values, replace=connector is None)
        return self

    def _update_and_or(self, descriptors: Iterable[Any], connector: Connector) -> 'QueryBuilder':
        if self._last_bind == ClauseCategory.ON:
            return self._update_on(descriptors, connector)
        elif self._last_bind == ClauseCategory.WHERE:
            return self._update_where(descriptors, connector)
        elif self._last_bind == ClauseCategory.HAVING:
            return self._update_having(descriptors, connector)

        self._warn(
            f"{connector.value}_() requires a previous on(), where() or having()",
            ErrorCode.MISSING_PREDECESSOR,
        )
        return self

    def _bind(self, category: ClauseCategory, values: List[Any], replace: bool = True) -> None:
        if replace:
            self._values[category] = list(values)
        else:
            self._values[category].extend(values)
        self._last_bind = category

    def _order_by_raw(self, default_direction: OrderDirection, columns: Iterable[Any]) -> str:
        parts: List[str] = []
        for column in columns:
            direction = default_direction.value
            if isinstance(column, (list, tuple)):
                if not column or not str(column[0]).strip():
                    self._warn(
                        "Ordering requires at least a column name",
                        ErrorCode.INVALID_ORDER_DIRECTION,
                    )
                    continue
                if len(column) > 1:
                    direction = str(column[1] or "").strip().lower()
                    if direction not in _DIRECTIONS:
                        self._warn(
                            f'Ordering direction must be "asc" or "desc", found "{direction}"',
                            ErrorCode.INVALID_ORDER_DIRECTION,
                        )
                        continue
                column = column[0]

            name = str(column).replace("\t", " ").strip()
            if not name:
                continue
            # A direction written inside the name wins over the default one
            if " " not in name and direction:
                name += f" {direction}"
            parts.append(name)
        return ", ".join(parts)

    def order_by(self, *columns: Any) -> 'QueryBuilder':
        """Set the ordering, ascending unless a direction is given.

        Examples::

            order_by("column_1", "column_2")
            order_by("column_1 desc", "column_2 asc")
            order_by(("column_1", "desc"), "column_2")
        """
        order = self._order_by_raw(OrderDirection.ASC, columns)
        if order:
            self._order_by = order
        return self

    def order_by_desc(self, *columns: Any) -> 'QueryBuilder':
        """Like ``order_by()`` but descending by default."""
        order = self._order_by_raw(OrderDirection.DESC, columns)
        if order:
            self._order_by = order
        return self

    def group_by(self, *columns: str) -> 'QueryBuilder':
        # Grouping is not supported; raw GROUP BY text can go in select()/from_().
        return self

    def offset(self, start: int) -> 'QueryBuilder':
        """Zero-based index of the first row returned by ``get()``."""
        if start >= 0:
            self._offset = start
        return self

    def limit(self, limit: int) -> 'QueryBuilder':
        """Maximum number of rows returned by ``get()``; 0 for all."""
        if limit >= 0:
            self._limit = limit
        return self

    def set_values(self, values: Sequence[Any]) -> 'QueryBuilder':
        """Replace the WHERE bound values (for raw ``?`` conditions)."""
        self._values[ClauseCategory.WHERE] = list(values)
        return self

    # Rendering

    def _render_from(self) -> str:
        body = ""
        for entry in self._from:
            if isinstance(entry, JoinEntry):
                line = f"{entry.join_type} join {entry.table}"
                if entry.has_on:
                    line += f" on {entry.on.sql}"
                body += f"{os.linesep} {line}"
            elif body:
                body += f", {entry.table}"
            else:
                body = entry.table
        return body.strip()

    def _clauses(self) -> Dict[str, str]:
        return {
            "select": self._select,
            "from": self._render_from(),
            "where": self._where.sql,
            "group by": "",
            "order by": self._order_by,
            "having": self._having.sql,
        }

    def build(self) -> Optional[str]:
        """Render the statement, one clause per line.

        Returns:
            SQL text with ``?`` placeholders, or None if ``select()`` was never called
        """
        if not self._select:
            return None

        clauses = self._clauses()
        query = ""
        for sentence in CLAUSE_SEQUENCE:
            body = clauses[sentence].strip()
            if body:
                query += f"{sentence} {body}{os.linesep}"
        return query

    def bound_values(self) -> List[Any]:
        """Values in execution order: select, on, where, having."""
        return [value for category in BIND_ORDER for value in self._values[category]]

    # Execution

    def _query_with_values(self, query: str, offset: int = 0, limit: int = 0) -> List[Row]:
        return self.engine.query(query, self.bound_values(), offset=offset, limit=limit)

    def _build_and_run(self, offset: int = 0, limit: int = 0, query: Optional[str] = None) -> List[Row]:
        if query is None:
            query = self.build()
        if not query:
            return []

        offset = max(offset, 0)
        limit = max(limit, 0)
        if offset > 0 or limit > 0:
            spliced = self.dialect.splice_pagination(query, offset, limit)
            if spliced is None:
                # No native pagination: every row up to offset + limit is
                # transferred and the window is cut client-side. Slow on big tables.
                logger.debug(
                    "Dialect cannot paginate, slicing rows client-side",
                    extra={"db.system": self.dialect.engine_name, "offset": offset, "limit": limit},
                )
                return self._query_with_values(query, offset=offset, limit=limit)
            query = spliced

        return self._query_with_values(query)

    def _get_all_or_one(self, offset: int, limit: int) -> FetchResult:
        rows = self._build_and_run(offset, limit)
        if limit == 1 and rows:
            return rows[0]
        return rows

    def get(self) -> List[Row]:
        """Rows within ``offset()``/``limit()``; all rows if neither was set.

        The SQL is rebuilt on every call, so later clause changes apply.
        """
        return self._build_and_run(self._offset, self._limit)

    def all(self) -> List[Row]:
        """All rows, ignoring ``offset()``/``limit()``."""
        return self._build_and_run()

    def count(self) -> int:
        """Number of rows the query matches, or -1 if it failed."""
        query = self.build()
        if not query:
            return -1

        wrapped = f"SELECT count(*) AS {COUNT_ALIAS} FROM ({query}) AS {COUNT_TABLE_ALIAS}"
        rows = self._query_with_values(wrapped)
        if rows and rows[0].get(COUNT_ALIAS) is not None:
            return int(rows[0][COUNT_ALIAS])
        return -1

    def first(self, count: int = 1) -> FetchResult:
        """First ``count`` rows; a single row is returned unwrapped."""
        if count <= 0:
            count = 1
        return self._get_all_or_one(0, count)

    def last(self, count: int = 1) -> Optional[FetchResult]:
        """Last ``count`` rows; a single row is returned unwrapped.

        Runs ``count()`` first, then fetches. Rows written between the two
        round-trips may shift the window.

        Returns:
            Rows, ``[]`` when the query matches nothing, None if counting failed
        """
        if count <= 0:
            count = 1

        total = self.count()
        if total > 0:
            return self._get_all_or_one(max(total - count, 0), count)
        if total == 0:
            return []
        return None

    def rand(self) -> Optional[FetchResult]:
        """One row picked uniformly at random.

        The row carries its zero-based position under ``RANDOM_INDEX_KEY``.
        Like ``last()``, counting and fetching are separate round-trips.
        """
        total = self.count()
        if total > 0:
            index = random.randint(0, total - 1)
            result = self.fetch(index)
            if isinstance(result, dict):
                result[RANDOM_INDEX_KEY] = index
            return result
        if total == 0:
            return []
        return None

    def fetch(self, offset: int) -> FetchResult:
        """Row at zero-based position ``offset``, or ``[]`` if there is none."""
        return self._get_all_or_one(max(offset, 0), 1)

    def last_query(self) -> str:
        return self.engine.last_query

    def _warn(self, message: str, error_code: ErrorCode) -> None:
        logger.warning(message, extra={"error_code": error_code.value})
        warnings.warn(message, QueryBuilderWarning, stacklevel=4)
