"""SQL and query-related constants.

This module contains the clause enums and ordering constants shared by the
query builder and the condition evaluator. It has no dependencies on other
sqlconsultor modules.
"""

from enum import Enum
from typing import Tuple


class ClauseCategory(str, Enum):
    """Clause categories that own bound values.

    Used to key the ordered bound-value lists of a query builder and to
    remember which clause ``and_()``/``or_()`` should extend.
    """

    SELECT = "select"
    ON = "on"
    WHERE = "where"
    HAVING = "having"


class Connector(str, Enum):
    """Logical connectors used to join conditions."""

    AND = "and"
    OR = "or"


class OrderDirection(str, Enum):
    """Accepted ordering directions."""

    ASC = "asc"
    DESC = "desc"


class JoinType(str, Enum):
    """Join flavours exposed through the fluent API."""

    LEFT = "left"
    RIGHT = "right"
    INNER = "inner"
    FULL = "full"


# Bound values are flattened in this order at execution time, regardless of
# where each category's placeholders appear in the SQL text.
BIND_ORDER: Tuple[ClauseCategory, ...] = (
    ClauseCategory.SELECT,
    ClauseCategory.ON,
    ClauseCategory.WHERE,
    ClauseCategory.HAVING,
)

# Sequence in which clauses are emitted by ``QueryBuilder.build()``.
CLAUSE_SEQUENCE: Tuple[str, ...] = (
    "select",
    "from",
    "where",
    "group by",
    "order by",
    "having",
)

PLACEHOLDER = "?"

# Markers that turn an equality condition into a LIKE condition.
WILDCARD_MARKERS: Tuple[str, ...] = ("%", "_")

# Alias of the derived table used by ``QueryBuilder.count()``.
COUNT_ALIAS = "total"
COUNT_TABLE_ALIAS = "tcount"

# Key added to the row returned by ``QueryBuilder.rand()``.
RANDOM_INDEX_KEY = "__index_random"
