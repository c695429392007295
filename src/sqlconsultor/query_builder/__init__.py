"""Fluent SELECT builder and condition evaluator.

Builders accumulate clause fragments and their bound values, render them
into parameterized SQL and run the result through a shared ``SQLEngine``.
Engine-specific pagination is delegated to the dialect driver; when the
driver declines, rows are windowed client-side.

Placeholders are always ``?``; the engine rewrites them into the DBAPI
driver's parameter style at execution time.

Example:
    >>> from sqlconsultor.engines import SQLEngine
    >>> from sqlconsultor.query_builder import QueryBuilder
    >>>
    >>> engine = SQLEngine("sqlite", filename="people.db")
    >>> builder = (
    ...     QueryBuilder(engine)
    ...     .select("*")
    ...     .from_("person")
    ...     .where({"name": ["B", "C"]})
    ...     .order_by("id")
    ... )
    >>> print(builder.build())
    select *
    from person
    where name in (?,?)
    order by id asc
    >>> builder.bound_values()
    ['B', 'C']
"""

from sqlconsultor.query_builder.builder import (
    FetchResult,
    Fragment,
    JoinEntry,
    QueryBuilder,
    TableEntry,
)
from sqlconsultor.query_builder.conditions import (
    Bound,
    Condition,
    ConditionResult,
    Equals,
    In,
    IsNull,
    Like,
    Literal,
    classify_descriptor,
    evaluate_conditions,
)

__all__ = [
    "QueryBuilder",
    "FetchResult",
    "Fragment",
    "JoinEntry",
    "TableEntry",
    "evaluate_conditions",
    "classify_descriptor",
    "Condition",
    "ConditionResult",
    "Literal",
    "Equals",
    "In",
    "IsNull",
    "Like",
    "Bound",
]
