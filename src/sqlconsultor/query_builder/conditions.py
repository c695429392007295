"""Condition evaluation for WHERE, ON and HAVING clauses.

Callers pass loosely-typed descriptors; they are classified into a closed
set of condition variants before rendering:

    =====================  ===================  ======================
    Descriptor             Variant              Rendered as
    =====================  ===================  ======================
    ``"or"``               ``Literal``          ``or`` (verbatim)
    ``{"id": 5}``          ``Equals``           ``id = ?``
    ``{"id": [1, 2]}``     ``In``               ``id in (?,?)``
    ``{"deleted": None}``  ``IsNull``           ``deleted is null``
    ``{"name": "A%"}``     ``Like``             ``name like ?``
    ``[5]`` / ``(1, 2)``   ``Bound``            ``?`` / ``(?,?)``
    =====================  ===================  ======================

``Bound`` completes a preceding literal, e.g. ``where("id >", [2])``.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Tuple, Union

from sqlconsultor.constants.sql import PLACEHOLDER, WILDCARD_MARKERS, Connector


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Equals:
    column: str
    value: Any


@dataclass(frozen=True)
class In:
    column: str
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class IsNull:
    column: str


@dataclass(frozen=True)
class Like:
    column: str
    pattern: str


@dataclass(frozen=True)
class Bound:
    values: Tuple[Any, ...]


Condition = Union[Literal, Equals, In, IsNull, Like, Bound]


@dataclass(frozen=True)
class ConditionResult:
    """Rendered SQL fragment and its bound values, in placeholder order."""

    sql: str = ""
    values: List[Any] = field(default_factory=list)


def _markers(count: int) -> str:
    if count <= 0:
        return "(null)"
    return "(" + ",".join([PLACEHOLDER] * count) + ")"


def _classify_value(column: str, value: Any) -> Condition:
    if isinstance(value, (list, tuple, set, frozenset)):
        return In(column, tuple(value))
    if value is None:
        return IsNull(column)
    if isinstance(value, str) and any(marker in value for marker in WILDCARD_MARKERS):
        return Like(column, value)
    return Equals(column, value)


def classify_descriptor(descriptor: Any) -> List[Condition]:
    """Turn one descriptor into condition variants.

    Mappings yield one variant per key (in key order), lists and tuples yield
    a ``Bound`` variant, and anything else is a literal SQL token.
    """
    if isinstance(descriptor, (Literal, Equals, In, IsNull, Like, Bound)):
        return [descriptor]
    if isinstance(descriptor, Mapping):
        return [_classify_value(str(column), value) for column, value in descriptor.items()]
    if isinstance(descriptor, (list, tuple)):
        return [Bound(tuple(descriptor))]
    return [Literal(str(descriptor))]


def _render(condition: Condition) -> Tuple[str, List[Any]]:
    if isinstance(condition, In):
        return f"{condition.column} in {_markers(len(condition.values))}", list(condition.values)
    if isinstance(condition, IsNull):
        return f"{condition.column} is null", []
    if isinstance(condition, Like):
        return f"{condition.column} like {PLACEHOLDER}", [condition.pattern]
    if isinstance(condition, Equals):
        return f"{condition.column} = {PLACEHOLDER}", [condition.value]
    if isinstance(condition, Bound):
        if len(condition.values) == 1:
            return PLACEHOLDER, list(condition.values)
        return _markers(len(condition.values)), list(condition.values)
    raise TypeError(f"Unexpected condition variant: {condition!r}")


def evaluate_conditions(
    descriptors: Iterable[Any],
    connector: Union[Connector, str] = Connector.AND,
) -> ConditionResult:
    """Render descriptors into one SQL fragment plus ordered values.

    Non-literal conditions are joined with ``connector``. A literal token is
    inserted verbatim and suppresses the connector before the next
    condition, so explicit operators are never doubled.

    Args:
        descriptors: Literal tokens, ``{column: value}`` mappings or value lists
        connector: Default connector between conditions

    Returns:
        ConditionResult with the stripped fragment and values in left-to-right order

    Example:
        >>> result = evaluate_conditions([{"id": [1, 2]}, "or", {"name": None}])
        >>> result.sql
        'id in (?,?) or name is null'
        >>> result.values
        [1, 2]
    """
    joiner = Connector(connector).value

    sql = ""
    values: List[Any] = []
    use_connector = True

    for descriptor in descriptors:
        for condition in classify_descriptor(descriptor):
            if isinstance(condition, Literal):
                sql += f" {condition.text} "
                use_connector = False
                continue

            partial, partial_values = _render(condition)
            if sql != "" and use_connector:
                sql += f" {joiner} "
            sql += partial
            values.extend(partial_values)
            use_connector = True

    return ConditionResult(sql=sql.strip(), values=values)
