"""Constants module for sqlconsultor.

This module contains all constant values and enumerations used throughout
the package. It has no dependencies on other sqlconsultor modules.

Organization:
    - engine: Database engine families
    - sql: Clause categories, connectors and ordering constants
"""

from sqlconsultor.constants.engine import EngineType, MYSQL_FAMILY
from sqlconsultor.constants.sql import (
    BIND_ORDER,
    CLAUSE_SEQUENCE,
    COUNT_ALIAS,
    COUNT_TABLE_ALIAS,
    PLACEHOLDER,
    RANDOM_INDEX_KEY,
    WILDCARD_MARKERS,
    ClauseCategory,
    Connector,
    JoinType,
    OrderDirection,
)

__all__ = [
    "EngineType",
    "MYSQL_FAMILY",
    "BIND_ORDER",
    "CLAUSE_SEQUENCE",
    "COUNT_ALIAS",
    "COUNT_TABLE_ALIAS",
    "PLACEHOLDER",
    "RANDOM_INDEX_KEY",
    "WILDCARD_MARKERS",
    "ClauseCategory",
    "Connector",
    "JoinType",
    "OrderDirection",
]
