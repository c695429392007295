from sqlconsultor.__version__ import __version__

from sqlconsultor.consultor import SQLConsultor
from sqlconsultor.engines import SQLEngine, QueryStats
from sqlconsultor.query_builder import QueryBuilder, evaluate_conditions
from sqlconsultor.dialects import (
    BaseDialect,
    DefaultDialect,
    MySQLDialect,
    SQLiteDialect,
    get_dialect,
)

from sqlconsultor.common.exceptions import ConsultorError, ErrorCode, QueryBuilderWarning

from sqlconsultor.settings import ConnectionSettings, get_settings
from sqlconsultor.logging import setup_logging

__all__ = [
    "__version__",
    "SQLConsultor",
    "SQLEngine",
    "QueryStats",
    "QueryBuilder",
    "evaluate_conditions",
    "BaseDialect",
    "DefaultDialect",
    "MySQLDialect",
    "SQLiteDialect",
    "get_dialect",
    "ConsultorError",
    "ErrorCode",
    "QueryBuilderWarning",
    "ConnectionSettings",
    "get_settings",
    "setup_logging",
]
