"""Dialect drivers hiding engine differences.

Each driver answers three engine-specific questions:
    - how to paginate a SELECT (``splice_pagination``)
    - how to switch the active database (``switch_database``)
    - which query lists tables (``list_tables_query``)

Available Drivers:
    - MySQLDialect: MySQL and MariaDB
    - SQLiteDialect: SQLite files
    - DefaultDialect: anything else; declines every capability

See Also:
    - sqlconsultor.query_builder: consumes dialects for pagination
    - sqlconsultor.consultor: consumes dialects for database switching
"""

from sqlconsultor.dialects.base import BaseDialect
from sqlconsultor.dialects.default import DefaultDialect
from sqlconsultor.dialects.factory import DialectFactory, get_dialect
from sqlconsultor.dialects.mysql import MySQLDialect
from sqlconsultor.dialects.sqlite import SQLiteDialect

__all__ = [
    "BaseDialect",
    "DefaultDialect",
    "DialectFactory",
    "MySQLDialect",
    "SQLiteDialect",
    "get_dialect",
]
