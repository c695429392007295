"""SQLite dialect driver."""

import os
from typing import Optional

from sqlconsultor.constants.engine import EngineType
from sqlconsultor.dialects.base import BaseDialect


class SQLiteDialect(BaseDialect):
    """Dialect driver for SQLite database files.

    SQLite paginates with ``LIMIT limit OFFSET offset``. Each database is a
    separate file, so switching databases means reconnecting.
    """

    @property
    def engine_name(self) -> str:
        return EngineType.SQLITE.value

    def switch_database(self, database: str) -> str:
        return ""

    def splice_pagination(self, query: str, offset: int = 0, limit: int = 0) -> Optional[str]:
        # LIMIT is omitted when unbounded, even if an OFFSET is requested.
        clause = ""
        if limit > 0:
            clause += f"limit {limit} "
        if offset > 0 or limit > 0:
            clause += f"offset {offset}"
        return f"{query.rstrip()}{os.linesep}{clause}"

    def list_tables_query(self) -> str:
        return (
            "SELECT name "
            "FROM sqlite_schema "
            "WHERE type ='table' AND name NOT LIKE 'sqlite_%'"
        )
