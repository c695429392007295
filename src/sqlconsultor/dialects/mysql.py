"""MySQL / MariaDB dialect driver."""

import os
from typing import Optional

from sqlconsultor.constants.engine import EngineType
from sqlconsultor.dialects.base import BaseDialect


class MySQLDialect(BaseDialect):
    """Dialect driver for MySQL-family servers.

    MySQL paginates with ``LIMIT offset[,limit]`` (zero-based offset) and can
    change the active database on an open connection with ``USE``.
    """

    @property
    def engine_name(self) -> str:
        return EngineType.MYSQL.value

    def switch_database(self, database: str) -> str:
        return f"use {database}"

    def splice_pagination(self, query: str, offset: int = 0, limit: int = 0) -> Optional[str]:
        spliced = f"{query.rstrip()}{os.linesep} limit {offset}"
        if limit > 0:
            spliced += f",{limit}"
        return spliced

    def list_tables_query(self) -> str:
        return "show tables"
