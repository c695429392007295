"""Fallback dialect for engines without a dedicated driver."""

from typing import Optional

from sqlconsultor.constants.engine import EngineType
from sqlconsultor.dialects.base import BaseDialect


class DefaultDialect(BaseDialect):
    """No-op dialect.

    Every capability is declined, which makes callers use their generic
    fallbacks: client-side pagination and reconnecting to switch databases.
    """

    def __init__(self, engine_name: str = EngineType.DEFAULT.value):
        self._engine_name = engine_name

    @property
    def engine_name(self) -> str:
        return self._engine_name

    def switch_database(self, database: str) -> str:
        return ""

    def splice_pagination(self, query: str, offset: int = 0, limit: int = 0) -> Optional[str]:
        return None

    def list_tables_query(self) -> str:
        return ""
