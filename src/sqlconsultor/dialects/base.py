from abc import ABC, abstractmethod
from typing import Optional


class BaseDialect(ABC):
    """Base interface for per-engine dialect drivers.

    A dialect answers the few questions whose SQL differs between engines:
    how to paginate a SELECT, how to switch the active database and how to
    list tables. Dialects generate SQL text only; they never execute it.

    Dialects are stateless, so a single instance per engine is shared by
    every query builder.
    """

    @property
    @abstractmethod
    def engine_name(self) -> str:
        """Engine name as understood by SQLAlchemy (mysql, sqlite, ...)."""
        pass

    @abstractmethod
    def switch_database(self, database: str) -> str:
        """Build the statement that makes ``database`` the active one.

        Args:
            database: Target database name

        Returns:
            SQL text, or an empty string when the engine cannot switch in
            place and the caller must reconnect instead
        """
        pass

    @abstractmethod
    def splice_pagination(self, query: str, offset: int = 0, limit: int = 0) -> Optional[str]:
        """Add native pagination to ``query``.

        Args:
            query: SELECT statement produced by the query builder
            offset: Zero-based index of the first row
            limit: Maximum number of rows, 0 for unbounded

        Returns:
            The spliced statement, or None when the engine has no native
            pagination (the caller then slices the rows client-side)
        """
        pass

    @abstractmethod
    def list_tables_query(self) -> str:
        """Build the query listing user tables, or return an empty string."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(engine_name={self.engine_name!r})"
