"""Dialect driver factory.

This module resolves engine names to dialect drivers. Drivers are stateless,
so the factory hands out one shared instance per engine family. Unknown
engines get a ``DefaultDialect`` that declines every capability.
"""

from typing import Dict, Type

from sqlconsultor.common.exceptions import ErrorCode, configuration_error
from sqlconsultor.constants.engine import MYSQL_FAMILY, EngineType
from sqlconsultor.dialects.base import BaseDialect
from sqlconsultor.dialects.default import DefaultDialect
from sqlconsultor.dialects.mysql import MySQLDialect
from sqlconsultor.dialects.sqlite import SQLiteDialect


class DialectFactory:
    """Factory for per-engine dialect drivers.

    Example:
        >>> DialectFactory.create("sqlite")
        SQLiteDialect(engine_name='sqlite')
        >>> DialectFactory.create("mysql+pymysql")
        MySQLDialect(engine_name='mysql')
        >>> DialectFactory.create("postgresql")
        DefaultDialect(engine_name='postgresql')
    """

    _registry: Dict[str, Type[BaseDialect]] = {
        EngineType.SQLITE.value: SQLiteDialect,
        **{name: MySQLDialect for name in MYSQL_FAMILY},
    }
    _instances: Dict[str, BaseDialect] = {}

    @staticmethod
    def normalize(engine_name: str) -> str:
        """Reduce ``engine+driver`` URL schemes to the bare engine name."""
        return (engine_name or "").strip().lower().split("+", 1)[0]

    @classmethod
    def register(cls, engine_name: str, dialect_class: Type[BaseDialect]) -> None:
        """Register a dialect driver for an engine name.

        Raises:
            ConsultorError: If the engine name is empty or the class is not a dialect
        """
        key = cls.normalize(engine_name)
        if not key:
            raise configuration_error(
                "Dialect registration requires a non-empty engine name",
                config_key="engine",
                error_code=ErrorCode.CONFIG_INVALID,
            )
        if not (isinstance(dialect_class, type) and issubclass(dialect_class, BaseDialect)):
            raise configuration_error(
                f"{dialect_class!r} is not a BaseDialect subclass",
                config_key="dialect",
                error_code=ErrorCode.CONFIG_INVALID,
            )
        cls._registry[key] = dialect_class
        cls._instances.pop(key, None)

    @classmethod
    def create(cls, engine_name: str) -> BaseDialect:
        """Return the shared dialect driver for ``engine_name``."""
        key = cls.normalize(engine_name)
        if key not in cls._instances:
            dialect_class = cls._registry.get(key)
            if dialect_class is None:
                cls._instances[key] = DefaultDialect(key or EngineType.DEFAULT.value)
            else:
                cls._instances[key] = dialect_class()
        return cls._instances[key]

    @classmethod
    def available(cls) -> Dict[str, Type[BaseDialect]]:
        return dict(cls._registry)


def get_dialect(engine_name: str) -> BaseDialect:
    """Get the dialect driver for an engine name.

    Example:
        >>> from sqlconsultor.dialects import get_dialect
        >>> get_dialect("sqlite").switch_database("other")
        ''
    """
    return DialectFactory.create(engine_name)
