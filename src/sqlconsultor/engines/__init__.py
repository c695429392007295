"""Execution engines.

``SQLEngine`` owns one lazy SQLAlchemy connection per logical database,
runs raw or ``?``-parameterized statements and records diagnostics when
``debug`` is enabled.
"""

from sqlconsultor.engines.base import SQLEngine
from sqlconsultor.engines.types import ErrorKind, QueryStats

__all__ = [
    "SQLEngine",
    "ErrorKind",
    "QueryStats",
]
