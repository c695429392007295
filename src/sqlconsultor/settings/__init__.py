"""Settings module providing configuration for sqlconsultor.

Built on Pydantic Settings. Configuration sources (precedence order):
    1. Explicit keyword arguments
    2. Environment variables (``SQLCONSULTOR_ENGINE``, ``SQLCONSULTOR_HOST``, ...)
    3. ``.env`` file in the working directory
    4. Default values in code

Quick Start:
    >>> from sqlconsultor.settings import get_settings
    >>> settings = get_settings()
    >>> settings.engine
    'sqlite'
"""

from .base import ConsultorBaseSettings
from .connection import ConnectionSettings
from .main import get_settings, _reload_settings

__all__ = [
    "ConsultorBaseSettings",
    "ConnectionSettings",
    "get_settings",
]
