import logging
from typing import Optional

from .connection import ConnectionSettings

logger = logging.getLogger(__name__)

_settings: Optional[ConnectionSettings] = None


def get_settings(force_reload: bool = False) -> ConnectionSettings:
    """Get the process-wide connection settings.

    Settings are read once from the environment (``SQLCONSULTOR_*``) and the
    optional ``.env`` file, then cached.

    Args:
        force_reload: Discard the cached instance and read the environment again

    Returns:
        ConnectionSettings instance

    Example:
        >>> settings = get_settings()
        >>> settings is get_settings()
        True
    """
    global _settings

    if _settings is None or force_reload:
        _settings = ConnectionSettings()
        logger.debug(
            "Connection settings loaded",
            extra={"engine": _settings.engine, "debug": _settings.debug},
        )

    return _settings


def _reload_settings() -> ConnectionSettings:
    """Force reload of settings from the environment (test helper)."""
    global _settings
    _settings = None
    return get_settings(force_reload=True)
