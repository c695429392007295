from typing import Any, Dict, Optional

from pydantic import Field, SecretStr, field_validator

from .base import ConsultorBaseSettings


class ConnectionSettings(ConsultorBaseSettings):
    """Connection parameters for one logical database.

    File-based engines (SQLite) use ``filename``; server engines use
    ``host``/``user``/``password``/``database``. Values are read from
    ``SQLCONSULTOR_*`` environment variables or a ``.env`` file.
    """

    engine: str = Field(
        default="sqlite",
        description="Engine name as known to SQLAlchemy (sqlite, mysql, postgresql, ...)"
    )
    driver: Optional[str] = Field(
        default=None,
        description="Optional DBAPI driver appended to the engine name (e.g. pymysql)"
    )
    host: str = Field(default="", description="Database server host")
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    user: str = Field(default="", description="Database user")
    password: SecretStr = Field(default=SecretStr(""), description="Database password")
    database: str = Field(default="", description="Default database name")
    filename: str = Field(default="", description="Database file for file-based engines")
    charset: str = Field(default="", description="Connection character set")

    debug: bool = Field(
        default=False,
        description="Collect execution statistics (timings, row counts, call site)"
    )
    echo: bool = Field(default=False, description="Echo SQL through SQLAlchemy's logger")

    @field_validator("engine")
    @classmethod
    def normalize_engine(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Engine name cannot be empty")
        return v

    @field_validator("host", "user", "database", "filename", "charset")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @property
    def is_file_based(self) -> bool:
        return bool(self.filename)

    def engine_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments accepted by ``SQLEngine.__init__``."""
        return {
            "engine": self.engine,
            "driver": self.driver,
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password.get_secret_value(),
            "database": self.database,
            "filename": self.filename,
            "charset": self.charset,
            "debug": self.debug,
            "echo": self.echo,
        }
