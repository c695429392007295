"""Database engine constants and enumerations."""

from enum import Enum


class EngineType(str, Enum):
    """Database engine families with a dedicated dialect driver.

    Values:
        MYSQL: MySQL and MariaDB servers
            - ``LIMIT offset,limit`` pagination
            - ``USE <database>`` to switch databases in place
        SQLITE: SQLite database files
            - ``LIMIT limit OFFSET offset`` pagination
            - no in-place database switch (reconnect instead)
        DEFAULT: any other engine SQLAlchemy can connect to
            - no native pagination (client-side slicing)
    """

    MYSQL = "mysql"
    SQLITE = "sqlite"
    DEFAULT = "defaultsql"


# Engine names that resolve to the MySQL dialect driver.
MYSQL_FAMILY = frozenset({"mysql", "mariadb"})
