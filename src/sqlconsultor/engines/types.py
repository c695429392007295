"""Engine-specific types.

Diagnostic snapshots and error categories produced by ``SQLEngine``.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Stage at which the last engine call failed."""

    CONNECT = "connect"
    EXECUTE = "execute"
    FETCH = "fetch"


class QueryStats(BaseModel):
    """Diagnostics of the last statement executed by an engine.

    Only collected when the engine runs with ``debug=True``. Presentation
    layers (debug dumps, log enrichers) consume this snapshot.

    Attributes:
        file: Source file of the first caller outside sqlconsultor
        line: Line number in that file
        start: Epoch timestamp at which execution started
        duration_exec: Seconds spent executing the statement
        duration_fetch: Seconds spent fetching rows
        rows_fetched: Number of rows collected
    """
    model_config = ConfigDict(validate_assignment=True)

    file: str = ""
    line: int = Field(default=0, ge=0)
    start: float = Field(default=0.0, ge=0.0)
    duration_exec: float = Field(default=0.0, ge=0.0)
    duration_fetch: float = Field(default=0.0, ge=0.0)
    rows_fetched: int = Field(default=0, ge=0)

    @property
    def start_date(self) -> str:
        return datetime.fromtimestamp(self.start).strftime("%Y/%m/%d %H:%M:%S")

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data["start_date"] = self.start_date
        return data
