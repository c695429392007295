"""Context injection for log records.

Statements executed on behalf of one unit of work (a web request, a job)
can be correlated by setting a request context around them::

    with request_context(request_id="req-42"):
        db.select("*").from_("person").get()
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from sqlconsultor.__version__ import __version__

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

# Process-wide labels (environment, region, ...) copied onto every record.
_static_context: Dict[str, Any] = {}


class ContextFilter(logging.Filter):
    """Copy request, process and SDK context onto each record. Never drops records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.user_id = user_id_var.get()
        record.sdk_name = "sqlconsultor"
        record.sdk_version = __version__
        for key, value in _static_context.items():
            setattr(record, key, value)
        return True


def set_logging_context(
    environment: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Replace the process-wide labels; call without arguments to clear them."""
    _static_context.clear()
    if environment is not None:
        _static_context["environment"] = environment
    if extra:
        _static_context.update(extra)


def set_request_context(
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> None:
    if request_id is not None:
        request_id_var.set(request_id)
    if user_id is not None:
        user_id_var.set(user_id)


def clear_request_context() -> None:
    request_id_var.set(None)
    user_id_var.set(None)


@contextmanager
def request_context(
    request_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> Iterator[None]:
    """Scope request ids to a block, restoring the previous values on exit."""
    request_token = request_id_var.set(request_id)
    user_token = user_id_var.set(user_id)
    try:
        yield
    finally:
        user_id_var.reset(user_token)
        request_id_var.reset(request_token)
