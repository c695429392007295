"""Common utilities and exceptions for sqlconsultor.

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    ConsultorError and include structured error information.

    Most failures never surface as exceptions: builder misuse is reported
    with ``QueryBuilderWarning`` and execution failures are captured by the
    engine's ``last_error``. Callers who prefer exceptions can call
    ``SQLEngine.raise_for_error()`` after a query.
"""

from sqlconsultor.common.exceptions import (
    ConsultorError,
    ErrorCode,
    QueryBuilderWarning,
    # Helper functions
    configuration_error,
    connection_error,
    engine_not_supported_error,
    query_execution_error,
)

__all__ = [
    # Base Exception and Error Codes
    "ConsultorError",
    "ErrorCode",
    "QueryBuilderWarning",
    # Helper functions
    "configuration_error",
    "connection_error",
    "engine_not_supported_error",
    "query_execution_error",
]
