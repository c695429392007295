from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for sqlconsultor operations.

    Error codes categorize failures without creating numerous exception
    classes. Each category has its own prefix for easy identification.

    Attributes:
        CONFIG_*: Configuration-related errors
        USAGE_*: Builder misuse (reported as warnings, never raised by the builder)
        CONNECTION_*: Connection errors
        EXECUTION_*: Statement execution errors
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_MISSING = "CONFIG_002"
    CONFIG_INVALID = "CONFIG_003"
    ENGINE_NOT_SUPPORTED = "CONFIG_004"

    # Usage errors
    USAGE_ERROR = "USAGE_001"
    MISSING_JOIN = "USAGE_002"
    MISSING_PREDECESSOR = "USAGE_003"
    INVALID_ORDER_DIRECTION = "USAGE_004"

    # Connection errors
    CONNECTION_ERROR = "CONNECTION_001"
    AUTH_ERROR = "CONNECTION_002"

    # Execution errors
    EXECUTION_ERROR = "EXECUTION_001"
    QUERY_EXECUTION_ERROR = "EXECUTION_002"
    FETCH_ERROR = "EXECUTION_003"


class QueryBuilderWarning(UserWarning):
    """Non-fatal misuse of the query builder.

    Emitted when ``on()`` is called without a join, when ``and_()``/``or_()``
    have no predecessor clause, or when an ordering direction is invalid.
    The offending call becomes a no-op and the builder remains usable.
    """


class ConsultorError(Exception):
    """Base exception for all sqlconsultor-related errors.

    Only unrecoverable problems are raised (e.g. an unsupported engine name at
    construction). Execution failures are captured by the engine and exposed
    through ``last_error`` instead.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXECUTION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from sqlconsultor.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={"error_code": error_code.value, "details": self.details},
            exc_info=cause is not None,
        )

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }


def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
    **kwargs
) -> ConsultorError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        error_code: Specific configuration error code
        **kwargs: Additional error details

    Returns:
        ConsultorError with a CONFIG_* code
    """
    details = kwargs.get('details', {})
    if config_key:
        details["config_key"] = config_key

    return ConsultorError(
        message=message,
        error_code=error_code,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def engine_not_supported_error(engine: str, **kwargs) -> ConsultorError:
    """Create an error for an engine name no database client can serve."""
    details = kwargs.get('details', {})
    details["engine"] = engine

    return ConsultorError(
        message=f"Database engine '{engine}' is not supported",
        error_code=ErrorCode.ENGINE_NOT_SUPPORTED,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def connection_error(
    message: str,
    engine: Optional[str] = None,
    host: Optional[str] = None,
    **kwargs
) -> ConsultorError:
    """Create a connection error.

    Args:
        message: Error message
        engine: Engine that failed to connect
        host: Host or file that failed
        **kwargs: Additional error details

    Returns:
        ConsultorError with CONNECTION_ERROR code
    """
    details = kwargs.get('details', {})
    if engine:
        details["engine"] = engine
    if host:
        details["host"] = host

    return ConsultorError(
        message=message,
        error_code=ErrorCode.CONNECTION_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def query_execution_error(
    query: str,
    original_error: Exception,
    **kwargs
) -> ConsultorError:
    """Create a query execution error.

    Args:
        query: SQL query that failed
        original_error: The underlying exception
        **kwargs: Additional error details

    Returns:
        ConsultorError with QUERY_EXECUTION_ERROR code
    """
    details = kwargs.get('details', {})
    details["query"] = query[:500] + "..." if len(query) > 500 else query

    return ConsultorError(
        message=f"Query execution failed: {str(original_error)}",
        error_code=ErrorCode.QUERY_EXECUTION_ERROR,
        details=details,
        cause=original_error,
        **{k: v for k, v in kwargs.items() if k not in ['details', 'cause']}
    )
