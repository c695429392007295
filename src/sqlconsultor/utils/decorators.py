import functools
from typing import Any, Callable, Dict, Optional, TypeVar

from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from sqlconsultor.logging import get_logger
from sqlconsultor.telemetry import get_tracer

F = TypeVar('F', bound=Callable[..., Any])
AttributeGetter = Callable[..., Optional[Dict[str, Any]]]

logger = get_logger(__name__)


def _set_attributes(span: Span, getter: Optional[AttributeGetter], *args: Any, **kwargs: Any) -> None:
    if getter is None:
        return
    try:
        attributes = getter(*args, **kwargs)
    except Exception as exc:  # pragma: no cover
        logger.warning("Span attribute getter failed: %s", exc)
        return
    for key, value in (attributes or {}).items():
        if value is not None:
            span.set_attribute(key, value)


def traced(
    span_name: Optional[str] = None,
    *,
    kind: SpanKind = SpanKind.CLIENT,
    attributes: Optional[Dict[str, Any]] = None,
    attribute_getter: Optional[AttributeGetter] = None,
    result_getter: Optional[AttributeGetter] = None,
) -> Callable[[F], F]:
    """Run the decorated function inside an OpenTelemetry span.

    Args:
        span_name: Span name; defaults to the module-qualified function name
        kind: Span kind; CLIENT since calls leave the process for the database
        attributes: Static attributes set on every span
        attribute_getter: Called with the function's arguments before the call;
            returns attributes such as the SQL statement
        result_getter: Called with the return value; returns attributes such
            as the number of rows fetched

    Exceptions are recorded on the span, which is marked as failed, and re-raised.
    """

    def decorator(func: F) -> F:
        name = span_name or f"{func.__module__}.{func.__qualname__}"
        static = {key: value for key, value in (attributes or {}).items() if value is not None}

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = get_tracer(func.__module__)
            with tracer.start_as_current_span(name, kind=kind, attributes=static) as span:
                _set_attributes(span, attribute_getter, *args, **kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise
                _set_attributes(span, result_getter, result)
                return result

        return wrapper  # type: ignore[return-value]

    return decorator
