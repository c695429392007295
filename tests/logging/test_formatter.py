import json
import logging
import sys

from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags, use_span

from sqlconsultor.logging import CustomJsonFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="sqlconsultor.engines.base",
        level=logging.WARNING,
        pathname=__file__,
        lineno=20,
        msg="rows %s",
        args=(3,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extras():
    payload = json.loads(CustomJsonFormatter().format(_record(**{"db.system": "sqlite"})))
    assert payload["message"] == "rows 3"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "sqlconsultor.engines.base"
    assert payload["db"] == {"system": "sqlite"}
    assert "msg" not in payload
    assert "trace_id" not in payload


def test_formatter_keeps_plain_extras_at_top_level():
    payload = json.loads(CustomJsonFormatter().format(_record(error_code="USAGE_002")))
    assert payload["error_code"] == "USAGE_002"
    assert "db" not in payload


def test_formatter_adds_trace_ids_inside_span():
    context = SpanContext(
        trace_id=0x1234,
        span_id=0x5678,
        is_remote=False,
        trace_flags=TraceFlags(TraceFlags.SAMPLED),
    )
    with use_span(NonRecordingSpan(context)):
        payload = json.loads(CustomJsonFormatter().format(_record()))
    assert payload["trace_id"] == format(0x1234, "032x")
    assert payload["span_id"] == format(0x5678, "016x")


def test_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    payload = json.loads(CustomJsonFormatter().format(record))
    assert "ValueError: bad" in payload["exception"]


def test_setup_logging_installs_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug")
        assert root.level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        handler = root.handlers[-1]
        assert isinstance(handler.formatter, CustomJsonFormatter)
        assert any(type(f).__name__ == "ContextFilter" for f in handler.filters)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
