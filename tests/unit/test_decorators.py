"""Unit tests for the tracing decorator."""

import pytest
from unittest.mock import MagicMock

from opentelemetry.trace import SpanKind, StatusCode

from sqlconsultor.utils import decorators
from sqlconsultor.utils.decorators import traced


@pytest.fixture
def span(monkeypatch):
    """Span handed out by a mocked tracer."""
    span = MagicMock()
    tracer = MagicMock()
    tracer.start_as_current_span.return_value.__enter__.return_value = span
    monkeypatch.setattr(decorators, "get_tracer", lambda name: tracer)
    span.tracer = tracer
    return span


class TestTraced:

    def test_sets_argument_and_result_attributes(self, span):
        @traced(
            "test.query",
            attributes={"db.system": "sqlite", "db.name": None},
            attribute_getter=lambda query: {"db.statement": query, "db.user": None},
            result_getter=lambda rows: {"db.response.returned_rows": len(rows)},
        )
        def run(query):
            return [1, 2]

        assert run("select 1") == [1, 2]
        span.tracer.start_as_current_span.assert_called_once_with(
            "test.query", kind=SpanKind.CLIENT, attributes={"db.system": "sqlite"}
        )
        span.set_attribute.assert_any_call("db.statement", "select 1")
        span.set_attribute.assert_any_call("db.response.returned_rows", 2)
        assert span.set_attribute.call_count == 2

    def test_default_span_name(self, span):
        @traced()
        def run():
            return None

        run()
        name = span.tracer.start_as_current_span.call_args[0][0]
        assert name.endswith("test_default_span_name.<locals>.run")

    def test_records_and_reraises_exceptions(self, span):
        @traced("test.fail")
        def run():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            run()
        span.record_exception.assert_called_once()
        status = span.set_status.call_args[0][0]
        assert status.status_code == StatusCode.ERROR

    def test_works_without_sdk(self):
        @traced("test.noop", result_getter=lambda value: {"value": value})
        def run():
            return 3

        assert run() == 3
