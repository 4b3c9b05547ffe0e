"""Tests for structured logging and metrics hooks."""

from __future__ import annotations

import io
import json
import logging
import sys
from pathlib import Path

import pytest

from mailpost.observability import (
    ROOT_LOGGER_NAME,
    MetricsHook,
    NoopMetricsHook,
    StructuredFormatter,
    configure_logging,
    get_logger,
    resolve_metrics,
)


def make_record(msg="hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="mailpost.test", level=logging.INFO, pathname=__file__,
        lineno=1, msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:

    def test_guaranteed_keys(self):
        entry = json.loads(StructuredFormatter().format(make_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "mailpost.test"
        assert entry["message"] == "hello"
        assert "ts" in entry

    def test_extra_fields_merged(self):
        record = make_record(extra_fields={"op": "write_post", "path": "a.md"})
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["op"] == "write_post"
        assert entry["path"] == "a.md"

    def test_non_json_values_stringified(self):
        record = make_record(extra_fields={"path": Path("a/b.md")})
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["path"] == "a/b.md"

    def test_exception_serialised(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()
        entry = json.loads(StructuredFormatter().format(record))
        assert "ValueError: bad" in entry["exception"]


@pytest.fixture
def log_stream():
    """Route the mailpost root logger to a buffer for one test."""
    stream = io.StringIO()
    configure_logging(level="debug", stream=stream)
    yield stream
    configure_logging()


def read_entries(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestGetLogger:

    def test_module_loggers_write_through_root(self, log_stream):
        log = get_logger("mailpost.resolver")
        log.info("Saved post", extra={"extra_fields": {"op": "write_post"}})
        [entry] = read_entries(log_stream)
        assert entry["logger"] == "mailpost.resolver"
        assert entry["message"] == "Saved post"
        assert entry["op"] == "write_post"

    def test_short_name_placed_under_root(self):
        assert get_logger("pipeline").name == "mailpost.pipeline"
        assert get_logger().name == ROOT_LOGGER_NAME

    def test_only_root_has_handler(self, log_stream):
        child = get_logger("mailpost.message")
        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert child.handlers == []
        assert child.propagate is True
        assert len(root.handlers) == 1
        assert root.propagate is False

    def test_none_fields_omitted(self, log_stream):
        get_logger("remote").warning(
            "Retrying image fetch",
            extra={"extra_fields": {"url": "https://x", "status_code": None}},
        )
        [entry] = read_entries(log_stream)
        assert entry["url"] == "https://x"
        assert "status_code" not in entry


class TestConfigureLogging:

    def test_reconfigure_replaces_handler(self, log_stream):
        second = io.StringIO()
        root = configure_logging(stream=second)
        assert len(root.handlers) == 1
        get_logger("post").info("hello")
        assert log_stream.getvalue() == ""
        assert read_entries(second)[0]["message"] == "hello"

    def test_string_level(self, log_stream):
        root = configure_logging(level="warning", stream=log_stream)
        assert root.level == logging.WARNING
        get_logger("post").info("dropped")
        assert log_stream.getvalue() == ""

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="verbose"):
            configure_logging(level="verbose")

    def test_foreign_handlers_kept(self, log_stream):
        root = logging.getLogger(ROOT_LOGGER_NAME)
        foreign = logging.NullHandler()
        root.addHandler(foreign)
        try:
            configure_logging(stream=log_stream)
            assert foreign in root.handlers
        finally:
            root.removeHandler(foreign)


class TestMetrics:

    def test_noop_satisfies_protocol(self):
        hook = NoopMetricsHook()
        assert isinstance(hook, MetricsHook)
        hook.increment("x")
        hook.timing("y", 1.0)

    def test_resolve_metrics(self):
        assert isinstance(resolve_metrics(None), NoopMetricsHook)
        hook = NoopMetricsHook()
        assert resolve_metrics(hook) is hook
