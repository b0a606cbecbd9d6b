"""Unit tests for telemetry module."""

import asyncio
import json
import logging
import sys

import pytest

from src.commons.telemetry.decorators import LogContext, log_exceptions, timed
from src.commons.telemetry.logger import (
    REDACTED,
    JsonFormatter,
    TextFormatter,
    clear_log_context,
    configure_logging,
    get_correlation_id,
    get_log_context,
    redact,
    set_correlation_id,
    set_log_context,
)


def _record(msg: str = "Test", level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationId:
    """Tests for correlation ID management."""

    def test_set_and_get_correlation_id(self):
        cid = set_correlation_id("test-123")
        assert cid == "test-123"
        assert get_correlation_id() == "test-123"

    def test_auto_generate_correlation_id(self):
        cid = set_correlation_id()
        assert cid is not None
        assert len(cid) == 36  # UUID format

    def test_correlation_id_isolation(self):
        set_correlation_id("main-context")

        async def async_task():
            set_correlation_id("async-context")
            return get_correlation_id()

        result = asyncio.run(async_task())
        assert result == "async-context"


class TestLogContext:
    """Tests for logging context management."""

    def setup_method(self):
        clear_log_context()

    def teardown_method(self):
        clear_log_context()

    def test_set_and_get_context(self):
        set_log_context(content_id=7, action="bind")
        ctx = get_log_context()
        assert ctx["content_id"] == 7
        assert ctx["action"] == "bind"

    def test_clear_context(self):
        set_log_context(key="value")
        clear_log_context()
        assert get_log_context() == {}

    def test_context_is_copied(self):
        set_log_context(key="value")
        ctx = get_log_context()
        ctx["new_key"] = "new_value"
        assert "new_key" not in get_log_context()


class TestRedact:
    """Tests for masking sensitive values."""

    def test_masks_credentials(self):
        data = {
            "token": "eyJhbGciOi",
            "mux_token_secret": "s3cret",
            "Authorization": "Basic abc",
            "upload_id": "up123",
        }

        result = redact(data)

        assert result["token"] == REDACTED
        assert result["mux_token_secret"] == REDACTED
        assert result["Authorization"] == REDACTED
        assert result["upload_id"] == "up123"

    def test_does_not_mutate_input(self):
        data = {"token": "abc"}
        redact(data)
        assert data == {"token": "abc"}


class TestJsonFormatter:
    """Tests for JSON log formatter."""

    def test_basic_format(self):
        formatter = JsonFormatter()
        record = logging.LogRecord(
            name="test.logger",
            level=logging.INFO,
            pathname="/test/file.py",
            lineno=42,
            msg="Test message",
            args=(),
            exc_info=None,
        )

        data = json.loads(formatter.format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert "/test/file.py:42" in data["path"]

    def test_format_with_correlation_id(self):
        set_correlation_id("test-cid")
        data = json.loads(JsonFormatter().format(_record()))
        assert data["correlation_id"] == "test-cid"

    def test_format_with_context(self):
        set_log_context(request_id="req-123")
        try:
            data = json.loads(JsonFormatter().format(_record()))
        finally:
            clear_log_context()

        assert data["context"]["request_id"] == "req-123"

    def test_extra_fields_included(self):
        data = json.loads(JsonFormatter().format(_record(upload_id="up1", attempt=3)))
        assert data["upload_id"] == "up1"
        assert data["attempt"] == 3

    def test_sensitive_extra_masked(self):
        output = JsonFormatter().format(
            _record(token="eyJ.secret.value", mux_token_secret="hunter2")
        )
        data = json.loads(output)

        assert data["token"] == REDACTED
        assert data["mux_token_secret"] == REDACTED
        assert "hunter2" not in output
        assert "eyJ.secret.value" not in output

    def test_sensitive_context_masked(self):
        set_log_context(submit_token="abc")
        try:
            data = json.loads(JsonFormatter().format(_record()))
        finally:
            clear_log_context()

        assert data["context"]["submit_token"] == REDACTED

    def test_format_with_exception(self):
        formatter = JsonFormatter()
        try:
            raise ValueError("Test error")
        except ValueError:
            record = logging.LogRecord(
                name="test",
                level=logging.ERROR,
                pathname="",
                lineno=0,
                msg="Error occurred",
                args=(),
                exc_info=sys.exc_info(),
            )

            data = json.loads(formatter.format(record))

        assert "exception" in data
        assert "ValueError" in data["exception"]


class TestTextFormatter:
    """Tests for text log formatter."""

    def test_basic_format(self):
        formatter = TextFormatter()
        record = logging.LogRecord(
            name="test.logger",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="Test message",
            args=(),
            exc_info=None,
        )

        output = formatter.format(record)

        assert "INFO" in output
        assert "[test.logger]" in output
        assert "Test message" in output


class TestConfigureLogging:
    """Tests for logger configuration."""

    def test_configure_json_logger(self):
        logger = configure_logging(
            level="DEBUG", format_type="json", logger_name="test.json"
        )
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_configure_text_logger(self):
        logger = configure_logging(
            level="INFO", format_type="text", logger_name="test.text"
        )
        assert logger.level == logging.INFO
        assert isinstance(logger.handlers[0].formatter, TextFormatter)


class TestLogExceptionsDecorator:
    """Tests for @log_exceptions decorator."""

    def test_log_and_reraise(self, caplog):
        @log_exceptions
        def failing_function():
            raise RuntimeError("Test error")

        with pytest.raises(RuntimeError), caplog.at_level(logging.ERROR):
            failing_function()

    def test_custom_level_and_message(self, caplog):
        logger = logging.getLogger("test.log_exceptions")

        @log_exceptions(logger=logger, level=logging.WARNING, message="bind failed")
        def failing_function():
            raise KeyError("x")

        with pytest.raises(KeyError), caplog.at_level(logging.WARNING):
            failing_function()

        assert any(r.getMessage() == "bind failed" for r in caplog.records)

    def test_passes_return_value_through(self):
        @log_exceptions
        def ok():
            return 42

        assert ok() == 42

    def test_async_log_exceptions(self, caplog):
        @log_exceptions
        async def async_failing():
            raise ValueError("Async error")

        with pytest.raises(ValueError), caplog.at_level(logging.ERROR):
            asyncio.run(async_failing())


class TestTimedDecorator:
    """Tests for @timed decorator."""

    def test_timed_sync_function(self, caplog):
        logger = logging.getLogger("test.timed")

        @timed(logger=logger)
        def quick():
            return "done"

        with caplog.at_level(logging.DEBUG, logger="test.timed"):
            result = quick()

        assert result == "done"
        assert any("quick completed" in r.getMessage() for r in caplog.records)

    def test_timed_async_function(self):
        @timed
        async def async_slow():
            await asyncio.sleep(0.01)
            return "async done"

        assert asyncio.run(async_slow()) == "async done"

    def test_timed_with_threshold(self, caplog):
        logger = logging.getLogger("test.timed.threshold")

        @timed(logger=logger, threshold_ms=10_000)
        def fast_function():
            return "fast"

        with caplog.at_level(logging.DEBUG, logger="test.timed.threshold"):
            result = fast_function()

        assert result == "fast"
        assert not [r for r in caplog.records if r.name == "test.timed.threshold"]


class TestLogContextManager:
    """Tests for LogContext context manager."""

    def setup_method(self):
        clear_log_context()

    def teardown_method(self):
        clear_log_context()

    def test_context_manager_adds_context(self):
        with LogContext(operation="bind", content_id=3):
            ctx = get_log_context()
            assert ctx["operation"] == "bind"
            assert ctx["content_id"] == 3

    def test_context_manager_restores_context(self):
        set_log_context(existing="value")

        with LogContext(temporary="data"):
            ctx = get_log_context()
            assert ctx["existing"] == "value"
            assert ctx["temporary"] == "data"

        ctx = get_log_context()
        assert ctx["existing"] == "value"
        assert "temporary" not in ctx

    def test_nested_context_managers(self):
        with LogContext(level1="a"):
            with LogContext(level2="b"):
                ctx = get_log_context()
                assert ctx["level1"] == "a"
                assert ctx["level2"] == "b"

            ctx = get_log_context()
            assert ctx["level1"] == "a"
            assert "level2" not in ctx
