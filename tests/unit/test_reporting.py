"""Unit tests for the exception side channel."""

from __future__ import annotations

import logging

import pytest

from davgate.bridge.reporting import (
    ExceptionContainer,
    ExceptionReporter,
    LoggingExceptionReporter,
)


class TestExceptionContainer:
    def test_keeps_last_exception(self):
        container = ExceptionContainer()
        first, second = RuntimeError("one"), OSError("two")
        container.report(first)
        container.report(second)
        assert container.exception is second
        assert container.reported == [first, second]

    def test_satisfies_protocol(self):
        assert isinstance(ExceptionContainer(), ExceptionReporter)


class TestLoggingExceptionReporter:
    def test_logs_at_error(self, caplog: pytest.LogCaptureFixture):
        reporter = LoggingExceptionReporter()
        with caplog.at_level(logging.ERROR, logger="davgate.bridge.reporting"):
            reporter.report(RuntimeError("remote down"))
        assert "remote down" in caplog.text
        assert caplog.records[0].exc_info is not None

    def test_satisfies_protocol(self):
        assert isinstance(LoggingExceptionReporter(), ExceptionReporter)
