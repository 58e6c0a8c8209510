"""Exception side channel — hands terminal request failures to the host.

The host keeps its own record of request failures next to the response
payload.  ``ExceptionContainer`` mirrors the host's container (one
exception per request); ``LoggingExceptionReporter`` writes failures to
the log for deployments without one.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ExceptionReporter(Protocol):
    """Protocol for the host's exception-reporting mechanism."""

    def report(self, error: BaseException) -> None:
        """Record *error* as the failure of the current request."""
        ...


class LoggingExceptionReporter:
    """Logs every reported failure at ERROR with its traceback."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def report(self, error: BaseException) -> None:
        self._log.error("DAV request failed: %s", error, exc_info=error)


class ExceptionContainer:
    """Holds the last reported exception, like the host's per-request container.

    Usage
    -----
    >>> container = ExceptionContainer()
    >>> container.report(RuntimeError("boom"))
    >>> str(container.exception)
    'boom'
    """

    def __init__(self) -> None:
        self.exception: BaseException | None = None
        self.reported: list[BaseException] = []

    def report(self, error: BaseException) -> None:
        self.exception = error
        self.reported.append(error)
