"""Bridges to the host and remote collaborators.

The gateway depends on three external capabilities, each behind a
``typing.Protocol``: the DAV connector, the account directory, and the
host's exception side channel.  The concrete classes here are the
in-process stand-ins used for dry runs and tests.
"""

from davgate.bridge.connector import DavConnector, InMemoryDavConnector
from davgate.bridge.directory import AccountDirectory, StaticAccountDirectory
from davgate.bridge.reporting import (
    ExceptionContainer,
    ExceptionReporter,
    LoggingExceptionReporter,
)

__all__ = [
    "AccountDirectory",
    "DavConnector",
    "ExceptionContainer",
    "ExceptionReporter",
    "InMemoryDavConnector",
    "LoggingExceptionReporter",
    "StaticAccountDirectory",
]
