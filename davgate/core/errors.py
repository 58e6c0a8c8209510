"""Gateway error taxonomy.

Every failure the gateway detects locally is a ``GatewayError``.  The
message always starts with the error code so the code survives into the
encoded error envelope the caller receives.  Connector I/O failures are
``ConnectorIOFailure`` (an ``OSError``) and are surfaced as-is.

None of these errors is retried or recovered; each is terminal for the
request that raised it.
"""

from __future__ import annotations

from collections.abc import Sequence


class GatewayError(RuntimeError):
    """Base class for failures detected by the gateway itself."""

    code: str = "GatewayError"

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls.code = cls.__name__

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.code}: {detail}")


class ConfigurationIncomplete(GatewayError):
    """The account's DAV connection settings are absent or unreadable."""

    def __init__(self, account_name: str, missing: Sequence[str] = ()) -> None:
        self.account_name = account_name
        self.missing = tuple(missing)
        detail = f"DAV data connection not set for user '{account_name}'"
        if self.missing:
            detail += f" (missing: {', '.join(self.missing)})"
        super().__init__(detail)


class InvalidServerAddress(GatewayError):
    """The configured server address cannot be used as an http(s) URL."""

    def __init__(self, address: str, reason: str = "") -> None:
        self.address = address
        detail = f"invalid DAV server address '{address}'"
        if reason:
            detail += f": {reason}"
        super().__init__(detail)


class TargetNotAllowed(GatewayError):
    """The remote DAV host is not on the account's proxy allow-list."""

    def __init__(self, host: str, account_name: str) -> None:
        self.host = host
        self.account_name = account_name
        super().__init__(
            f"proxy domain not allowed '{host}' for user '{account_name}'"
        )


class UnknownCommand(GatewayError):
    """The ``action`` parameter names no supported DAV command."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"DAV command '{action}' not recognized")


class MissingParameter(GatewayError):
    """A mandatory parameter for the command was not supplied."""

    def __init__(self, command: str, parameter: str) -> None:
        self.command = command
        self.parameter = parameter
        super().__init__(
            f"parameter '{parameter}' not provided for {command} DAV action"
        )


class MalformedParameter(GatewayError):
    """A parameter was supplied but could not be parsed."""

    def __init__(self, command: str, parameter: str, value: object) -> None:
        self.command = command
        self.parameter = parameter
        self.value = value
        super().__init__(
            f"parameter '{parameter}' for {command} DAV action "
            f"has malformed value {value!r}"
        )


class ConnectorIOFailure(OSError):
    """Raised by a DAV connector when a remote operation fails."""
