"""RequestDispatcher — runs one zimlet DAV action end to end.

Each request passes a fixed sequence of gates; the first failing gate
ends the request:

1. load the account's remote target and require every field to be set
2. parse the server address as an http(s) URL with an unambiguous host
3. check the server host against the account's proxy allow-list
4. build the connector for the target
5. resolve the ``action`` parameter to a DAV command
6. validate the command's parameters
7. invoke the connector

Success yields ``{<COMMAND>: result}``.  Any failure yields
``{"error": <envelope>}`` and is handed to the exception reporter as well.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlsplit

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from davgate.bridge.connector import DavConnector
from davgate.bridge.directory import AccountDirectory
from davgate.bridge.reporting import ExceptionReporter, LoggingExceptionReporter
from davgate.core.command_resolver import CommandResolver
from davgate.core.domain_matcher import is_allowed
from davgate.core.error_encoder import encode_error
from davgate.core.errors import (
    ConfigurationIncomplete,
    GatewayError,
    InvalidServerAddress,
    TargetNotAllowed,
)
from davgate.models.commands import DavCommand
from davgate.models.target import AccountContext, AllowedDomainSet, RemoteTarget

logger = logging.getLogger(__name__)

# Host registration of this handler.
REQUEST_NAME = "davSoapConnector"
REQUEST_NAMESPACE = "urn:zimbraAccount"

ConnectorFactory = Callable[[RemoteTarget], DavConnector]
DomainCheck = Callable[[str, AllowedDomainSet], bool]

_HTTP_URL: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


def render_result(value: Any) -> str:
    """Text form of a connector result for the response payload."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class RequestDispatcher:
    """Validates, authorizes and dispatches zimlet DAV actions.

    Parameters
    ----------
    directory:
        Source of per-account remote targets and allow-lists.
    connector_factory:
        Builds a connector bound to a remote target.  Only called after
        the target host passed the allow-list.
    reporter:
        Receives every terminal failure.  Defaults to logging.
    matcher:
        Allow-list predicate, ``(host, allow_list) -> bool``.
    resolver:
        Command resolver; a default ``CommandResolver`` when omitted.
    """

    def __init__(
        self,
        directory: AccountDirectory,
        connector_factory: ConnectorFactory,
        *,
        reporter: ExceptionReporter | None = None,
        matcher: DomainCheck = is_allowed,
        resolver: CommandResolver | None = None,
    ) -> None:
        self._directory = directory
        self._connector_factory = connector_factory
        self._reporter = reporter or LoggingExceptionReporter()
        self._matcher = matcher
        self._resolver = resolver or CommandResolver()

    # ------------------------------------------------------------------
    # Host authorization predicates
    # ------------------------------------------------------------------

    def needs_admin_authentication(self) -> bool:
        """Any authenticated account may use this handler."""
        return False

    def needs_authentication(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    def handle(
        self, account: AccountContext, parameters: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Run one action for *account* and return the response payload.

        Gateway errors and connector I/O errors (``OSError``) become an
        ``error`` payload and are reported.  Anything else is a programming
        error and propagates to the host.
        """
        try:
            command, result = self._execute(account, parameters)
        except (GatewayError, OSError) as exc:
            return self._fail(exc)
        return {command.value: result}

    def _execute(
        self, account: AccountContext, parameters: Mapping[str, Any]
    ) -> tuple[DavCommand, Any]:
        target = self._load_target(account)
        host = self._parse_host(target)
        self._check_target(host, account)

        connector = self._connector_factory(target)

        command = self._resolver.resolve(parameters.get("action") or "")
        request = self._resolver.bind(command, parameters)

        logger.info(
            "Dispatching %s to %s for user '%s'.", command.value, host, account.name
        )
        raw = request.invoke(connector)
        return command, True if request.mutating else render_result(raw)

    def _load_target(self, account: AccountContext) -> RemoteTarget:
        try:
            target = self._directory.get_remote_target(account)
        except Exception as exc:  # noqa: BLE001
            raise ConfigurationIncomplete(account.name) from exc

        if not target.is_complete:
            missing = target.missing_fields()
            logger.warning(
                "DAV connection for user '%s' is missing: %s",
                account.name,
                ", ".join(missing),
            )
            raise ConfigurationIncomplete(account.name, missing)
        return target

    def _parse_host(self, target: RemoteTarget) -> str:
        address = target.server_address or ""
        try:
            url = _HTTP_URL.validate_python(address)
        except ValidationError as exc:
            raise InvalidServerAddress(address, exc.errors()[0]["msg"]) from exc
        if not url.host:
            raise InvalidServerAddress(address, "no host")
        # Clients parsing the raw address must reach the host that was checked.
        try:
            raw_host = urlsplit(address).hostname
        except ValueError as exc:
            raise InvalidServerAddress(address, str(exc)) from exc
        if raw_host != url.host.strip("[]").lower():
            raise InvalidServerAddress(address, f"ambiguous host {raw_host!r}")
        try:
            target.port_number
        except ValueError as exc:
            raise InvalidServerAddress(address, str(exc)) from exc
        return url.host

    def _check_target(self, host: str, account: AccountContext) -> None:
        try:
            allowed_domains = self._directory.get_allowed_domains(account)
        except Exception as exc:  # noqa: BLE001
            raise ConfigurationIncomplete(account.name) from exc

        if not self._matcher(host, allowed_domains):
            logger.warning(
                "Proxy domain '%s' not allowed for user '%s'.", host, account.name
            )
            raise TargetNotAllowed(host, account.name)

    def _fail(self, error: BaseException) -> dict[str, Any]:
        envelope = encode_error(error)
        self._reporter.report(error)
        return {"error": envelope.to_payload()}
