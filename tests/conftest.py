"""Shared test fixtures for davgate."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from davgate.bridge.reporting import ExceptionContainer
from davgate.core.dispatcher import RequestDispatcher
from davgate.models.target import AccountContext, AllowedDomainSet, RemoteTarget


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeDirectory:
    """Account directory returning fixed values, or raising *error*."""

    def __init__(
        self,
        target: RemoteTarget,
        domains: AllowedDomainSet,
        error: Exception | None = None,
    ) -> None:
        self.target = target
        self.domains = domains
        self.error = error

    def get_remote_target(self, account: AccountContext) -> RemoteTarget:
        if self.error is not None:
            raise self.error
        return self.target

    def get_allowed_domains(self, account: AccountContext) -> AllowedDomainSet:
        return self.domains


class RecordingConnector:
    """Connector that records every call and returns canned responses."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.responses: dict[str, Any] = {}
        self.error: BaseException | None = None

    def _record(self, verb: str, *args: Any) -> Any:
        self.calls.append((verb, args))
        if self.error is not None:
            raise self.error
        return self.responses.get(verb)

    def get(self, path: str) -> Any:
        return self._record("get", path)

    def put(self, path: str, data: bytes, content_type: str) -> Any:
        return self._record("put", path, data, content_type)

    def propfind(self, path: str, depth: int) -> Any:
        return self._record("propfind", path, depth)

    def delete(self, path: str) -> Any:
        return self._record("delete", path)

    def mkcol(self, path: str) -> Any:
        return self._record("mkcol", path)

    def copy(self, source: str, destination: str, overwrite: bool) -> Any:
        return self._record("copy", source, destination, overwrite)

    def move(self, source: str, destination: str, overwrite: bool) -> Any:
        return self._record("move", source, destination, overwrite)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def account() -> AccountContext:
    """Provide the authenticated test account."""
    return AccountContext(account_id="acc-1", name="alice@example.com")


@pytest.fixture
def remote_target() -> RemoteTarget:
    """Provide a fully populated remote target on an allowed host."""
    return RemoteTarget(
        server_address="https://dav.example.com",
        port="443",
        base_path="/remote.php/webdav",
        username="alice",
        password="s3cret",
    )


@pytest.fixture
def allowed_domains() -> AllowedDomainSet:
    return AllowedDomainSet(patterns=("*example.com",))


@pytest.fixture
def connector() -> RecordingConnector:
    return RecordingConnector()


@pytest.fixture
def reporter() -> ExceptionContainer:
    return ExceptionContainer()


@pytest.fixture
def built_targets() -> list[RemoteTarget]:
    """Targets the connector factory was called with, in call order."""
    return []


@pytest.fixture
def make_directory(
    remote_target: RemoteTarget,
    allowed_domains: AllowedDomainSet,
) -> Callable[..., FakeDirectory]:
    """Factory fixture: build a FakeDirectory, defaulting to the allowed target."""

    def _factory(
        target: RemoteTarget | None = None,
        domains: AllowedDomainSet | None = None,
        error: Exception | None = None,
    ) -> FakeDirectory:
        return FakeDirectory(
            target if target is not None else remote_target,
            domains if domains is not None else allowed_domains,
            error=error,
        )

    return _factory


@pytest.fixture
def make_dispatcher(
    make_directory: Callable[..., FakeDirectory],
    connector: RecordingConnector,
    reporter: ExceptionContainer,
    built_targets: list[RemoteTarget],
) -> Callable[..., RequestDispatcher]:
    """Factory fixture: build a RequestDispatcher wired to test doubles."""

    def _connector_factory(target: RemoteTarget) -> RecordingConnector:
        built_targets.append(target)
        return connector

    def _factory(
        target: RemoteTarget | None = None,
        domains: AllowedDomainSet | None = None,
        directory: Any = None,
    ) -> RequestDispatcher:
        if directory is None:
            directory = make_directory(target, domains)
        return RequestDispatcher(directory, _connector_factory, reporter=reporter)

    return _factory


@pytest.fixture
def dispatcher(make_dispatcher: Callable[..., RequestDispatcher]) -> RequestDispatcher:
    """Convenience: a dispatcher with the default allowed target."""
    return make_dispatcher()
