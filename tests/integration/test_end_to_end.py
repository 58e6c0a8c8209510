"""End-to-end integration tests — accounts file, dispatcher and in-memory DAV
tree working together."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from davgate.bridge.connector import InMemoryDavConnector
from davgate.bridge.directory import StaticAccountDirectory
from davgate.bridge.reporting import ExceptionContainer
from davgate.config import DEFAULT_ZIMLET_NAME
from davgate.core.dispatcher import RequestDispatcher
from davgate.models.target import RemoteTarget

Z = DEFAULT_ZIMLET_NAME


def _properties(server: str, *, with_password: bool = True) -> list[str]:
    props = [
        f"{Z}:owncloud_zimlet_server_name:{server}",
        f"{Z}:owncloud_zimlet_server_port:443",
        f"{Z}:owncloud_zimlet_server_path:/remote.php/webdav/",
        f"{Z}:owncloud_zimlet_username:user",
    ]
    if with_password:
        props.append(f"{Z}:owncloud_zimlet_password:secret")
    return props


class TestEndToEnd:
    @pytest.fixture
    def directory(self, tmp_path: Path) -> StaticAccountDirectory:
        path = tmp_path / "accounts.json"
        path.write_text(
            json.dumps(
                {
                    "alice": {
                        "name": "alice@example.com",
                        "zimlet_user_properties": _properties("https://cloud.example.com"),
                        "proxy_allowed_domains": "*example.com",
                    },
                    "mallory": {
                        "name": "mallory@example.com",
                        "zimlet_user_properties": _properties("https://cloud.evil.org"),
                        "proxy_allowed_domains": "*example.com",
                    },
                    "bob": {
                        "name": "bob@example.com",
                        "zimlet_user_properties": _properties(
                            "https://cloud.example.com", with_password=False
                        ),
                        "proxy_allowed_domains": "*",
                    },
                }
            ),
            encoding="utf-8",
        )
        return StaticAccountDirectory.from_file(path)

    @pytest.fixture
    def dav(self) -> InMemoryDavConnector:
        return InMemoryDavConnector()

    @pytest.fixture
    def built(self) -> list[RemoteTarget]:
        return []

    @pytest.fixture
    def reporter(self) -> ExceptionContainer:
        return ExceptionContainer()

    @pytest.fixture
    def gateway(
        self,
        directory: StaticAccountDirectory,
        dav: InMemoryDavConnector,
        built: list[RemoteTarget],
        reporter: ExceptionContainer,
    ) -> RequestDispatcher:
        def factory(target: RemoteTarget) -> InMemoryDavConnector:
            built.append(target)
            dav.target = target
            return dav

        return RequestDispatcher(directory, factory, reporter=reporter)

    def test_calendar_lifecycle(
        self,
        gateway: RequestDispatcher,
        directory: StaticAccountDirectory,
        reporter: ExceptionContainer,
    ):
        alice = directory.account_context("alice")

        assert gateway.handle(alice, {"action": "MKCOL", "path": "/calendars"}) == {"MKCOL": True}
        assert gateway.handle(
            alice,
            {"action": "PUT", "path": "/cal", "data": "BEGIN:VCALENDAR", "contentType": "text/calendar"},
        ) == {"PUT": True}
        assert gateway.handle(alice, {"action": "GET", "path": "/cal"}) == {"GET": "BEGIN:VCALENDAR"}

        assert gateway.handle(
            alice, {"action": "COPY", "path": "/cal", "destPath": "/calendars/cal", "overwrite": "true"}
        ) == {"COPY": True}
        listing = gateway.handle(alice, {"action": "PROPFIND", "path": "/calendars", "depth": "1"})
        assert "<D:href>/calendars/cal</D:href>" in listing["PROPFIND"]

        assert gateway.handle(
            alice, {"action": "MOVE", "path": "/cal", "destPath": "/old.ics"}
        ) == {"MOVE": True}
        assert gateway.handle(alice, {"action": "DELETE", "path": "/old.ics"}) == {"DELETE": True}
        assert reporter.reported == []

    def test_remote_failure_is_returned_and_reported(
        self,
        gateway: RequestDispatcher,
        directory: StaticAccountDirectory,
        reporter: ExceptionContainer,
    ):
        alice = directory.account_context("alice")
        gateway.handle(alice, {"action": "PUT", "path": "/a", "data": "1"})
        gateway.handle(alice, {"action": "PUT", "path": "/b", "data": "2"})

        response = gateway.handle(alice, {"action": "COPY", "path": "/a", "destPath": "/b"})

        assert "412" in response["error"]["message"]
        assert len(reporter.reported) == 1

    def test_disallowed_host(
        self,
        gateway: RequestDispatcher,
        directory: StaticAccountDirectory,
        built: list[RemoteTarget],
    ):
        mallory = directory.account_context("mallory")
        response = gateway.handle(mallory, {"action": "GET", "path": "/cal"})

        assert set(response) == {"error"}
        assert "TargetNotAllowed" in response["error"]["message"]
        assert isinstance(response["error"]["trace"], list)
        assert built == []

    def test_incomplete_configuration(
        self,
        gateway: RequestDispatcher,
        directory: StaticAccountDirectory,
        built: list[RemoteTarget],
        reporter: ExceptionContainer,
    ):
        bob = directory.account_context("bob")
        response = gateway.handle(bob, {"action": "GET"})

        assert "ConfigurationIncomplete" in response["error"]["message"]
        assert "password" in response["error"]["message"]
        assert built == []
        assert len(reporter.reported) == 1

    def test_connector_bound_to_account_target(
        self,
        gateway: RequestDispatcher,
        directory: StaticAccountDirectory,
        built: list[RemoteTarget],
    ):
        gateway.handle(directory.account_context("alice"), {"action": "MKCOL", "path": "/x"})
        assert built[0].server_address == "https://cloud.example.com"
        assert built[0].port_number == 443
