"""``davgate handle`` — run one DAV action as a dry run.

Loads the account from an accounts file, runs the action through the full
dispatcher (configuration gate, allow-list, parameter validation) against
an in-memory DAV tree, and prints the JSON response payload.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from davgate.bridge.connector import InMemoryDavConnector
from davgate.bridge.directory import StaticAccountDirectory
from davgate.bridge.reporting import ExceptionContainer
from davgate.config import settings
from davgate.core.dispatcher import RequestDispatcher

console = Console()


def parse_params(pairs: list[str]) -> dict[str, str]:
    """Turn ``key=value`` strings into a parameter mapping."""
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {pair!r}", param_hint="--param")
        params[key] = value
    return params


def handle_cmd(
    account_id: str = typer.Option(
        ...,
        "--account",
        "-u",
        help="Account id to run the action as.",
    ),
    action: str = typer.Option(
        ...,
        "--action",
        "-x",
        help="DAV command: GET, PUT, PROPFIND, DELETE, MKCOL, COPY or MOVE.",
    ),
    param: Optional[list[str]] = typer.Option(
        None,
        "--param",
        "-p",
        help="Request parameter as key=value (repeatable), e.g. path=/cal.",
    ),
    accounts_path: Optional[Path] = typer.Option(
        None,
        "--accounts",
        "-f",
        help="Accounts JSON file. Defaults to DAVGATE_ACCOUNTS_PATH.",
    ),
) -> None:
    """Run one DAV action against an in-memory DAV tree and print the response."""
    parameters = parse_params(param or [])
    parameters["action"] = action

    path = accounts_path or settings.accounts_path
    try:
        directory = StaticAccountDirectory.from_file(path, zimlet_name=settings.zimlet_name)
        account = directory.account_context(account_id)
    except (OSError, ValueError, KeyError) as e:
        console.print(f"[red]Cannot load account '{escape(account_id)}' from {escape(str(path))}:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)

    reporter = ExceptionContainer()
    dispatcher = RequestDispatcher(directory, InMemoryDavConnector, reporter=reporter)
    payload = dispatcher.handle(account, parameters)

    console.print_json(json.dumps(payload))
    if reporter.exception is not None:
        raise typer.Exit(code=1)
