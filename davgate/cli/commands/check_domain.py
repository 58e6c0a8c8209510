"""``davgate check-domain`` — test a host against allow-list patterns."""

from __future__ import annotations

import typer
from rich.console import Console

from davgate.core.domain_matcher import is_allowed
from davgate.models.target import AllowedDomainSet

console = Console()


def check_domain_cmd(
    host: str = typer.Argument(..., help="Remote DAV host name."),
    patterns: list[str] = typer.Argument(
        ..., help="Allowed domain patterns, e.g. '*' or '*example.com'."
    ),
) -> None:
    """Report whether HOST is allowed by the given patterns (exit 1 if denied)."""
    allow_list = AllowedDomainSet.from_property(patterns)
    if is_allowed(host, allow_list):
        console.print(f"[green]allowed[/green] {host}")
        return
    console.print(f"[red]denied[/red] {host}")
    raise typer.Exit(code=1)
