"""``davgate commands`` — list DAV commands and their parameters."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from davgate.core.command_resolver import CommandResolver

console = Console()


def list_commands_cmd() -> None:
    """Show each DAV command with its mandatory and optional parameters."""
    table = Table(title="DAV Commands")
    table.add_column("Command", style="cyan")
    table.add_column("Mandatory", style="bold")
    table.add_column("Optional (default)")
    table.add_column("Result")

    for command, contract in CommandResolver().describe().items():
        optional = ", ".join(
            f"{name} ({default!r})" for name, default in contract["optional"].items()
        )
        table.add_row(
            command.value,
            ", ".join(contract["mandatory"]) or "-",
            optional or "-",
            "true" if contract["mutating"] else "body",
        )

    console.print(table)
