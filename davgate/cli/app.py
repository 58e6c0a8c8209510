"""Main Typer application — imports and registers all CLI commands.

Entry point: ``davgate`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer

from davgate.cli.commands.check_domain import check_domain_cmd
from davgate.cli.commands.handle import handle_cmd
from davgate.cli.commands.list_commands import list_commands_cmd
from davgate.config import settings

app = typer.Typer(
    name="davgate",
    help="davgate: WebDAV gateway for mail-server zimlet actions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        settings.log_level, "--log-level", help="Logging level."
    ),
) -> None:
    """davgate: WebDAV gateway for mail-server zimlet actions."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
app.command(name="handle", help="Run one DAV action as a dry run.")(handle_cmd)
app.command(name="check-domain", help="Test a host against allow-list patterns.")(check_domain_cmd)
app.command(name="commands", help="List DAV commands and their parameters.")(list_commands_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
