"""davgate CLI — Typer application with rich output."""
