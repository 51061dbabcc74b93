"""CLI subpackage for Community Pulse."""

from __future__ import annotations

import typer
from rich.console import Console

app = typer.Typer(
    name="community-pulse",
    help="Score community sentiment, themes and pain points for a startup idea.",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        from .. import __version__

        console.print(f"community-pulse {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """Community Pulse - sentiment and theme signals from Reddit discussions."""
    pass


# Import and register command modules
from . import analyze, web  # noqa: E402, F401
