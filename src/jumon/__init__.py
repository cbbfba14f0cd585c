"""
jumon - package manager for Claude Code slash commands.

Usage:
    jumon add owner/repo/path/to/command.md
    jumon add owner/repo --global
    jumon install
    jumon update
    jumon remove <name>
    jumon list
"""

import logging
from typing import Optional

import typer

from jumon.cli.commands import register_commands
from jumon.cli.ui import console

__version__ = "0.4.0"

app = typer.Typer(
    name="jumon",
    help="Install and manage slash commands from GitHub repositories",
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"jumon {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Manage .claude/commands from GitHub."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
