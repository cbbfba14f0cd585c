"""Command implementations registered on the jumon Typer app."""

from __future__ import annotations

import typer

from .add import add
from .install import install
from .list_cmd import list_commands
from .remove import remove
from .update import update


def register_commands(app: typer.Typer) -> None:
    app.command()(add)
    app.command()(install)
    app.command()(update)
    app.command()(remove)
    app.command("list")(list_commands)


__all__ = ["register_commands", "add", "install", "update", "remove", "list_commands"]
