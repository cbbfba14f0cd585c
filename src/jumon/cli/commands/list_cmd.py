"""``jumon list``: show installed commands per scope."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from jumon.cli.ui import console, run_or_exit
from jumon.core.paths import Scope, ScopePaths
from jumon.reconcile import InstalledCommand, ReconcileEngine

SCOPE_TITLES = {Scope.LOCAL: "Local commands", Scope.GLOBAL: "Global commands"}
SCOPE_PREFIXES = {Scope.LOCAL: "/project:", Scope.GLOBAL: "/user:"}


def _render_scope(scope: Scope, commands: list[InstalledCommand], install_dir: Path) -> None:
    console.print(f"\n[bold]{SCOPE_TITLES[scope]}[/bold] [dim]({install_dir})[/dim]", highlight=False)
    if not commands:
        console.print("  [dim]No commands installed[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Command", style="green", no_wrap=True)
    table.add_column("Repository", style="magenta", no_wrap=True)
    prefix = SCOPE_PREFIXES[scope]
    for command in commands:
        table.add_row(f"{prefix}{command.name}", command.repository)
    console.print(table)


def list_commands(
    global_: bool = typer.Option(False, "--global", "-g", help="Only list global commands"),
    local: bool = typer.Option(False, "--local", "-l", help="Only list project commands"),
) -> None:
    """List installed commands; both scopes unless one is selected."""
    if global_ and not local:
        scopes = [Scope.GLOBAL]
    elif local and not global_:
        scopes = [Scope.LOCAL]
    else:
        scopes = [Scope.LOCAL, Scope.GLOBAL]

    for scope in scopes:
        paths = ScopePaths.for_scope(scope)
        commands = run_or_exit(ReconcileEngine(paths).list_installed)
        _render_scope(scope, commands, paths.install_dir)
