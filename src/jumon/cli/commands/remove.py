"""``jumon remove``: delete an installed command."""

from __future__ import annotations

import typer

from jumon.cli.ui import console, print_success, resolve_scope, run_or_exit
from jumon.core.paths import ScopePaths
from jumon.reconcile import ReconcileEngine, RemoveResult


def remove(
    name: str = typer.Argument(..., help="Command name (or alias) to remove"),
    global_: bool = typer.Option(False, "--global", "-g", help="Remove from the global commands"),
    local: bool = typer.Option(False, "--local", "-l", help="Remove from the project commands (default)"),
) -> None:
    """Remove a command and drop it from jumon.json and jumon-lock.json."""
    scope = resolve_scope(global_, local)
    engine = ReconcileEngine(ScopePaths.for_scope(scope))

    result: RemoveResult = run_or_exit(lambda: engine.remove(name))
    print_success(f"Removed {result.name} from {result.repository}")
    if not result.tracked:
        console.print("[yellow]⚠ The command was not tracked in jumon.json; only the file was removed.[/yellow]")
    for directory in result.removed_dirs:
        console.print(f"[dim]Removed empty directory {directory}[/dim]")
