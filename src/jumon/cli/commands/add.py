"""``jumon add``: install one command or every command of a repository."""

from __future__ import annotations

from typing import Optional

import typer

from jumon.cli import ui
from jumon.cli.ui import (
    console,
    make_confirm,
    print_item_failures,
    print_success,
    resolve_scope,
    run_or_exit,
)
from jumon.core.paths import ScopePaths
from jumon.reconcile import AddResult, ReconcileEngine


def _report(result: AddResult) -> None:
    revision = result.revision
    if revision.fell_back:
        console.print(
            "[yellow]⚠ Configured tag or version not found; installed from the default branch[/yellow]"
        )
    for spec, destination in result.installed:
        print_success(f"Installed {spec.install_name} → {destination}")
    print_item_failures(result.failures)
    for path in result.removed:
        console.print(f"[dim]Removed {path}[/dim]")
    if result.whole_repository:
        console.print(
            f"\n[bold]{result.key}[/bold] @ {revision.short}: "
            f"{len(result.installed)} installed, {len(result.failures)} failed"
        )


def add(
    repository_path: str = typer.Argument(
        ..., help="owner/repo to install every command, or owner/repo/path/to/command.md"
    ),
    global_: bool = typer.Option(False, "--global", "-g", help="Install into ~/.claude/commands"),
    local: bool = typer.Option(False, "--local", "-l", help="Install into ./.claude/commands (default)"),
    alias: Optional[str] = typer.Option(None, "--alias", "-a", help="Install the command under a different name"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Install from this branch and pin it"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to every confirmation"),
) -> None:
    """Add a command (or a whole repository) and record it in jumon.json."""
    scope = resolve_scope(global_, local)
    paths = ScopePaths.for_scope(scope)

    def run() -> AddResult:
        with ui.github_source() as source:
            engine = ReconcileEngine(paths, source, confirm=make_confirm(yes))
            return engine.add(repository_path, alias=alias, branch=branch)

    result = run_or_exit(run)
    _report(result)
