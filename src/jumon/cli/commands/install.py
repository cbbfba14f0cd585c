"""``jumon install``: restore command files from the lockfile."""

from __future__ import annotations

import typer

from jumon.cli import ui
from jumon.cli.ui import (
    console,
    print_item_failures,
    print_success,
    resolve_scope,
    run_or_exit,
)
from jumon.core.paths import ScopePaths
from jumon.reconcile import InstallReport, ReconcileEngine


def install(
    global_: bool = typer.Option(False, "--global", "-g", help="Install the global commands"),
    local: bool = typer.Option(False, "--local", "-l", help="Install the project commands (default)"),
) -> None:
    """Install every command pinned in jumon-lock.json."""
    scope = resolve_scope(global_, local)
    paths = ScopePaths.for_scope(scope)

    def run() -> InstallReport:
        with ui.github_source() as source:
            return ReconcileEngine(paths, source).install()

    report = run_or_exit(run)

    for key in report.unlocked:
        console.print(f"[yellow]⚠ {key} is not in the lockfile; run `jumon update` to install it[/yellow]")
    if not report.repositories:
        console.print("[dim]Nothing to install: the lockfile has no repositories.[/dim]")
        return

    for outcome in report.repositories:
        if outcome.skipped:
            console.print(f"[yellow]⚠ Skipped {outcome.key}: {outcome.skipped}[/yellow]")
            continue
        for spec in outcome.installed:
            print_success(f"{spec.install_name} ({outcome.key})")
        print_item_failures(outcome.failures)

    console.print(
        f"\n[bold]Installed {report.installed_count} command(s)[/bold]"
        + (f", [red]{report.failed_count} failed[/red]" if report.failed_count else "")
    )
