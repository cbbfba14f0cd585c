"""``jumon update``: move repositories to their latest target revision."""

from __future__ import annotations

import typer

from jumon.cli import ui
from jumon.cli.ui import (
    console,
    make_confirm,
    print_failure,
    print_success,
    render_update_plan,
    resolve_scope,
    run_or_exit,
)
from jumon.core.paths import ScopePaths
from jumon.reconcile import ReconcileEngine, UpdateReport


def _report(report: UpdateReport) -> None:
    for key, sha in report.up_to_date:
        console.print(f"[dim]{key} is up to date ({sha[:7]})[/dim]")
    for repo_plan in report.updated:
        changed = len(repo_plan.changed_files)
        old = (repo_plan.old_revision or "")[:7] or "unknown"
        print_success(
            f"{repo_plan.key}: {old} → {repo_plan.new_revision.short} ({changed} file(s) changed)"
        )
        for failure in repo_plan.failures:
            print_failure(f"Failed to update {failure.item}: {failure.message}")
    for failure in report.failures:
        print_failure(f"{failure.item}: {failure.message}")
    if not report.updated and not report.failures:
        console.print("[green]All commands are up to date.[/green]")
        return
    console.print(
        f"\n[bold]Summary:[/bold] {len(report.updated)} updated, "
        f"{len(report.up_to_date)} unchanged, {len(report.failures)} failed"
    )


def update(
    global_: bool = typer.Option(False, "--global", "-g", help="Update the global commands"),
    local: bool = typer.Option(False, "--local", "-l", help="Update the project commands (default)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply changes without asking"),
) -> None:
    """Check every configured repository for new revisions and apply them."""
    scope = resolve_scope(global_, local)
    paths = ScopePaths.for_scope(scope)

    def run() -> UpdateReport:
        with ui.github_source() as source:
            engine = ReconcileEngine(
                paths, source, confirm=make_confirm(yes), preview=render_update_plan
            )
            return engine.update()

    report = run_or_exit(run)
    _report(report)
