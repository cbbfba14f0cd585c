"""Console helpers shared by the jumon commands."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from jumon.core.errors import JumonError, OperationCancelled, ValidationError
from jumon.core.paths import Scope
from jumon.github.client import GitHubContentSource
from jumon.reconcile.diff import ChangeKind
from jumon.reconcile.engine import Confirm
from jumon.reconcile.results import ItemFailure, UpdatePlan
from jumon.settings import load_settings

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_failure(message: str) -> None:
    err_console.print(f"[red]✗[/red] {escape(message)}")


def print_item_failures(failures: list[ItemFailure]) -> None:
    for failure in failures:
        print_failure(f"Failed to install {failure.item}: {failure.message}")


def print_error(error: JumonError) -> None:
    err_console.print(f"[red]✗ Error:[/red] {escape(str(error))}", highlight=False)
    if error.remedy:
        err_console.print(f"[dim]{escape(error.remedy)}[/dim]", highlight=False)


def run_or_exit(fn: Callable[[], T]) -> T:
    """Run *fn*, mapping cancellations to exit 0 and jumon errors to exit 1."""
    try:
        return fn()
    except OperationCancelled as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise typer.Exit(0) from exc
    except JumonError as exc:
        print_error(exc)
        raise typer.Exit(1) from exc


def resolve_scope(global_: bool, local: bool, *, default: Scope = Scope.LOCAL) -> Scope:
    if global_ and local:
        print_error(ValidationError("--global and --local are mutually exclusive"))
        raise typer.Exit(1)
    if global_:
        return Scope.GLOBAL
    if local:
        return Scope.LOCAL
    return default


def make_confirm(assume_yes: bool) -> Confirm:
    """Confirmation callback for the engine; ``--yes`` answers every prompt."""

    def confirm(prompt: str) -> bool:
        if assume_yes:
            console.print(f"[yellow]{prompt}[/yellow] [dim](--yes)[/dim]")
            return True
        console.print(f"[yellow]⚠ {prompt}[/yellow]")
        return typer.confirm("Continue?", default=False)

    return confirm


@contextmanager
def github_source() -> Iterator[GitHubContentSource]:
    """Open a GitHub content source configured from the user settings."""
    settings = load_settings()
    with GitHubContentSource(settings.github) as source:
        yield source


def _diff_text(lines: list[str]) -> Text:
    text = Text()
    for line in lines:
        if line.startswith(("+++", "---")):
            style = "bold"
        elif line.startswith("@@"):
            style = "cyan"
        elif line.startswith("+"):
            style = "green"
        elif line.startswith("-"):
            style = "red"
        else:
            style = "dim"
        text.append(line + "\n", style=style)
    return text


def render_update_plan(plan: UpdatePlan) -> None:
    """Show the per-repository revision change and file diffs."""
    console.print("\n[bold]Detailed changes preview:[/bold]\n")
    for repo_plan in plan.repositories:
        old = (repo_plan.old_revision or "")[:7] or "unknown"
        console.print(
            f"[bold]{repo_plan.key}[/bold] {old} → {repo_plan.new_revision.short}",
            highlight=False,
        )
        changed = repo_plan.changed_files
        if not changed:
            console.print("  [dim]No file changes[/dim]")
            continue
        for change in changed:
            label = "[green]NEW[/green]" if change.kind is ChangeKind.NEW else "[yellow]MODIFIED[/yellow]"
            console.print(f"  {label}: {change.filename}", highlight=False)
            console.print(
                Panel(_diff_text(change.diff_lines()), title=change.filename, border_style="dim")
            )


__all__ = [
    "console",
    "err_console",
    "print_success",
    "print_failure",
    "print_item_failures",
    "print_error",
    "run_or_exit",
    "resolve_scope",
    "make_confirm",
    "github_source",
    "render_update_plan",
]
