"""Console layer of the jumon CLI."""

from .ui import (
    console,
    err_console,
    make_confirm,
    print_error,
    print_failure,
    print_success,
    render_update_plan,
    resolve_scope,
    run_or_exit,
)

__all__ = [
    "console",
    "err_console",
    "make_confirm",
    "print_error",
    "print_failure",
    "print_success",
    "render_update_plan",
    "resolve_scope",
    "run_or_exit",
]
