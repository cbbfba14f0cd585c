"""Scope-based path resolution for config, lock and install locations.

Local scope resolves against the current working directory, global scope
against the user's home directory:

- local:  ./jumon.json, ./jumon-lock.json, ./.claude/commands/jumon/
- global: <jumon home>/jumon.json, <jumon home>/jumon-lock.json,
          ~/.claude/commands/jumon/
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from .constants import (
    CLAUDE_DIR,
    COMMANDS_SUBDIR,
    CONFIG_FILENAME,
    INSTALL_NAMESPACE,
    JUMON_HOME_DIR,
    LOCK_FILENAME,
)
from .errors import NotInitializedError, classify_os_error


class Scope(StrEnum):
    """Installation target."""

    LOCAL = "local"
    GLOBAL = "global"

    @property
    def is_local(self) -> bool:
        return self is Scope.LOCAL


def _is_windows() -> bool:
    return os.name == "nt"


def get_jumon_home() -> Path:
    """Return the user-global jumon directory.

    Resolution order:
    1. JUMON_HOME environment variable (all platforms)
    2. ~/.jumon/ on macOS/Linux
    3. %LOCALAPPDATA%\\jumon\\ on Windows (via platformdirs)
    """
    if env_home := os.environ.get("JUMON_HOME"):
        return Path(env_home)

    if _is_windows():
        from platformdirs import user_data_dir

        return Path(user_data_dir("jumon"))

    return Path.home() / JUMON_HOME_DIR


def _scope_base(scope: Scope) -> Path:
    return Path.cwd() if scope.is_local else Path.home()


def resolve_config_path(scope: Scope) -> Path:
    if scope.is_local:
        return Path.cwd() / CONFIG_FILENAME
    return get_jumon_home() / CONFIG_FILENAME


def resolve_lock_path(scope: Scope) -> Path:
    if scope.is_local:
        return Path.cwd() / LOCK_FILENAME
    return get_jumon_home() / LOCK_FILENAME


def resolve_marker_dir(scope: Scope) -> Path:
    """Return the ``.claude`` directory that must exist before installing."""
    return _scope_base(scope) / CLAUDE_DIR


def resolve_install_dir(scope: Scope) -> Path:
    return resolve_marker_dir(scope) / COMMANDS_SUBDIR / INSTALL_NAMESPACE


def ensure_install_dir(scope: Scope) -> Path:
    """Create the install root for *scope* and return it.

    Raises:
        NotInitializedError: If the ``.claude`` directory is missing. The
            directory is never created here.
    """
    return _ensure_install_dir(scope, resolve_marker_dir(scope), resolve_install_dir(scope))


def _ensure_install_dir(scope: Scope, marker: Path, install_dir: Path) -> Path:
    if not marker.is_dir():
        location = "current directory" if scope.is_local else "home directory"
        raise NotInitializedError(
            f"Claude Code directory not found in {location} ({marker}).",
            remedy="Create the .claude directory (or run Claude Code there once) and retry.",
        )

    try:
        install_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise classify_os_error(exc, install_dir, "create") from exc
    return install_dir


@dataclass(frozen=True)
class ScopePaths:
    """All filesystem locations for one scope, resolved at construction."""

    scope: Scope
    config_path: Path
    lock_path: Path
    install_dir: Path
    marker_dir: Path

    @classmethod
    def for_scope(cls, scope: Scope) -> "ScopePaths":
        return cls(
            scope=scope,
            config_path=resolve_config_path(scope),
            lock_path=resolve_lock_path(scope),
            install_dir=resolve_install_dir(scope),
            marker_dir=resolve_marker_dir(scope),
        )

    def ensure_install_dir(self) -> Path:
        return _ensure_install_dir(self.scope, self.marker_dir, self.install_dir)


__all__ = [
    "Scope",
    "ScopePaths",
    "get_jumon_home",
    "resolve_config_path",
    "resolve_lock_path",
    "resolve_marker_dir",
    "resolve_install_dir",
    "ensure_install_dir",
]
