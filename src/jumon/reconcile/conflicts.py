"""Conflict detection for ``jumon add``.

Two families of conflicts exist:

- **mode conflicts** between an existing repository entry and a new request
  (whole-repository vs. specific commands), resolved by asking the user;
- **destination conflicts** where the installed filename already exists
  somewhere under the install root, resolved only by choosing an alias.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from jumon.core.errors import ConflictError
from jumon.core.repository import RepositoryKey
from jumon.github.source import RemoteFile
from jumon.state.models import RepositoryConfig

from .filesystem import find_installed


class ModeConflictKind(StrEnum):
    SWITCH_TO_SPECIFIC = "switch_to_specific"
    SWITCH_TO_ALL = "switch_to_all"
    ALREADY_CONFIGURED = "already_configured"


@dataclass(frozen=True)
class ModeConflict:
    kind: ModeConflictKind
    key: RepositoryKey
    command_path: str | None = None

    @property
    def prompt(self) -> str:
        if self.kind is ModeConflictKind.SWITCH_TO_SPECIFIC:
            return (
                f"{self.key} is configured to install all commands. "
                f"Switch to installing only {self.command_path}? "
                "Other commands from this repository will be removed."
            )
        if self.kind is ModeConflictKind.SWITCH_TO_ALL:
            return (
                f"{self.key} is configured with specific commands. "
                "Switch to installing all commands from the repository?"
            )
        return f"{self.command_path} from {self.key} is already configured. Update it?"


def detect_mode_conflict(
    key: RepositoryKey, existing: RepositoryConfig | None, command_path: str | None
) -> ModeConflict | None:
    """Compare the configured mode of *key* against the requested one."""
    if existing is None:
        return None
    if existing.installs_all and command_path is not None:
        return ModeConflict(ModeConflictKind.SWITCH_TO_SPECIFIC, key, command_path)
    if not existing.installs_all and command_path is None:
        return ModeConflict(ModeConflictKind.SWITCH_TO_ALL, key)
    if not existing.installs_all and existing.find_by_path(command_path) is not None:
        return ModeConflict(ModeConflictKind.ALREADY_CONFIGURED, key, command_path)
    return None


def check_command_destination(
    install_root: Path,
    install_name: str,
    *,
    alias: str | None,
    own_target: Path | None,
    repository_path: str,
) -> None:
    """Refuse to install over an existing ``<install_name>.md`` without an alias.

    *own_target* is the command's own destination when its repository is
    already configured; it never counts as a conflict.
    """
    existing = find_installed(install_root, install_name, exclude=own_target)
    if existing is None or alias:
        return
    raise ConflictError(
        f"Command '{install_name}' already exists at {existing}",
        conflicts=[(install_name, existing)],
        remedy=(
            "Use --alias to install with a different name:\n"
            f"  jumon add {repository_path} --alias <new-name>"
        ),
    )


def check_repository_destinations(
    install_root: Path, key: RepositoryKey, files: list[RemoteFile], own_dir: Path
) -> None:
    """All-or-nothing conflict gate for installing every file of a repository.

    Files already in this repository's own install directory are not
    conflicts; two remote files sharing a basename are.
    """
    conflicts: list[tuple[str, Path]] = []
    counts = Counter(file.name for file in files)
    for name, count in sorted(counts.items()):
        if count > 1:
            conflicts.append((name, own_dir / f"{name}.md"))
            continue
        existing = find_installed(install_root, name, exclude=own_dir)
        if existing is not None:
            conflicts.append((name, existing))

    if conflicts:
        details = "\n".join(f"  '{name}' at {path}" for name, path in conflicts)
        raise ConflictError(
            f"The following commands from {key} conflict with existing commands:\n{details}",
            conflicts=conflicts,
            remedy="Resolve the conflicts manually or install specific commands with --alias.",
        )


__all__ = [
    "ModeConflictKind",
    "ModeConflict",
    "detect_mode_conflict",
    "check_command_destination",
    "check_repository_destinations",
]
