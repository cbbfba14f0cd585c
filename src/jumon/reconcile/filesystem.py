"""Filesystem side of reconciliation: the ``<root>/<owner>/<repo>/<name>.md`` tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from jumon.core.constants import COMMAND_SUFFIX
from jumon.core.errors import classify_os_error
from jumon.core.repository import RepositoryKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class InstalledCommand:
    """A Markdown file found under the install root."""

    repository: str
    name: str
    path: Path


def repository_dir(install_root: Path, key: RepositoryKey) -> Path:
    return install_root / key.owner / key.repo


def _subdirs(path: Path) -> list[Path]:
    try:
        return sorted(child for child in path.iterdir() if child.is_dir())
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise classify_os_error(exc, path, "read") from exc


def iter_installed(install_root: Path) -> list[InstalledCommand]:
    """Walk owner -> repo -> ``*.md`` and return every installed command, sorted."""
    found: list[InstalledCommand] = []
    for owner_dir in _subdirs(install_root):
        for repo_dir in _subdirs(owner_dir):
            for file in sorted(repo_dir.glob(f"*{COMMAND_SUFFIX}")):
                if file.is_file():
                    found.append(
                        InstalledCommand(
                            repository=f"{owner_dir.name}/{repo_dir.name}",
                            name=file.stem,
                            path=file,
                        )
                    )
    return sorted(found)


def find_installed(
    install_root: Path, install_name: str, *, exclude: Path | None = None
) -> Path | None:
    """Return the first ``<install_name>.md`` anywhere under the root.

    Looks at files directly under the root as well as inside every
    owner/repo subtree. *exclude* is a file or directory to ignore.
    """
    filename = f"{install_name}{COMMAND_SUFFIX}"
    if not install_root.is_dir():
        return None

    for candidate in sorted(install_root.rglob(filename)):
        if not candidate.is_file():
            continue
        if exclude is not None and (candidate == exclude or exclude in candidate.parents):
            continue
        return candidate
    return None


def write_command(target: Path, content: bytes) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as exc:
        raise classify_os_error(exc, target, "write") from exc


def read_command(target: Path) -> bytes | None:
    try:
        return target.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise classify_os_error(exc, target, "read") from exc


def _is_empty_dir(path: Path) -> bool:
    return path.is_dir() and not any(path.iterdir())


def prune_empty_parents(start: Path, install_root: Path) -> list[Path]:
    """Remove *start* and its ancestors while empty, stopping at *install_root*."""
    removed: list[Path] = []
    current = start
    root = install_root.resolve()
    while current.resolve() != root and root in current.resolve().parents:
        if not _is_empty_dir(current):
            break
        try:
            current.rmdir()
        except OSError as exc:
            raise classify_os_error(exc, current, "remove") from exc
        removed.append(current)
        current = current.parent
    return removed


def remove_command_file(target: Path, install_root: Path) -> list[Path]:
    """Delete *target* and cascade to an empty repo dir and owner dir.

    Returns the directories removed, innermost first.
    """
    try:
        target.unlink()
    except FileNotFoundError:
        logger.debug("Command file already gone: %s", target)
    except OSError as exc:
        raise classify_os_error(exc, target, "remove") from exc
    return prune_empty_parents(target.parent, install_root)


def remove_stale_commands(repo_dir: Path, keep: set[str]) -> list[Path]:
    """Delete ``*.md`` files in *repo_dir* whose filename is not in *keep*."""
    removed: list[Path] = []
    if not repo_dir.is_dir():
        return removed
    for file in sorted(repo_dir.glob(f"*{COMMAND_SUFFIX}")):
        if file.name in keep or not file.is_file():
            continue
        try:
            file.unlink()
        except OSError as exc:
            raise classify_os_error(exc, file, "remove") from exc
        removed.append(file)
    return removed


__all__ = [
    "InstalledCommand",
    "repository_dir",
    "iter_installed",
    "find_installed",
    "write_command",
    "read_command",
    "prune_empty_parents",
    "remove_command_file",
    "remove_stale_commands",
]
