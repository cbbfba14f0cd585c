"""Outcome records returned by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from jumon.core.repository import RepositoryKey
from jumon.state.models import CommandSpec, Lock

from .diff import FileChange
from .revisions import ResolvedRevision


@dataclass(frozen=True)
class ItemFailure:
    """A single command or repository that could not be processed."""

    item: str
    message: str


@dataclass
class AddResult:
    key: RepositoryKey
    revision: ResolvedRevision
    whole_repository: bool
    installed: list[tuple[CommandSpec, Path]] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)


@dataclass
class RepositoryInstall:
    key: RepositoryKey
    installed: list[CommandSpec] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    skipped: str | None = None


@dataclass
class InstallReport:
    repositories: list[RepositoryInstall] = field(default_factory=list)
    unlocked: list[RepositoryKey] = field(default_factory=list)

    @property
    def installed_count(self) -> int:
        return sum(len(repo.installed) for repo in self.repositories)

    @property
    def failed_count(self) -> int:
        return sum(len(repo.failures) for repo in self.repositories)


@dataclass
class RepositoryUpdatePlan:
    key: RepositoryKey
    old_revision: str | None
    new_revision: ResolvedRevision
    changes: list[tuple[CommandSpec, FileChange]] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)

    @property
    def changed_files(self) -> list[FileChange]:
        return [change for _, change in self.changes if change.changed]


@dataclass
class UpdatePlan:
    repositories: list[RepositoryUpdatePlan] = field(default_factory=list)
    up_to_date: list[tuple[RepositoryKey, str]] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    lock: Lock = field(default_factory=Lock, repr=False)

    @property
    def has_file_changes(self) -> bool:
        return any(plan.changed_files for plan in self.repositories)


@dataclass
class UpdateReport:
    updated: list[RepositoryUpdatePlan] = field(default_factory=list)
    up_to_date: list[tuple[RepositoryKey, str]] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)


@dataclass
class RemoveResult:
    name: str
    repository: str
    path: Path
    tracked: bool
    removed_dirs: list[Path] = field(default_factory=list)


__all__ = [
    "ItemFailure",
    "AddResult",
    "RepositoryInstall",
    "InstallReport",
    "RepositoryUpdatePlan",
    "UpdatePlan",
    "UpdateReport",
    "RemoveResult",
]
