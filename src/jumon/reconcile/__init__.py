"""Reconciliation of config, lock and installed command files."""

from .conflicts import ModeConflict, ModeConflictKind, detect_mode_conflict
from .diff import ChangeKind, FileChange
from .engine import Confirm, Preview, ReconcileEngine, decline
from .filesystem import InstalledCommand, iter_installed
from .results import (
    AddResult,
    InstallReport,
    ItemFailure,
    RemoveResult,
    RepositoryInstall,
    RepositoryUpdatePlan,
    UpdatePlan,
    UpdateReport,
)
from .revisions import ResolvedRevision, resolve_target_revision

__all__ = [
    "ModeConflict",
    "ModeConflictKind",
    "detect_mode_conflict",
    "ChangeKind",
    "FileChange",
    "Confirm",
    "Preview",
    "ReconcileEngine",
    "decline",
    "InstalledCommand",
    "iter_installed",
    "AddResult",
    "InstallReport",
    "ItemFailure",
    "RemoveResult",
    "RepositoryInstall",
    "RepositoryUpdatePlan",
    "UpdatePlan",
    "UpdateReport",
    "ResolvedRevision",
    "resolve_target_revision",
]
