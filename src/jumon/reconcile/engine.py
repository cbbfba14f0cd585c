"""Reconciliation of config (desired state), lock (resolved state) and files.

The engine is the only writer of ``jumon.json`` and ``jumon-lock.json``.
Each operation loads both documents once, mutates them in memory and writes
them back at the end. User decisions come in through the ``confirm``
callback; the engine itself never reads from or writes to the terminal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from jumon.core.errors import JumonError, NotFoundError, OperationCancelled
from jumon.core.paths import ScopePaths
from jumon.core.repository import (
    RepositoryKey,
    RepositoryTarget,
    parse_repository_path,
    validate_alias,
)
from jumon.github.source import ContentSource
from jumon.state.models import CommandSpec, Config, Lock, RepositoryConfig, RepositoryLockInfo
from jumon.state.store import load_config, load_lock, save_config, save_lock

from .conflicts import (
    ModeConflict,
    ModeConflictKind,
    check_command_destination,
    check_repository_destinations,
    detect_mode_conflict,
)
from .diff import FileChange
from .filesystem import (
    InstalledCommand,
    iter_installed,
    read_command,
    remove_command_file,
    remove_stale_commands,
    repository_dir,
    write_command,
)
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

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]
Preview = Callable[[UpdatePlan], None]


def decline(prompt: str) -> bool:
    """Default confirmation: answer no."""
    return False


class ReconcileEngine:
    """Add, install, update, remove and list commands for one scope."""

    def __init__(
        self,
        paths: ScopePaths,
        source: ContentSource | None = None,
        *,
        confirm: Confirm = decline,
        preview: Preview | None = None,
    ) -> None:
        self.paths = paths
        self._source = source
        self._confirm = confirm
        self._preview = preview

    @property
    def source(self) -> ContentSource:
        if self._source is None:
            raise RuntimeError("This operation needs a content source; none was configured")
        return self._source

    # ------------------------------------------------------------------
    # documents
    # ------------------------------------------------------------------

    def load_documents(self) -> tuple[Config, Lock]:
        return load_config(self.paths.config_path), load_lock(self.paths.lock_path)

    def _save(self, config: Config | None = None, lock: Lock | None = None) -> None:
        if config is not None:
            save_config(self.paths.config_path, config)
        if lock is not None:
            save_lock(self.paths.lock_path, lock)

    def _ask(self, conflict: ModeConflict) -> None:
        if not self._confirm(conflict.prompt):
            raise OperationCancelled(f"Cancelled: {conflict.key} left unchanged.")

    # ------------------------------------------------------------------
    # add
    # ------------------------------------------------------------------

    def add(
        self,
        repository_path: str,
        *,
        alias: str | None = None,
        branch: str | None = None,
    ) -> AddResult:
        """Install one command (``owner/repo/path``) or a whole repository."""
        if alias is not None:
            alias = validate_alias(alias)
        target = parse_repository_path(repository_path)
        key = target.key
        config, lock = self.load_documents()
        existing = config.get(key)

        conflict = detect_mode_conflict(key, existing, target.command_path)
        if conflict is not None:
            self._ask(conflict)

        install_root = self.paths.ensure_install_dir()
        revision = resolve_target_revision(self.source, key, existing, branch=branch)
        logger.debug("Resolved %s to %s", key, revision.sha)

        if target.command_path:
            result = self._add_command(
                target, alias, revision, config, lock, install_root, conflict
            )
        else:
            result = self._add_repository(key, revision, config, lock, install_root)

        if branch:
            config.ensure(key).set_branch(branch)
        self._save(config, lock)
        return result

    def _add_command(
        self,
        target: RepositoryTarget,
        alias: str | None,
        revision: ResolvedRevision,
        config: Config,
        lock: Lock,
        install_root: Path,
        conflict: ModeConflict | None,
    ) -> AddResult:
        key = target.key
        spec = CommandSpec.from_path(target.command_path, alias)
        repo_dir = repository_dir(install_root, key)
        destination = repo_dir / spec.filename

        existing = config.get(key)
        configured = existing.find_by_path(spec.path) if existing is not None else None
        previous_filename = configured.filename if configured is not None else None

        check_command_destination(
            install_root,
            spec.install_name,
            alias=alias,
            own_target=destination if existing is not None else None,
            repository_path=str(target),
        )

        content = self.source.fetch_file(key.owner, key.repo, spec.path, revision.sha)
        write_command(destination, content)

        result = AddResult(key=key, revision=revision, whole_repository=False)
        result.installed.append((spec, destination))

        switching = conflict is not None and conflict.kind is ModeConflictKind.SWITCH_TO_SPECIFIC
        if switching:
            result.removed.extend(remove_stale_commands(repo_dir, {spec.filename}))
        elif previous_filename and previous_filename != spec.filename:
            renamed = repo_dir / previous_filename
            if renamed.is_file():
                remove_command_file(renamed, install_root)
                result.removed.append(renamed)

        config.ensure(key).upsert_command(spec)

        info = lock.ensure(key)
        if switching:
            info.only = []
        info.revision = revision.sha
        info.merge_command(CommandSpec(name=spec.name, path=spec.path, alias=spec.alias))
        return result

    def _add_repository(
        self,
        key: RepositoryKey,
        revision: ResolvedRevision,
        config: Config,
        lock: Lock,
        install_root: Path,
    ) -> AddResult:
        files = self.source.list_markdown_files(key.owner, key.repo, "", revision.sha)
        if not files:
            raise NotFoundError(f"No markdown files found in {key}")

        repo_dir = repository_dir(install_root, key)
        check_repository_destinations(install_root, key, files, repo_dir)

        result = AddResult(key=key, revision=revision, whole_repository=True)
        keep: set[str] = set()
        for file in files:
            spec = CommandSpec(name=file.name, path=file.path)
            keep.add(spec.filename)
            try:
                content = self.source.fetch_file(key.owner, key.repo, file.path, revision.sha)
            except JumonError as exc:
                logger.warning("Failed to install %s from %s: %s", file.name, key, exc)
                result.failures.append(ItemFailure(file.name, str(exc)))
                continue
            destination = repo_dir / spec.filename
            write_command(destination, content)
            result.installed.append((spec, destination))

        result.removed.extend(remove_stale_commands(repo_dir, keep))

        config.ensure(key).only = []
        lock.repositories[str(key)] = RepositoryLockInfo(
            revision=revision.sha, only=[spec for spec, _ in result.installed]
        )
        return result

    # ------------------------------------------------------------------
    # install
    # ------------------------------------------------------------------

    def install(self, *, write_lock: bool = True) -> InstallReport:
        """Fetch and write every repository recorded in the lock."""
        config, lock = self.load_documents()
        report = InstallReport(
            unlocked=[key for key, _ in config.items() if lock.get(key) is None]
        )
        for key in report.unlocked:
            logger.warning("%s is configured but not locked; run `jumon update` to install it", key)
        if not lock.repositories:
            return report

        install_root = self.paths.ensure_install_dir()
        for key, info in lock.items():
            report.repositories.append(self._install_repository(key, info, config.get(key), install_root))

        if write_lock:
            self._save(lock=lock)
        return report

    def _install_repository(
        self,
        key: RepositoryKey,
        info: RepositoryLockInfo,
        repo_config: RepositoryConfig | None,
        install_root: Path,
    ) -> RepositoryInstall:
        outcome = RepositoryInstall(key=key)
        if repo_config is None:
            outcome.skipped = "not present in config"
            logger.warning("Skipping %s: locked but not present in config", key)
            return outcome

        try:
            if not info.revision:
                # Migrated v1 locks carry no revision; pin the configured ref.
                info.revision = resolve_target_revision(self.source, key, repo_config).sha
            fetched, outcome.failures = self._fetch_commands(key, repo_config, info.revision)
        except JumonError as exc:
            logger.warning("Failed to list commands of %s: %s", key, exc)
            outcome.failures.append(ItemFailure(str(key), str(exc)))
            return outcome

        repo_dir = repository_dir(install_root, key)
        for spec, content in fetched:
            write_command(repo_dir / spec.filename, content)
            outcome.installed.append(spec)
        info.only = list(outcome.installed)
        return outcome

    def _fetch_commands(
        self, key: RepositoryKey, repo_config: RepositoryConfig, ref: str | None
    ) -> tuple[list[tuple[CommandSpec, bytes]], list[ItemFailure]]:
        """Fetch the command set *repo_config* asks for.

        Whole-repository mode lists the repository first; a listing failure
        propagates. Individual file failures are collected.
        """
        if repo_config.installs_all:
            files = self.source.list_markdown_files(key.owner, key.repo, "", ref)
            specs = [CommandSpec(name=file.name, path=file.path) for file in files]
        else:
            specs = [CommandSpec(name=spec.name, path=spec.path, alias=spec.alias) for spec in repo_config.only]

        fetched: list[tuple[CommandSpec, bytes]] = []
        failures: list[ItemFailure] = []
        for spec in specs:
            try:
                fetched.append((spec, self.source.fetch_file(key.owner, key.repo, spec.path, ref)))
            except JumonError as exc:
                logger.warning("Failed to fetch %s from %s: %s", spec.path, key, exc)
                failures.append(ItemFailure(spec.install_name, str(exc)))
        return fetched, failures

    # ------------------------------------------------------------------
    # update
    # ------------------------------------------------------------------

    def update(self) -> UpdateReport:
        """Move every configured repository to its current target revision.

        All changes are previewed first and confirmed once for the whole
        batch; declining raises :class:`OperationCancelled` before any write.
        """
        plan = self.plan_update()
        if plan.has_file_changes:
            if self._preview is not None:
                self._preview(plan)
            if not self._confirm("Apply these changes?"):
                raise OperationCancelled("Update cancelled.")
        return self.apply_update(plan)

    def plan_update(self) -> UpdatePlan:
        config, lock = self.load_documents()
        plan = UpdatePlan(lock=lock)
        if not config.repositories:
            return plan

        install_root = self.paths.ensure_install_dir()
        for key, repo_config in config.items():
            info = lock.get(key)
            try:
                revision = resolve_target_revision(self.source, key, repo_config)
            except JumonError as exc:
                logger.warning("Failed to check updates for %s: %s", key, exc)
                plan.failures.append(ItemFailure(str(key), str(exc)))
                continue

            if info is not None and info.revision == revision.sha:
                plan.up_to_date.append((key, revision.sha))
                continue

            try:
                fetched, failures = self._fetch_commands(key, repo_config, revision.sha)
            except JumonError as exc:
                logger.warning("Failed to list commands of %s: %s", key, exc)
                plan.failures.append(ItemFailure(str(key), str(exc)))
                continue

            repo_dir = repository_dir(install_root, key)
            repo_plan = RepositoryUpdatePlan(
                key=key,
                old_revision=info.revision if info is not None else None,
                new_revision=revision,
                failures=failures,
            )
            for spec, content in fetched:
                target = repo_dir / spec.filename
                change = FileChange(spec.filename, target, read_command(target), content)
                repo_plan.changes.append((spec, change))
            plan.repositories.append(repo_plan)
        return plan

    def apply_update(self, plan: UpdatePlan) -> UpdateReport:
        """Write the files of *plan* and record the new revisions in the lock."""
        report = UpdateReport(up_to_date=list(plan.up_to_date), failures=list(plan.failures))
        lock = plan.lock
        for repo_plan in plan.repositories:
            repo_dir = repository_dir(self.paths.install_dir, repo_plan.key)
            failed = {failure.item for failure in repo_plan.failures}
            keep = {spec.filename for spec, _ in repo_plan.changes}
            keep.update(f"{item}.md" for item in failed)
            remove_stale_commands(repo_dir, keep)

            for _, change in repo_plan.changes:
                if change.changed:
                    write_command(change.target, change.new)

            info = lock.ensure(repo_plan.key)
            retained = [spec for spec in info.only if spec.install_name in failed]
            info.only = [spec for spec, _ in repo_plan.changes] + retained
            if repo_plan.failures:
                # Keep the old pin so the next update retries the failed files.
                logger.warning(
                    "%s updated partially (%d failed); revision left at %s",
                    repo_plan.key,
                    len(repo_plan.failures),
                    info.revision or "unknown",
                )
            else:
                info.revision = repo_plan.new_revision.sha
            report.updated.append(repo_plan)

        if plan.repositories:
            self._save(lock=lock)
        return report

    # ------------------------------------------------------------------
    # remove / list
    # ------------------------------------------------------------------

    def remove(self, name: str) -> RemoveResult:
        """Remove an installed command by name or alias."""
        install_root = self.paths.install_dir
        if not install_root.is_dir():
            raise NotFoundError(f"No commands directory found at {install_root}")

        config, lock = self.load_documents()
        match = self._find_in_config(config, name, install_root)
        if match is None:
            return self._remove_untracked(name, install_root)

        key, repo_config, spec, target = match
        removed_dirs = remove_command_file(target, install_root)

        if spec is not None:
            repo_config.only.remove(spec)
            if not repo_config.only:
                config.discard(key)
            info = lock.get(key)
            if info is not None:
                info.remove_command(spec.name)
                if not info.only:
                    lock.discard(key)
        elif not any(repository_dir(install_root, key).glob("*.md")):
            # Whole-repository entries do not track individual removals.
            config.discard(key)
            lock.discard(key)

        self._save(config, lock)
        return RemoveResult(
            name=name, repository=str(key), path=target, tracked=True, removed_dirs=removed_dirs
        )

    def _find_in_config(
        self, config: Config, name: str, install_root: Path
    ) -> tuple[RepositoryKey, RepositoryConfig, CommandSpec | None, Path] | None:
        for key, repo_config in config.items():
            repo_dir = repository_dir(install_root, key)
            if repo_config.installs_all:
                candidate = repo_dir / f"{name}.md"
                if candidate.is_file():
                    return key, repo_config, None, candidate
                continue
            spec = repo_config.find_by_name(name)
            if spec is not None:
                return key, repo_config, spec, repo_dir / spec.filename
        return None

    def _remove_untracked(self, name: str, install_root: Path) -> RemoveResult:
        for installed in iter_installed(install_root):
            if installed.name == name:
                removed_dirs = remove_command_file(installed.path, install_root)
                return RemoveResult(
                    name=name,
                    repository=installed.repository,
                    path=installed.path,
                    tracked=False,
                    removed_dirs=removed_dirs,
                )
        raise NotFoundError(
            f"Command '{name}' not found",
            remedy="Run `jumon list` to see installed commands.",
        )

    def list_installed(self) -> list[InstalledCommand]:
        return iter_installed(self.paths.install_dir)


__all__ = ["Confirm", "Preview", "ReconcileEngine", "decline"]
