"""Migration of legacy config and lock payloads to the current shape.

Migrations are pure functions over the raw JSON payload and run once, at the
load boundary, before any model is constructed.

Lock versions:

- v1: command-centric ``{"commands": {name: {"repository", "path"}}}``
- v2: ``{"repositories": {key: {"revision", "only": ["name", ...]}}}``
- v3: ``only`` entries are ``{"name", "path", "alias"}`` objects (current)

Config: the legacy shape is keyed by repository path,
``{"commands": {"owner/repo[/path]": alias-or-options-or-null}}``.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

from jumon.core.constants import LOCKFILE_VERSION
from jumon.core.errors import ValidationError
from jumon.core.repository import command_name_from_path, normalize_command_path, parse_repository_path

logger = logging.getLogger(__name__)

Payload = dict[str, Any]
LockMigration = Callable[[Payload], Payload]

_LOCK_MIGRATIONS: dict[int, LockMigration] = {}


def _lock_migration(from_version: int) -> Callable[[LockMigration], LockMigration]:
    """Register a lock migration lifting *from_version* to the next version."""

    def decorator(fn: LockMigration) -> LockMigration:
        if from_version in _LOCK_MIGRATIONS:
            raise ValueError(f"Lock migration from v{from_version} already registered")
        _LOCK_MIGRATIONS[from_version] = fn
        return fn

    return decorator


def normalize_only_item(item: Any) -> Any:
    """Convert a legacy string ``only`` entry to the object form."""
    if isinstance(item, str):
        return {"name": item, "path": f"{item}.md", "alias": None}
    return item


@_lock_migration(1)
def _lock_commands_to_repositories(payload: Payload) -> Payload:
    repositories: dict[str, Any] = {}
    commands = payload.get("commands")
    if not isinstance(commands, dict):
        commands = {}

    for name, info in commands.items():
        if not isinstance(info, dict):
            logger.warning("Dropping malformed legacy lock entry %r", name)
            continue
        repository = info.get("repository")
        if not isinstance(repository, str) or repository.count("/") != 1:
            logger.warning("Dropping legacy lock entry %r without a valid repository", name)
            continue
        path = info.get("path") if isinstance(info.get("path"), str) else f"{name}.md"
        entry = repositories.setdefault(repository, {"revision": "", "only": []})
        canonical = command_name_from_path(path)
        entry["only"].append(
            {
                "name": canonical,
                "path": normalize_command_path(path),
                "alias": name if name != canonical else None,
            }
        )

    return {"lockfileVersion": 2, "repositories": repositories}


@_lock_migration(2)
def _lock_normalize_only_items(payload: Payload) -> Payload:
    repositories = payload.get("repositories")
    if isinstance(repositories, dict):
        for entry in repositories.values():
            if isinstance(entry, dict) and isinstance(entry.get("only"), list):
                entry["only"] = [normalize_only_item(item) for item in entry["only"]]
    payload["lockfileVersion"] = 3
    return payload


def detect_lock_version(payload: Payload) -> int:
    """Infer the shape version of a lock payload.

    The shape is authoritative; ``lockfileVersion`` is only trusted when it
    is newer than anything the shape reveals.
    """
    if "commands" in payload and "repositories" not in payload:
        return 1

    repositories = payload.get("repositories")
    if isinstance(repositories, dict):
        for entry in repositories.values():
            only = entry.get("only") if isinstance(entry, dict) else None
            if isinstance(only, list) and any(isinstance(item, str) for item in only):
                return 2

    declared = payload.get("lockfileVersion")
    if isinstance(declared, int) and not isinstance(declared, bool) and declared > LOCKFILE_VERSION:
        return declared
    return LOCKFILE_VERSION


def migrate_lock_payload(payload: Payload) -> Payload:
    """Return *payload* lifted to the current lockfile version."""
    version = detect_lock_version(payload)
    if version > LOCKFILE_VERSION:
        logger.warning(
            "Lockfile version %s is newer than supported version %s; reading it as v%s",
            version,
            LOCKFILE_VERSION,
            LOCKFILE_VERSION,
        )
        return payload

    migrated = copy.deepcopy(payload)
    while version < LOCKFILE_VERSION:
        logger.debug("Migrating lockfile from v%s", version)
        migrated = _LOCK_MIGRATIONS[version](migrated)
        version += 1
    migrated["lockfileVersion"] = LOCKFILE_VERSION
    return migrated


def is_legacy_config(payload: Payload) -> bool:
    return "commands" in payload and "repositories" not in payload


def _legacy_alias(options: Any) -> tuple[str | None, str | None]:
    """Return ``(alias, branch)`` from a legacy config value."""
    if isinstance(options, str):
        return options or None, None
    if isinstance(options, dict):
        alias = options.get("alias")
        branch = options.get("branch")
        return (
            alias if isinstance(alias, str) and alias else None,
            branch if isinstance(branch, str) and branch else None,
        )
    return None, None


def migrate_config_payload(payload: Payload) -> Payload:
    """Rewrite the command-keyed legacy config into the repositories shape.

    A legacy key without a command path means the whole repository, which
    wins over specific entries for the same repository.
    """
    if not is_legacy_config(payload):
        return payload

    commands = payload.get("commands")
    if not isinstance(commands, dict):
        commands = {}

    repositories: dict[str, dict[str, Any]] = {}
    whole_repo: set[str] = set()
    for raw_path, options in commands.items():
        try:
            target = parse_repository_path(raw_path)
        except ValidationError as exc:
            logger.warning("Dropping legacy config entry %r: %s", raw_path, exc)
            continue

        key = str(target.key)
        alias, branch = _legacy_alias(options)
        entry = repositories.setdefault(key, {"only": []})
        if branch:
            entry["branch"] = branch

        if target.command_path is None:
            whole_repo.add(key)
            continue
        if any(item["path"] == target.command_path for item in entry["only"]):
            continue
        entry["only"].append(
            {
                "name": command_name_from_path(target.command_path),
                "path": target.command_path,
                "alias": alias,
            }
        )

    for key in whole_repo:
        repositories[key]["only"] = []

    logger.info("Migrated legacy command-keyed config (%d repositories)", len(repositories))
    return {"repositories": repositories}


__all__ = [
    "normalize_only_item",
    "detect_lock_version",
    "migrate_lock_payload",
    "is_legacy_config",
    "migrate_config_payload",
]
