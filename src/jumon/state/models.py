"""Desired-state (config) and resolved-state (lock) documents.

``RepositoryConfig.only`` carries the central sentinel of the whole tool:
an empty list means "install every command in the repository", a non-empty
list means "install exactly these commands".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from jumon.core.constants import LOCKFILE_VERSION
from jumon.core.errors import ValidationError
from jumon.core.repository import (
    RepositoryKey,
    command_name_from_path,
    normalize_command_path,
    validate_alias,
)
from jumon.github.source import RevisionRequest

logger = logging.getLogger(__name__)


@dataclass
class CommandSpec:
    """One installable Markdown file of a repository."""

    name: str
    path: str
    alias: str | None = None

    @property
    def install_name(self) -> str:
        return self.alias or self.name

    @property
    def filename(self) -> str:
        return f"{self.install_name}.md"

    def matches(self, name: str) -> bool:
        return name in (self.name, self.alias)

    @classmethod
    def from_path(cls, path: str, alias: str | None = None) -> CommandSpec:
        path = normalize_command_path(path)
        if alias is not None:
            alias = validate_alias(alias)
        return cls(name=command_name_from_path(path), path=path, alias=alias)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path, "alias": self.alias}

    @classmethod
    def from_dict(cls, data: Any) -> CommandSpec:
        if not isinstance(data, dict):
            raise ValidationError(f"Command entry must be an object, got {type(data).__name__}")

        path = data.get("path")
        name = data.get("name")
        alias = data.get("alias")
        if not isinstance(path, str) or not path.strip():
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("Command entry needs a 'path' or a 'name'")
            path = name
        if alias is not None and not isinstance(alias, str):
            raise ValidationError("Command 'alias' must be a string or null")
        if alias:
            alias = validate_alias(alias)

        path = normalize_command_path(path)
        if not isinstance(name, str) or not name.strip():
            name = command_name_from_path(path)
        return cls(name=name.strip(), path=path, alias=alias or None)


def _specs_from_list(raw: Any, key: str) -> list[CommandSpec]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError(f"'only' for {key} must be a list")
    return [CommandSpec.from_dict(item) for item in raw]


def _optional_str(data: dict[str, Any], field_name: str, key: str) -> str | None:
    value = data.get(field_name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{field_name}' for {key} must be a string")
    return value.strip() or None


@dataclass
class RepositoryConfig:
    """Desired state for one repository.

    ``branch``, ``version`` and ``tag`` are mutually exclusive; use the
    setters, which clear the other two.
    """

    only: list[CommandSpec] = field(default_factory=list)
    branch: str | None = None
    version: str | None = None
    tag: str | None = None

    @property
    def installs_all(self) -> bool:
        return not self.only

    def set_branch(self, branch: str) -> None:
        self.branch, self.version, self.tag = branch, None, None

    def set_version(self, version: str) -> None:
        self.branch, self.version, self.tag = None, version, None

    def set_tag(self, tag: str) -> None:
        self.branch, self.version, self.tag = None, None, tag

    def revision_request(self) -> RevisionRequest:
        return RevisionRequest(branch=self.branch, tag=self.tag, version=self.version)

    def find_by_path(self, path: str) -> CommandSpec | None:
        for spec in self.only:
            if spec.path == path:
                return spec
        return None

    def find_by_name(self, name: str) -> CommandSpec | None:
        for spec in self.only:
            if spec.matches(name):
                return spec
        return None

    def upsert_command(self, spec: CommandSpec) -> CommandSpec:
        """Append *spec*, or update the alias of the entry with the same path."""
        existing = self.find_by_path(spec.path)
        if existing is None:
            self.only.append(spec)
            return spec
        existing.alias = spec.alias
        return existing

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.branch:
            data["branch"] = self.branch
        if self.version:
            data["version"] = self.version
        if self.tag:
            data["tag"] = self.tag
        data["only"] = [spec.to_dict() for spec in self.only]
        return data

    @classmethod
    def from_dict(cls, data: Any, key: str = "<repository>") -> RepositoryConfig:
        if not isinstance(data, dict):
            raise ValidationError(f"Configuration for {key} must be an object")

        branch = _optional_str(data, "branch", key)
        version = _optional_str(data, "version", key)
        tag = _optional_str(data, "tag", key)
        config = cls(only=_specs_from_list(data.get("only"), key))

        refs = [name for name, value in (("version", version), ("tag", tag), ("branch", branch)) if value]
        if len(refs) > 1:
            logger.warning(
                "%s sets %s; only one is allowed, using %s", key, " and ".join(refs), refs[0]
            )
        if version:
            config.set_version(version)
        elif tag:
            config.set_tag(tag)
        elif branch:
            config.set_branch(branch)
        return config


@dataclass
class Config:
    """Root of ``jumon.json``."""

    repositories: dict[str, RepositoryConfig] = field(default_factory=dict)

    def get(self, key: RepositoryKey) -> RepositoryConfig | None:
        return self.repositories.get(str(key))

    def ensure(self, key: RepositoryKey) -> RepositoryConfig:
        return self.repositories.setdefault(str(key), RepositoryConfig())

    def discard(self, key: RepositoryKey) -> None:
        self.repositories.pop(str(key), None)

    def items(self) -> list[tuple[RepositoryKey, RepositoryConfig]]:
        return [(RepositoryKey.parse(key), value) for key, value in self.repositories.items()]

    def to_dict(self) -> dict[str, Any]:
        return {"repositories": {key: value.to_dict() for key, value in self.repositories.items()}}

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        config = cls()
        if not isinstance(data, dict):
            return config
        repositories = data.get("repositories")
        if not isinstance(repositories, dict):
            return config

        for raw_key, raw_value in repositories.items():
            try:
                key = str(RepositoryKey.parse(raw_key))
                config.repositories[key] = RepositoryConfig.from_dict(raw_value, key)
            except ValidationError as exc:
                logger.warning("Skipping repository entry %r in config: %s", raw_key, exc)
        return config


@dataclass
class RepositoryLockInfo:
    """Resolved state for one repository: pinned revision and installed set."""

    revision: str = ""
    only: list[CommandSpec] = field(default_factory=list)

    def find_by_name(self, name: str) -> CommandSpec | None:
        for spec in self.only:
            if spec.matches(name):
                return spec
        return None

    def merge_command(self, spec: CommandSpec) -> None:
        """Record *spec*, updating the entry with the same name in place."""
        for index, existing in enumerate(self.only):
            if existing.name == spec.name:
                self.only[index] = CommandSpec(name=spec.name, path=spec.path, alias=spec.alias)
                return
        self.only.append(spec)

    def remove_command(self, name: str) -> bool:
        spec = self.find_by_name(name)
        if spec is None:
            return False
        self.only.remove(spec)
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"revision": self.revision, "only": [spec.to_dict() for spec in self.only]}

    @classmethod
    def from_dict(cls, data: Any, key: str = "<repository>") -> RepositoryLockInfo:
        if not isinstance(data, dict):
            raise ValidationError(f"Lock entry for {key} must be an object")
        revision = data.get("revision") or ""
        if not isinstance(revision, str):
            raise ValidationError(f"'revision' for {key} must be a string")
        return cls(revision=revision, only=_specs_from_list(data.get("only"), key))


@dataclass
class Lock:
    """Root of ``jumon-lock.json``."""

    lockfile_version: int = LOCKFILE_VERSION
    repositories: dict[str, RepositoryLockInfo] = field(default_factory=dict)

    def get(self, key: RepositoryKey) -> RepositoryLockInfo | None:
        return self.repositories.get(str(key))

    def ensure(self, key: RepositoryKey) -> RepositoryLockInfo:
        return self.repositories.setdefault(str(key), RepositoryLockInfo())

    def discard(self, key: RepositoryKey) -> None:
        self.repositories.pop(str(key), None)

    def items(self) -> list[tuple[RepositoryKey, RepositoryLockInfo]]:
        return [(RepositoryKey.parse(key), value) for key, value in self.repositories.items()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "lockfileVersion": self.lockfile_version,
            "repositories": {key: value.to_dict() for key, value in self.repositories.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> Lock:
        lock = cls()
        if not isinstance(data, dict):
            return lock
        version = data.get("lockfileVersion")
        if isinstance(version, int) and not isinstance(version, bool):
            lock.lockfile_version = version
        repositories = data.get("repositories")
        if not isinstance(repositories, dict):
            return lock

        for raw_key, raw_value in repositories.items():
            try:
                key = str(RepositoryKey.parse(raw_key))
                lock.repositories[key] = RepositoryLockInfo.from_dict(raw_value, key)
            except ValidationError as exc:
                logger.warning("Skipping repository entry %r in lock: %s", raw_key, exc)
        return lock


__all__ = [
    "CommandSpec",
    "RepositoryConfig",
    "Config",
    "RepositoryLockInfo",
    "Lock",
]
