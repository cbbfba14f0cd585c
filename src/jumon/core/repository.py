"""Repository keys and command path parsing."""

from __future__ import annotations

from dataclasses import dataclass
from posixpath import basename

from .constants import COMMAND_SUFFIX
from .errors import ValidationError


@dataclass(frozen=True, order=True)
class RepositoryKey:
    """An ``owner/repo`` pair identifying a GitHub repository."""

    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, value: str) -> "RepositoryKey":
        if not isinstance(value, str):
            raise ValidationError("Repository key must be a string")
        parts = value.split("/")
        if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
            raise ValidationError(
                f"Invalid repository key format: {value!r}. Expected format: owner/repo"
            )
        return cls(owner=parts[0].strip(), repo=parts[1].strip())


@dataclass(frozen=True)
class RepositoryTarget:
    """Parsed ``owner/repo[/path/to/command]`` argument of ``jumon add``."""

    key: RepositoryKey
    command_path: str | None = None

    @property
    def owner(self) -> str:
        return self.key.owner

    @property
    def repo(self) -> str:
        return self.key.repo

    def __str__(self) -> str:
        if self.command_path:
            return f"{self.key}/{self.command_path}"
        return str(self.key)


def parse_repository_path(value: str) -> RepositoryTarget:
    """Split ``owner/repo`` or ``owner/repo/path/to/command``.

    The command path, when present, is normalised to end in ``.md``.
    """
    parts = value.strip().strip("/").split("/")
    if len(parts) < 2 or any(not part for part in parts):
        raise ValidationError(
            f"Invalid repository path: {value!r}. "
            "Expected owner/repo or owner/repo/path/to/command"
        )
    key = RepositoryKey(owner=parts[0], repo=parts[1])
    command_path = "/".join(parts[2:]) or None
    if command_path is not None:
        command_path = normalize_command_path(command_path)
    return RepositoryTarget(key=key, command_path=command_path)


def normalize_command_path(path: str) -> str:
    """Return *path* with a trailing ``.md``."""
    path = path.strip().strip("/")
    if not path:
        raise ValidationError("Command path must not be empty")
    if path.endswith(COMMAND_SUFFIX):
        return path
    return f"{path}{COMMAND_SUFFIX}"


def validate_alias(alias: str) -> str:
    """Return *alias* stripped, or raise if it cannot be a plain file name."""
    value = alias.strip()
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ValidationError(
            f"Invalid alias: {alias!r}. An alias is a plain command name without path separators"
        )
    return value


def command_name_from_path(path: str) -> str:
    """Derive the canonical command name: basename minus ``.md``."""
    name = basename(path)
    if name.endswith(COMMAND_SUFFIX):
        name = name[: -len(COMMAND_SUFFIX)]
    return name


__all__ = [
    "RepositoryKey",
    "RepositoryTarget",
    "parse_repository_path",
    "normalize_command_path",
    "command_name_from_path",
    "validate_alias",
]
