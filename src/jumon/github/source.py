"""Contract between the reconciliation engine and a remote content source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from jumon.core.errors import ValidationError


@dataclass(frozen=True)
class RemoteFile:
    """A Markdown file discovered in a repository listing."""

    name: str  # basename without .md
    path: str  # repository-relative, ends in .md


@dataclass(frozen=True)
class RevisionRequest:
    """What to resolve to a commit: at most one of branch, tag or version.

    An empty request means "the default branch".
    """

    branch: str | None = None
    tag: str | None = None
    version: str | None = None

    def __post_init__(self) -> None:
        chosen = [value for value in (self.branch, self.tag, self.version) if value]
        if len(chosen) > 1:
            raise ValidationError("A revision request takes only one of branch, tag or version")

    @property
    def is_default(self) -> bool:
        return not (self.branch or self.tag or self.version)

    def describe(self) -> str:
        if self.tag:
            return f"tag {self.tag}"
        if self.version:
            return f"version {self.version}"
        if self.branch:
            return f"branch {self.branch}"
        return "default branch"


@runtime_checkable
class ContentSource(Protocol):
    """Fetches command files and revisions from a remote repository."""

    def fetch_file(self, owner: str, repo: str, path: str, ref: str | None = None) -> bytes:
        """Return the raw bytes of *path*; raise NotFoundError when absent."""
        ...

    def list_markdown_files(
        self, owner: str, repo: str, directory: str = "", ref: str | None = None
    ) -> list[RemoteFile]:
        """Recursively list ``*.md`` files below *directory*."""
        ...

    def resolve_revision(self, owner: str, repo: str, request: RevisionRequest) -> str:
        """Resolve *request* to a commit SHA."""
        ...


__all__ = ["ContentSource", "RemoteFile", "RevisionRequest"]
