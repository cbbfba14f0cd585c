"""Shared test doubles and helpers for the jumon test suite."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from posixpath import basename

from jumon.core.errors import NotFoundError, RemoteError
from jumon.github.client import version_tag_candidates
from jumon.github.source import RemoteFile, RevisionRequest

SHA_A = "a" * 40
SHA_B = "b" * 40
SHA_C = "c" * 40


@dataclass
class FakeRepository:
    files: dict[str, bytes]
    sha: str = SHA_A
    branches: dict[str, str] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)


class FakeContentSource:
    """In-memory ContentSource that records every fetch and listing."""

    def __init__(self) -> None:
        self.repositories: dict[str, FakeRepository] = {}
        self.failing: set[str] = set()
        self.fetches: list[tuple[str, str, str | None]] = []
        self.listings: list[tuple[str, str | None]] = []
        self.resolutions: list[tuple[str, RevisionRequest]] = []

    def add_repo(self, key: str, files: dict[str, str], *, sha: str = SHA_A, **kwargs) -> FakeRepository:
        repo = FakeRepository({path: text.encode() for path, text in files.items()}, sha=sha, **kwargs)
        self.repositories[key] = repo
        return repo

    def set_file(self, key: str, path: str, text: str) -> None:
        self.repositories[key].files[path] = text.encode()

    def _repo(self, owner: str, repo: str) -> FakeRepository:
        try:
            return self.repositories[f"{owner}/{repo}"]
        except KeyError:
            raise NotFoundError(f"{owner}/{repo} not found") from None

    def fetch_file(self, owner: str, repo: str, path: str, ref: str | None = None) -> bytes:
        self.fetches.append((f"{owner}/{repo}", path, ref))
        if path in self.failing:
            raise RemoteError(f"GitHub API returned 500 for {path}", status_code=500)
        try:
            return self._repo(owner, repo).files[path]
        except KeyError:
            raise NotFoundError(f"{owner}/{repo}/{path} not found") from None

    def list_markdown_files(
        self, owner: str, repo: str, directory: str = "", ref: str | None = None
    ) -> list[RemoteFile]:
        self.listings.append((f"{owner}/{repo}", ref))
        files = self._repo(owner, repo).files
        prefix = f"{directory.strip('/')}/" if directory else ""
        return [
            RemoteFile(name=basename(path)[:-3], path=path)
            for path in sorted(files)
            if path.startswith(prefix) and path.endswith(".md")
        ]

    def resolve_revision(self, owner: str, repo: str, request: RevisionRequest) -> str:
        self.resolutions.append((f"{owner}/{repo}", request))
        fake = self._repo(owner, repo)
        if request.tag:
            if request.tag not in fake.tags:
                raise NotFoundError(f"tag {request.tag} not found")
            return fake.tags[request.tag]
        if request.version:
            for candidate in version_tag_candidates(request.version):
                if candidate in fake.tags:
                    return fake.tags[candidate]
            raise NotFoundError(f"No tag matching version {request.version}")
        if request.branch:
            if request.branch not in fake.branches:
                raise NotFoundError(f"branch {request.branch} not found")
            return fake.branches[request.branch]
        return fake.sha

    def reset_calls(self) -> None:
        self.fetches.clear()
        self.listings.clear()
        self.resolutions.clear()


def read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, payload: dict) -> None:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
