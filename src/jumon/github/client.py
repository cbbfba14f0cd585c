"""GitHub REST API implementation of :class:`~jumon.github.source.ContentSource`."""

from __future__ import annotations

import base64
import binascii
import logging
import re
import ssl
from typing import Any
from urllib.parse import quote

import httpx
import truststore
from packaging.version import InvalidVersion, Version

from jumon.core.constants import COMMAND_SUFFIX, DEFAULT_BRANCHES
from jumon.core.errors import NotFoundError, RemoteError
from jumon.settings import GitHubSettings

from .source import RemoteFile, RevisionRequest

logger = logging.getLogger(__name__)

_VERSION_OPERATORS = re.compile(r"^[~^>=<\s]+")


def _auth_headers(token: str | None) -> dict[str, str]:
    """Return Authorization header dict only when a non-empty token exists."""
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def version_tag_candidates(version: str) -> list[str]:
    """Tag spellings to try for a version constraint such as ``^1.2.0``.

    Range operators are stripped; a PEP 440 version is tried both with and
    without a leading ``v``.
    """
    tag = _VERSION_OPERATORS.sub("", version).strip()
    if not tag:
        return []
    candidates = [tag]
    bare = tag[1:] if tag[:1] in ("v", "V") else tag
    try:
        Version(bare)
    except InvalidVersion:
        return candidates
    alternate = bare if bare != tag else f"v{tag}"
    if alternate not in candidates:
        candidates.append(alternate)
    return candidates


class GitHubContentSource:
    """Read command files and revisions through the GitHub REST API.

    Usable as a context manager; the underlying ``httpx.Client`` is closed on
    exit when this instance created it.
    """

    def __init__(
        self,
        settings: GitHubSettings | None = None,
        *,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or GitHubSettings()
        self._owns_client = client is None
        if client is None:
            if transport is None:
                ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                client = httpx.Client(verify=ssl_context)
            else:
                client = httpx.Client(transport=transport)
        self._client = client

    def __enter__(self) -> "GitHubContentSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _url(self, owner: str, repo: str, suffix: str) -> str:
        return f"{self.settings.api_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/{suffix}"

    def _get(self, url: str, *, what: str, params: dict[str, str] | None = None) -> Any:
        try:
            response = self._client.get(
                url,
                params=params,
                headers=_auth_headers(self.settings.token),
                timeout=self.settings.timeout,
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            raise RemoteError(f"Failed to fetch {what}: {exc}") from exc

        status = response.status_code
        if status == 404:
            raise NotFoundError(f"{what} not found")
        if status in (401, 403):
            remedy = "Set GH_TOKEN or GITHUB_TOKEN (or github.token in config.yaml)."
            if response.headers.get("x-ratelimit-remaining") == "0":
                raise RemoteError(
                    f"GitHub API rate limit exceeded while fetching {what}",
                    status_code=status,
                    remedy=f"Wait for the limit to reset or authenticate. {remedy}",
                )
            raise RemoteError(f"GitHub denied access to {what} ({status})", status_code=status, remedy=remedy)
        if status != 200:
            raise RemoteError(f"GitHub API returned {status} for {what}", status_code=status)

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(f"Failed to parse GitHub response for {what}: {exc}") from exc

    def _get_raw(self, url: str, *, what: str) -> bytes:
        try:
            response = self._client.get(
                url,
                headers=_auth_headers(self.settings.token),
                timeout=self.settings.timeout,
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            raise RemoteError(f"Failed to download {what}: {exc}") from exc
        if response.status_code == 404:
            raise NotFoundError(f"{what} not found")
        if response.status_code != 200:
            raise RemoteError(f"Download of {what} failed with {response.status_code}", status_code=response.status_code)
        return response.content

    def _contents(self, owner: str, repo: str, path: str, ref: str | None) -> Any:
        what = f"{owner}/{repo}/{path}" if path else f"{owner}/{repo}"
        if ref:
            what = f"{what} at {ref}"
        params = {"ref": ref} if ref else None
        return self._get(self._url(owner, repo, f"contents/{quote(path)}"), what=what, params=params)

    # ------------------------------------------------------------------
    # ContentSource
    # ------------------------------------------------------------------

    def fetch_file(self, owner: str, repo: str, path: str, ref: str | None = None) -> bytes:
        payload = self._contents(owner, repo, path, ref)
        if not isinstance(payload, dict) or payload.get("type") != "file":
            raise NotFoundError(f"{owner}/{repo}/{path} is not a file")

        if payload.get("encoding") == "base64" and payload.get("content"):
            try:
                return base64.b64decode(payload["content"])
            except (binascii.Error, ValueError) as exc:
                raise RemoteError(f"Invalid base64 content for {owner}/{repo}/{path}: {exc}") from exc

        # Files over 1 MB come back without inline content.
        download_url = payload.get("download_url")
        if download_url:
            return self._get_raw(download_url, what=f"{owner}/{repo}/{path}")
        return b""

    def list_markdown_files(
        self, owner: str, repo: str, directory: str = "", ref: str | None = None
    ) -> list[RemoteFile]:
        payload = self._contents(owner, repo, directory, ref)
        if not isinstance(payload, list):
            raise NotFoundError(f"{owner}/{repo}/{directory} is not a directory")

        files: list[RemoteFile] = []
        for item in payload:
            item_type = item.get("type")
            item_path = item.get("path") or item.get("name", "")
            if item_type == "file" and item_path.endswith(COMMAND_SUFFIX):
                name = item.get("name", item_path.rsplit("/", 1)[-1])
                files.append(RemoteFile(name=name[: -len(COMMAND_SUFFIX)], path=item_path))
            elif item_type == "dir":
                files.extend(self.list_markdown_files(owner, repo, item_path, ref))
        return files

    def resolve_revision(self, owner: str, repo: str, request: RevisionRequest) -> str:
        if request.tag:
            return self._resolve_tag(owner, repo, request.tag)
        if request.version:
            candidates = version_tag_candidates(request.version)
            for candidate in candidates:
                try:
                    return self._resolve_tag(owner, repo, candidate)
                except NotFoundError:
                    logger.debug("Tag %s not found in %s/%s", candidate, owner, repo)
            raise NotFoundError(f"No tag matching version {request.version} in {owner}/{repo}")
        if request.branch:
            return self._resolve_branch(owner, repo, request.branch)
        return self._resolve_default_branch(owner, repo)

    def _resolve_branch(self, owner: str, repo: str, branch: str) -> str:
        payload = self._get(
            self._url(owner, repo, f"branches/{quote(branch, safe='')}"),
            what=f"branch {branch} of {owner}/{repo}",
        )
        try:
            return payload["commit"]["sha"]
        except (KeyError, TypeError) as exc:
            raise RemoteError(f"Unexpected branch payload for {owner}/{repo}@{branch}") from exc

    def _resolve_default_branch(self, owner: str, repo: str) -> str:
        for branch in DEFAULT_BRANCHES:
            try:
                return self._resolve_branch(owner, repo, branch)
            except NotFoundError:
                logger.debug("Branch %s not found in %s/%s", branch, owner, repo)
        raise NotFoundError(
            f"Repository {owner}/{repo} not found or has none of the branches: {', '.join(DEFAULT_BRANCHES)}"
        )

    def _resolve_tag(self, owner: str, repo: str, tag: str) -> str:
        what = f"tag {tag} of {owner}/{repo}"
        payload = self._get(self._url(owner, repo, f"git/refs/tags/{quote(tag)}"), what=what)

        # A missing exact ref returns the list of refs sharing the prefix.
        if isinstance(payload, list):
            payload = next((ref for ref in payload if ref.get("ref") == f"refs/tags/{tag}"), None)
            if payload is None:
                raise NotFoundError(f"{what} not found")

        try:
            target = payload["object"]
            sha, object_type = target["sha"], target.get("type")
        except (KeyError, TypeError) as exc:
            raise RemoteError(f"Unexpected tag payload for {what}") from exc

        if object_type == "tag":
            annotated = self._get(self._url(owner, repo, f"git/tags/{sha}"), what=f"annotated {what}")
            try:
                return annotated["object"]["sha"]
            except (KeyError, TypeError) as exc:
                raise RemoteError(f"Unexpected annotated tag payload for {what}") from exc
        return sha


__all__ = ["GitHubContentSource", "version_tag_candidates"]
