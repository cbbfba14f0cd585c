"""Tests for the GitHub REST content source."""

from __future__ import annotations

import base64

import httpx
import pytest

from jumon.core.errors import NotFoundError, RemoteError
from jumon.github.client import GitHubContentSource, version_tag_candidates
from jumon.github.source import RemoteFile, RevisionRequest
from jumon.settings import GitHubSettings

API = "https://api.github.com"


def _source(handler, **settings) -> GitHubContentSource:
    return GitHubContentSource(GitHubSettings(**settings), transport=httpx.MockTransport(handler))


def _encoded(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


def test_default_branch_falls_back_to_master() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.path == "/repos/acme/tools/branches/master":
            return httpx.Response(200, json={"commit": {"sha": "abc123"}})
        return httpx.Response(404, json={"message": "Not Found"})

    with _source(handler) as source:
        sha = source.resolve_revision("acme", "tools", RevisionRequest())

    assert sha == "abc123"
    assert seen == ["/repos/acme/tools/branches/main", "/repos/acme/tools/branches/master"]


def test_missing_repository_is_not_found() -> None:
    with _source(lambda request: httpx.Response(404)) as source:
        with pytest.raises(NotFoundError) as excinfo:
            source.resolve_revision("acme", "missing", RevisionRequest())

    assert "main, master" in str(excinfo.value)


def test_explicit_branch() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/acme/tools/branches/dev"
        return httpx.Response(200, json={"commit": {"sha": "dev-sha"}})

    with _source(handler) as source:
        assert source.resolve_revision("acme", "tools", RevisionRequest(branch="dev")) == "dev-sha"


def test_annotated_tag_is_dereferenced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/repos/acme/tools/git/refs/tags/v1.0.0":
            return httpx.Response(
                200, json={"ref": "refs/tags/v1.0.0", "object": {"sha": "tag-object", "type": "tag"}}
            )
        if request.url.path == "/repos/acme/tools/git/tags/tag-object":
            return httpx.Response(200, json={"object": {"sha": "commit-sha", "type": "commit"}})
        return httpx.Response(404)

    with _source(handler) as source:
        assert source.resolve_revision("acme", "tools", RevisionRequest(tag="v1.0.0")) == "commit-sha"


def test_prefix_match_list_is_not_an_exact_tag() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json=[{"ref": "refs/tags/v1.0.0-rc1", "object": {"sha": "rc", "type": "commit"}}]
        )

    with _source(handler) as source:
        with pytest.raises(NotFoundError):
            source.resolve_revision("acme", "tools", RevisionRequest(tag="v1.0.0"))


def test_version_tries_prefixed_spelling() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/repos/acme/tools/git/refs/tags/v1.2.0":
            return httpx.Response(200, json={"ref": "refs/tags/v1.2.0", "object": {"sha": "v-sha", "type": "commit"}})
        return httpx.Response(404)

    with _source(handler) as source:
        assert source.resolve_revision("acme", "tools", RevisionRequest(version="^1.2.0")) == "v-sha"


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("^1.2.0", ["1.2.0", "v1.2.0"]),
        (">= v2.0", ["v2.0", "2.0"]),
        ("~release-x", ["release-x"]),
        ("^", []),
    ],
)
def test_version_tag_candidates(version: str, expected: list[str]) -> None:
    assert version_tag_candidates(version) == expected


def test_fetch_file_decodes_base64_with_auth_and_ref() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/acme/tools/contents/tools/test.md"
        assert request.url.params["ref"] == "abc"
        assert request.headers["Authorization"] == "Bearer secret"
        return httpx.Response(
            200, json={"type": "file", "encoding": "base64", "content": _encoded("# Test\n")}
        )

    with _source(handler, token="secret") as source:
        assert source.fetch_file("acme", "tools", "tools/test.md", "abc") == b"# Test\n"


def test_fetch_large_file_uses_download_url() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "raw.example.com":
            return httpx.Response(200, content=b"big file")
        return httpx.Response(
            200,
            json={"type": "file", "encoding": "none", "content": "", "download_url": "https://raw.example.com/big.md"},
        )

    with _source(handler) as source:
        assert source.fetch_file("acme", "tools", "big.md") == b"big file"


def test_no_auth_header_without_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert "Authorization" not in request.headers
        return httpx.Response(200, json={"commit": {"sha": "x"}})

    with _source(handler) as source:
        source.resolve_revision("acme", "tools", RevisionRequest(branch="main"))


def test_listing_recurses_and_keeps_markdown() -> None:
    listings = {
        "/repos/acme/tools/contents/": [
            {"type": "file", "name": "deploy.md", "path": "deploy.md"},
            {"type": "file", "name": "README.txt", "path": "README.txt"},
            {"type": "dir", "name": "tools", "path": "tools"},
        ],
        "/repos/acme/tools/contents/tools": [
            {"type": "file", "name": "test.md", "path": "tools/test.md"},
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=listings[request.url.path])

    with _source(handler) as source:
        files = source.list_markdown_files("acme", "tools", ref="abc")

    assert files == [RemoteFile("deploy", "deploy.md"), RemoteFile("test", "tools/test.md")]


def test_rate_limit_maps_to_remote_error_with_remedy() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, headers={"x-ratelimit-remaining": "0"})

    with _source(handler) as source:
        with pytest.raises(RemoteError) as excinfo:
            source.fetch_file("acme", "tools", "deploy.md")

    assert excinfo.value.status_code == 403
    assert "rate limit" in str(excinfo.value)
    assert "GH_TOKEN" in excinfo.value.remedy


def test_server_error_maps_to_remote_error() -> None:
    with _source(lambda request: httpx.Response(502)) as source:
        with pytest.raises(RemoteError) as excinfo:
            source.fetch_file("acme", "tools", "deploy.md")

    assert excinfo.value.status_code == 502


def test_transport_failure_maps_to_remote_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _source(handler) as source:
        with pytest.raises(RemoteError, match="connection refused"):
            source.fetch_file("acme", "tools", "deploy.md")


def test_external_client_is_not_closed() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

    with GitHubContentSource(client=client):
        pass

    assert not client.is_closed
    client.close()


def test_api_url_comes_from_settings() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url).startswith("https://ghe.example.com/api/v3/repos/acme/tools/branches/main")
        return httpx.Response(200, json={"commit": {"sha": "ghe"}})

    with _source(handler, api_url="https://ghe.example.com/api/v3") as source:
        assert source.resolve_revision("acme", "tools", RevisionRequest()) == "ghe"
