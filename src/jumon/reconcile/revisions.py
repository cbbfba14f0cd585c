"""Target revision resolution with tag/version fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jumon.core.errors import NotFoundError, RemoteError
from jumon.core.repository import RepositoryKey
from jumon.github.source import ContentSource, RevisionRequest
from jumon.state.models import RepositoryConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedRevision:
    sha: str
    request: RevisionRequest
    fell_back: bool = False

    @property
    def short(self) -> str:
        return self.sha[:7]


def resolve_target_revision(
    source: ContentSource,
    key: RepositoryKey,
    repo_config: RepositoryConfig | None,
    *,
    branch: str | None = None,
) -> ResolvedRevision:
    """Resolve the commit to install for *key*.

    Precedence: explicit *branch* > configured tag/version/branch > default
    branch. A tag or version that cannot be resolved falls back to the latest
    commit on the configured branch (there is none when a tag is set, so the
    default branch) with a warning.
    """
    if branch:
        request = RevisionRequest(branch=branch)
    elif repo_config is not None:
        request = repo_config.revision_request()
    else:
        request = RevisionRequest()

    try:
        return ResolvedRevision(source.resolve_revision(key.owner, key.repo, request), request)
    except (NotFoundError, RemoteError) as exc:
        if not (request.tag or request.version):
            raise
        logger.warning(
            "Failed to resolve %s for %s (%s), falling back to latest commit", request.describe(), key, exc
        )

    fallback = RevisionRequest()
    return ResolvedRevision(source.resolve_revision(key.owner, key.repo, fallback), fallback, fell_back=True)


__all__ = ["ResolvedRevision", "resolve_target_revision"]
