"""Remote content source: the GitHub REST API client and its contract."""

from .client import GitHubContentSource, version_tag_candidates
from .source import ContentSource, RemoteFile, RevisionRequest

__all__ = [
    "ContentSource",
    "GitHubContentSource",
    "RemoteFile",
    "RevisionRequest",
    "version_tag_candidates",
]
