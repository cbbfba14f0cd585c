"""Exception hierarchy for jumon operations.

Every failure the reconciliation engine can surface is a :class:`JumonError`
subclass. The CLI prints ``str(error)`` with a failure glyph and, when set,
the ``remedy`` line underneath.
"""

from __future__ import annotations

import errno
from pathlib import Path


class JumonError(Exception):
    """Base exception for jumon errors."""

    def __init__(self, message: str, *, remedy: str | None = None):
        self.remedy = remedy
        super().__init__(message)


class NotFoundError(JumonError):
    """A file, branch, tag, command or repository does not exist."""


class ConflictError(JumonError):
    """An install name or configuration mode collides with existing state."""

    def __init__(
        self,
        message: str,
        *,
        conflicts: list[tuple[str, Path]] | None = None,
        remedy: str | None = None,
    ):
        self.conflicts = conflicts or []
        super().__init__(message, remedy=remedy)


class CorruptDocumentError(JumonError):
    """A persisted config or lock document could not be parsed."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        super().__init__(f"Invalid JSON in {path}: {detail}")


class PermissionDeniedError(JumonError):
    """Filesystem access was denied."""

    def __init__(self, path: Path, action: str = "access"):
        self.path = path
        super().__init__(
            f"Permission denied: cannot {action} {path}",
            remedy="Check the ownership and permissions of that path.",
        )


class RemoteError(JumonError):
    """The GitHub API failed or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        remedy: str | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, remedy=remedy)


class ValidationError(JumonError):
    """A repository key, path or configuration shape is malformed."""


class NotInitializedError(JumonError):
    """The slash-command runner's directory is missing for a scope."""


class OperationCancelled(Exception):
    """The user declined a confirmation prompt.

    Not a :class:`JumonError`: a cancellation is a graceful abort and the
    CLI exits with status 0.
    """

    def __init__(self, message: str = "Operation cancelled."):
        super().__init__(message)


def classify_os_error(exc: OSError, path: Path, action: str = "access") -> JumonError:
    """Map an ``OSError`` raised for *path* onto the jumon taxonomy."""
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return PermissionDeniedError(path, action)
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return NotFoundError(f"File not found: {path}")
    if exc.errno == errno.ENOSPC:
        return JumonError(
            f"No space left on device while trying to {action} {path}",
            remedy="Free some disk space and retry.",
        )
    return JumonError(f"Failed to {action} {path}: {exc.strerror or exc}")


__all__ = [
    "JumonError",
    "NotFoundError",
    "ConflictError",
    "CorruptDocumentError",
    "PermissionDeniedError",
    "RemoteError",
    "ValidationError",
    "NotInitializedError",
    "OperationCancelled",
    "classify_os_error",
]
