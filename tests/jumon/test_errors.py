"""Tests for the error taxonomy and OSError classification."""

from __future__ import annotations

import errno
from pathlib import Path

from jumon.core.errors import (
    ConflictError,
    CorruptDocumentError,
    JumonError,
    NotFoundError,
    OperationCancelled,
    PermissionDeniedError,
    classify_os_error,
)


def test_permission_errors_map_to_permission_denied() -> None:
    path = Path("/tmp/jumon.json")

    error = classify_os_error(PermissionError(errno.EACCES, "denied"), path, "write")

    assert isinstance(error, PermissionDeniedError)
    assert error.path == path
    assert "cannot write" in str(error)
    assert error.remedy


def test_eperm_errno_is_a_permission_error() -> None:
    error = classify_os_error(OSError(errno.EPERM, "not permitted"), Path("x"))

    assert isinstance(error, PermissionDeniedError)


def test_missing_file_maps_to_not_found() -> None:
    error = classify_os_error(FileNotFoundError(errno.ENOENT, "missing"), Path("x.md"))

    assert isinstance(error, NotFoundError)


def test_disk_full_has_remedy() -> None:
    error = classify_os_error(OSError(errno.ENOSPC, "No space left on device"), Path("x.md"), "write")

    assert type(error) is JumonError
    assert "No space left" in str(error)
    assert error.remedy == "Free some disk space and retry."


def test_other_errors_keep_strerror() -> None:
    error = classify_os_error(OSError(errno.EIO, "I/O error"), Path("x.md"), "read")

    assert str(error) == "Failed to read x.md: I/O error"


def test_corrupt_document_message_names_file() -> None:
    error = CorruptDocumentError(Path("jumon.json"), "Expecting value")

    assert str(error) == "Invalid JSON in jumon.json: Expecting value"


def test_conflict_error_carries_conflicts() -> None:
    error = ConflictError("boom", conflicts=[("deploy", Path("a/b/deploy.md"))], remedy="use --alias")

    assert error.conflicts == [("deploy", Path("a/b/deploy.md"))]
    assert error.remedy == "use --alias"


def test_cancellation_is_not_a_jumon_error() -> None:
    assert not issubclass(OperationCancelled, JumonError)
    assert str(OperationCancelled()) == "Operation cancelled."
