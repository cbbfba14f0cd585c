"""Core utilities: paths, repository keys and the error taxonomy."""

from .errors import (
    ConflictError,
    CorruptDocumentError,
    JumonError,
    NotFoundError,
    NotInitializedError,
    OperationCancelled,
    PermissionDeniedError,
    RemoteError,
    ValidationError,
    classify_os_error,
)
from .paths import Scope, ScopePaths, get_jumon_home
from .repository import (
    RepositoryKey,
    RepositoryTarget,
    command_name_from_path,
    normalize_command_path,
    parse_repository_path,
    validate_alias,
)

__all__ = [
    "ConflictError",
    "CorruptDocumentError",
    "JumonError",
    "NotFoundError",
    "NotInitializedError",
    "OperationCancelled",
    "PermissionDeniedError",
    "RemoteError",
    "ValidationError",
    "classify_os_error",
    "Scope",
    "ScopePaths",
    "get_jumon_home",
    "RepositoryKey",
    "RepositoryTarget",
    "command_name_from_path",
    "validate_alias",
    "normalize_command_path",
    "parse_repository_path",
]
