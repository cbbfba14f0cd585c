"""Config and lock documents, their persistence and migrations."""

from .models import CommandSpec, Config, Lock, RepositoryConfig, RepositoryLockInfo
from .store import load_config, load_lock, save_config, save_lock

__all__ = [
    "CommandSpec",
    "Config",
    "Lock",
    "RepositoryConfig",
    "RepositoryLockInfo",
    "load_config",
    "load_lock",
    "save_config",
    "save_lock",
]
