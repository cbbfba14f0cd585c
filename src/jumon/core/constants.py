"""Shared file and directory names for the jumon layout."""

from __future__ import annotations

CONFIG_FILENAME = "jumon.json"
LOCK_FILENAME = "jumon-lock.json"
SETTINGS_FILENAME = "config.yaml"
JUMON_HOME_DIR = ".jumon"
CLAUDE_DIR = ".claude"
COMMANDS_SUBDIR = "commands"
INSTALL_NAMESPACE = "jumon"
COMMAND_SUFFIX = ".md"
LOCKFILE_VERSION = 3
DEFAULT_BRANCHES = ("main", "master")

__all__ = [
    "CONFIG_FILENAME",
    "LOCK_FILENAME",
    "SETTINGS_FILENAME",
    "JUMON_HOME_DIR",
    "CLAUDE_DIR",
    "COMMANDS_SUBDIR",
    "INSTALL_NAMESPACE",
    "COMMAND_SUFFIX",
    "LOCKFILE_VERSION",
    "DEFAULT_BRANCHES",
]
