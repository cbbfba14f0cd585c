"""User settings stored in ``<jumon home>/config.yaml``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from jumon.core.constants import SETTINGS_FILENAME
from jumon.core.errors import PermissionDeniedError, ValidationError
from jumon.core.paths import get_jumon_home

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0


class SettingsError(ValidationError):
    """Raised when config.yaml cannot be parsed or validated."""


@dataclass(slots=True)
class GitHubSettings:
    """Connection settings for the GitHub content source."""

    token: str | None = None
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: object, source: Path) -> "GitHubSettings":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise SettingsError(f"Invalid 'github' section in {source}: expected a mapping")

        token = data.get("token")
        api_url = data.get("api_url", DEFAULT_API_URL)
        timeout = data.get("timeout", DEFAULT_TIMEOUT)

        if token is not None and not isinstance(token, str):
            raise SettingsError(f"Invalid github.token in {source}: expected a string")
        if not isinstance(api_url, str) or not api_url.strip():
            raise SettingsError(f"Invalid github.api_url in {source}: expected a URL")
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise SettingsError(f"Invalid github.timeout in {source}: expected a positive number")

        return cls(
            token=(token or "").strip() or None,
            api_url=api_url.strip().rstrip("/"),
            timeout=float(timeout),
        )


@dataclass(slots=True)
class Settings:
    github: GitHubSettings

    @classmethod
    def default(cls) -> "Settings":
        return cls(github=GitHubSettings())


def settings_path() -> Path:
    return get_jumon_home() / SETTINGS_FILENAME


def _env_token() -> str | None:
    """Return sanitized GitHub token from the environment or None."""
    return (os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip() or None


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from config.yaml and apply environment overrides.

    Environment variables win over the file: ``GH_TOKEN``/``GITHUB_TOKEN``
    for the token and ``JUMON_GITHUB_API_URL`` for the API base URL.
    """
    path = path or settings_path()
    settings = Settings.default()

    if path.exists():
        yaml = YAML(typ="safe")
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = yaml.load(handle) or {}
        except PermissionError as exc:
            raise PermissionDeniedError(path, "read") from exc
        except YAMLError as exc:
            raise SettingsError(f"Invalid YAML in {path}: {exc}") from exc

        if not isinstance(payload, dict):
            raise SettingsError(f"Invalid settings in {path}: expected a mapping at the top level")
        settings.github = GitHubSettings.from_dict(payload.get("github"), path)

    if token := _env_token():
        settings.github.token = token
    if api_url := os.getenv("JUMON_GITHUB_API_URL", "").strip():
        settings.github.api_url = api_url.rstrip("/")
    return settings


__all__ = ["GitHubSettings", "Settings", "SettingsError", "load_settings", "settings_path"]
