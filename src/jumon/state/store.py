"""JSON persistence for ``jumon.json`` and ``jumon-lock.json``.

Loading never fails for a missing or corrupt document: a missing file yields
an empty default and a corrupt one is reported loudly through the logger
before falling back to the default. Permission problems are raised as
:class:`~jumon.core.errors.PermissionDeniedError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jumon.core.errors import CorruptDocumentError, PermissionDeniedError, classify_os_error

from .migrations import is_legacy_config, migrate_config_payload, migrate_lock_payload
from .models import Config, Lock

logger = logging.getLogger(__name__)

JSON_INDENT = 2


def _read_payload(path: Path, label: str) -> dict[str, Any] | None:
    """Read a JSON object from *path*, or ``None`` when absent or unusable."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except PermissionError as exc:
        raise PermissionDeniedError(path, "read") from exc
    except OSError as exc:
        logger.warning("Failed to read %s (%s): %s; using an empty %s", label, path, exc, label)
        return None

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        error = CorruptDocumentError(path, f"{exc.msg} (line {exc.lineno}, column {exc.colno})")
        logger.warning("%s; using an empty %s", error, label)
        return None

    if not isinstance(payload, dict):
        logger.warning(
            "%s at %s must contain a JSON object, found %s; using an empty %s",
            label,
            path,
            type(payload).__name__,
            label,
        )
        return None
    return payload


def _write_payload(path: Path, payload: dict[str, Any]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=JSON_INDENT) + "\n", encoding="utf-8")
    except OSError as exc:
        raise classify_os_error(exc, path, "write") from exc


def load_config(path: Path) -> Config:
    """Load the desired-state document, migrating legacy shapes."""
    payload = _read_payload(path, "config")
    if payload is None:
        return Config()
    if is_legacy_config(payload):
        logger.warning("Converting legacy config format in %s", path)
        payload = migrate_config_payload(payload)
    return Config.from_dict(payload)


def save_config(path: Path, config: Config) -> None:
    _write_payload(path, config.to_dict())
    logger.debug("Saved config to %s", path)


def load_lock(path: Path) -> Lock:
    """Load the resolved-state document, migrating legacy lockfile versions."""
    payload = _read_payload(path, "lock")
    if payload is None:
        return Lock()
    return Lock.from_dict(migrate_lock_payload(payload))


def save_lock(path: Path, lock: Lock) -> None:
    _write_payload(path, lock.to_dict())
    logger.debug("Saved lock to %s", path)


__all__ = ["load_config", "save_config", "load_lock", "save_lock"]
