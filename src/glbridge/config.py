"""Configuration helpers for glbridge.

This module validates the string-keyed bridge configuration mapping, reads
and writes saved bridge configurations, and resolves environment settings.

Example:
    >>> validate_configuration({"target": "gitlab", "projectId": "42", "baseUrl": "https://gitlab.com"})
"""

import json
import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ValidationError

from .gitlab import DEFAULT_TIMEOUT_SECONDS
from .models import (
    CONFIG_KEY_BASE_URL,
    CONFIG_KEY_PROJECT_ID,
    CONFIG_KEY_TARGET,
    CONFIG_KEYS,
    TARGET,
    BridgeConfiguration,
)
from .services.errors import InvalidConfigurationShapeError, IoFailedError

HTTP_TIMEOUT_ENV = "GLBRIDGE_HTTP_TIMEOUT"


def load_json(path: Path) -> dict | None:
    """Load a JSON file if it exists.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload as a dict, or ``None`` if the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def write_json(path: Path, payload: dict | BaseModel) -> None:
    """Write a JSON payload to disk.

    Args:
        path: Path to the JSON file to write.
        payload: Dict or Pydantic model to serialize.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
        fh.write("\n")


def validate_configuration(conf: Mapping[str, str]) -> None:
    """Check that a bridge configuration mapping is usable.

    Raises:
        InvalidConfigurationShapeError: When a required key is missing, the
            target is not ``gitlab``, or the project id is not numeric.
    """
    for key in CONFIG_KEYS:
        if key not in conf:
            raise InvalidConfigurationShapeError(f"missing {key} key")
    target = conf[CONFIG_KEY_TARGET]
    if target != TARGET:
        raise InvalidConfigurationShapeError(f"unexpected target name: {target}")
    if not str(conf[CONFIG_KEY_PROJECT_ID]).isdigit():
        raise InvalidConfigurationShapeError(
            f"invalid {CONFIG_KEY_PROJECT_ID}: {conf[CONFIG_KEY_PROJECT_ID]}"
        )
    if not str(conf[CONFIG_KEY_BASE_URL]).strip():
        raise InvalidConfigurationShapeError(f"empty {CONFIG_KEY_BASE_URL}")


def parse_configuration(conf: Mapping[str, str]) -> BridgeConfiguration:
    """Validate a configuration mapping and return the typed record.

    Example:
        >>> parse_configuration(
        ...     {"target": "gitlab", "projectId": "7", "baseUrl": "https://gitlab.com"}
        ... ).project_id
        7
    """
    validate_configuration(conf)
    return BridgeConfiguration(
        target=conf[CONFIG_KEY_TARGET],
        project_id=int(conf[CONFIG_KEY_PROJECT_ID]),
        base_url=conf[CONFIG_KEY_BASE_URL],
    )


def write_bridge_config(path: Path, conf: Mapping[str, str]) -> None:
    """Persist a validated bridge configuration mapping."""
    validate_configuration(conf)
    try:
        write_json(path, dict(conf))
    except OSError as exc:
        raise IoFailedError(f"failed to write bridge config {path}: {exc}") from exc


def load_bridge_config(path: Path) -> BridgeConfiguration | None:
    """Load a saved bridge configuration, or ``None`` when it does not exist."""
    try:
        payload = load_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        raise IoFailedError(f"failed to read bridge config {path}: {exc}") from exc
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise InvalidConfigurationShapeError(f"bridge config {path} is not an object")
    try:
        return parse_configuration({str(key): str(value) for key, value in payload.items()})
    except ValidationError as exc:
        raise InvalidConfigurationShapeError(f"invalid bridge config {path}: {exc}") from exc


def resolve_http_timeout(env: Mapping[str, str] | None = None) -> float:
    """Return the HTTP timeout from ``GLBRIDGE_HTTP_TIMEOUT`` or the default.

    Example:
        >>> resolve_http_timeout({"GLBRIDGE_HTTP_TIMEOUT": "2.5"})
        2.5
        >>> resolve_http_timeout({"GLBRIDGE_HTTP_TIMEOUT": "soon"})
        10.0
    """
    source = os.environ if env is None else env
    raw = str(source.get(HTTP_TIMEOUT_ENV, "")).strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS
