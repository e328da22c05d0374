"""Path helpers for locating glbridge data directories and files."""

import os
import re
from pathlib import Path

from platformdirs import user_data_dir

GLBRIDGE_APP_NAME = "glbridge"
DATA_DIR_ENV = "GLBRIDGE_DATA_DIR"
BRIDGES_DIRNAME = "bridges"
CREDENTIALS_FILENAME = "credentials.json"

_BRIDGE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def data_dir() -> Path:
    """Return the base glbridge data directory.

    ``GLBRIDGE_DATA_DIR`` overrides the platform default.

    Example:
        >>> isinstance(data_dir(), Path)
        True
    """
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_data_dir(GLBRIDGE_APP_NAME))


def credentials_path() -> Path:
    """Return the path of the credential store file.

    Example:
        >>> credentials_path().name
        'credentials.json'
    """
    return data_dir() / CREDENTIALS_FILENAME


def bridges_dir() -> Path:
    """Return the directory holding saved bridge configurations."""
    return data_dir() / BRIDGES_DIRNAME


def is_valid_bridge_name(name: str) -> bool:
    """Return whether ``name`` is usable as a bridge config filename.

    Example:
        >>> is_valid_bridge_name("default")
        True
        >>> is_valid_bridge_name("../escape")
        False
    """
    return bool(_BRIDGE_NAME_RE.match(name))


def bridge_config_path(name: str) -> Path:
    """Return the config file path for the named bridge."""
    return bridges_dir() / f"{name}.json"
