"""Leveled terminal logging for glbridge commands.

Messages go through rich so styles degrade cleanly when color is off.
Warnings and errors go to stderr. Secrets are never passed in here;
callers log credential human ids only.
"""

from __future__ import annotations

import os
import sys
from enum import IntEnum

from rich.console import Console
from rich.text import Text

LOG_LEVEL_ENV = "GLBRIDGE_LOG_LEVEL"
NO_COLOR_ENVS = ("NO_COLOR", "GLBRIDGE_NO_COLOR")


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


LOG_LEVEL_NAMES = tuple(level.name.lower() for level in LogLevel)

_LEVEL_BY_NAME = {name: LogLevel[name.upper()] for name in LOG_LEVEL_NAMES}
_LEVEL_BY_NAME["warn"] = LogLevel.WARNING
_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}
_DEFAULT_LEVEL = LogLevel.INFO

_configured_level: LogLevel | None = None
_no_color_override: bool | None = None


def parse_level(value: str | None) -> LogLevel:
    """Map a level name to a :class:`LogLevel`; unknown names mean ``info``.

    Example:
        >>> parse_level("Warn")
        <LogLevel.WARNING: 40>
        >>> parse_level("loud")
        <LogLevel.INFO: 30>
    """
    normalized = (value or "").strip().lower()
    return _LEVEL_BY_NAME.get(normalized, _DEFAULT_LEVEL)


def configured_level() -> LogLevel:
    global _configured_level
    if _configured_level is None:
        _configured_level = parse_level(os.environ.get(LOG_LEVEL_ENV))
    return _configured_level


def set_level(value: str | None) -> None:
    """Set the active log level, overriding ``GLBRIDGE_LOG_LEVEL``."""
    global _configured_level
    _configured_level = parse_level(value)


def set_no_color(value: bool) -> None:
    """Force colorless output regardless of the environment."""
    global _no_color_override
    _no_color_override = bool(value) or None


def _no_color() -> bool:
    if _no_color_override is not None:
        return _no_color_override
    return any(os.environ.get(name) for name in NO_COLOR_ENVS)


def is_enabled(level: LogLevel) -> bool:
    return level >= configured_level()


def emit(
    level: LogLevel,
    message: str,
    *,
    style: str | None = None,
    stderr: bool | None = None,
) -> None:
    if not is_enabled(level):
        return
    to_stderr = level >= LogLevel.WARNING if stderr is None else stderr
    console = Console(
        file=sys.stderr if to_stderr else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=_no_color(),
    )
    console.print(Text(message, style=style or _STYLES.get(level, "")))


def trace(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.TRACE, message, style=style)


def debug(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.DEBUG, message, style=style)


def info(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.INFO, message, style=style)


def success(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.SUCCESS, message, style=style)


def warning(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.WARNING, message, style=style)


def error(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.ERROR, message, style=style)
