"""Console I/O helpers for user-facing messages and prompts."""

from __future__ import annotations

import sys

try:
    import questionary
except ImportError:  # pragma: no cover - safety fallback when dependency is missing
    questionary = None


def _use_questionary() -> bool:
    if questionary is None:
        return False
    return sys.stdin.isatty() and sys.stdout.isatty()


def say(message: str = "") -> None:
    """Print a normal message to stdout.

    Args:
        message: Text to print.

    Returns:
        None.

    Example:
        >>> say("Hello")
        Hello
    """
    print(message)


def die(message: str, code: int = 1) -> None:
    """Print an error message and exit.

    Args:
        message: Error message to display.
        code: Exit code to use.

    Returns:
        None. Exits the process via ``sys.exit``.
    """
    print(f"error: {message}", file=sys.stderr)
    sys.exit(code)


def die_with_hint(message: str, hint: str | None = None, code: int = 1) -> None:
    """Print an error message with an optional recovery hint and exit."""
    print(f"error: {message}", file=sys.stderr)
    if hint:
        print(f"hint: {hint}", file=sys.stderr)
    sys.exit(code)


def ask(text: str) -> str:
    """Read one line of input for a prompt label, trimmed of whitespace.

    Args:
        text: Prompt label shown to the user (without the trailing colon).

    Returns:
        The stripped response.

    Raises:
        EOFError: When input is closed or the prompt is cancelled.

    Example:
        Select option:
    """
    if _use_questionary():
        value = questionary.text(f"{text}:").ask()
        if value is None:
            raise EOFError("prompt cancelled")
        return str(value).strip()
    return input(f"{text}: ").strip()


def confirm(text: str, default: bool = False) -> bool:
    """Prompt for a yes/no confirmation.

    Args:
        text: Prompt label shown to the user.
        default: Default answer when the user presses enter.

    Returns:
        ``True`` when the user confirms.
    """
    if _use_questionary():
        response = questionary.confirm(text, default=default).ask()
        return bool(response)
    suffix = "[Y/n]" if default else "[y/N]"
    response = input(f"{text} {suffix}: ").strip().lower()
    if response == "":
        return default
    return response in {"y", "yes"}
