"""Interactive selection loops for terminal prompts.

Each loop is a small state machine: ``PROMPTING`` reads a line,
``VALIDATING`` checks it, ``RESOLVED`` returns it and ``ABORTED`` surfaces
closed input as :class:`IoFailedError`. Rejected input goes back to
``PROMPTING`` until the retry policy runs out (unbounded by default).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from . import io
from .services.errors import IoFailedError, ValidationFailedError

_INDEX_RE = re.compile(r"^[+-]?\d+$")


class SelectionState(Enum):
    PROMPTING = "prompting"
    VALIDATING = "validating"
    RESOLVED = "resolved"
    ABORTED = "aborted"


class Console(Protocol):
    """Line-oriented console used by interactive prompts."""

    def say(self, message: str = "") -> None: ...

    def ask(self, text: str) -> str: ...


class TerminalConsole:
    """Console backed by stdin/stdout."""

    def say(self, message: str = "") -> None:
        io.say(message)

    def ask(self, text: str) -> str:
        return io.ask(text)


@dataclass(frozen=True)
class RetryPolicy:
    """How many rejected entries a prompt tolerates; ``None`` means no limit."""

    max_attempts: int | None = None

    def exhausted(self, attempts: int) -> bool:
        return self.max_attempts is not None and attempts >= self.max_attempts


UNBOUNDED = RetryPolicy()


def parse_index(raw: str, lowest: int, highest: int) -> int | None:
    """Return ``raw`` as an index within ``[lowest, highest]`` or ``None``.

    Example:
        >>> parse_index("2", 1, 3)
        2
        >>> parse_index("abc", 1, 3) is None
        True
        >>> parse_index("99", 1, 3) is None
        True
    """
    value = raw.strip()
    if not _INDEX_RE.match(value):
        return None
    index = int(value)
    if index < lowest or index > highest:
        return None
    return index


def read_entry(
    console: Console,
    text: str,
    *,
    accept: Callable[[str], bool],
    rejection: str,
    render: Callable[[], None] | None = None,
    policy: RetryPolicy = UNBOUNDED,
) -> str:
    """Prompt until ``accept`` returns true for the trimmed response.

    Args:
        console: Console used for output and input.
        text: Prompt label.
        accept: Predicate deciding whether a response is valid.
        rejection: Message printed after an invalid response.
        render: Optional callback printing the menu before each prompt.
        policy: Retry policy for rejected responses.

    Returns:
        The accepted response.

    Raises:
        IoFailedError: When input is closed.
        ValidationFailedError: When the retry policy is exhausted.
    """
    state = SelectionState.PROMPTING
    attempts = 0
    response = ""
    while True:
        if state is SelectionState.PROMPTING:
            if render is not None:
                render()
            try:
                response = console.ask(text).strip()
            except EOFError:
                state = SelectionState.ABORTED
                continue
            attempts += 1
            state = SelectionState.VALIDATING
        elif state is SelectionState.VALIDATING:
            if accept(response):
                state = SelectionState.RESOLVED
                continue
            console.say(rejection)
            if policy.exhausted(attempts):
                raise ValidationFailedError(f"no valid input after {attempts} attempts")
            state = SelectionState.PROMPTING
        elif state is SelectionState.RESOLVED:
            return response
        else:
            raise IoFailedError("input closed before a valid response was entered")


def choose_option(
    console: Console,
    *,
    lowest: int,
    highest: int,
    render: Callable[[], None],
    text: str = "Select option",
    policy: RetryPolicy = UNBOUNDED,
) -> int:
    """Render a numbered menu and return the selected index.

    Non-numeric or out-of-range responses print ``invalid input`` and the
    menu is shown again.
    """
    response = read_entry(
        console,
        text,
        accept=lambda value: parse_index(value, lowest, highest) is not None,
        rejection="invalid input",
        render=render,
        policy=policy,
    )
    index = parse_index(response, lowest, highest)
    assert index is not None
    return index
