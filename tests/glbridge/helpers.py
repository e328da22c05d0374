# ruff: noqa: E402

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from glbridge.exec import CommandRequest, CommandResult
from glbridge.gitlab import GitlabApiError, GitlabNotFoundError

VALID_TOKEN = "abcdefghij0123456789"
OTHER_TOKEN = "zyxwvutsrq9876543210"


class FakeConsole:
    """Console that replays scripted answers and records output lines."""

    def __init__(self, answers: list[str] | None = None) -> None:
        self.answers = list(answers or [])
        self.lines: list[str] = []
        self.prompts: list[str] = []

    def say(self, message: str = "") -> None:
        self.lines.append(message)

    def ask(self, text: str) -> str:
        self.prompts.append(text)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0).strip()


@dataclass
class FakeRunner:
    """Command runner returning canned results keyed by argv suffix."""

    results: dict[tuple[str, ...], CommandResult | None] = field(default_factory=dict)
    calls: list[CommandRequest] = field(default_factory=list)

    def run(self, request: CommandRequest) -> CommandResult | None:
        self.calls.append(request)
        for suffix, result in self.results.items():
            if tuple(request.argv[-len(suffix) :]) == suffix:
                return result
        return CommandResult(argv=request.argv, returncode=1, stdout="", stderr="")


@dataclass
class StaticRemotes:
    mapping: dict[str, str] = field(default_factory=dict)

    def remotes(self) -> dict[str, str]:
        return dict(self.mapping)


class FakeGitlabClient:
    def __init__(
        self,
        projects: dict[str, dict[str, Any]] | None = None,
        error: GitlabApiError | None = None,
    ) -> None:
        self.projects = dict(projects or {})
        self.error = error
        self.requested: list[str] = []
        self.closed = False

    def get_project(self, project_path: str) -> dict[str, Any]:
        self.requested.append(project_path)
        if self.error is not None:
            raise self.error
        if project_path not in self.projects:
            raise GitlabNotFoundError("404 Not Found", status_code=404)
        return self.projects[project_path]

    def close(self) -> None:
        self.closed = True


class RecordingFactory:
    """Client factory remembering the base URL and token it was called with."""

    def __init__(self, client: FakeGitlabClient) -> None:
        self.client = client
        self.calls: list[tuple[str, str]] = []

    def __call__(self, base_url: str, token: str) -> FakeGitlabClient:
        self.calls.append((base_url, token))
        return self.client


def failing_factory(base_url: str, token: str) -> FakeGitlabClient:
    raise AssertionError("network lookup attempted")


@dataclass(frozen=True)
class StaticIdentityProvider:
    user_id: str | None = None

    def current_user(self) -> str | None:
        return self.user_id
