"""Resolve which GitLab project URL a bridge should bind to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict

from ... import git, log
from ...selection import Console, TerminalConsole, choose_option, read_entry
from ..base import BaseService
from ..errors import ValidationFailedError

UrlSource = Literal["explicit", "remote", "manual"]


class RemotesProvider(Protocol):
    """Typed dependency listing the repository's git remotes."""

    def remotes(self) -> dict[str, str]:
        """Return remote name to URL."""
        ...


class ResolveProjectUrlRequest(BaseModel):
    """Input contract for project URL resolution.

    Attributes:
        url: Explicit project URL, when the caller supplied one.
        host: Host of the target GitLab instance used to filter remotes.
        interactive: Whether the operator can be prompted.
    """

    url: str | None = None
    host: str
    interactive: bool = True

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True)
class ResolveProjectUrlOutcome:
    """Outcome payload for project URL resolution.

    Args:
        url: Resolved project URL or ``host/path`` candidate.
        source: Where the URL came from.
    """

    url: str
    source: UrlSource


class ResolveProjectUrlService(BaseService[ResolveProjectUrlRequest, ResolveProjectUrlOutcome]):
    """Pick a project URL from the request, the git remotes, or the operator."""

    def __init__(self, *, remotes: RemotesProvider, console: Console | None = None) -> None:
        self._remotes = remotes
        self._console = console or TerminalConsole()

    def _run(self, request: ResolveProjectUrlRequest) -> ResolveProjectUrlOutcome:
        explicit = (request.url or "").strip()
        if explicit:
            return ResolveProjectUrlOutcome(url=explicit, source="explicit")
        if not request.interactive:
            raise ValidationFailedError(
                "a project URL is required in non-interactive mode",
                recovery_hint="Pass --url with the GitLab project URL.",
            )

        candidates = git.discover_project_urls(self._remotes.remotes(), request.host)
        log.debug(f"detected {len(candidates)} project(s) on {request.host}")
        if candidates:
            index = choose_option(
                self._console,
                lowest=0,
                highest=len(candidates),
                render=lambda: self._render_candidates(candidates),
            )
            if index > 0:
                return ResolveProjectUrlOutcome(url=candidates[index - 1], source="remote")

        url = read_entry(
            self._console,
            "GitLab project URL",
            accept=bool,
            rejection="URL is empty",
        )
        return ResolveProjectUrlOutcome(url=url, source="manual")

    def _render_candidates(self, candidates: list[str]) -> None:
        say = self._console.say
        say()
        say("Detected projects:")
        for index, candidate in enumerate(candidates, start=1):
            say(f"[{index}]: {candidate}")
        say()
        say("[0]: Another project")
        say()
