"""Validate a project URL against the GitLab API and recover its id."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from pydantic import BaseModel, ConfigDict

from ... import config, git, log
from ...gitlab import GitlabApiError, GitlabClient
from ...models import ProjectHandle, TokenCredential
from ..base import BaseService
from ..errors import BadReferenceError, RemoteLookupFailedError


class ProjectLookupClient(Protocol):
    """The slice of the GitLab client used for validation."""

    def get_project(self, project_path: str) -> dict[str, Any]: ...

    def close(self) -> None: ...


ClientFactory = Callable[[str, str], ProjectLookupClient]


def default_client_factory(base_url: str, token: str) -> ProjectLookupClient:
    return GitlabClient(base_url, token, timeout_seconds=config.resolve_http_timeout())


class ValidateProjectRequest(BaseModel):
    """Input contract for project validation.

    Attributes:
        base_url: Base URL of the GitLab instance.
        project_url: Project URL, remote reference, or ``host/path`` candidate.
        token: Token used to authenticate the lookup.
    """

    base_url: str
    project_url: str
    token: TokenCredential

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True)
class ValidateProjectOutcome:
    """Outcome payload for project validation.

    Args:
        handle: Validated project id and base URL.
        project_path: Normalized ``namespace/name`` path that was looked up.
    """

    handle: ProjectHandle
    project_path: str


class ValidateProjectService(BaseService[ValidateProjectRequest, ValidateProjectOutcome]):
    """Check that the project exists and is readable with the token."""

    def __init__(self, *, client_factory: ClientFactory = default_client_factory) -> None:
        self._client_factory = client_factory

    def _run(self, request: ValidateProjectRequest) -> ValidateProjectOutcome:
        base_host = git.host_of(request.base_url)
        if not base_host:
            raise BadReferenceError(f"bad base url: {request.base_url}")
        project_host, project_path = git.split_project_reference(
            request.project_url, known_host=base_host
        )
        if project_host != base_host:
            raise BadReferenceError(
                f"base URL ({request.base_url}) doesn't match the project URL "
                f"({request.project_url})",
                recovery_hint="Pass --base-url for projects on a self-hosted instance.",
            )

        client = self._client_factory(request.base_url, request.token.value)
        try:
            payload = client.get_project(project_path)
        except GitlabApiError as exc:
            raise RemoteLookupFailedError(
                f"project validation: {project_path}: {exc}",
                recovery_hint="Check the project URL and that the token has the 'api' scope.",
            ) from exc
        finally:
            client.close()

        handle = ProjectHandle(project_id=int(payload["id"]), base_url=request.base_url)
        log.debug(f"validated {project_path} as project {handle.project_id}")
        return ValidateProjectOutcome(handle=handle, project_path=project_path)
