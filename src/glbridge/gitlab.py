"""Minimal GitLab REST client used to validate bridge projects."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from . import log

API_PREFIX = "/api/v4"
TOKEN_HEADER = "PRIVATE-TOKEN"
DEFAULT_TIMEOUT_SECONDS = 10.0


class GitlabApiError(RuntimeError):
    """Base error for failed GitLab API calls."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitlabNotFoundError(GitlabApiError):
    """The requested object does not exist or is not visible to the token."""


class GitlabUnauthorizedError(GitlabApiError):
    """The token was rejected or lacks the required scope."""


class GitlabTransportError(GitlabApiError):
    """Network failure, unexpected status, or malformed response body."""


def normalize_base_url(value: str) -> str:
    """Return a base URL with a scheme and without a trailing slash.

    Example:
        >>> normalize_base_url("gitlab.example.com/")
        'https://gitlab.example.com'
        >>> normalize_base_url("http://localhost:8080")
        'http://localhost:8080'
    """
    normalized = value.strip().rstrip("/")
    if normalized and "://" not in normalized:
        normalized = f"https://{normalized}"
    return normalized


def api_base_url(base_url: str) -> str:
    """Return the REST API root for a GitLab instance base URL.

    Example:
        >>> api_base_url("https://gitlab.example.com/")
        'https://gitlab.example.com/api/v4'
    """
    return base_url.strip().rstrip("/") + API_PREFIX


class GitlabClient:
    """Authenticated GitLab API client bound to one instance and token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.Client(
            base_url=api_base_url(base_url),
            headers={TOKEN_HEADER: token, "Accept": "application/json"},
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> GitlabClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get_json(self, path: str) -> Any:
        try:
            response = self._client.get(path)
        except httpx.HTTPError as exc:
            raise GitlabTransportError(f"request to {self.base_url} failed: {exc}") from exc
        log.trace(f"GET {path} -> {response.status_code}")
        if response.status_code == 404:
            raise GitlabNotFoundError("404 Not Found", status_code=404)
        if response.status_code in {401, 403}:
            raise GitlabUnauthorizedError(
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        if response.is_error:
            raise GitlabTransportError(
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GitlabTransportError(f"malformed response from {self.base_url}") from exc

    def get_project(self, project_path: str) -> dict[str, Any]:
        """Return the project payload for ``namespace/name``.

        Raises:
            GitlabNotFoundError: When the project does not exist.
            GitlabUnauthorizedError: When the token is rejected.
            GitlabTransportError: On network or response errors.
        """
        payload = self._get_json(f"/projects/{quote(project_path, safe='')}")
        if not isinstance(payload, dict) or not isinstance(payload.get("id"), int):
            raise GitlabTransportError(f"unexpected project payload for {project_path}")
        return payload
