"""Git helpers: remote enumeration and project URL normalization."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping
from urllib.parse import urlparse

from . import exec as exec_util
from . import log
from .services.errors import BadReferenceError, IoFailedError

_SCP_RE = re.compile(r"^(?P<user>[^@/]+)@(?P<host>[^:/]+):(?P<path>.+)$")
_URL_SCHEMES = {"http", "https", "ssh", "git"}


def strip_git_suffix(path: str) -> str:
    """Remove a trailing ``.git`` suffix from a path string.

    Args:
        path: Git URL or path.

    Returns:
        Path without a trailing ``.git``.

    Example:
        >>> strip_git_suffix("group/project.git")
        'group/project'
    """
    normalized = path.strip().rstrip("/")
    if normalized.lower().endswith(".git"):
        return normalized[: -len(".git")]
    return normalized


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path."""
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def split_project_reference(
    reference: str, *, known_host: str | None = None
) -> tuple[str, str]:
    """Split a remote reference into ``(host, project_path)``.

    SSH SCP-style references are rewritten to HTTPS form before parsing so
    both spellings of the same project yield the same result.

    Args:
        reference: Raw remote URL or project URL.
        known_host: Host accepted as the first segment of a bare
            ``host/path`` value even without a dot (``localhost``, intranet
            hosts). Other bare values need a dotted first segment.

    Returns:
        Lowercased host and the project path without leading separator.

    Raises:
        BadReferenceError: When the value does not parse as a project URL.

    Example:
        >>> split_project_reference("git@gitlab.example.com:group/project.git")
        ('gitlab.example.com', 'group/project')
        >>> split_project_reference("https://gitlab.example.com/group/project")
        ('gitlab.example.com', 'group/project')
        >>> split_project_reference("localhost/group/project", known_host="localhost")
        ('localhost', 'group/project')
    """
    raw = reference.strip()
    if not raw:
        raise BadReferenceError("bad project url: empty value")
    cleaned = strip_git_suffix(raw)

    scp_match = _SCP_RE.match(cleaned)
    if scp_match:
        cleaned = f"https://{scp_match.group('host')}/{scp_match.group('path').lstrip('/')}"
    elif "://" not in cleaned:
        head = cleaned.split("/", 1)[0]
        trusted = bool(known_host and host_of(head) == known_host.strip().lower())
        if " " in cleaned or ("." not in head and not trusted):
            raise BadReferenceError(f"bad project url: {reference}")
        cleaned = f"https://{cleaned}"

    try:
        parsed = urlparse(cleaned)
        host = parsed.hostname or ""
    except ValueError as exc:
        raise BadReferenceError(f"bad project url: {reference}") from exc

    scheme = (parsed.scheme or "").lower()
    path = strip_git_suffix(parsed.path or "").lstrip("/")
    if scheme not in _URL_SCHEMES or not host or not path:
        raise BadReferenceError(f"bad project url: {reference}")
    return host.lower(), path


def project_path(reference: str) -> str:
    """Return the ``namespace/name`` project path for a remote reference.

    Example:
        >>> project_path("ssh://git@gitlab.com/group/sub/project.git")
        'group/sub/project'
    """
    return split_project_reference(reference)[1]


def host_of(url: str) -> str:
    """Return the lowercased host of a base URL, or ``""`` when it has none.

    Example:
        >>> host_of("https://GitLab.example.com/")
        'gitlab.example.com'
    """
    value = url.strip()
    if "://" not in value:
        value = f"https://{value}"
    try:
        return (urlparse(value).hostname or "").lower()
    except ValueError:
        return ""


def discover_project_urls(remotes: Mapping[str, str], host: str) -> list[str]:
    """Return candidate project identifiers for remotes hosted on ``host``.

    Remotes that fail to normalize or point at another host are dropped.
    Each survivor is returned as ``<host>/<path>`` in input order; pass
    ``known_host=host`` to :func:`split_project_reference` to parse it back.

    Example:
        >>> discover_project_urls(
        ...     {"origin": "git@gitlab.com:group/project.git", "gh": "https://github.com/o/r"},
        ...     "gitlab.com",
        ... )
        ['gitlab.com/group/project']
    """
    wanted = host.strip().lower()
    candidates: list[str] = []
    for name, value in remotes.items():
        try:
            remote_host, path = split_project_reference(value, known_host=wanted)
        except BadReferenceError:
            log.debug(f"ignoring remote {name}: unparseable url")
            continue
        if remote_host != wanted:
            continue
        candidate = f"{wanted}/{path}"
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


def _parse_remotes(result: exec_util.CommandResult) -> dict[str, str]:
    remotes: dict[str, str] = {}
    for line in result.stdout.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        name, url = parts[0], parts[1]
        if len(parts) >= 3 and parts[2] != "(fetch)":
            continue
        remotes.setdefault(name, url)
    return remotes


def git_remotes(
    repo_dir: Path,
    *,
    git_path: str | None = None,
    runner: exec_util.CommandRunner | None = None,
) -> dict[str, str]:
    """Return the fetch URL of every remote configured in ``repo_dir``.

    Raises:
        IoFailedError: When git is missing or the remotes cannot be listed.
    """
    spec = exec_util.CommandSpec(
        request=exec_util.CommandRequest(
            argv=tuple(git_command(["-C", str(repo_dir), "remote", "-v"], git_path=git_path))
        ),
        parser=_parse_remotes,
        context="git remote -v",
    )
    try:
        return exec_util.run_typed(spec, runner=runner)
    except exec_util.CommandExecutionError as exc:
        raise IoFailedError(
            f"getting remotes: {exc}",
            recovery_hint="Run glbridge inside a git repository or pass --url.",
        ) from exc


def git_config_value(
    repo_dir: Path,
    key: str,
    *,
    git_path: str | None = None,
    runner: exec_util.CommandRunner | None = None,
) -> str | None:
    """Return a git config value, or ``None`` when unset or git is missing."""
    result = exec_util.run_with_runner(
        exec_util.CommandRequest(
            argv=tuple(
                git_command(["-C", str(repo_dir), "config", "--get", key], git_path=git_path)
            )
        ),
        runner=runner,
    )
    if result is None or result.returncode != 0:
        return None
    value = result.stdout.strip()
    return value or None


def git_repo_root(
    start: Path,
    *,
    git_path: str | None = None,
    runner: exec_util.CommandRunner | None = None,
) -> Path | None:
    """Return the git repository root for a starting path."""
    result = exec_util.run_with_runner(
        exec_util.CommandRequest(
            argv=tuple(
                git_command(["-C", str(start), "rev-parse", "--show-toplevel"], git_path=git_path)
            )
        ),
        runner=runner,
    )
    if result is None or result.returncode != 0:
        return None
    root = result.stdout.strip()
    return Path(root) if root else None


@dataclass(frozen=True)
class GitRemotesProvider:
    """Remotes provider backed by ``git remote -v``."""

    repo_dir: Path
    git_path: str | None = None
    runner: exec_util.CommandRunner | None = None

    def remotes(self) -> dict[str, str]:
        return git_remotes(self.repo_dir, git_path=self.git_path, runner=self.runner)
