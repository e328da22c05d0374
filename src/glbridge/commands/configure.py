"""Implementation for the ``glbridge configure`` command.

``glbridge configure`` binds the current repository to a GitLab project,
stores the token used for it, and saves the bridge configuration in the
glbridge data directory. The repository itself is not modified.
"""

from pathlib import Path

from .. import config, git, log, paths
from ..auth import JsonCredentialStore
from ..identity import GitIdentityProvider
from ..io import confirm, die, die_with_hint, say
from ..services import ServiceFailure
from ..services.bridge import ConfigureBridgeRequest, ConfigureBridgeService


def configure_bridge(args: object) -> None:
    """Configure a GitLab bridge for the current Git repository.

    Args:
        args: CLI argument object with ``name``, ``url``, ``base_url``,
            ``token``, ``credential``, ``project``, ``owner`` and
            ``non_interactive``.

    Returns:
        None.

    Example:
        $ glbridge configure --url https://gitlab.com/group/project
    """
    name = str(getattr(args, "name", None) or "default").strip()
    if not paths.is_valid_bridge_name(name):
        die(f"invalid bridge name: {name}")

    repo_root = git.git_repo_root(Path.cwd())
    if repo_root is None:
        die("command must be run inside a git repository")

    # Piped stdin still drives the prompts; closed input fails the run.
    interactive = not bool(getattr(args, "non_interactive", False))
    config_path = paths.bridge_config_path(name)
    if interactive:
        try:
            existing = config.load_bridge_config(config_path)
        except ServiceFailure as exc:
            log.warning(f"replacing unreadable bridge config: {exc}")
            existing = None
        if existing is not None and not _confirm_overwrite(name, existing.project_id):
            say("Aborted.")
            return

    service = ConfigureBridgeService.build(
        store=JsonCredentialStore(paths.credentials_path()),
        identity=GitIdentityProvider(repo_root),
        remotes=git.GitRemotesProvider(repo_root),
    )
    try:
        outcome = service.run(
            ConfigureBridgeRequest(
                url=getattr(args, "url", None),
                base_url=getattr(args, "base_url", None),
                token=getattr(args, "token", None),
                credential_prefix=getattr(args, "credential", None),
                project=getattr(args, "project", None),
                owner=getattr(args, "owner", None),
                interactive=interactive,
            )
        )
        config.write_bridge_config(config_path, outcome.configuration)
    except ServiceFailure as exc:
        die_with_hint(str(exc), exc.recovery_hint)
        return

    for message in outcome.messages:
        say(message)
    for key, value in outcome.configuration.items():
        say(f"{key}: {value}")
    log.success(f"Configured bridge {name}")


def _confirm_overwrite(name: str, project_id: int) -> bool:
    try:
        return confirm(f"Bridge {name} is bound to project {project_id}. Overwrite it?")
    except EOFError:
        return False
