"""Implementation for the ``glbridge auth`` commands."""

from .. import paths
from ..auth import JsonCredentialStore
from ..io import die_with_hint, say
from ..models import RFC3339_FORMAT, TokenCredential, truncate_secret
from ..services import ServiceFailure


def list_credentials(args: object) -> None:
    """List stored credentials, one per line, sorted by id.

    Args:
        args: CLI argument object with an optional ``target`` filter.

    Example:
        $ glbridge auth list
        1a2b3c4 token gitlab 2026-01-18T12:34:56Z
    """
    store = JsonCredentialStore(paths.credentials_path())
    target = getattr(args, "target", None) or None
    try:
        credentials = store.list(target=target)
    except ServiceFailure as exc:
        die_with_hint(str(exc), exc.recovery_hint)
        return
    if not credentials:
        say("No stored credentials.")
        return
    for credential in credentials:
        created = credential.create_time.strftime(RFC3339_FORMAT)
        say(f"{credential.human_id()} {credential.kind} {credential.target} {created}")


def show_credential(args: object) -> None:
    """Show one stored credential selected by id prefix, secret truncated."""
    store = JsonCredentialStore(paths.credentials_path())
    try:
        credential = store.load_with_prefix(str(getattr(args, "prefix", "") or ""))
    except ServiceFailure as exc:
        die_with_hint(str(exc), exc.recovery_hint)
        return
    say(f"Id: {credential.id}")
    say(f"Kind: {credential.kind}")
    say(f"Target: {credential.target}")
    say(f"User: {credential.user_id}")
    say(f"Created: {credential.create_time.strftime(RFC3339_FORMAT)}")
    if isinstance(credential, TokenCredential):
        say(f"Value: {truncate_secret(credential.value)}")
    else:
        say(f"Login: {credential.login}")
    for key, value in sorted(credential.meta.items()):
        say(f"Meta {key}: {value}")
