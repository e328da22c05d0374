"""User identity resolution for credential ownership."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from . import exec as exec_util
from . import git

IDENTITY_CONFIG_KEYS = ("glbridge.user", "user.email")


class IdentityProvider(Protocol):
    """Source of the current user id."""

    def current_user(self) -> str | None:
        """Return the current user id, or ``None`` when no identity is set."""
        ...


def user_id_for(identity: str) -> str:
    """Return the stable user id for an identity string.

    Example:
        >>> user_id_for("Dev@Example.com") == user_id_for("dev@example.com ")
        True
    """
    normalized = identity.strip().lower()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class GitIdentityProvider:
    """Identity read from the repository git config.

    ``glbridge.user`` wins over ``user.email``; neither set means no identity.
    """

    repo_dir: Path
    git_path: str | None = None
    runner: exec_util.CommandRunner | None = None

    def current_user(self) -> str | None:
        for key in IDENTITY_CONFIG_KEYS:
            value = git.git_config_value(
                self.repo_dir, key, git_path=self.git_path, runner=self.runner
            )
            if value:
                return user_id_for(value)
        return None

