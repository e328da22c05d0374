"""Credential store for bridge access tokens.

Credentials are kept as a JSON array validated through the discriminated
``Credential`` union in :mod:`glbridge.models`. Identifiers are derived from
content, so inserting a credential that is already stored is a no-op for
callers that check :meth:`CredentialStore.exists` first.

Example:
    >>> store = MemoryCredentialStore()
    >>> token = TokenCredential(user_id="u", target="gitlab", value="abcdefghij0123456789")
    >>> store.insert(token)
    >>> store.exists(token.id)
    True
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence

from pydantic import ValidationError

from . import log
from .models import (
    CREDENTIAL_LIST_ADAPTER,
    Credential,
    CredentialKind,
    TokenCredential,
)
from .services.errors import AmbiguousOrMissingCredentialError, IoFailedError


class CredentialStore(Protocol):
    """Keyed store of saved credentials."""

    def list(
        self,
        *,
        user_id: str | None = None,
        target: str | None = None,
        kind: CredentialKind | None = None,
    ) -> list[Credential]: ...

    def exists(self, credential_id: str) -> bool: ...

    def insert(self, credential: Credential) -> None: ...

    def load_with_prefix(self, prefix: str) -> Credential: ...


def filter_credentials(
    credentials: Sequence[Credential],
    *,
    user_id: str | None = None,
    target: str | None = None,
    kind: CredentialKind | None = None,
) -> list[Credential]:
    """Return credentials matching every given filter, sorted by id."""
    matches = [
        credential
        for credential in credentials
        if (user_id is None or credential.user_id == user_id)
        and (target is None or credential.target == target)
        and (kind is None or credential.kind == kind)
    ]
    return sorted(matches, key=lambda credential: credential.id)


def match_prefix(credentials: Sequence[Credential], prefix: str) -> Credential:
    """Return the single credential whose id starts with ``prefix``.

    Raises:
        AmbiguousOrMissingCredentialError: When zero or several ids match.
    """
    needle = prefix.strip().lower()
    if not needle:
        raise AmbiguousOrMissingCredentialError("credential prefix must not be empty")
    matches = [credential for credential in credentials if credential.id.startswith(needle)]
    if not matches:
        raise AmbiguousOrMissingCredentialError(
            f"no credential found with prefix {needle}",
            recovery_hint="Run `glbridge auth list` to see stored credentials.",
        )
    if len(matches) > 1:
        raise AmbiguousOrMissingCredentialError(
            f"multiple credentials match prefix {needle}",
            recovery_hint="Use a longer credential prefix.",
        )
    return matches[0]


@dataclass
class MemoryCredentialStore:
    """In-process credential store."""

    credentials: list[Credential] = field(default_factory=list)

    def list(
        self,
        *,
        user_id: str | None = None,
        target: str | None = None,
        kind: CredentialKind | None = None,
    ) -> list[Credential]:
        return filter_credentials(self.credentials, user_id=user_id, target=target, kind=kind)

    def exists(self, credential_id: str) -> bool:
        return any(credential.id == credential_id for credential in self.credentials)

    def insert(self, credential: Credential) -> None:
        self.credentials.append(credential)

    def load_with_prefix(self, prefix: str) -> Credential:
        return match_prefix(self.credentials, prefix)


@dataclass(frozen=True)
class JsonCredentialStore:
    """Credential store persisted as a JSON array on disk."""

    path: Path

    def _load(self) -> list[Credential]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                payload = json.load(fh)
            return CREDENTIAL_LIST_ADAPTER.validate_python(payload)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise IoFailedError(
                f"failed to read credential store {self.path}: {exc}",
                recovery_hint="Fix or remove the credential store file.",
            ) from exc

    def _save(self, credentials: list[Credential]) -> None:
        payload = CREDENTIAL_LIST_ADAPTER.dump_python(credentials, mode="json")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".json.tmp")
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
                fh.write("\n")
            tmp_path.chmod(0o600)
            tmp_path.replace(self.path)
        except OSError as exc:
            raise IoFailedError(f"failed to write credential store {self.path}: {exc}") from exc

    def list(
        self,
        *,
        user_id: str | None = None,
        target: str | None = None,
        kind: CredentialKind | None = None,
    ) -> list[Credential]:
        return filter_credentials(self._load(), user_id=user_id, target=target, kind=kind)

    def exists(self, credential_id: str) -> bool:
        return any(credential.id == credential_id for credential in self._load())

    def insert(self, credential: Credential) -> None:
        credentials = self._load()
        credentials.append(credential)
        self._save(credentials)
        log.debug(f"stored credential {credential.human_id()} in {self.path}")

    def load_with_prefix(self, prefix: str) -> Credential:
        return match_prefix(self._load(), prefix)
