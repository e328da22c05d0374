"""Resolve the access token a bridge authenticates with."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict

from ... import log
from ...auth import CredentialStore
from ...models import (
    DEFAULT_BASE_URL,
    KIND_TOKEN,
    TARGET,
    TARGET_DISPLAY_NAME,
    Credential,
    LoginPasswordCredential,
    TokenCredential,
    truncate_secret,
)
from ...selection import Console, TerminalConsole, choose_option, read_entry
from ..base import BaseService
from ..errors import (
    CredentialUserMismatchError,
    UnsupportedCredentialKindError,
    ValidationFailedError,
)

CredentialSource = Literal["prefix", "raw", "stored", "entered"]

TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9-]{20,}$")
RFC822_FORMAT = "%d %b %y %H:%M %Z"


def token_has_valid_format(value: str) -> bool:
    """Return whether ``value`` looks like a GitLab access token.

    Example:
        >>> token_has_valid_format("abcdefghij0123456789")
        True
        >>> token_has_valid_format("has spaces!!")
        False
    """
    return bool(TOKEN_PATTERN.match(value))


def require_token(credential: Credential) -> TokenCredential:
    """Narrow a stored credential to the token kind.

    Raises:
        UnsupportedCredentialKindError: For every other credential kind.
    """
    if isinstance(credential, TokenCredential):
        return credential
    if isinstance(credential, LoginPasswordCredential):
        raise UnsupportedCredentialKindError(
            "the GitLab bridge only handles token credentials",
            recovery_hint="Select or enter a personal access token.",
        )
    raise UnsupportedCredentialKindError(f"unknown credential kind: {type(credential).__name__}")


class ResolveCredentialRequest(BaseModel):
    """Input contract for credential resolution.

    Attributes:
        user_id: Current user id, or the placeholder id when none is set.
        known_user: Whether ``user_id`` comes from a configured identity.
        credential_prefix: Id prefix of a stored credential to reuse.
        token: Raw token value supplied by the caller.
        interactive: Whether the operator can be prompted.
        base_url: GitLab instance URL, shown in token-creation hints.
    """

    user_id: str
    known_user: bool = False
    credential_prefix: str | None = None
    token: str | None = None
    interactive: bool = True
    base_url: str = DEFAULT_BASE_URL

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True)
class ResolveCredentialOutcome:
    """Outcome payload for credential resolution.

    Args:
        credential: Resolved token credential.
        source: How the credential was obtained.
    """

    credential: TokenCredential
    source: CredentialSource


class ResolveCredentialService(BaseService[ResolveCredentialRequest, ResolveCredentialOutcome]):
    """Produce exactly one token from a prefix, a raw value, or a prompt."""

    def __init__(self, *, store: CredentialStore, console: Console | None = None) -> None:
        self._store = store
        self._console = console or TerminalConsole()

    def _run(self, request: ResolveCredentialRequest) -> ResolveCredentialOutcome:
        prefix = (request.credential_prefix or "").strip()
        raw_token = (request.token or "").strip()
        if prefix and raw_token:
            raise ValidationFailedError(
                "a credential prefix and a raw token are mutually exclusive",
                recovery_hint="Pass either --credential or --token, not both.",
            )

        source: CredentialSource
        if prefix:
            credential = self._store.load_with_prefix(prefix)
            if request.known_user and credential.user_id != request.user_id:
                raise CredentialUserMismatchError(
                    "selected credential doesn't match the user",
                    recovery_hint="Pick a credential created for the current identity.",
                )
            source = "prefix"
        elif raw_token:
            credential = TokenCredential(user_id=request.user_id, target=TARGET, value=raw_token)
            source = "raw"
        elif request.interactive:
            credential, source = self._prompt_token_options(request)
        else:
            raise ValidationFailedError(
                "a token is required in non-interactive mode",
                recovery_hint="Pass --token or --credential.",
            )

        token = require_token(credential)
        log.debug(f"resolved credential {token.human_id()} ({source})")
        return ResolveCredentialOutcome(credential=token, source=source)

    def _prompt_token_options(
        self, request: ResolveCredentialRequest
    ) -> tuple[Credential, CredentialSource]:
        stored = [
            credential
            for credential in self._store.list(
                user_id=request.user_id, target=TARGET, kind=KIND_TOKEN
            )
            if isinstance(credential, TokenCredential)
        ]
        if not stored:
            return self._new_token(request), "entered"

        stored.sort(key=lambda credential: credential.id)
        index = choose_option(
            self._console,
            lowest=1,
            highest=len(stored) + 1,
            render=lambda: self._render_tokens(stored),
        )
        if index == 1:
            return self._new_token(request), "entered"
        return stored[index - 2], "stored"

    def _render_tokens(self, tokens: list[TokenCredential]) -> None:
        say = self._console.say
        say()
        say("[1]: enter my token")
        say()
        say(f"Existing tokens for {TARGET_DISPLAY_NAME}:")
        for index, token in enumerate(tokens, start=2):
            created = token.create_time.strftime(RFC822_FORMAT).strip()
            say(f"[{index}]: {token.human_id()} => {truncate_secret(token.value)} ({created})")
        say()

    def _new_token(self, request: ResolveCredentialRequest) -> TokenCredential:
        say = self._console.say
        base_url = request.base_url.rstrip("/")
        say(
            "You can generate a new token by visiting "
            f"{base_url}/-/user_settings/personal_access_tokens."
        )
        say("Choose 'Add new token' and set the necessary access scope for your repository.")
        say()
        say("'api' access scope: to be able to make api calls")
        say()
        value = read_entry(
            self._console,
            "Enter token",
            accept=token_has_valid_format,
            rejection="token has incorrect format",
        )
        return TokenCredential(user_id=request.user_id, target=TARGET, value=value)
