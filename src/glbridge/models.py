"""Pydantic models for bridge credentials and configuration."""

from __future__ import annotations

import datetime as dt
import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

TARGET = "gitlab"
TARGET_DISPLAY_NAME = "GitLab"
DEFAULT_BASE_URL = "https://gitlab.com"
DEFAULT_USER_ID = "unset"

CONFIG_KEY_TARGET = "target"
CONFIG_KEY_PROJECT_ID = "projectId"
CONFIG_KEY_BASE_URL = "baseUrl"
CONFIG_KEYS = (CONFIG_KEY_TARGET, CONFIG_KEY_PROJECT_ID, CONFIG_KEY_BASE_URL)

CredentialKind = Literal["token", "login-password"]
KIND_TOKEN: CredentialKind = "token"
KIND_LOGIN_PASSWORD: CredentialKind = "login-password"

HUMAN_ID_LENGTH = 7
RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _utc_now() -> dt.datetime:
    return dt.datetime.now(tz=dt.timezone.utc).replace(microsecond=0)


def truncate_secret(value: str, width: int = 10) -> str:
    """Shorten a secret for display.

    Example:
        >>> truncate_secret("abcdefghij0123456789")
        'abcdefghi…'
        >>> truncate_secret("short")
        'short'
    """
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


class _CredentialBase(BaseModel, ABC):
    """Fields shared by every credential kind.

    The identifier is derived from the kind, owner, target and secret so two
    credentials with the same content always collapse to the same id.
    """

    model_config = ConfigDict(frozen=True)

    kind: CredentialKind
    user_id: str
    target: str
    create_time: dt.datetime = Field(default_factory=_utc_now)
    meta: dict[str, str] = Field(default_factory=dict)

    @field_validator("user_id", "target", mode="before")
    @classmethod
    def normalize_identity(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @abstractmethod
    def _secret_parts(self) -> tuple[str, ...]:
        """Return the secret fields that feed the id."""

    @property
    def id(self) -> str:
        parts = (self.kind, self.user_id, self.target, *self._secret_parts())
        return hashlib.sha256("\x00".join(parts).encode("utf-8")).hexdigest()

    def human_id(self) -> str:
        return self.id[:HUMAN_ID_LENGTH]


class TokenCredential(_CredentialBase):
    """Bearer access token for a target service.

    Attributes:
        value: Opaque token secret.

    Example:
        >>> a = TokenCredential(user_id="u", target="gitlab", value="abcdefghij0123456789")
        >>> b = TokenCredential(user_id="u", target="gitlab", value="abcdefghij0123456789")
        >>> a.id == b.id
        True
    """

    kind: Literal["token"] = "token"
    value: str

    def _secret_parts(self) -> tuple[str, ...]:
        return (self.value,)


class LoginPasswordCredential(_CredentialBase):
    """Login and password pair; stored for other bridges, never used here."""

    kind: Literal["login-password"] = "login-password"
    login: str
    password: str

    def _secret_parts(self) -> tuple[str, ...]:
        return (self.login, self.password)


Credential = Annotated[
    Union[TokenCredential, LoginPasswordCredential],
    Field(discriminator="kind"),
]
CREDENTIAL_LIST_ADAPTER: TypeAdapter[list[Credential]] = TypeAdapter(list[Credential])


@dataclass(frozen=True)
class ProjectHandle:
    """Validated project reference: the project exists and the token can read it."""

    project_id: int
    base_url: str


class BridgeConfiguration(BaseModel):
    """Typed bridge configuration record.

    Attributes:
        target: Target service tag (always ``gitlab``).
        project_id: Numeric GitLab project id.
        base_url: Base URL of the GitLab instance.

    Example:
        >>> BridgeConfiguration(project_id=42, base_url="https://gitlab.example.com").as_mapping()
        {'target': 'gitlab', 'projectId': '42', 'baseUrl': 'https://gitlab.example.com'}
    """

    model_config = ConfigDict(frozen=True)

    target: str = TARGET
    project_id: int
    base_url: str

    @classmethod
    def from_handle(cls, handle: ProjectHandle) -> BridgeConfiguration:
        return cls(project_id=handle.project_id, base_url=handle.base_url)

    def as_mapping(self) -> dict[str, str]:
        return {
            CONFIG_KEY_TARGET: self.target,
            CONFIG_KEY_PROJECT_ID: str(self.project_id),
            CONFIG_KEY_BASE_URL: self.base_url,
        }
