"""Configure a GitLab bridge: project URL, token, validation, persistence."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator

from ... import config, git, log
from ...auth import CredentialStore
from ...gitlab import normalize_base_url
from ...identity import IdentityProvider
from ...models import DEFAULT_BASE_URL, DEFAULT_USER_ID, BridgeConfiguration, ProjectHandle
from ...selection import Console
from ..base import BaseService
from ..errors import MissingUrlForCredentialError, ValidationFailedError
from .resolve_credential import ResolveCredentialRequest, ResolveCredentialService
from .resolve_project_url import (
    RemotesProvider,
    ResolveProjectUrlRequest,
    ResolveProjectUrlService,
)
from .validate_project import (
    ClientFactory,
    ValidateProjectRequest,
    ValidateProjectService,
    default_client_factory,
)


class ConfigureBridgeRequest(BaseModel):
    """Input contract for bridge configuration.

    Attributes:
        url: Project URL. Required whenever ``token`` or
            ``credential_prefix`` is set.
        base_url: Base URL of the GitLab instance.
        token: Raw access token.
        credential_prefix: Id prefix of a stored credential.
        project: Accepted for parity with other bridges; ignored.
        owner: Accepted for parity with other bridges; ignored.
        interactive: Whether the operator can be prompted.
    """

    url: str | None = None
    base_url: str = DEFAULT_BASE_URL
    token: str | None = None
    credential_prefix: str | None = None
    project: str | None = None
    owner: str | None = None
    interactive: bool = True

    model_config = ConfigDict(frozen=True)

    @field_validator("url", "token", "credential_prefix", "project", "owner", mode="before")
    @classmethod
    def normalize_optional_strings(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, str):
            normalized = value.strip()
            return normalized or None
        return value

    @field_validator("base_url", mode="before")
    @classmethod
    def normalize_base(cls, value: object) -> object:
        if value is None:
            return DEFAULT_BASE_URL
        if isinstance(value, str):
            return normalize_base_url(value) or DEFAULT_BASE_URL
        return value


@dataclass(frozen=True)
class ConfigureBridgeOutcome:
    """Outcome payload for bridge configuration.

    Args:
        configuration: String-keyed configuration (``target``,
            ``projectId``, ``baseUrl``).
        handle: Validated project handle.
        project_path: Normalized project path that was validated.
        credential_id: Id of the token the bridge uses.
        credential_stored: Whether the token was newly stored by this run.
        messages: User-facing render lines in output order.
    """

    configuration: dict[str, str]
    handle: ProjectHandle
    project_path: str
    credential_id: str
    credential_stored: bool
    messages: tuple[str, ...]


class ConfigureBridgeService(BaseService[ConfigureBridgeRequest, ConfigureBridgeOutcome]):
    """Run URL resolution, credential resolution, validation and persistence.

    Every stage depends on the previous one; a failure anywhere aborts the
    run before the credential store is written.
    """

    def __init__(
        self,
        *,
        store: CredentialStore,
        identity: IdentityProvider,
        resolve_url_service: ResolveProjectUrlService,
        resolve_credential_service: ResolveCredentialService,
        validate_project_service: ValidateProjectService,
    ) -> None:
        self._store = store
        self._identity = identity
        self._resolve_url_service = resolve_url_service
        self._resolve_credential_service = resolve_credential_service
        self._validate_project_service = validate_project_service

    @classmethod
    def build(
        cls,
        *,
        store: CredentialStore,
        identity: IdentityProvider,
        remotes: RemotesProvider,
        console: Console | None = None,
        client_factory: ClientFactory = default_client_factory,
    ) -> ConfigureBridgeService:
        """Wire the service with its default stage services."""
        return cls(
            store=store,
            identity=identity,
            resolve_url_service=ResolveProjectUrlService(remotes=remotes, console=console),
            resolve_credential_service=ResolveCredentialService(store=store, console=console),
            validate_project_service=ValidateProjectService(client_factory=client_factory),
        )

    def _run(self, request: ConfigureBridgeRequest) -> ConfigureBridgeOutcome:
        if request.project:
            log.warning("--project is ineffective for a gitlab bridge")
        if request.owner:
            log.warning("--owner is ineffective for a gitlab bridge")

        if (request.credential_prefix or request.token) and not request.url:
            raise MissingUrlForCredentialError(
                "you must provide a project URL to configure this bridge with a token",
                recovery_hint="Pass --url together with --token or --credential.",
            )
        base_host = git.host_of(request.base_url)
        if not base_host:
            raise ValidationFailedError(f"invalid base URL: {request.base_url}")

        url = self._resolve_url_service.run(
            ResolveProjectUrlRequest(
                url=request.url,
                host=base_host,
                interactive=request.interactive,
            )
        )

        user_id = self._identity.current_user()
        resolved = self._resolve_credential_service.run(
            ResolveCredentialRequest(
                user_id=user_id or DEFAULT_USER_ID,
                known_user=user_id is not None,
                credential_prefix=request.credential_prefix,
                token=request.token,
                interactive=request.interactive,
                base_url=request.base_url,
            )
        )
        credential = resolved.credential

        validation = self._validate_project_service.run(
            ValidateProjectRequest(
                base_url=request.base_url,
                project_url=url.url,
                token=credential,
            )
        )

        configuration = BridgeConfiguration.from_handle(validation.handle).as_mapping()
        config.validate_configuration(configuration)

        stored = False
        if not self._store.exists(credential.id):
            self._store.insert(credential)
            stored = True

        messages = [
            f"Project: {validation.project_path} (id {validation.handle.project_id})",
            (
                f"Stored new token {credential.human_id()}"
                if stored
                else f"Using stored token {credential.human_id()}"
            ),
        ]
        return ConfigureBridgeOutcome(
            configuration=configuration,
            handle=validation.handle,
            project_path=validation.project_path,
            credential_id=credential.id,
            credential_stored=stored,
            messages=tuple(messages),
        )
