"""Service failure contracts.

Services return typed outcomes on success and raise ServiceFailure on expected
lookup, validation, or runtime failures. Programmer bugs raise normal
exceptions.
"""

from __future__ import annotations

from typing import Literal

ServiceFailureCode = Literal[
    "validation_failed",
    "bad_reference",
    "ambiguous_or_missing_credential",
    "credential_user_mismatch",
    "unsupported_credential_kind",
    "missing_url_for_credential",
    "remote_lookup_failed",
    "invalid_configuration_shape",
    "io_failed",
]


class ServiceFailure(Exception):
    """Expected service failure: validation, lookup, or runtime error.

    Raised by services instead of returning a failure value. Use ``raise
    ServiceFailure(...) from exc`` to chain a causing exception; it is
    available as ``__cause__``. Callers catch ServiceFailure and handle per
    their interface (the CLI prints the message and exits non-zero).
    """

    def __init__(
        self,
        code: ServiceFailureCode,
        message: str,
        *,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.recovery_hint = recovery_hint


class ValidationFailedError(ServiceFailure):
    """Validation failed (invalid input, conflicting options)."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("validation_failed", message, recovery_hint=recovery_hint)


class BadReferenceError(ServiceFailure):
    """A project URL or remote reference could not be normalized."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("bad_reference", message, recovery_hint=recovery_hint)


class AmbiguousOrMissingCredentialError(ServiceFailure):
    """A credential prefix matched no stored credential, or several."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__(
            "ambiguous_or_missing_credential", message, recovery_hint=recovery_hint
        )


class CredentialUserMismatchError(ServiceFailure):
    """The selected credential belongs to another user."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("credential_user_mismatch", message, recovery_hint=recovery_hint)


class UnsupportedCredentialKindError(ServiceFailure):
    """The resolved credential is not an access token."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("unsupported_credential_kind", message, recovery_hint=recovery_hint)


class MissingUrlForCredentialError(ServiceFailure):
    """A credential was selected without a project URL to bind it to."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("missing_url_for_credential", message, recovery_hint=recovery_hint)


class RemoteLookupFailedError(ServiceFailure):
    """The GitLab project lookup failed (not found, unauthorized, transport)."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("remote_lookup_failed", message, recovery_hint=recovery_hint)


class InvalidConfigurationShapeError(ServiceFailure):
    """The assembled configuration is missing keys or has the wrong target."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("invalid_configuration_shape", message, recovery_hint=recovery_hint)


class IoFailedError(ServiceFailure):
    """I/O operation failed (console input, git remotes, credential store)."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("io_failed", message, recovery_hint=recovery_hint)
