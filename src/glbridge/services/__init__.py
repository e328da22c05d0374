from .base import BaseService
from .errors import (
    AmbiguousOrMissingCredentialError,
    BadReferenceError,
    CredentialUserMismatchError,
    InvalidConfigurationShapeError,
    IoFailedError,
    MissingUrlForCredentialError,
    RemoteLookupFailedError,
    ServiceFailure,
    UnsupportedCredentialKindError,
    ValidationFailedError,
)

__all__ = [
    "AmbiguousOrMissingCredentialError",
    "BadReferenceError",
    "BaseService",
    "CredentialUserMismatchError",
    "InvalidConfigurationShapeError",
    "IoFailedError",
    "MissingUrlForCredentialError",
    "RemoteLookupFailedError",
    "ServiceFailure",
    "UnsupportedCredentialKindError",
    "ValidationFailedError",
]
