"""Bridge configuration service modules."""

from .configure_bridge import (
    ConfigureBridgeOutcome,
    ConfigureBridgeRequest,
    ConfigureBridgeService,
)
from .resolve_credential import (
    ResolveCredentialOutcome,
    ResolveCredentialRequest,
    ResolveCredentialService,
    token_has_valid_format,
)
from .resolve_project_url import (
    ResolveProjectUrlOutcome,
    ResolveProjectUrlRequest,
    ResolveProjectUrlService,
)
from .validate_project import (
    ValidateProjectOutcome,
    ValidateProjectRequest,
    ValidateProjectService,
)

__all__ = [
    "ConfigureBridgeOutcome",
    "ConfigureBridgeRequest",
    "ConfigureBridgeService",
    "ResolveCredentialOutcome",
    "ResolveCredentialRequest",
    "ResolveCredentialService",
    "ResolveProjectUrlOutcome",
    "ResolveProjectUrlRequest",
    "ResolveProjectUrlService",
    "ValidateProjectOutcome",
    "ValidateProjectRequest",
    "ValidateProjectService",
    "token_has_valid_format",
]
