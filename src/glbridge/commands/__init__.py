"""Command implementations exposed by the glbridge CLI."""

from .auth import list_credentials, show_credential
from .configure import configure_bridge

__all__ = [
    "configure_bridge",
    "list_credentials",
    "show_credential",
]
