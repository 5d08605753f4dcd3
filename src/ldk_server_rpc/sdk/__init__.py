"""LDK Server SDK - Client for connecting to an LDK Server RPC endpoint.

Provides both HTTP (remote) and embedded (in-process) modes.
"""

from .client import (
    LdkServerClient,
    LdkServerError,
    create_client,
    create_embedded_client,
)

__all__ = [
    "LdkServerClient",
    "LdkServerError",
    "create_client",
    "create_embedded_client",
]
