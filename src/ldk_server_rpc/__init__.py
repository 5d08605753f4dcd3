"""LDK Server RPC - binary-over-HTTP RPC layer for a Lightning node.

The server maps each operation path onto a handler run against a shared
node; the SDK client exposes one async method per operation.
"""

from .app import create_app
from .config import ClientConfig, ServerConfig
from .handlers import default_registry
from .protocol import (
    CONTENT_TYPE,
    OPERATIONS,
    DecodeError,
    EncodeError,
    Operation,
    OperationRegistry,
    OperationType,
)
from .sdk import LdkServerClient, LdkServerError, create_client, create_embedded_client
from .service import Node, NodeError, NodeService

__all__ = [
    # Server
    "create_app",
    "default_registry",
    "Node",
    "NodeError",
    "NodeService",
    "ServerConfig",
    # Client
    "LdkServerClient",
    "LdkServerError",
    "create_client",
    "create_embedded_client",
    "ClientConfig",
    # Protocol
    "CONTENT_TYPE",
    "OPERATIONS",
    "DecodeError",
    "EncodeError",
    "Operation",
    "OperationRegistry",
    "OperationType",
]
