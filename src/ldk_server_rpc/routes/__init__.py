"""HTTP routes."""

from .health import health_routes
from .rpc import rpc_routes

__all__ = ["health_routes", "rpc_routes"]
