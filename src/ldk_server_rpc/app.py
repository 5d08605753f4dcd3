"""LDK Server RPC application.

Creates the Starlette ASGI application serving the node operations.

Route organization:
- GET /health - Health check
- POST /{operation} - Binary RPC, one path per registered operation
"""

from starlette.applications import Starlette
from starlette.routing import Route

from .config import ServerConfig
from .handlers import default_registry
from .protocol.operations import OperationRegistry
from .routes import health_routes, rpc_routes
from .service import NodeService


def create_app(
    service: NodeService,
    *,
    registry: OperationRegistry | None = None,
    config: ServerConfig | None = None,
) -> Starlette:
    """Create the RPC application.

    Args:
        service: Shared node handle passed to every handler invocation
        registry: Operations to serve (default: all node operations)
        config: Server configuration (default: ServerConfig())

    Returns:
        Configured Starlette application
    """
    config = config or ServerConfig()

    # Health must come first; the RPC route matches every POST path
    routes: list[Route] = []
    routes.extend(health_routes)
    routes.extend(rpc_routes)

    app = Starlette(routes=routes)
    app.state.service = service
    app.state.registry = registry if registry is not None else default_registry()
    app.state.max_body_size = config.max_body_size
    return app
