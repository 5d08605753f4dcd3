"""LDK Server RPC CLI.

Usage:
    ldk-server-rpc serve --node mypkg.node:build_node          # Run the server
    ldk-server-rpc serve --node mypkg.node:node --port 3001    # Custom port
    ldk-server-rpc health                                      # Check server health
    ldk-server-rpc call OnchainReceive                         # Call an operation
    ldk-server-rpc call Bolt11Send --json '{"invoice": "lnbc..."}'

Environment variables prefixed with LDK_SERVER_ (HOST, PORT, MAX_BODY_SIZE,
LOG_LEVEL, BASE_URL, TIMEOUT) supply defaults for the matching options.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import json
import logging
import sys
from dataclasses import replace
from typing import Any

import click
import httpx
from pydantic import ValidationError

from .config import ClientConfig, ServerConfig
from .protocol.operations import OPERATIONS, OperationType, get_operation
from .sdk.client import LdkServerError, create_client
from .service import Node, NodeService


def configure_logging(level: str) -> None:
    """Send all logs to stderr with a single formatter."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    root_logger.addHandler(stderr_handler)
    root_logger.setLevel(level.upper())


def load_node(target: str) -> Node:
    """Import a node from ``module:attribute``.

    Classes and functions are called with no arguments to build the node;
    any other attribute is used as the node itself.
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise click.BadParameter("expected 'module:attribute'", param_hint="--node")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}", param_hint="--node") from e

    try:
        obj = getattr(module, attr)
    except AttributeError as e:
        raise click.BadParameter(
            f"module {module_name!r} has no attribute {attr!r}", param_hint="--node"
        ) from e

    if inspect.isclass(obj) or inspect.isfunction(obj):
        obj = obj()
    return obj


@click.group()
def main() -> None:
    """LDK Server RPC - binary RPC over HTTP for a Lightning node."""


@main.command()
@click.option(
    "--node",
    "node_target",
    required=True,
    help="Node to serve, as module:attribute (class/factory or instance)",
)
@click.option("--host", default=None, help="Host to bind to [env: LDK_SERVER_HOST]")
@click.option("--port", default=None, type=int, help="Port to bind to [env: LDK_SERVER_PORT]")
@click.option(
    "--max-body-size",
    default=None,
    type=int,
    help="Maximum request body in bytes [env: LDK_SERVER_MAX_BODY_SIZE]",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Log level [env: LDK_SERVER_LOG_LEVEL]",
)
def serve(
    node_target: str,
    host: str | None,
    port: int | None,
    max_body_size: int | None,
    log_level: str | None,
) -> None:
    """Run the RPC server."""
    import uvicorn

    from .app import create_app

    overrides = {
        "host": host,
        "port": port,
        "max_body_size": max_body_size,
        "log_level": log_level.lower() if log_level else None,
    }
    try:
        config = replace(
            ServerConfig.from_env(),
            **{key: value for key, value in overrides.items() if value is not None},
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    configure_logging(config.log_level)

    service = NodeService(load_node(node_target))
    app = create_app(service, config=config)

    click.echo(f"Starting LDK Server RPC on http://{config.host}:{config.port}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level)


@main.command()
@click.option("--base-url", default=None, help="Server host:port [env: LDK_SERVER_BASE_URL]")
def health(base_url: str | None) -> None:
    """Check server health."""
    config = ClientConfig.from_env()
    url = f"http://{base_url or config.base_url}/health"
    try:
        response = httpx.get(url, timeout=config.timeout)
        response.raise_for_status()
    except httpx.HTTPError as e:
        click.echo(f"Server unhealthy: {e}", err=True)
        sys.exit(1)

    data = response.json()
    click.echo(f"Server healthy: {data.get('status')}")
    for path in data.get("operations", []):
        click.echo(f"  {path}")


@main.command()
@click.argument("operation", type=click.Choice([op.value for op in OperationType]))
@click.option("--base-url", default=None, help="Server host:port [env: LDK_SERVER_BASE_URL]")
@click.option("--json", "params", default="{}", help="Request fields as a JSON object")
def call(operation: str, base_url: str | None, params: str) -> None:
    """Call an operation and print its response as JSON."""
    op = get_operation(operation)
    try:
        fields = json.loads(params)
        request = op.request_type.model_validate(fields)
    except (json.JSONDecodeError, ValidationError) as e:
        raise click.BadParameter(str(e), param_hint="--json") from e

    config = ClientConfig.from_env()

    async def _call() -> Any:
        async with create_client(base_url or config.base_url, timeout=config.timeout) as client:
            return await getattr(client, op.method_name)(request)

    try:
        response = asyncio.run(_call())
    except LdkServerError as e:
        status = f" (HTTP {e.status_code})" if e.status_code is not None else ""
        click.echo(f"Error{status}: {e.message}", err=True)
        sys.exit(1)

    click.echo(response.model_dump_json(indent=2))


@main.command("operations")
def list_operations() -> None:
    """List supported operations."""
    for op in OPERATIONS:
        click.echo(f"{op.path:<16} {op.request_type.__name__} -> {op.response_type.__name__}")


if __name__ == "__main__":
    main()
