"""RPC dispatch endpoint.

Every operation is served by one catch-all POST route. The request path is
looked up in the operation registry, the body decoded into the operation's
request type, and the bound handler invoked with the shared node.

Status codes:
- 200: success, body is the encoded response message
- 400: unknown path, or body failed to decode (plain text)
- 413: body larger than the configured maximum (plain text)
- 500: the handler failed, or its response could not be encoded (plain text)
"""

import logging

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

from ..protocol.codec import CONTENT_TYPE, DecodeError
from ..protocol.operations import OperationRegistry
from ..service import NodeError, NodeService

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "Error parsing request"
BODY_TOO_LARGE_MESSAGE = "Request body too large"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class BodyTooLargeError(Exception):
    """Raised when a request body exceeds the configured limit."""


async def read_body(request: Request, limit: int) -> bytes:
    """Read the full request body, refusing to buffer more than ``limit`` bytes.

    A declared Content-Length over the limit is rejected before reading;
    chunked or undeclared bodies are checked as they stream in.
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        raise BodyTooLargeError(f"Declared body of {declared} bytes exceeds {limit}")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise BodyTooLargeError(f"Body exceeds {limit} bytes")
    return bytes(body)


async def dispatch(request: Request) -> Response:
    """Dispatch one RPC call."""
    registry: OperationRegistry = request.app.state.registry
    service: NodeService = request.app.state.service
    max_body_size: int = request.app.state.max_body_size

    entry = registry.lookup(request.path_params["path"])
    if entry is None:
        logger.warning(f"Unknown request path: {request.url.path}")
        return PlainTextResponse(f"Unknown request: {request.url.path}", status_code=400)

    operation = entry.operation

    try:
        body = await read_body(request, max_body_size)
    except BodyTooLargeError as e:
        logger.warning(f"Rejected {operation.name}: {e}")
        return PlainTextResponse(BODY_TOO_LARGE_MESSAGE, status_code=413)

    try:
        message = operation.decode_request(body)
    except DecodeError as e:
        # The decode reason stays in the server log only
        logger.warning(f"Failed to decode {operation.name} request: {e}")
        return PlainTextResponse(PARSE_ERROR_MESSAGE, status_code=400)

    try:
        result = await run_in_threadpool(entry.handler, service.node, message)
        payload = operation.encode_response(result)
    except NodeError as e:
        logger.info(f"{operation.name} failed: {e}")
        return PlainTextResponse(str(e), status_code=500)
    except Exception:
        logger.exception(f"Unexpected error handling {operation.name}")
        return PlainTextResponse(INTERNAL_ERROR_MESSAGE, status_code=500)

    return Response(payload, media_type=CONTENT_TYPE)


rpc_routes = [
    Route("/{path:path}", dispatch, methods=["POST"]),
]
