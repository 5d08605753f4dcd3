"""SDK Client - Connects to an LDK Server RPC endpoint.

One async method per operation. Each encodes the request, POSTs it to
``http://{base_url}/{operation_path}`` and decodes the response. Calls
are independent and may run concurrently over the shared HTTP client;
nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..protocol import operations as ops
from ..protocol.codec import CONTENT_TYPE, DecodeError, EncodeError
from ..protocol.messages import (
    Bolt11ReceiveRequest,
    Bolt11ReceiveResponse,
    Bolt11SendRequest,
    Bolt11SendResponse,
    Bolt12ReceiveRequest,
    Bolt12ReceiveResponse,
    Bolt12SendRequest,
    Bolt12SendResponse,
    CloseChannelRequest,
    CloseChannelResponse,
    ListChannelsRequest,
    ListChannelsResponse,
    Message,
    OnchainReceiveRequest,
    OnchainReceiveResponse,
    OnchainSendRequest,
    OnchainSendResponse,
    OpenChannelRequest,
    OpenChannelResponse,
)
from ..protocol.operations import Operation

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
UNKNOWN_ERROR_MESSAGE = "Unknown Error"


class LdkServerError(Exception):
    """Error returned by every client call.

    Attributes:
        message: Human-readable description. For error responses this is the
            server's text body, or "Unknown Error" when the body is empty.
        status_code: HTTP status of the response, or None when the request
            failed before any response arrived (connection refused, DNS,
            timeout).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"LdkServerError(message={self.message!r}, status_code={self.status_code!r})"


@dataclass
class LdkServerClient:
    """Client to access a hosted LDK Server.

    ``base_url`` is ``host:port`` with no scheme; TLS is not supported.
    """

    base_url: str
    timeout: float | None = DEFAULT_TIMEOUT
    _http_client: httpx.AsyncClient | None = field(default=None, repr=False)

    # =========================================================================
    # Operations
    # =========================================================================

    async def onchain_receive(self, request: OnchainReceiveRequest) -> OnchainReceiveResponse:
        """Retrieve a new on-chain funding address."""
        return await self._post_request(ops.ONCHAIN_RECEIVE, request)

    async def onchain_send(self, request: OnchainSendRequest) -> OnchainSendResponse:
        """Send an on-chain payment to the given address."""
        return await self._post_request(ops.ONCHAIN_SEND, request)

    async def bolt11_receive(self, request: Bolt11ReceiveRequest) -> Bolt11ReceiveResponse:
        """Retrieve a new BOLT11 payable invoice."""
        return await self._post_request(ops.BOLT11_RECEIVE, request)

    async def bolt11_send(self, request: Bolt11SendRequest) -> Bolt11SendResponse:
        """Send a payment for a BOLT11 invoice."""
        return await self._post_request(ops.BOLT11_SEND, request)

    async def bolt12_receive(self, request: Bolt12ReceiveRequest) -> Bolt12ReceiveResponse:
        """Retrieve a new BOLT12 payable offer."""
        return await self._post_request(ops.BOLT12_RECEIVE, request)

    async def bolt12_send(self, request: Bolt12SendRequest) -> Bolt12SendResponse:
        """Send a payment for a BOLT12 offer."""
        return await self._post_request(ops.BOLT12_SEND, request)

    async def open_channel(self, request: OpenChannelRequest) -> OpenChannelResponse:
        """Create a new outbound channel."""
        return await self._post_request(ops.OPEN_CHANNEL, request)

    async def close_channel(self, request: CloseChannelRequest) -> CloseChannelResponse:
        """Close the channel specified by the request."""
        return await self._post_request(ops.CLOSE_CHANNEL, request)

    async def list_channels(self, request: ListChannelsRequest) -> ListChannelsResponse:
        """Retrieve the list of known channels."""
        return await self._post_request(ops.LIST_CHANNELS, request)

    # =========================================================================
    # Transport
    # =========================================================================

    def url_for(self, operation: Operation) -> str:
        """Target URL for an operation."""
        return f"http://{self.base_url}/{operation.path}"

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def _post_request(self, operation: Operation, request: Message) -> Any:
        """Execute one operation and decode its response.

        Raises:
            LdkServerError: On an unencodable request, transport failure,
                non-success status, or an undecodable response body.
        """
        try:
            body = operation.encode_request(request)
        except EncodeError as e:
            raise LdkServerError(f"Failed to encode {operation.name} request: {e}") from e

        try:
            response = await self._client().post(
                self.url_for(operation),
                content=body,
                headers={"Content-Type": CONTENT_TYPE},
            )
        except httpx.HTTPError as e:
            logger.debug(f"{operation.name} transport failure: {e!r}")
            raise LdkServerError(str(e) or type(e).__name__) from e

        if response.is_success:
            try:
                return operation.decode_response(response.content)
            except DecodeError as e:
                raise LdkServerError(
                    f"Failed to decode {operation.name} response: {e}",
                    status_code=response.status_code,
                ) from e

        message = response.text or UNKNOWN_ERROR_MESSAGE
        logger.debug(f"{operation.name} returned {response.status_code}: {message}")
        raise LdkServerError(message, status_code=response.status_code)

    async def close(self) -> None:
        """Close the client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> LdkServerClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def create_client(base_url: str = "localhost:3000", timeout: float | None = DEFAULT_TIMEOUT) -> LdkServerClient:
    """Create an SDK client for a remote server.

    Args:
        base_url: Server ``host:port`` (default: localhost:3000)
        timeout: Per-request timeout in seconds, None to wait indefinitely

    Returns:
        LdkServerClient configured for HTTP
    """
    return LdkServerClient(base_url=base_url, timeout=timeout)


def create_embedded_client(app: Any) -> LdkServerClient:
    """Create an SDK client that calls an ASGI app in-process.

    No network I/O; requests go straight to the app through httpx's ASGI
    transport. Useful for tests and for embedding the server.
    """
    http_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app))
    return LdkServerClient(base_url="ldk-server.embedded", _http_client=http_client)
