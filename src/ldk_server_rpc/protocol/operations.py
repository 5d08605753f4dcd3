"""Operation registry.

An operation is one named remote call with a fixed request/response pair.
Its path is the single URI segment the client posts to and the server
dispatches on. The server binds a handler to each operation by registering
it, so adding an operation never needs a new dispatch branch.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .codec import decode, encode
from .messages import (
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

# handler(node, request) -> response; raises NodeError on application failure
Handler = Callable[[Any, Message], Message]


class OperationType(str, Enum):
    """All supported operation paths."""

    ONCHAIN_RECEIVE = "OnchainReceive"
    ONCHAIN_SEND = "OnchainSend"
    BOLT11_RECEIVE = "Bolt11Receive"
    BOLT11_SEND = "Bolt11Send"
    BOLT12_RECEIVE = "Bolt12Receive"
    BOLT12_SEND = "Bolt12Send"
    OPEN_CHANNEL = "OpenChannel"
    CLOSE_CHANNEL = "CloseChannel"
    LIST_CHANNELS = "ListChannels"


@dataclass(frozen=True)
class Operation:
    """Descriptor for one remote operation."""

    name: str
    path: str
    request_type: type[Message]
    response_type: type[Message]

    @property
    def method_name(self) -> str:
        """Snake-case client method name, e.g. ``Bolt11Send`` -> ``bolt11_send``."""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", self.name).lower()

    def encode_request(self, request: Message) -> bytes:
        return encode(request)

    def decode_request(self, data: bytes) -> Message:
        return decode(self.request_type, data)

    def encode_response(self, response: Message) -> bytes:
        return encode(response)

    def decode_response(self, data: bytes) -> Message:
        return decode(self.response_type, data)

    @classmethod
    def create(
        cls,
        op: OperationType,
        request_type: type[Message],
        response_type: type[Message],
    ) -> Operation:
        """Factory for operations whose name and path are the same literal."""
        return cls(
            name=op.value,
            path=op.value,
            request_type=request_type,
            response_type=response_type,
        )


@dataclass(frozen=True)
class RegisteredOperation:
    """An operation bound to the handler that serves it."""

    operation: Operation
    handler: Handler


class OperationRegistry:
    """Path -> (operation, handler) table.

    Lookup is exact and case-sensitive on the full path string; there is no
    prefix, wildcard or hierarchical matching.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RegisteredOperation] = {}

    def register(self, operation: Operation, handler: Handler) -> OperationRegistry:
        """Bind ``handler`` to ``operation``. Returns self for chaining.

        Raises:
            ValueError: If an operation is already registered at the same path.
        """
        if operation.path in self._entries:
            raise ValueError(f"Operation path already registered: {operation.path}")
        self._entries[operation.path] = RegisteredOperation(operation, handler)
        return self

    def lookup(self, path: str) -> RegisteredOperation | None:
        """Return the entry registered at ``path``, or None."""
        return self._entries.get(path)

    def paths(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[RegisteredOperation]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


# =============================================================================
# Operation table
# =============================================================================

ONCHAIN_RECEIVE = Operation.create(
    OperationType.ONCHAIN_RECEIVE, OnchainReceiveRequest, OnchainReceiveResponse
)
ONCHAIN_SEND = Operation.create(
    OperationType.ONCHAIN_SEND, OnchainSendRequest, OnchainSendResponse
)
BOLT11_RECEIVE = Operation.create(
    OperationType.BOLT11_RECEIVE, Bolt11ReceiveRequest, Bolt11ReceiveResponse
)
BOLT11_SEND = Operation.create(
    OperationType.BOLT11_SEND, Bolt11SendRequest, Bolt11SendResponse
)
BOLT12_RECEIVE = Operation.create(
    OperationType.BOLT12_RECEIVE, Bolt12ReceiveRequest, Bolt12ReceiveResponse
)
BOLT12_SEND = Operation.create(
    OperationType.BOLT12_SEND, Bolt12SendRequest, Bolt12SendResponse
)
OPEN_CHANNEL = Operation.create(
    OperationType.OPEN_CHANNEL, OpenChannelRequest, OpenChannelResponse
)
CLOSE_CHANNEL = Operation.create(
    OperationType.CLOSE_CHANNEL, CloseChannelRequest, CloseChannelResponse
)
LIST_CHANNELS = Operation.create(
    OperationType.LIST_CHANNELS, ListChannelsRequest, ListChannelsResponse
)

OPERATIONS: tuple[Operation, ...] = (
    ONCHAIN_RECEIVE,
    ONCHAIN_SEND,
    BOLT11_RECEIVE,
    BOLT11_SEND,
    BOLT12_RECEIVE,
    BOLT12_SEND,
    OPEN_CHANNEL,
    CLOSE_CHANNEL,
    LIST_CHANNELS,
)


def get_operation(name: str | OperationType) -> Operation:
    """Look up an operation by name.

    Raises:
        KeyError: If no operation has that name.
    """
    key = name.value if isinstance(name, OperationType) else name
    for operation in OPERATIONS:
        if operation.name == key:
            return operation
    raise KeyError(key)
