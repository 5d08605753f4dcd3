"""Wire protocol: messages, codec and the operation registry."""

from .codec import CONTENT_TYPE, DecodeError, EncodeError, decode, encode
from .messages import (
    Bolt11ReceiveRequest,
    Bolt11ReceiveResponse,
    Bolt11SendRequest,
    Bolt11SendResponse,
    Bolt12ReceiveRequest,
    Bolt12ReceiveResponse,
    Bolt12SendRequest,
    Bolt12SendResponse,
    Channel,
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
from .operations import (
    OPERATIONS,
    Handler,
    Operation,
    OperationRegistry,
    OperationType,
    RegisteredOperation,
    get_operation,
)

__all__ = [
    # Codec
    "CONTENT_TYPE",
    "DecodeError",
    "EncodeError",
    "decode",
    "encode",
    # Registry
    "OPERATIONS",
    "Handler",
    "Operation",
    "OperationRegistry",
    "OperationType",
    "RegisteredOperation",
    "get_operation",
    # Messages
    "Message",
    "Channel",
    "OnchainReceiveRequest",
    "OnchainReceiveResponse",
    "OnchainSendRequest",
    "OnchainSendResponse",
    "Bolt11ReceiveRequest",
    "Bolt11ReceiveResponse",
    "Bolt11SendRequest",
    "Bolt11SendResponse",
    "Bolt12ReceiveRequest",
    "Bolt12ReceiveResponse",
    "Bolt12SendRequest",
    "Bolt12SendResponse",
    "OpenChannelRequest",
    "OpenChannelResponse",
    "CloseChannelRequest",
    "CloseChannelResponse",
    "ListChannelsRequest",
    "ListChannelsResponse",
]
