"""Binary codec for wire messages.

Messages are serialized as a msgpack map of their fields, in declaration
order. An empty body decodes as an empty map, so messages without required
fields can be sent with no payload at all.
"""

from __future__ import annotations

from typing import TypeVar

import msgpack
from pydantic import ValidationError

from .messages import Message

# Attached by the transport layer; informational only, never validated.
CONTENT_TYPE = "application/octet-stream"

M = TypeVar("M", bound=Message)


class EncodeError(ValueError):
    """Raised when a message cannot be serialized."""


class DecodeError(ValueError):
    """Raised when bytes cannot be decoded into the expected message type."""


def encode(message: Message) -> bytes:
    """Serialize a message to bytes.

    Raises:
        EncodeError: If ``message`` is not a Message, or holds a value the
            wire format cannot carry (only possible for models built without
            validation). The original failure is chained as ``__cause__``.
    """
    if not isinstance(message, Message):
        raise EncodeError(f"Expected a Message, got {type(message).__name__}")
    try:
        return msgpack.packb(message.model_dump(mode="python"), use_bin_type=True)
    except (OverflowError, ValueError, TypeError) as e:
        raise EncodeError(f"Cannot encode {type(message).__name__}") from e


def decode(message_type: type[M], data: bytes) -> M:
    """Deserialize ``data`` into ``message_type``.

    Raises:
        DecodeError: If the bytes are truncated or malformed, are not a map,
            or do not match the message schema. The original failure is
            chained as ``__cause__``.
    """
    if not data:
        payload: object = {}
    else:
        try:
            payload = msgpack.unpackb(data, raw=False)
        except (msgpack.UnpackException, ValueError, TypeError) as e:
            raise DecodeError(f"Malformed {message_type.__name__} payload") from e

    if not isinstance(payload, dict):
        raise DecodeError(
            f"Expected a map for {message_type.__name__}, got {type(payload).__name__}"
        )

    try:
        return message_type.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"Payload does not match {message_type.__name__}") from e
