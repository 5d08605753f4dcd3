"""Request and response messages for the node RPC operations.

Each operation has one request and one response model. Field names and
shapes mirror the node's protocol definitions; the RPC layer treats them as
opaque values that only need to survive the binary codec.

Amounts suffixed ``_sats`` are in satoshis, ``_msat`` in millisatoshis.
Both are unsigned 64-bit values.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

U64_MAX = 2**64 - 1
U32_MAX = 2**32 - 1

# Unsigned integers as carried on the wire; out-of-range values fail validation.
Amount = Annotated[int, Field(ge=0, le=U64_MAX)]
Seconds = Annotated[int, Field(ge=0, le=U32_MAX)]


class Message(BaseModel):
    """Base model for wire messages.

    Unknown fields are rejected so a body encoded for a different message
    shape fails to decode instead of silently dropping data.
    """

    model_config = ConfigDict(extra="forbid")

    @field_validator("*")
    @classmethod
    def require_utf8(cls, value: Any) -> Any:
        # Strings must be UTF-8 encodable (no lone surrogates) to reach the wire
        if isinstance(value, str):
            value.encode("utf-8")
        return value


# =============================================================================
# On-chain
# =============================================================================


class OnchainReceiveRequest(Message):
    """Request a new on-chain funding address."""


class OnchainReceiveResponse(Message):
    address: str


class OnchainSendRequest(Message):
    """Send an on-chain payment.

    Either ``amount_sats`` is set, or ``send_all`` drains the spendable
    balance to ``address``.
    """

    address: str
    amount_sats: Amount | None = None
    send_all: bool | None = None


class OnchainSendResponse(Message):
    txid: str


# =============================================================================
# BOLT11
# =============================================================================


class Bolt11ReceiveRequest(Message):
    """Create a BOLT11 invoice. A missing amount creates a variable-amount invoice."""

    amount_msat: Amount | None = None
    description: str
    expiry_secs: Seconds


class Bolt11ReceiveResponse(Message):
    invoice: str


class Bolt11SendRequest(Message):
    """Pay a BOLT11 invoice; ``amount_msat`` is required for zero-amount invoices."""

    invoice: str
    amount_msat: Amount | None = None


class Bolt11SendResponse(Message):
    payment_id: str


# =============================================================================
# BOLT12
# =============================================================================


class Bolt12ReceiveRequest(Message):
    description: str
    amount_msat: Amount | None = None


class Bolt12ReceiveResponse(Message):
    offer: str


class Bolt12SendRequest(Message):
    offer: str
    amount_msat: Amount | None = None
    payer_note: str | None = None


class Bolt12SendResponse(Message):
    payment_id: str


# =============================================================================
# Channels
# =============================================================================


class OpenChannelRequest(Message):
    """Open an outbound channel to ``node_pubkey`` reachable at ``address``."""

    node_pubkey: str
    address: str
    channel_amount_sats: Amount
    push_to_counterparty_msat: Amount | None = None
    announce_channel: bool = False


class OpenChannelResponse(Message):
    user_channel_id: str


class CloseChannelRequest(Message):
    user_channel_id: str
    counterparty_node_id: str
    force_close: bool = False


class CloseChannelResponse(Message):
    pass


class Channel(Message):
    """A channel as reported by the node."""

    channel_id: str
    counterparty_node_id: str
    funding_txo: str | None = None
    user_channel_id: str
    channel_value_sats: Amount
    outbound_capacity_msat: Amount = 0
    inbound_capacity_msat: Amount = 0
    is_channel_ready: bool = False
    is_usable: bool = False
    is_public: bool = False


class ListChannelsRequest(Message):
    pass


class ListChannelsResponse(Message):
    channels: list[Channel] = []
