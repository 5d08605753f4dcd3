"""Request handlers.

Each handler is a synchronous, single-shot function taking the shared node
and the decoded request, returning the response message. Failures are
raised as NodeError by the node itself and propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .protocol import operations as ops
from .protocol.messages import (
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
    OnchainReceiveRequest,
    OnchainReceiveResponse,
    OnchainSendRequest,
    OnchainSendResponse,
    OpenChannelRequest,
    OpenChannelResponse,
)
from .protocol.operations import OperationRegistry
from .service import Node

logger = logging.getLogger(__name__)


def handle_onchain_receive_request(
    node: Node, request: OnchainReceiveRequest
) -> OnchainReceiveResponse:
    return OnchainReceiveResponse(address=node.new_onchain_address())


def handle_onchain_send_request(node: Node, request: OnchainSendRequest) -> OnchainSendResponse:
    txid = node.send_onchain(request.address, request.amount_sats, bool(request.send_all))
    return OnchainSendResponse(txid=txid)


def handle_bolt11_receive_request(
    node: Node, request: Bolt11ReceiveRequest
) -> Bolt11ReceiveResponse:
    invoice = node.receive_bolt11(request.amount_msat, request.description, request.expiry_secs)
    return Bolt11ReceiveResponse(invoice=invoice)


def handle_bolt11_send_request(node: Node, request: Bolt11SendRequest) -> Bolt11SendResponse:
    payment_id = node.send_bolt11(request.invoice, request.amount_msat)
    return Bolt11SendResponse(payment_id=payment_id)


def handle_bolt12_receive_request(
    node: Node, request: Bolt12ReceiveRequest
) -> Bolt12ReceiveResponse:
    offer = node.receive_bolt12(request.amount_msat, request.description)
    return Bolt12ReceiveResponse(offer=offer)


def handle_bolt12_send_request(node: Node, request: Bolt12SendRequest) -> Bolt12SendResponse:
    payment_id = node.send_bolt12(request.offer, request.amount_msat, request.payer_note)
    return Bolt12SendResponse(payment_id=payment_id)


def handle_open_channel_request(node: Node, request: OpenChannelRequest) -> OpenChannelResponse:
    user_channel_id = node.open_channel(
        request.node_pubkey,
        request.address,
        request.channel_amount_sats,
        request.push_to_counterparty_msat,
        request.announce_channel,
    )
    logger.info(f"Opened channel {user_channel_id} to {request.node_pubkey}")
    return OpenChannelResponse(user_channel_id=user_channel_id)


def handle_close_channel_request(
    node: Node, request: CloseChannelRequest
) -> CloseChannelResponse:
    node.close_channel(request.user_channel_id, request.counterparty_node_id, request.force_close)
    logger.info(f"Closed channel {request.user_channel_id} (force={request.force_close})")
    return CloseChannelResponse()


def _channel_from_record(record: Any) -> Channel:
    """Build a Channel from a node record, keeping only the reported fields.

    Records may be mappings or objects and usually carry more details than
    a Channel reports (fee rates, confirmations, ...).
    """
    if isinstance(record, Mapping):
        fields = {name: record[name] for name in Channel.model_fields if name in record}
    else:
        fields = {
            name: getattr(record, name) for name in Channel.model_fields if hasattr(record, name)
        }
    return Channel.model_validate(fields)


def handle_list_channels_request(
    node: Node, request: ListChannelsRequest
) -> ListChannelsResponse:
    channels = [_channel_from_record(c) for c in node.list_channels()]
    return ListChannelsResponse(channels=channels)


def default_registry() -> OperationRegistry:
    """Registry binding every supported operation to its handler."""
    return (
        OperationRegistry()
        .register(ops.ONCHAIN_RECEIVE, handle_onchain_receive_request)
        .register(ops.ONCHAIN_SEND, handle_onchain_send_request)
        .register(ops.BOLT11_RECEIVE, handle_bolt11_receive_request)
        .register(ops.BOLT11_SEND, handle_bolt11_send_request)
        .register(ops.BOLT12_RECEIVE, handle_bolt12_receive_request)
        .register(ops.BOLT12_SEND, handle_bolt12_send_request)
        .register(ops.OPEN_CHANNEL, handle_open_channel_request)
        .register(ops.CLOSE_CHANNEL, handle_close_channel_request)
        .register(ops.LIST_CHANNELS, handle_list_channels_request)
    )
