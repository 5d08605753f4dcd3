"""Unit tests for the operation handlers.

Handlers run against the stub node directly, without HTTP.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from ldk_server_rpc.handlers import (
    handle_bolt11_receive_request,
    handle_bolt11_send_request,
    handle_bolt12_receive_request,
    handle_bolt12_send_request,
    handle_close_channel_request,
    handle_list_channels_request,
    handle_onchain_receive_request,
    handle_onchain_send_request,
    handle_open_channel_request,
)
from ldk_server_rpc.protocol.messages import (
    Bolt11ReceiveRequest,
    Bolt11SendRequest,
    Bolt12ReceiveRequest,
    Bolt12SendRequest,
    Channel,
    CloseChannelRequest,
    CloseChannelResponse,
    ListChannelsRequest,
    OnchainReceiveRequest,
    OnchainSendRequest,
    OpenChannelRequest,
)
from ldk_server_rpc.service import Node, NodeError, NodeService


class TestOnchainHandlers:
    def test_receive_returns_fresh_address(self, stub_node) -> None:
        first = handle_onchain_receive_request(stub_node, OnchainReceiveRequest())
        second = handle_onchain_receive_request(stub_node, OnchainReceiveRequest())
        assert first.address != second.address

    def test_send_with_amount(self, stub_node) -> None:
        response = handle_onchain_send_request(
            stub_node, OnchainSendRequest(address="bcrt1qdest", amount_sats=500)
        )
        assert response.txid == "txid:bcrt1qdest:500"

    def test_send_all(self, stub_node) -> None:
        response = handle_onchain_send_request(
            stub_node, OnchainSendRequest(address="bcrt1qdest", send_all=True)
        )
        assert response.txid == "txid:bcrt1qdest:all"

    def test_node_error_propagates(self, stub_node) -> None:
        with pytest.raises(NodeError):
            handle_onchain_send_request(stub_node, OnchainSendRequest(address="bcrt1qdest"))


class TestPaymentHandlers:
    def test_bolt11_receive(self, stub_node) -> None:
        response = handle_bolt11_receive_request(
            stub_node, Bolt11ReceiveRequest(amount_msat=1000, description="tea", expiry_secs=60)
        )
        assert response.invoice == "lnbcrt1000:tea:60"

    def test_bolt11_send(self, stub_node) -> None:
        response = handle_bolt11_send_request(stub_node, Bolt11SendRequest(invoice="lnbc1"))
        assert response.payment_id == "payment:lnbc1:None"

    def test_bolt12_receive(self, stub_node) -> None:
        response = handle_bolt12_receive_request(
            stub_node, Bolt12ReceiveRequest(description="tips")
        )
        assert response.offer == "lno0:tips"

    def test_bolt12_send(self, stub_node) -> None:
        response = handle_bolt12_send_request(
            stub_node, Bolt12SendRequest(offer="lno1", payer_note="hi")
        )
        assert response.payment_id == "payment:lno1:hi"


class TestChannelHandlers:
    def _open(self, node, pubkey: str = "02aa") -> str:
        response = handle_open_channel_request(
            node,
            OpenChannelRequest(node_pubkey=pubkey, address="127.0.0.1:9735", channel_amount_sats=100_000),
        )
        return response.user_channel_id

    def test_open_then_list(self, stub_node) -> None:
        user_channel_id = self._open(stub_node)

        response = handle_list_channels_request(stub_node, ListChannelsRequest())

        assert [c.user_channel_id for c in response.channels] == [user_channel_id]
        assert response.channels[0].channel_value_sats == 100_000

    def test_close(self, stub_node) -> None:
        user_channel_id = self._open(stub_node)

        response = handle_close_channel_request(
            stub_node,
            CloseChannelRequest(user_channel_id=user_channel_id, counterparty_node_id="02aa"),
        )

        assert response == CloseChannelResponse()
        assert stub_node.channels == {}

    def test_close_unknown_channel(self, stub_node) -> None:
        with pytest.raises(NodeError, match="Channel not found: nope"):
            handle_close_channel_request(
                stub_node, CloseChannelRequest(user_channel_id="nope", counterparty_node_id="02aa")
            )

    def test_list_accepts_attribute_records(self) -> None:
        record = SimpleNamespace(
            channel_id="c1",
            counterparty_node_id="02bb",
            funding_txo=None,
            user_channel_id="9",
            channel_value_sats=10,
            outbound_capacity_msat=0,
            inbound_capacity_msat=0,
            is_channel_ready=False,
            is_usable=False,
            is_public=False,
        )
        node = SimpleNamespace(list_channels=lambda: [record])

        response = handle_list_channels_request(node, ListChannelsRequest())

        assert response.channels == [
            Channel(channel_id="c1", counterparty_node_id="02bb", user_channel_id="9", channel_value_sats=10)
        ]

    def test_list_ignores_extra_mapping_keys(self) -> None:
        record = {
            "channel_id": "c1",
            "counterparty_node_id": "02bb",
            "user_channel_id": "9",
            "channel_value_sats": 10,
            "feerate_sat_per_1000_weight": 253,
            "confirmations": 6,
        }
        node = SimpleNamespace(list_channels=lambda: [record])

        response = handle_list_channels_request(node, ListChannelsRequest())

        assert response.channels == [
            Channel(channel_id="c1", counterparty_node_id="02bb", user_channel_id="9", channel_value_sats=10)
        ]

    def test_list_ignores_extra_attributes(self) -> None:
        record = SimpleNamespace(
            channel_id="c1",
            counterparty_node_id="02bb",
            user_channel_id="9",
            channel_value_sats=10,
            is_usable=True,
            cltv_expiry_delta=144,
        )
        node = SimpleNamespace(list_channels=lambda: [record])

        response = handle_list_channels_request(node, ListChannelsRequest())

        assert response.channels[0].is_usable is True
        assert response.channels[0].channel_value_sats == 10

    def test_list_rejects_record_missing_required_fields(self) -> None:
        node = SimpleNamespace(list_channels=lambda: [{"channel_id": "c1"}])

        with pytest.raises(ValidationError):
            handle_list_channels_request(node, ListChannelsRequest())


class TestNodeService:
    def test_stub_satisfies_node_protocol(self, stub_node) -> None:
        assert isinstance(stub_node, Node)

    def test_service_shares_the_node(self, stub_node) -> None:
        service = NodeService(stub_node)
        assert service.node is stub_node
        assert service.node is service.node
