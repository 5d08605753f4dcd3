"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import itertools
import threading
from typing import Any

import pytest
from starlette.applications import Starlette
from starlette.testclient import TestClient

from ldk_server_rpc.app import create_app
from ldk_server_rpc.service import NodeError, NodeService

# =============================================================================
# Stub node (real behavior, minimal implementation)
# =============================================================================


class StubNode:
    """In-memory node whose outputs are derived from its inputs.

    Deterministic outputs let tests check that each caller got the
    response to its own request.
    """

    def __init__(self) -> None:
        self.channels: dict[str, dict[str, Any]] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def _next(self) -> int:
        with self._lock:
            return next(self._counter)

    def new_onchain_address(self) -> str:
        return f"bcrt1qaddress{self._next()}"

    def send_onchain(self, address: str, amount_sats: int | None, send_all: bool) -> str:
        if amount_sats is None and not send_all:
            raise NodeError("Either amount_sats or send_all must be set")
        amount = "all" if send_all else str(amount_sats)
        return f"txid:{address}:{amount}"

    def receive_bolt11(self, amount_msat: int | None, description: str, expiry_secs: int) -> str:
        return f"lnbcrt{amount_msat or 0}:{description}:{expiry_secs}"

    def send_bolt11(self, invoice: str, amount_msat: int | None) -> str:
        return f"payment:{invoice}:{amount_msat}"

    def receive_bolt12(self, amount_msat: int | None, description: str) -> str:
        return f"lno{amount_msat or 0}:{description}"

    def send_bolt12(self, offer: str, amount_msat: int | None, payer_note: str | None) -> str:
        return f"payment:{offer}:{payer_note}"

    def open_channel(
        self,
        node_pubkey: str,
        address: str,
        channel_amount_sats: int,
        push_to_counterparty_msat: int | None,
        announce_channel: bool,
    ) -> str:
        user_channel_id = f"ucid-{node_pubkey}"
        with self._lock:
            self.channels[user_channel_id] = {
                "channel_id": f"chan-{node_pubkey}",
                "counterparty_node_id": node_pubkey,
                "user_channel_id": user_channel_id,
                "channel_value_sats": channel_amount_sats,
                "outbound_capacity_msat": channel_amount_sats * 1000
                - (push_to_counterparty_msat or 0),
                "inbound_capacity_msat": push_to_counterparty_msat or 0,
                "is_public": announce_channel,
            }
        return user_channel_id

    def close_channel(
        self, user_channel_id: str, counterparty_node_id: str, force_close: bool
    ) -> None:
        with self._lock:
            if user_channel_id not in self.channels:
                raise NodeError(f"Channel not found: {user_channel_id}")
            del self.channels[user_channel_id]

    def list_channels(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self.channels.values())


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def stub_node() -> StubNode:
    return StubNode()


@pytest.fixture
def service(stub_node: StubNode) -> NodeService:
    return NodeService(stub_node)


@pytest.fixture
def app(service: NodeService) -> Starlette:
    return create_app(service)


@pytest.fixture
def client(app: Starlette) -> TestClient:
    """Test client against the full operation registry."""
    return TestClient(app)
