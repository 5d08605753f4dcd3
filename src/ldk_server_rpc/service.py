"""Shared service handle.

The node is the stateful Lightning wallet that does the real work. It is
created once per server process and shared by every concurrent request;
it is responsible for its own thread safety, so nothing here locks.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable


class NodeError(Exception):
    """Application-level failure reported by the node.

    The server flattens it to its display text, sent with status 500.
    """


@runtime_checkable
class Node(Protocol):
    """Node operations the request handlers rely on.

    Implementations signal failures by raising NodeError.
    """

    def new_onchain_address(self) -> str:
        """Return a fresh on-chain funding address."""
        ...

    def send_onchain(self, address: str, amount_sats: int | None, send_all: bool) -> str:
        """Send to ``address`` and return the transaction id."""
        ...

    def receive_bolt11(self, amount_msat: int | None, description: str, expiry_secs: int) -> str:
        """Return an encoded BOLT11 invoice."""
        ...

    def send_bolt11(self, invoice: str, amount_msat: int | None) -> str:
        """Pay an invoice and return the payment id."""
        ...

    def receive_bolt12(self, amount_msat: int | None, description: str) -> str:
        """Return an encoded BOLT12 offer."""
        ...

    def send_bolt12(self, offer: str, amount_msat: int | None, payer_note: str | None) -> str:
        """Pay an offer and return the payment id."""
        ...

    def open_channel(
        self,
        node_pubkey: str,
        address: str,
        channel_amount_sats: int,
        push_to_counterparty_msat: int | None,
        announce_channel: bool,
    ) -> str:
        """Open a channel and return its user channel id."""
        ...

    def close_channel(
        self, user_channel_id: str, counterparty_node_id: str, force_close: bool
    ) -> None: ...

    def list_channels(self) -> Iterable[Any]:
        """Return channel records (mappings or objects with channel attributes).

        Fields a Channel does not report are ignored.
        """
        ...


class NodeService:
    """Handle to the node shared by all handler invocations.

    Passed into the application factory; never stored as a global.
    """

    def __init__(self, node: Node) -> None:
        self._node = node

    @property
    def node(self) -> Node:
        return self._node

    def __repr__(self) -> str:
        return f"NodeService(node={self._node!r})"
