"""LAN server discovery via UDP broadcast.

A query datagram is broadcast once; every game server on the network
answers with a JSON description of itself. Replies are collected for a
fixed window and decoded into entries tagged as local.
"""

from __future__ import annotations

import asyncio
import json
import logging
import socket
import time
from collections.abc import Callable
from typing import Any

from serverbrowser.api.errors import LanDiscoveryError
from serverbrowser.models.entry import ServerListEntry

logger = logging.getLogger(__name__)

# Well-known port game servers listen on for discovery queries
DISCOVERY_PORT = 11754
DISCOVERY_BROADCAST_ADDRESS = "255.255.255.255"
DISCOVERY_QUERY = b"Are you an OpenRCT2 server?"

# Listen window and poll interval (milliseconds)
RECV_WAIT_MS = 2000
RECV_DELAY_MS = 10

# Replies larger than this are truncated (and then fail to decode)
MAX_DATAGRAM_SIZE = 1024


def _default_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


def decode_reply(data: bytes, sender: str) -> ServerListEntry | None:
    """Decode a discovery reply datagram.

    The sender address from the transport replaces any "ip" field in the
    payload.

    Args:
        data: Raw datagram payload.
        sender: IP address the datagram came from.

    Returns:
        Local entry, or None if the payload is not a usable server record.
    """
    try:
        info: Any = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Ignoring malformed discovery reply from %s: %s", sender, e)
        return None

    if not isinstance(info, dict):
        logger.debug("Ignoring non-object discovery reply from %s", sender)
        return None

    info["ip"] = {"v4": [sender]}
    entry = ServerListEntry.from_json(info)
    if entry is None:
        return None
    return entry.with_local(True)


class LanDiscoveryClient:
    """Finds game servers on the local network.

    Example:
        client = LanDiscoveryClient()
        entries = await client.discover()  # takes ~2 seconds
        for entry in entries:
            print(f"{entry.name} at {entry.address}")
    """

    def __init__(
        self,
        broadcast_address: str = DISCOVERY_BROADCAST_ADDRESS,
        port: int = DISCOVERY_PORT,
        wait_ms: int = RECV_WAIT_MS,
        poll_interval_ms: int = RECV_DELAY_MS,
        socket_factory: Callable[[], socket.socket] = _default_socket,
    ) -> None:
        """Initialize the client.

        Args:
            broadcast_address: Destination for the query.
            port: Destination port for the query.
            wait_ms: How long to collect replies.
            poll_interval_ms: Delay between receive attempts.
            socket_factory: Creates the UDP socket (replaced in tests).
        """
        self._broadcast_address = broadcast_address
        self._port = port
        self._wait_ms = wait_ms
        self._poll_interval_ms = max(1, poll_interval_ms)
        self._socket_factory = socket_factory

    @property
    def broadcast_address(self) -> str:
        """Return the query destination address."""
        return self._broadcast_address

    @property
    def port(self) -> int:
        """Return the query destination port."""
        return self._port

    async def discover(self) -> list[ServerListEntry]:
        """Discover LAN servers without blocking the event loop.

        Returns:
            One entry per valid reply (repeated replies are not merged).

        Raises:
            LanDiscoveryError: If the query could not be sent.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.discover_sync)

    def discover_sync(self) -> list[ServerListEntry]:
        """Broadcast the query and collect replies (blocking).

        Runs for the full listen window.

        Raises:
            LanDiscoveryError: If the query could not be sent.
        """
        try:
            sock = self._socket_factory()
        except OSError as e:
            raise LanDiscoveryError(f"Unable to create discovery socket: {e}") from e

        with sock:
            self._send_query(sock)
            entries = self._collect_replies(sock)

        logger.info("LAN discovery found %d servers", len(entries))
        return entries

    def _send_query(self, sock: socket.socket) -> None:
        """Broadcast the query message on sock."""
        destination = (self._broadcast_address, self._port)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            sock.setblocking(False)
            sent = sock.sendto(DISCOVERY_QUERY, destination)
        except OSError as e:
            raise LanDiscoveryError(f"Unable to broadcast server query: {e}") from e

        if sent != len(DISCOVERY_QUERY):
            raise LanDiscoveryError(
                f"Unable to broadcast server query: sent {sent} of {len(DISCOVERY_QUERY)} bytes"
            )
        logger.debug("Sent discovery query to %s:%d", *destination)

    def _collect_replies(self, sock: socket.socket) -> list[ServerListEntry]:
        """Poll sock for replies until the listen window closes."""
        entries: list[ServerListEntry] = []
        delay = self._poll_interval_ms / 1000
        for _ in range(self._wait_ms // self._poll_interval_ms):
            try:
                data, (sender, _port) = sock.recvfrom(MAX_DATAGRAM_SIZE - 1)
            except BlockingIOError:
                pass
            except OSError as e:
                # e.g. ICMP port unreachable surfacing as a reset on some platforms
                logger.debug("Discovery receive failed: %s", e)
            else:
                logger.debug("Received discovery reply from %s", sender)
                entry = decode_reply(data, sender)
                if entry is not None:
                    entries.append(entry)
            time.sleep(delay)
        return entries
