"""QThread worker that fetches LAN and master server lists in the background.

Qt widgets must run in the main thread, but the fetches use asyncio (and
LAN discovery blocks for its listen window). This worker runs both on a
private event loop in a background thread and hands results back through
Qt signals, so the receiving thread is the only one that touches the
ServerList.
"""

import asyncio
import logging

from PySide6.QtCore import QThread, Signal

from serverbrowser.api.lan import LanDiscoveryClient
from serverbrowser.api.master import MasterServerClient

logger = logging.getLogger(__name__)

SOURCE_LAN = "lan"
SOURCE_MASTER = "master"


class ServerListWorker(QThread):
    """Background fetch of LAN and online servers.

    Each enabled source reports exactly once, through either its result
    signal or fetch_failed. A failing source does not stop the other.
    QThread.finished is emitted after both have reported.

    Example:
        worker = ServerListWorker(LanDiscoveryClient(), MasterServerClient(url))
        worker.local_servers_received.connect(server_list.add_range)
        worker.online_servers_received.connect(server_list.add_range)
        worker.fetch_failed.connect(lambda source, e: print(source, e))
        worker.start()
    """

    local_servers_received = Signal(object)  # list[ServerListEntry]
    online_servers_received = Signal(object)  # list[ServerListEntry]

    # Source name ("lan" or "master"), exception
    fetch_failed = Signal(str, object)

    def __init__(
        self,
        lan_client: LanDiscoveryClient | None = None,
        master_client: MasterServerClient | None = None,
    ) -> None:
        """Initialize the worker.

        Args:
            lan_client: LAN discovery client, or None to skip LAN discovery.
            master_client: Master server client, or None to skip the master server.
        """
        super().__init__()
        self._lan_client = lan_client
        self._master_client = master_client

    @property
    def lan_enabled(self) -> bool:
        """Return True if LAN discovery will run."""
        return self._lan_client is not None

    @property
    def master_enabled(self) -> bool:
        """Return True if the master server will be queried."""
        return self._master_client is not None

    def run(self) -> None:
        """Run the worker thread (entry point)."""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(self._fetch_all())
        finally:
            loop.run_until_complete(loop.shutdown_default_executor())
            loop.close()
            asyncio.set_event_loop(None)

    async def _fetch_all(self) -> None:
        """Run enabled fetches concurrently."""
        tasks = []
        if self._lan_client is not None:
            tasks.append(self._fetch_lan(self._lan_client))
        if self._master_client is not None:
            tasks.append(self._fetch_master(self._master_client))
        await asyncio.gather(*tasks)

    async def _fetch_lan(self, client: LanDiscoveryClient) -> None:
        """Discover LAN servers and emit the result."""
        try:
            entries = await client.discover()
        except Exception as e:  # noqa: BLE001
            logger.warning("LAN discovery failed: %s", e)
            self.fetch_failed.emit(SOURCE_LAN, e)
            return
        self.local_servers_received.emit(entries)

    async def _fetch_master(self, client: MasterServerClient) -> None:
        """Fetch online servers and emit the result."""
        try:
            entries = await client.fetch()
        except Exception as e:  # noqa: BLE001
            logger.warning("Master server fetch failed: %s", e)
            self.fetch_failed.emit(SOURCE_MASTER, e)
            return
        self.online_servers_received.emit(entries)
