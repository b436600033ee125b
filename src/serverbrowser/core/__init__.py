"""Core application logic.

Classes:
    ConfigManager: QSettings wrapper for configuration.
    FavouritesStore: Binary persistence for favourite servers.
    ServerListWorker: QThread worker running LAN and master fetches.
"""

from serverbrowser.core.config import ConfigManager
from serverbrowser.core.favourites import FavouritesStore
from serverbrowser.core.worker import ServerListWorker

__all__ = ["ConfigManager", "FavouritesStore", "ServerListWorker"]
