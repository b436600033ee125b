"""Network clients for LAN discovery and the master server."""

from serverbrowser.api.errors import (
    FavouritesFormatError,
    FetchFailure,
    LanDiscoveryError,
    MasterServerError,
    ServerListError,
)
from serverbrowser.api.lan import LanDiscoveryClient
from serverbrowser.api.master import MasterServerClient, resolve_master_server_url

__all__ = [
    "FavouritesFormatError",
    "FetchFailure",
    "LanDiscoveryClient",
    "LanDiscoveryError",
    "MasterServerClient",
    "MasterServerError",
    "ServerListError",
    "resolve_master_server_url",
]
