"""Data models for server list entries and the aggregated list."""

from serverbrowser.models.entry import ServerListEntry
from serverbrowser.models.server_list import ServerList

__all__ = [
    "ServerList",
    "ServerListEntry",
]
