"""Server list entry model."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Self

logger = logging.getLogger(__name__)


def _json_str(value: Any) -> str:
    """Return value if it is a JSON string, else empty string."""
    return value if isinstance(value, str) else ""


def _json_count(value: Any) -> int:
    """Return value if it is a non-negative JSON integer, else 0."""
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(0, value)


def _first_ipv4(record: dict[str, Any]) -> str:
    """Return the first address in record["ip"]["v4"], or empty string."""
    ip = record.get("ip")
    if not isinstance(ip, dict):
        return ""
    v4 = ip.get("v4")
    if not isinstance(v4, list) or not v4:
        return ""
    return _json_str(v4[0])


@dataclass(frozen=True, slots=True)
class ServerListEntry:
    """A known game server.

    Attributes:
        address: Server address as "host:port".
        name: Display name.
        version: Game version the server runs (empty if unknown).
        description: Free-form description.
        requires_password: Whether joining needs a password.
        players: Current player count.
        max_players: Player limit.
        favourite: Loaded from the favourites file.
        local: Found by LAN discovery.
    """

    address: str
    name: str
    version: str
    description: str = ""
    requires_password: bool = False
    players: int = 0
    max_players: int = 0
    favourite: bool = False
    local: bool = False

    @property
    def host(self) -> str:
        """Return the host part of the address."""
        host, _, _ = self.address.rpartition(":")
        return host

    @property
    def port(self) -> int:
        """Return the port part of the address (0 if not numeric)."""
        _, _, port = self.address.rpartition(":")
        return int(port) if port.isdigit() else 0

    @property
    def display_players(self) -> str:
        """Return player count for display (e.g. "3/10")."""
        return f"{self.players}/{self.max_players}"

    def is_version_valid(self, current_version: str) -> bool:
        """Return True if a client at current_version can join this server.

        An empty version means unknown and is accepted.
        """
        return not self.version or self.version == current_version

    def sort_key(self, current_version: str) -> tuple[bool, bool, bool, bool, str]:
        """Return the canonical ordering key (ascending = list order).

        Favourites first, then non-local before local, then compatible
        versions, then servers without a password, then by name.
        """
        return (
            not self.favourite,
            self.local,
            not self.is_version_valid(current_version),
            self.requires_password,
            self.name.casefold(),
        )

    def compare_to(self, other: ServerListEntry, current_version: str) -> int:
        """Compare two entries in list order.

        Returns:
            Positive if self sorts before other, negative if after, 0 if tied.
        """
        mine = self.sort_key(current_version)
        theirs = other.sort_key(current_version)
        return (mine < theirs) - (mine > theirs)

    def with_favourite(self, favourite: bool) -> Self:
        """Return a copy with the favourite flag changed."""
        return replace(self, favourite=favourite)

    def with_local(self, local: bool) -> Self:
        """Return a copy with the local flag changed."""
        return replace(self, local=local)

    @classmethod
    def from_json(cls, record: dict[str, Any]) -> ServerListEntry | None:
        """Decode a server record from the master server or a LAN reply.

        Only name and version are required; anything else that is missing
        or malformed falls back to its default.

        Args:
            record: Decoded JSON object.

        Returns:
            The entry, or None if name or version is missing.
        """
        name = record.get("name")
        version = record.get("version")
        if name is None or version is None:
            logger.debug("Skipping server record without name or version")
            return None

        port = _json_count(record.get("port"))
        return cls(
            address=f"{_first_ipv4(record)}:{port}",
            name=_json_str(name),
            version=_json_str(version),
            description=_json_str(record.get("description")),
            requires_password=record.get("requiresPassword") is True,
            players=_json_count(record.get("players")),
            max_players=_json_count(record.get("maxPlayers")),
        )
