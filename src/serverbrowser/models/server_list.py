"""ServerList aggregate combining favourites, LAN and master server entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from serverbrowser.models.entry import ServerListEntry

if TYPE_CHECKING:
    from serverbrowser.core.favourites import FavouritesStore

logger = logging.getLogger(__name__)


class ServerList:
    """Ordered collection of server entries.

    Entries are kept in canonical order: the list is re-sorted after every
    mutation. Duplicate addresses across sources are kept as-is.

    Not thread-safe. Results from background fetches must be merged from a
    single thread (the worker delivers them through queued Qt signals).

    Example:
        servers = ServerList(current_version="0.4.5")
        servers.read_and_add_favourites(store)
        servers.add_range(await lan_client.discover())
        print(servers[0].name, servers.total_player_count)
    """

    def __init__(self, current_version: str = "") -> None:
        """Initialize an empty list.

        Args:
            current_version: Version of the running game, used to rank
                compatible servers first.
        """
        self._current_version = current_version
        self._entries: list[ServerListEntry] = []

    @property
    def current_version(self) -> str:
        """Return the version used for compatibility checks."""
        return self._current_version

    @property
    def count(self) -> int:
        """Return number of entries."""
        return len(self._entries)

    @property
    def total_player_count(self) -> int:
        """Return the sum of players across all entries."""
        return sum(entry.players for entry in self._entries)

    @property
    def favourites(self) -> list[ServerListEntry]:
        """Return favourite entries in list order."""
        return [entry for entry in self._entries if entry.favourite]

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> ServerListEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[ServerListEntry]:
        return iter(list(self._entries))

    def get_server(self, index: int) -> ServerListEntry:
        """Return the entry at index.

        Raises:
            IndexError: If index is out of range.
        """
        return self._entries[index]

    def sort(self) -> None:
        """Sort entries into canonical order (stable)."""
        self._entries.sort(key=lambda entry: entry.sort_key(self._current_version))

    def add(self, entry: ServerListEntry) -> None:
        """Append one entry and re-sort."""
        self._entries.append(entry)
        self.sort()

    def add_range(self, entries: Iterable[ServerListEntry]) -> None:
        """Append several entries and re-sort once."""
        self._entries.extend(entries)
        self.sort()

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def set_favourite(self, index: int, favourite: bool) -> None:
        """Mark or unmark the entry at index as a favourite.

        Raises:
            IndexError: If index is out of range.
        """
        self._entries[index] = self._entries[index].with_favourite(favourite)
        self.sort()

    def read_and_add_favourites(self, store: FavouritesStore) -> None:
        """Replace all favourite entries with a fresh read of the store."""
        self._entries = [entry for entry in self._entries if not entry.favourite]
        favourites = store.read()
        logger.debug("Loaded %d favourite servers", len(favourites))
        self.add_range(favourites)

    def write_favourites(self, store: FavouritesStore) -> bool:
        """Write the favourite entries to the store.

        Returns:
            True if the file was written.
        """
        return store.write(self.favourites)
