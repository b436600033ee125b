"""Binary persistence for favourite servers (servers.cfg).

File layout, little-endian:

    uint32 count
    count x { string address, string name, string description }

where each string is a uint32 byte length followed by UTF-8 bytes.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable
from pathlib import Path

from serverbrowser.api.errors import FavouritesFormatError
from serverbrowser.models.entry import ServerListEntry

logger = logging.getLogger(__name__)

FAVOURITES_FILENAME = "servers.cfg"

_UINT32 = struct.Struct("<I")


def _pack_string(value: str) -> bytes:
    data = value.encode("utf-8")
    return _UINT32.pack(len(data)) + data


class _Reader:
    """Cursor over favourites file bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def read_uint32(self) -> int:
        if self._offset + _UINT32.size > len(self._data):
            raise FavouritesFormatError(f"Unexpected end of file at offset {self._offset}")
        (value,) = _UINT32.unpack_from(self._data, self._offset)
        self._offset += _UINT32.size
        return value

    def read_string(self) -> str:
        length = self.read_uint32()
        end = self._offset + length
        if end > len(self._data):
            raise FavouritesFormatError(f"String of {length} bytes overruns file")
        raw = self._data[self._offset : end]
        self._offset = end
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FavouritesFormatError(f"Invalid UTF-8 in string: {e}") from e


def encode_favourites(entries: Iterable[ServerListEntry]) -> bytes:
    """Serialize entries to the favourites file format.

    Only address, name and description are stored.
    """
    entries = list(entries)
    parts = [_UINT32.pack(len(entries))]
    for entry in entries:
        parts.append(_pack_string(entry.address))
        parts.append(_pack_string(entry.name))
        parts.append(_pack_string(entry.description))
    return b"".join(parts)


def decode_favourites(data: bytes) -> list[ServerListEntry]:
    """Parse favourites file contents.

    Args:
        data: Raw file bytes.

    Returns:
        Entries flagged as favourites, with all unstored fields at defaults.

    Raises:
        FavouritesFormatError: If the data is truncated or not valid UTF-8.
    """
    reader = _Reader(data)
    count = reader.read_uint32()
    entries: list[ServerListEntry] = []
    for _ in range(count):
        address = reader.read_string()
        name = reader.read_string()
        description = reader.read_string()
        entries.append(
            ServerListEntry(
                address=address,
                name=name,
                version="",
                description=description,
                favourite=True,
            )
        )
    return entries


class FavouritesStore:
    """Reads and writes the favourites file.

    Errors never propagate: a bad file reads as empty, a failed write
    returns False. Both are logged.

    Example:
        store = FavouritesStore(config.get_favourites_path())
        servers.read_and_add_favourites(store)
    """

    def __init__(self, path: Path | str) -> None:
        """Initialize the store.

        Args:
            path: Location of servers.cfg.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Return the favourites file path."""
        return self._path

    def read(self) -> list[ServerListEntry]:
        """Load favourite servers.

        Returns:
            Favourite entries, or empty list if the file is missing or bad.
        """
        if not self._path.exists():
            logger.debug("No favourites file at %s", self._path)
            return []

        try:
            return decode_favourites(self._path.read_bytes())
        except (OSError, FavouritesFormatError) as e:
            logger.error("Unable to read server list %s: %s", self._path, e)
            return []

    def write(self, entries: Iterable[ServerListEntry]) -> bool:
        """Replace the favourites file with entries.

        Returns:
            True on success, False if the file could not be written.
        """
        try:
            data = encode_favourites(entries)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(data)
        except (OSError, UnicodeEncodeError) as e:
            logger.error("Unable to write server list %s: %s", self._path, e)
            return False
        logger.debug("Wrote %d bytes of favourites to %s", len(data), self._path)
        return True
