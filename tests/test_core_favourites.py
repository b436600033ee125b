"""Tests for favourites persistence (servers.cfg)."""

import logging
import struct
from pathlib import Path

import pytest

from serverbrowser.api.errors import FavouritesFormatError
from serverbrowser.api.lan import decode_reply
from serverbrowser.core.favourites import (
    FAVOURITES_FILENAME,
    FavouritesStore,
    decode_favourites,
    encode_favourites,
)
from serverbrowser.models.entry import ServerListEntry


def _entry(name: str, address: str = "10.0.0.1:11753", description: str = "") -> ServerListEntry:
    return ServerListEntry(
        address=address,
        name=name,
        version="0.4.5",
        description=description,
        requires_password=True,
        players=5,
        max_players=10,
        local=True,
    )


class TestFavouritesCodec:
    """Tests for the binary file format."""

    def test_encode_layout(self) -> None:
        """Test the exact byte layout of one entry."""
        data = encode_favourites([_entry("N", address="a:1")])
        assert data == (
            b"\x01\x00\x00\x00"
            + b"\x03\x00\x00\x00a:1"
            + b"\x01\x00\x00\x00N"
            + b"\x00\x00\x00\x00"
        )

    def test_encode_empty(self) -> None:
        """Test an empty list is just a zero count."""
        assert encode_favourites([]) == b"\x00\x00\x00\x00"

    def test_decode_empty(self) -> None:
        """Test a zero count decodes to no entries."""
        assert decode_favourites(b"\x00\x00\x00\x00") == []

    def test_round_trip_resets_unstored_fields(self) -> None:
        """Test reloaded entries keep text fields and reset everything else."""
        original = _entry("Café ☕", address="[::1]:11753", description="Multi\nline")
        (loaded,) = decode_favourites(encode_favourites([original]))

        assert loaded.address == original.address
        assert loaded.name == original.name
        assert loaded.description == original.description
        assert loaded.favourite is True
        assert loaded.local is False
        assert loaded.version == ""
        assert loaded.requires_password is False
        assert loaded.players == 0
        assert loaded.max_players == 0

    def test_string_length_counts_bytes(self) -> None:
        """Test string lengths are UTF-8 byte counts, not characters."""
        data = encode_favourites([_entry("é")])
        name_offset = 4 + 4 + len(b"10.0.0.1:11753")
        (length,) = struct.unpack_from("<I", data, name_offset)
        assert length == 2

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"\x01\x00",
            b"\x01\x00\x00\x00",
            b"\x01\x00\x00\x00\x10\x00\x00\x00short",
            b"\x02\x00\x00\x00" + b"\x00\x00\x00\x00" * 3,
        ],
    )
    def test_decode_truncated(self, data: bytes) -> None:
        """Test truncated data raises FavouritesFormatError."""
        with pytest.raises(FavouritesFormatError):
            decode_favourites(data)

    def test_decode_invalid_utf8(self) -> None:
        """Test invalid UTF-8 raises FavouritesFormatError."""
        data = b"\x01\x00\x00\x00" + b"\x02\x00\x00\x00\xff\xfe" + b"\x00\x00\x00\x00" * 2
        with pytest.raises(FavouritesFormatError):
            decode_favourites(data)


class TestFavouritesStore:
    """Tests for FavouritesStore file handling."""

    def test_filename(self) -> None:
        """Test the favourites filename."""
        assert FAVOURITES_FILENAME == "servers.cfg"

    def test_path_property(self, favourites_path: Path) -> None:
        """Test path accepts str and exposes a Path."""
        store = FavouritesStore(str(favourites_path))
        assert store.path == favourites_path

    def test_missing_file_reads_empty(self, favourites_path: Path) -> None:
        """Test a missing file is not an error."""
        assert FavouritesStore(favourites_path).read() == []

    def test_write_and_read(self, favourites_path: Path) -> None:
        """Test entries survive a write/read cycle."""
        store = FavouritesStore(favourites_path)
        entries = [_entry("One", "1.1.1.1:1", "first"), _entry("Two", "2.2.2.2:2")]

        assert store.write(entries) is True

        loaded = store.read()
        assert [(e.address, e.name, e.description) for e in loaded] == [
            ("1.1.1.1:1", "One", "first"),
            ("2.2.2.2:2", "Two", ""),
        ]
        assert all(e.favourite for e in loaded)

    def test_write_creates_parent_directory(self, tmp_path: Path) -> None:
        """Test write creates missing directories."""
        path = tmp_path / "a" / "b" / FAVOURITES_FILENAME
        assert FavouritesStore(path).write([_entry("x")]) is True
        assert path.exists()

    def test_write_truncates(self, favourites_path: Path) -> None:
        """Test a shorter write replaces the previous file completely."""
        store = FavouritesStore(favourites_path)
        store.write([_entry("One"), _entry("Two"), _entry("Three")])
        store.write([_entry("Only")])
        assert [e.name for e in store.read()] == ["Only"]

    def test_malformed_file_reads_empty(
        self, favourites_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a corrupt file degrades to an empty list and logs an error."""
        favourites_path.parent.mkdir(parents=True)
        favourites_path.write_bytes(b"\x05\x00\x00\x00\x03\x00\x00\x00ab")

        with caplog.at_level(logging.ERROR, logger="serverbrowser.core.favourites"):
            assert FavouritesStore(favourites_path).read() == []

        assert "Unable to read server list" in caplog.text

    def test_unreadable_path_reads_empty(self, tmp_path: Path) -> None:
        """Test a directory in place of the file degrades to an empty list."""
        path = tmp_path / FAVOURITES_FILENAME
        path.mkdir()
        assert FavouritesStore(path).read() == []

    def test_unencodable_name_returns_false(
        self, favourites_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a name that cannot be UTF-8 encoded reports failure and leaves the file alone."""
        store = FavouritesStore(favourites_path)
        store.write([_entry("Kept")])
        entry = decode_reply(b'{"name": "bad\\ud800", "version": ""}', "10.0.0.1")
        assert entry is not None

        with caplog.at_level(logging.ERROR, logger="serverbrowser.core.favourites"):
            assert store.write([entry.with_favourite(True)]) is False

        assert "Unable to write server list" in caplog.text
        assert [e.name for e in store.read()] == ["Kept"]

    def test_write_failure_returns_false(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test an unwritable path reports failure instead of raising."""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("x")
        store = FavouritesStore(blocker / FAVOURITES_FILENAME)

        with caplog.at_level(logging.ERROR, logger="serverbrowser.core.favourites"):
            assert store.write([_entry("x")]) is False

        assert "Unable to write server list" in caplog.text
