"""Failure types for server list sources.

A record that is missing a required field is not an error (the decoder
returns None). The types here cover failures that stop a whole source
from producing results.
"""

from enum import Enum


class FetchFailure(Enum):
    """Why a master server fetch failed.

    The value is the message shown to the user.
    """

    NO_CONNECTION = "Could not connect to the master server"
    INVALID_RESPONSE_NUMBER = "Invalid response from master server (expected number)"
    MASTER_SERVER_FAILED = "Master server failed to return servers"
    INVALID_RESPONSE_ARRAY = "Invalid response from master server (expected array)"

    @property
    def message(self) -> str:
        """Return the user-facing message."""
        return self.value


class ServerListError(Exception):
    """Base class for server list errors."""


class MasterServerError(ServerListError):
    """The master server fetch failed."""

    def __init__(self, reason: FetchFailure) -> None:
        self.reason = reason
        super().__init__(reason.message)


class LanDiscoveryError(ServerListError):
    """The LAN discovery query could not be broadcast."""


class FavouritesFormatError(ServerListError):
    """The favourites file is malformed."""
