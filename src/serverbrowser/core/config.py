"""Configuration manager using QSettings for persistent storage."""

import logging
from pathlib import Path

from PySide6.QtCore import QSettings, QStandardPaths

from serverbrowser.api.lan import DISCOVERY_BROADCAST_ADDRESS
from serverbrowser.api.master import resolve_master_server_url
from serverbrowser.core.favourites import FAVOURITES_FILENAME

logger = logging.getLogger(__name__)

# Settings keys
_KEY_MASTER_SERVER_URL = "network/master_server_url"
_KEY_BROADCAST_ADDRESS = "network/broadcast_address"
_KEY_FAVOURITES_PATH = "network/favourites_path"
_KEY_GAME_VERSION = "game/version"

_CONFIG_DIR_NAME = "ServerBrowser"


def default_favourites_path() -> Path:
    """Return the default location of servers.cfg in the user config directory."""
    base = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.GenericConfigLocation)
    if not base:
        base = str(Path.home() / ".config")
    return Path(base) / _CONFIG_DIR_NAME / FAVOURITES_FILENAME


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\ServerBrowser\\ServerBrowser
    - macOS: ~/Library/Preferences/com.ServerBrowser.ServerBrowser.plist
    - Linux: ~/.config/ServerBrowser/ServerBrowser.conf

    Example:
        config = ConfigManager()
        client = MasterServerClient(config.resolve_master_server_url())
        store = FavouritesStore(config.get_favourites_path())
    """

    def __init__(
        self, organization: str = "ServerBrowser", application: str = "ServerBrowser"
    ) -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Master server ---------------------------------------------------------

    def get_master_server_url(self) -> str:
        """Return the user's master server URL override.

        Returns:
            URL string, or empty string to use the built-in default.
        """
        value = self._settings.value(_KEY_MASTER_SERVER_URL, "", str)
        return str(value) if value else ""

    def set_master_server_url(self, url: str) -> None:
        """Set the master server URL override.

        Args:
            url: URL, or empty string to restore the default.
        """
        self._settings.setValue(_KEY_MASTER_SERVER_URL, url)

    def resolve_master_server_url(self) -> str:
        """Return the override if set, else the built-in master server URL."""
        return resolve_master_server_url(self.get_master_server_url())

    # -- LAN discovery ---------------------------------------------------------

    def get_broadcast_address(self) -> str:
        """Return the LAN discovery broadcast address.

        Returns:
            Address string (default 255.255.255.255).
        """
        value = self._settings.value(_KEY_BROADCAST_ADDRESS, DISCOVERY_BROADCAST_ADDRESS, str)
        return str(value) if value else DISCOVERY_BROADCAST_ADDRESS

    def set_broadcast_address(self, address: str) -> None:
        """Set the LAN discovery broadcast address.

        Args:
            address: IPv4 broadcast address, or empty string for the default.
        """
        self._settings.setValue(_KEY_BROADCAST_ADDRESS, address)

    # -- Favourites ------------------------------------------------------------

    def get_favourites_path(self) -> Path:
        """Return the favourites file path.

        Returns:
            Configured path, or servers.cfg in the user config directory.
        """
        value = self._settings.value(_KEY_FAVOURITES_PATH, "", str)
        if value:
            return Path(str(value)).expanduser()
        return default_favourites_path()

    def set_favourites_path(self, path: str) -> None:
        """Set a custom favourites file path.

        Args:
            path: File path, or empty string for the default location.
        """
        self._settings.setValue(_KEY_FAVOURITES_PATH, path)

    # -- Game ------------------------------------------------------------------

    def get_game_version(self) -> str:
        """Return the current game version used for compatibility checks.

        Returns:
            Version string, or empty string if unknown.
        """
        value = self._settings.value(_KEY_GAME_VERSION, "", str)
        return str(value) if value else ""

    def set_game_version(self, version: str) -> None:
        """Set the current game version.

        Args:
            version: Version string.
        """
        self._settings.setValue(_KEY_GAME_VERSION, version)

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
