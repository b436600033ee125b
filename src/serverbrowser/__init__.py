"""Multiplayer server browser: favourites, LAN discovery and master server list."""

__version__ = "0.1.0"
