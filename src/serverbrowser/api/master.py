"""Master server client for the online server directory.

The master server answers a GET with a JSON envelope:

    {"status": 200, "servers": [<server record>, ...]}
"""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from serverbrowser.api.errors import FetchFailure, MasterServerError
from serverbrowser.models.entry import ServerListEntry

logger = logging.getLogger(__name__)

DEFAULT_MASTER_SERVER_URL = "https://servers.openrct2.io"

# Request timeout in seconds
REQUEST_TIMEOUT = 10.0

_STATUS_OK = 200


def resolve_master_server_url(override: str | None = None) -> str:
    """Return the configured master server URL, or the built-in default.

    Args:
        override: User-configured URL; empty or None means default.
    """
    if override and override.strip():
        return override.strip()
    return DEFAULT_MASTER_SERVER_URL


def parse_server_list(payload: Any) -> list[ServerListEntry]:
    """Decode a master server response envelope.

    Args:
        payload: Decoded JSON body.

    Returns:
        Entries for every server record that decodes. Non-object elements
        and records missing required fields are skipped.

    Raises:
        MasterServerError: If the envelope itself is invalid.
    """
    status = payload.get("status") if isinstance(payload, dict) else None
    if isinstance(status, bool) or not isinstance(status, (int, float)):
        raise MasterServerError(FetchFailure.INVALID_RESPONSE_NUMBER)
    if isinstance(status, float) and not math.isfinite(status):
        raise MasterServerError(FetchFailure.INVALID_RESPONSE_NUMBER)

    if status != _STATUS_OK:
        raise MasterServerError(FetchFailure.MASTER_SERVER_FAILED)

    servers = payload.get("servers")
    if not isinstance(servers, list):
        raise MasterServerError(FetchFailure.INVALID_RESPONSE_ARRAY)

    entries: list[ServerListEntry] = []
    for record in servers:
        if not isinstance(record, dict):
            continue
        entry = ServerListEntry.from_json(record)
        if entry is not None:
            entries.append(entry)

    skipped = len(servers) - len(entries)
    if skipped:
        logger.debug("Skipped %d invalid server records", skipped)
    return entries


class MasterServerClient:
    """Fetches the online server list from the master server.

    Example:
        client = MasterServerClient(resolve_master_server_url(config_url))
        try:
            entries = await client.fetch()
        except MasterServerError as e:
            show_status(e.reason.message)
    """

    def __init__(
        self,
        url: str = DEFAULT_MASTER_SERVER_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Master server URL (already resolved).
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used in tests).
        """
        self._url = url
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        """Return the master server URL."""
        return self._url

    async def fetch(self) -> list[ServerListEntry]:
        """Fetch and decode the server list.

        Returns:
            All decodable entries, delivered at once.

        Raises:
            MasterServerError: On transport failure or an invalid envelope.
        """
        logger.debug("Fetching server list from %s", self._url)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(self._url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.warning("Master server request to %s failed: %s", self._url, e)
            raise MasterServerError(FetchFailure.NO_CONNECTION) from e

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "Master server %s returned HTTP %d", self._url, response.status_code
            )
            raise MasterServerError(FetchFailure.NO_CONNECTION)

        try:
            payload = response.json()
        except ValueError as e:
            raise MasterServerError(FetchFailure.INVALID_RESPONSE_NUMBER) from e

        entries = parse_server_list(payload)
        logger.info("Master server returned %d servers", len(entries))
        return entries
