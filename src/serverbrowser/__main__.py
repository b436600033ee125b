"""Command line entry point: print the ranked server list."""

import argparse
import asyncio
import logging
import sys

from serverbrowser.api.lan import LanDiscoveryClient
from serverbrowser.api.master import MasterServerClient, resolve_master_server_url
from serverbrowser.core.config import ConfigManager
from serverbrowser.core.favourites import FavouritesStore
from serverbrowser.models.entry import ServerListEntry
from serverbrowser.models.server_list import ServerList

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="serverbrowser",
        description="List multiplayer servers from favourites, the LAN and the master server",
    )
    parser.add_argument("--master-url", default=None, help="master server URL override")
    parser.add_argument("--favourites", default=None, help="path to servers.cfg")
    parser.add_argument("--game-version", default=None, help="current game version")
    parser.add_argument("--broadcast", default=None, help="LAN broadcast address")
    parser.add_argument("--no-lan", action="store_true", help="skip LAN discovery")
    parser.add_argument("--no-master", action="store_true", help="skip the master server")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _flags(entry: ServerListEntry, current_version: str) -> str:
    flags = ""
    flags += "F" if entry.favourite else "-"
    flags += "L" if entry.local else "-"
    flags += "P" if entry.requires_password else "-"
    flags += "-" if entry.is_version_valid(current_version) else "X"
    return flags


def format_server_list(servers: ServerList) -> str:
    """Render the list as a plain-text table.

    Flags: F favourite, L local, P password, X incompatible version.
    """
    lines = [f"{'FLAGS':<6}{'NAME':<32}{'ADDRESS':<24}{'PLAYERS':>9}"]
    for entry in servers:
        lines.append(
            f"{_flags(entry, servers.current_version):<6}"
            f"{entry.name[:31]:<32}"
            f"{entry.address[:23]:<24}"
            f"{entry.display_players:>9}"
        )
    lines.append(f"{servers.count} servers, {servers.total_player_count} players online")
    return "\n".join(lines)


async def _fetch(
    lan_client: LanDiscoveryClient | None,
    master_client: MasterServerClient | None,
) -> list[tuple[str, list[ServerListEntry] | BaseException]]:
    """Run the enabled fetches concurrently and pair each result with its source."""
    sources: list[str] = []
    tasks = []
    if lan_client is not None:
        sources.append("LAN")
        tasks.append(lan_client.discover())
    if master_client is not None:
        sources.append("master server")
        tasks.append(master_client.fetch())
    results = await asyncio.gather(*tasks, return_exceptions=True)
    return list(zip(sources, results, strict=True))


def main(argv: list[str] | None = None) -> int:
    """Run the server browser.

    Returns:
        Exit code (1 if every requested source failed and the list is empty).
    """
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ConfigManager()
    current_version = (
        args.game_version if args.game_version is not None else config.get_game_version()
    )
    servers = ServerList(current_version=current_version)

    store = FavouritesStore(args.favourites or config.get_favourites_path())
    servers.read_and_add_favourites(store)

    lan_client = None
    if not args.no_lan:
        lan_client = LanDiscoveryClient(
            broadcast_address=args.broadcast or config.get_broadcast_address()
        )
    master_client = None
    if not args.no_master:
        url = resolve_master_server_url(args.master_url or config.get_master_server_url())
        master_client = MasterServerClient(url)

    logger.debug("Loaded %d favourites from %s", servers.count, store.path)
    failures = 0
    results = asyncio.run(_fetch(lan_client, master_client))
    for source, result in results:
        if isinstance(result, BaseException):
            print(f"{source}: {result}", file=sys.stderr)
            failures += 1
        else:
            servers.add_range(result)

    print(format_server_list(servers))
    if results and failures == len(results) and servers.count == 0:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
