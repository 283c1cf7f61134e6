#!/usr/bin/env python3
"""App Catalog - command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from appcatalog.config import config
from appcatalog.core.errors import AppCatalogError
from appcatalog.core.logging import logger, setup_logging
from appcatalog.core.snapshot import SnapshotGateway, open_snapshot
from appcatalog.integrations.appinfo_feed import load_appinfo_text
from appcatalog.integrations.hltb_feed import HLTBFeedClient
from appcatalog.integrations.steam_app_list import SteamAppListClient
from appcatalog.services.language_service import LanguageService
from appcatalog.version import __app_name__, __version__

__all__ = ["build_parser", "main"]


def _cmd_update_applist(gateway: SnapshotGateway, args: argparse.Namespace) -> int:
    client = SteamAppListClient(url=config.APP_LIST_URL, timeout=config.REQUEST_TIMEOUT)
    added = gateway.database.integrate_app_list(client.fetch_app_list())
    gateway.save()
    print(f"{added} new apps")
    return 0


def _cmd_update_appinfo(gateway: SnapshotGateway, args: argparse.Namespace) -> int:
    records = load_appinfo_text(args.path)
    updated = gateway.database.update_from_appinfo(records)
    gateway.save()
    print(f"{updated} apps updated")
    return 0


def _cmd_update_hltb(gateway: SnapshotGateway, args: argparse.Namespace) -> int:
    include_imputed = config.INCLUDE_IMPUTED_TIMES if args.include_imputed is None else args.include_imputed
    client = HLTBFeedClient(url=config.HLTB_URL, timeout=config.REQUEST_TIMEOUT)
    updated = gateway.database.update_from_hltb(client.fetch_all(), include_imputed)
    gateway.save()
    print(f"{updated} apps updated")
    return 0


def _cmd_set_language(gateway: SnapshotGateway, args: argparse.Namespace) -> int:
    change = LanguageService(gateway).set_language(args.language)
    if change.changed:
        print(f"Store language set to {change.language.value}; {change.cleared} apps need re-scraping")
    else:
        print(f"Store language already {change.language.value}")
    return 0


def _cmd_tags(gateway: SnapshotGateway, args: argparse.Namespace) -> int:
    scores = gateway.database.scoring.tag_scores(
        weight_factor=args.weight,
        min_score=args.min_score,
        tags_per_game=args.tags_per_game,
        exclude_genres=args.exclude_genres,
        sort_by_score=not args.sort_by_name,
    )
    for name, score in scores:
        print(f"{score:8.2f}  {name}")
    return 0


def _cmd_show(gateway: SnapshotGateway, args: argparse.Namespace) -> int:
    database = gateway.database
    entry = database.get_entry(args.app_id)
    if entry is None:
        print(f"App {args.app_id} is not in the database")
        return 1

    resolver = database.resolver
    depth = config.RESOLUTION_DEPTH
    times = resolver.get_completion_times(entry.app_id, depth)
    print(f"{entry.app_id}: {entry.name or '?'} [{entry.app_type.label()}]")
    print(f"  parent:      {entry.parent_id or '-'}")
    print(f"  developers:  {', '.join(resolver.get_developers(entry.app_id, depth))}")
    print(f"  publishers:  {', '.join(resolver.get_publishers(entry.app_id, depth))}")
    print(f"  genres:      {', '.join(resolver.get_genres(entry.app_id, depth))}")
    print(f"  tags:        {', '.join(resolver.get_tags(entry.app_id, depth))}")
    print(f"  released:    {database.get_release_year(entry.app_id) or '-'}")
    print(f"  vr:          {'yes' if resolver.supports_vr(entry.app_id, depth) else 'no'}")
    print(f"  hltb (min):  {times.main} / {times.extras} / {times.completionist}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="appcatalog", description=f"{__app_name__} {__version__}")
    parser.add_argument("--db", type=Path, default=None, help="snapshot file (default: data dir db.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("update-applist", help="merge the Steam app list").set_defaults(func=_cmd_update_applist)

    appinfo = sub.add_parser("update-appinfo", help="merge a text appinfo dump")
    appinfo.add_argument("path", type=Path)
    appinfo.set_defaults(func=_cmd_update_appinfo)

    hltb = sub.add_parser("update-hltb", help="merge HowLongToBeat times")
    hltb.add_argument("--include-imputed", dest="include_imputed", action="store_true", default=None)
    hltb.add_argument("--exclude-imputed", dest="include_imputed", action="store_false")
    hltb.set_defaults(func=_cmd_update_hltb)

    language = sub.add_parser("set-language", help="switch the store language")
    language.add_argument("language", help="language code, or 'system'")
    language.set_defaults(func=_cmd_set_language)

    tags = sub.add_parser("tags", help="list tags by popularity score")
    tags.add_argument("--weight", type=float, default=config.TAG_WEIGHT_FACTOR)
    tags.add_argument("--min-score", type=float, default=0)
    tags.add_argument("--tags-per-game", type=int, default=config.TAGS_PER_GAME)
    tags.add_argument("--exclude-genres", action="store_true")
    tags.add_argument("--sort-by-name", action="store_true")
    tags.set_defaults(func=_cmd_tags)

    show = sub.add_parser("show", help="show resolved metadata for one app")
    show.add_argument("app_id", type=int)
    show.set_defaults(func=_cmd_show)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parses arguments, opens the snapshot and runs one command."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        gateway = open_snapshot(args.db or config.SNAPSHOT_FILE)
        return args.func(gateway, args)
    except ValueError as e:
        logger.error("Invalid argument: %s", e)
        return 2
    except AppCatalogError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
