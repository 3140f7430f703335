#!/usr/bin/env python3
"""
rbit CLI - add torrents to qBittorrent and list them

Flow: resolve settings -> build one request intent -> run it in a single
session (login first when credentials are configured).
"""

import argparse
from pathlib import Path
from typing import List, Optional

from rbit.arguments import create_parser, cli_overrides
from rbit.api import QBittorrentSession
from rbit.config import (
    load_config_file, resolve_settings, resolve_save_path,
    get_log_level, get_log_file, get_trace_mode
)
from rbit.errors import handle_errors
from rbit.formatting import render_table
from rbit.logging import setup_logging, get_logger
from rbit.models import AddFile, AddMagnet, ListTorrents, RequestIntent, SessionSettings
from rbit.operations import submit_add, fetch_torrents

logger = get_logger(__name__)

MAGNET_PREFIX = 'magnet:'


def build_intent(args: argparse.Namespace, settings: SessionSettings) -> RequestIntent:
    """
    Translate the parsed subcommand into a request intent

    Inputs starting with 'magnet:' are magnet links, anything else is a file path.
    """
    if args.command == 'list':
        return ListTorrents(show_all=args.show_all)

    save_path = resolve_save_path(args.dest, settings)
    if args.input.startswith(MAGNET_PREFIX):
        return AddMagnet(uri=args.input, save_path=save_path)
    return AddFile(path=Path(args.input), save_path=save_path)


def console_log_level(log_level: str, settings: SessionSettings) -> str:
    """
    Console level that keeps --verbose and --dry-run output visible

    The [verbose] and [dry-run] lines are logged at INFO, so a quieter
    configured level is lowered to INFO when either mode is on.
    """
    if (settings.verbose or settings.dry_run) and log_level in ('WARNING', 'ERROR', 'CRITICAL'):
        return 'INFO'
    return log_level


def run(intent: RequestIntent, settings: SessionSettings,
        session: Optional[QBittorrentSession] = None):
    """
    Execute one request intent

    Args:
        intent: AddMagnet, AddFile or ListTorrents
        settings: Resolved session settings
        session: Session to use (created from settings if omitted)
    """
    if session is None and not settings.dry_run:
        session = QBittorrentSession(settings)

    if isinstance(intent, ListTorrents):
        records = fetch_torrents(settings, intent.show_all, session=session)
        if settings.dry_run:
            return
        if not records:
            logger.info("No torrents found")
            return
        logger.info(render_table(records))
        return

    submit_add(intent, settings, session=session)
    logger.info(f"Added to qBittorrent (destination: {intent.save_path})")


@handle_errors
def main(argv: Optional[List[str]] = None):
    """Main entry point for rbit CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    file_config = load_config_file(args.config)
    settings = resolve_settings(cli_overrides(args), file_config)

    setup_logging(
        console_log_level(get_log_level(args.log_level, file_config), settings),
        get_log_file(file_config),
        get_trace_mode(args.trace, file_config)
    )

    logger.debug(f"qBittorrent: {settings.host} (auth: {'yes' if settings.has_credentials else 'no'})")

    intent = build_intent(args, settings)

    if settings.dry_run:
        run(intent, settings)
        return

    with QBittorrentSession(settings) as session:
        run(intent, settings, session=session)


if __name__ == '__main__':
    main()
