"""
Argument parsing for the rbit command line
"""

import argparse
from pathlib import Path
from typing import Any, Dict

from rbit.__version__ import __version__, __description__
from rbit.config import user_config_path, LOCAL_CONFIG_FILE


def create_parser() -> argparse.ArgumentParser:
    """
    Create the rbit argument parser

    Global options go before the subcommand:
        rbit [options] add <magnet-or-file> [--dest PATH]
        rbit [options] list [--all]
    """
    parser = argparse.ArgumentParser(
        prog='rbit',
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f'''
Examples:
  # Add a magnet link to the default save path
  rbit add "magnet:?xt=urn:btih:..."

  # Upload a .torrent file into a specific folder
  rbit add ./ubuntu.iso.torrent --dest /srv/downloads/iso

  # Show what would be sent without contacting qBittorrent
  rbit --dry-run add ./ubuntu.iso.torrent

  # List torrents that are incomplete or transferring / all torrents
  rbit list
  rbit list --all

Config files (YAML): {user_config_path()} then ./{LOCAL_CONFIG_FILE}
        '''
    )

    parser.add_argument(
        '-c', '--config',
        type=Path,
        default=None,
        help='Path to a config file (replaces the default config file lookup)'
    )

    parser.add_argument(
        '--host',
        help='qBittorrent Web UI URL (overrides config, default: http://127.0.0.1:8080)'
    )

    parser.add_argument(
        '--username',
        help='qBittorrent username (overrides config)'
    )

    parser.add_argument(
        '--password',
        help='qBittorrent password (overrides config)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Do not send requests; print what would be sent'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print HTTP requests and responses'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Set logging verbosity (default: from config or INFO)'
    )

    parser.add_argument(
        '--trace',
        action='store_true',
        help='Log module/function/line details to the log file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'rbit v{__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    add_parser = subparsers.add_parser(
        'add',
        help='Add a torrent from a magnet link or .torrent file'
    )
    add_parser.add_argument(
        'input',
        help='Path to a .torrent file or a magnet link'
    )
    add_parser.add_argument(
        '-d', '--dest',
        type=Path,
        default=None,
        help='Destination folder for the torrent content (default: config default_save_path or current directory)'
    )

    list_parser = subparsers.add_parser(
        'list',
        help='List torrents (incomplete or transferring unless --all)'
    )
    list_parser.add_argument(
        '-a', '--all',
        dest='show_all',
        action='store_true',
        help='Include completed, idle torrents'
    )

    return parser


def cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Settings overrides taken from parsed arguments

    Flags that were not given map to None so lower-priority sources apply.
    """
    return {
        'host': getattr(args, 'host', None),
        'username': getattr(args, 'username', None),
        'password': getattr(args, 'password', None),
        'verbose': getattr(args, 'verbose', False),
        'dry_run': getattr(args, 'dry_run', False),
    }
