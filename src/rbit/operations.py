"""
Torrent operations: add (magnet or .torrent file) and list
"""

from pathlib import Path
from typing import List, Optional, Sequence

import requests

from rbit.api import QBittorrentSession
from rbit.errors import APIError, ResponseDecodeError, TorrentFileError
from rbit.logging import get_logger
from rbit.models import AddFile, AddMagnet, SessionSettings, TorrentRecord

logger = get_logger(__name__)

TORRENTS_ADD_ENDPOINT = '/api/v2/torrents/add'
TORRENTS_INFO_ENDPOINT = '/api/v2/torrents/info'

FALLBACK_TORRENT_FILENAME = 'upload.torrent'
TORRENT_CONTENT_TYPE = 'application/x-bittorrent'


def _check_response(response: requests.Response, endpoint: str):
    """Raise APIError unless the status is 2xx"""
    if not 200 <= response.status_code < 300:
        raise APIError(endpoint, response.status_code, response.text)


def torrent_filename(path: Path) -> str:
    """Filename sent with the multipart upload"""
    return Path(path).name or FALLBACK_TORRENT_FILENAME


# Add

def submit_add(intent, settings: SessionSettings,
               session: Optional[QBittorrentSession] = None):
    """
    Add a torrent from a magnet link or a local .torrent file

    In dry-run mode the request is only described; nothing is read or sent.

    Args:
        intent: AddMagnet or AddFile
        settings: Resolved session settings
        session: Session to reuse (created from settings if omitted)

    Raises:
        TorrentFileError: If the .torrent file cannot be opened
        AuthenticationError: If login fails
        ConnectionError: If the daemon cannot be reached
        APIError: If qBittorrent rejects the request
    """
    if not isinstance(intent, (AddMagnet, AddFile)):
        raise TypeError(f"Not an add request: {intent!r}")

    url = f"{settings.host}{TORRENTS_ADD_ENDPOINT}"

    if settings.dry_run:
        logger.info(f"[dry-run] POST {url}")
        if isinstance(intent, AddMagnet):
            logger.info(f"[dry-run] form params: urls={intent.uri}, savepath={intent.save_path}")
        else:
            logger.info(f"[dry-run] file: {intent.path}")
            logger.info(f"[dry-run] savepath: {intent.save_path}")
        return

    if session is None:
        session = QBittorrentSession(settings)

    session.login()

    if isinstance(intent, AddMagnet):
        _add_magnet(session, intent)
    else:
        _add_file(session, intent)


def _add_magnet(session: QBittorrentSession, intent: AddMagnet):
    logger.debug(f"Adding magnet link to {intent.save_path}")
    response = session.request(
        'POST',
        TORRENTS_ADD_ENDPOINT,
        data={
            'urls': intent.uri,
            'savepath': str(intent.save_path)
        }
    )
    _check_response(response, TORRENTS_ADD_ENDPOINT)


def _add_file(session: QBittorrentSession, intent: AddFile):
    path = Path(intent.path)
    filename = torrent_filename(path)

    try:
        torrent_file = open(path, 'rb')
    except OSError as e:
        raise TorrentFileError(str(path), e.strerror or str(e))

    logger.debug(f"Uploading {filename} to {intent.save_path}")
    with torrent_file:
        response = session.request(
            'POST',
            TORRENTS_ADD_ENDPOINT,
            files={'torrents': (filename, torrent_file, TORRENT_CONTENT_TYPE)},
            data={'savepath': str(intent.save_path)}
        )
    _check_response(response, TORRENTS_ADD_ENDPOINT)


# List

def is_active(record: TorrentRecord) -> bool:
    """
    Active means not fully downloaded, or currently transferring

    A record without progress information counts as incomplete.
    """
    progress = record.progress if record.progress is not None else 0.0
    return progress < 1.0 or record.download_rate > 0 or record.upload_rate > 0


def filter_torrents(records: Sequence[TorrentRecord], show_all: bool = False) -> List[TorrentRecord]:
    """Keep every record when show_all, otherwise only active ones"""
    if show_all:
        return list(records)
    return [record for record in records if is_active(record)]


def parse_torrents(response: requests.Response, endpoint: str = TORRENTS_INFO_ENDPOINT) -> List[TorrentRecord]:
    """
    Decode a /torrents/info response body

    Raises:
        ResponseDecodeError: If the body is not a JSON list of torrent objects
    """
    try:
        payload = response.json()
    except ValueError as e:
        raise ResponseDecodeError(endpoint, response.status_code, f"Invalid JSON: {e}")

    if not isinstance(payload, list):
        raise ResponseDecodeError(
            endpoint, response.status_code,
            f"Expected a list of torrents, got {type(payload).__name__}"
        )

    records = []
    for index, item in enumerate(payload):
        try:
            records.append(TorrentRecord.from_api(item))
        except KeyError as e:
            raise ResponseDecodeError(endpoint, response.status_code, f"Torrent #{index + 1} missing field {e}")
        except (TypeError, ValueError, OverflowError) as e:
            raise ResponseDecodeError(endpoint, response.status_code, f"Torrent #{index + 1}: {e}")

    return records


def fetch_torrents(settings: SessionSettings, show_all: bool = False,
                   session: Optional[QBittorrentSession] = None) -> List[TorrentRecord]:
    """
    Fetch all torrents and apply the active/all filter

    Args:
        settings: Resolved session settings
        show_all: Keep completed idle torrents too
        session: Session to reuse (created from settings if omitted)

    Returns:
        Retained torrent records, in server order

    Raises:
        AuthenticationError: If login fails
        ConnectionError: If the daemon cannot be reached
        APIError: If the status is not 2xx or the body cannot be decoded
    """
    if settings.dry_run:
        logger.info(f"[dry-run] GET {settings.host}{TORRENTS_INFO_ENDPOINT}?filter=all")
        return []

    if session is None:
        session = QBittorrentSession(settings)

    session.login()

    response = session.request('GET', TORRENTS_INFO_ENDPOINT, params={'filter': 'all'})
    _check_response(response, TORRENTS_INFO_ENDPOINT)

    records = parse_torrents(response)
    logger.debug(f"Fetched {len(records)} torrents")

    return filter_torrents(records, show_all)
