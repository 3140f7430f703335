"""Pytest configuration and shared fixtures for the rbit test suite."""

import json
import logging

import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

from rbit.models import SessionSettings


@pytest.fixture(autouse=True)
def isolate_config_home(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.config/rbit and ./rbit.yml."""
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path / 'xdg'))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() installs root handlers; drop and close them after each test."""
    root_logger = logging.getLogger()
    level = root_logger.level

    yield

    for handler in list(root_logger.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


# ============================================================================
# Settings
# ============================================================================

@pytest.fixture
def settings() -> SessionSettings:
    """Unauthenticated daemon on the default host."""
    return SessionSettings(host='http://127.0.0.1:8080')


@pytest.fixture
def auth_settings() -> SessionSettings:
    """Daemon with Web UI authentication."""
    return SessionSettings(host='http://nas:8080', username='admin', password='adminadmin')


# ============================================================================
# HTTP helpers
# ============================================================================

def make_response(status_code: int = 200, text: str = '', json_data: Optional[Any] = None) -> Mock:
    """Build a Mock that looks enough like a requests.Response."""
    response = Mock()
    response.status_code = status_code
    if json_data is not None:
        response.text = json.dumps(json_data)
        response.json = Mock(return_value=json_data)
    else:
        response.text = text
        response.json = Mock(side_effect=ValueError('Expecting value: line 1 column 1 (char 0)'))
    return response


@pytest.fixture
def response_factory():
    """Factory for fake responses."""
    return make_response


@pytest.fixture
def http_session():
    """Mock requests.Session; set .request.side_effect / return_value per test."""
    session = Mock()
    session.request = Mock(return_value=make_response(200, 'Ok.'))
    return session


# ============================================================================
# Torrent fixtures
# ============================================================================

@pytest.fixture
def downloading_torrent() -> Dict[str, Any]:
    """Half-downloaded torrent, currently transferring."""
    return {
        "hash": "0123456789abcdef0123456789abcdef01234567",
        "name": "Example.Torrent.1080p",
        "state": "downloading",
        "progress": 0.5,
        "dlspeed": 2048,
        "upspeed": 512,
    }


@pytest.fixture
def completed_idle_torrent() -> Dict[str, Any]:
    """Fully downloaded torrent with no traffic."""
    return {
        "hash": "fedcba9876543210fedcba9876543210fedcba98",
        "name": "Finished.Album.FLAC",
        "state": "stalledUP",
        "progress": 1.0,
        "dlspeed": 0,
        "upspeed": 0,
    }


@pytest.fixture
def seeding_torrent() -> Dict[str, Any]:
    """Fully downloaded torrent still uploading."""
    return {
        "hash": "aaaabbbbccccddddeeeeffff0000111122223333",
        "name": "Linux.Distro.ISO",
        "state": "uploading",
        "progress": 1.0,
        "dlspeed": 0,
        "upspeed": 1048576,
    }


@pytest.fixture
def torrent_list(downloading_torrent, completed_idle_torrent, seeding_torrent) -> List[Dict[str, Any]]:
    """Mixed torrents as returned by /api/v2/torrents/info."""
    return [downloading_torrent, completed_idle_torrent, seeding_torrent]
